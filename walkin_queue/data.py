# walkin_queue/data.py

DEFAULT_SERVICES = [
    {"name": "Haircut", "description": "Professional haircut with styling", "price": 25.00, "duration": 30},
    {"name": "Beard Trim", "description": "Beard trimming and shaping", "price": 15.00, "duration": 20},
    {"name": "Haircut + Beard", "description": "Complete grooming package", "price": 35.00, "duration": 45},
    {"name": "Hair Wash & Style", "description": "Hair washing with professional styling", "price": 20.00, "duration": 25},
    {"name": "Mustache Trim", "description": "Mustache trimming and styling", "price": 12.00, "duration": 15},
]

# SMS text per notification kind; placeholders come from the queue entry
MESSAGES = {
    "joined": (
        "Hi {name}, you've been added to the queue. Your queue number is {queue_number}. "
        "Estimated wait time: {estimated_wait_time} minutes."
    ),
    "ready": "Hi {name}, the barber is ready for you. Please proceed to the barber station.",
    "cancelled_by_customer": "Hi {name}, your queue request has been cancelled.",
    "cancelled_by_admin": (
        "Hi {name}, your queue number {queue_number} has been cancelled by the shop. "
        "Please contact us if this is unexpected."
    ),
}
