# walkin_queue/sequencer.py

from datetime import date

from sqlalchemy import func
from sqlmodel import Session, select

from .models import QueueEntry
from .schemas import QueueStatus


class QueueSequencer:
    """Per-day queue numbering and wait estimates.

    Wait estimates use a flat number of minutes per waiting customer rather
    than the durations of the services those customers chose. This is a
    modeling choice kept on purpose.
    """

    def __init__(self, session: Session, minutes_per_customer: int = 15):
        self.session = session
        self.minutes_per_customer = minutes_per_customer

    def next_number(self, day: date) -> int:
        # Only race-free inside the transaction holding the day's ledger lock;
        # uq_queue_number_per_day rejects a duplicate otherwise.
        max_number = self.session.exec(
            select(func.max(QueueEntry.queue_number)).where(QueueEntry.service_date == day)
        ).one()
        return (max_number or 0) + 1

    def waiting_count(self, day: date) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(QueueEntry)
            .where(QueueEntry.service_date == day)
            .where(QueueEntry.status == QueueStatus.waiting.value)
        ).one()

    def waiting_ahead(self, day: date, queue_number: int) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(QueueEntry)
            .where(QueueEntry.service_date == day)
            .where(QueueEntry.status == QueueStatus.waiting.value)
            .where(QueueEntry.queue_number < queue_number)
        ).one()

    def estimate_wait(self, ahead_count: int) -> int:
        return ahead_count * self.minutes_per_customer

    def position(self, entry: QueueEntry) -> int:
        return self.waiting_ahead(entry.service_date, entry.queue_number) + 1
