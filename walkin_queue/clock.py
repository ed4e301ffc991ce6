# walkin_queue/clock.py

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


class Clock:
    """System time source.

    Day-keys are computed midnight-to-midnight in one fixed reference
    timezone for the whole process. Stored timestamps are timezone-aware UTC.
    """

    def __init__(self, tz_name: str):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def utcnow(self) -> datetime:
        return self.now().astimezone(timezone.utc)

    def today(self) -> date:
        return self.now().date()
