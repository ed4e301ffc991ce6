# walkin_queue/ledger.py

import logging
from datetime import date
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import CapacityExceeded, ValidationError
from .models import DailyLimit

logger = logging.getLogger(__name__)


class DailyCapacityLedger:
    """Per-day admission counter with a ceiling.

    ``try_reserve_slot`` is a single conditional UPDATE, so the check and the
    increment happen atomically in the store. The row lock it takes stays held
    until the caller's transaction ends and serializes every other admission
    for the same day-key behind it.
    """

    def __init__(self, session: Session):
        self.session = session

    def get(self, day: date) -> Optional[DailyLimit]:
        return self.session.get(DailyLimit, day)

    def get_or_create(self, day: date, default_max: int) -> DailyLimit:
        limit = self.get(day)
        if limit is not None:
            return limit

        self.session.add(DailyLimit(date=day, max_customers=default_max, current_count=0))
        try:
            self.session.commit()
        except IntegrityError:
            # another request created the day first
            self.session.rollback()
            return self.session.exec(select(DailyLimit).where(DailyLimit.date == day)).one()

        logger.info("Opened daily limit for %s with max %d", day, default_max)
        return self.session.get(DailyLimit, day)

    def try_reserve_slot(self, day: date) -> int:
        result = self.session.exec(
            update(DailyLimit)
            .where(DailyLimit.date == day)
            .where(DailyLimit.current_count < DailyLimit.max_customers)
            .values(current_count=DailyLimit.current_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning("Daily capacity reached for %s", day)
            raise CapacityExceeded()

        return self.session.exec(
            select(DailyLimit.current_count).where(DailyLimit.date == day)
        ).one()

    def set_max(self, day: date, new_max: int) -> DailyLimit:
        if new_max < 1:
            raise ValidationError("maxCustomers must be at least 1")

        limit = self.get_or_create(day, new_max)
        limit.max_customers = new_max
        self.session.add(limit)
        self.session.commit()
        self.session.refresh(limit)
        logger.info("Daily limit for %s set to %d (current %d)", day, new_max, limit.current_count)
        return limit
