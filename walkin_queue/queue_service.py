# walkin_queue/queue_service.py

import logging
import math
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import Session, select

from .admission import find_active_entry
from .clock import Clock
from .errors import EntryNotFound, InvalidTransition, ValidationError
from .ledger import DailyCapacityLedger
from .models import DailyLimit, QueueEntry
from .notifications import Notifier
from .schemas import (
    QueueEntryPublic,
    QueueStats,
    QueueStatus,
    QueueStatusResponse,
    RecordsPage,
    RecordsPeriod,
    ServicePublic,
)
from .sequencer import QueueSequencer
from .state_machine import QueueEntryStateMachine, TriggerSource

logger = logging.getLogger(__name__)

PERIOD_DAYS = {
    RecordsPeriod.week: 7,
    RecordsPeriod.month: 30,
}


class QueueService:
    """Status polling, cancellation and the admin operations on queue entries."""

    def __init__(
        self,
        session: Session,
        clock: Clock,
        notifier: Notifier,
        minutes_per_customer: int = 15,
        default_retention_days: int = 30,
    ):
        self.session = session
        self.clock = clock
        self.notifier = notifier
        self.default_retention_days = default_retention_days
        self.sequencer = QueueSequencer(session, minutes_per_customer)
        self.ledger = DailyCapacityLedger(session)
        self.machine = QueueEntryStateMachine()

    # customer side

    def get_status(self, mobile: str) -> QueueStatusResponse:
        entry = find_active_entry(self.session, mobile)
        if entry is None:
            raise EntryNotFound()

        # advisory; a stale count is acceptable here
        position = self.sequencer.position(entry)
        return QueueStatusResponse(
            queue_number=entry.queue_number,
            status=entry.status,
            position=position,
            estimated_wait=self.sequencer.estimate_wait(position),
            service=ServicePublic.model_validate(entry.service),
        )

    def cancel(self, mobile: str) -> QueueEntry:
        entry = find_active_entry(self.session, mobile, statuses=(QueueStatus.waiting.value,))
        if entry is None:
            raise EntryNotFound("No active queue found to cancel")
        return self._transition(entry, QueueStatus.cancelled, TriggerSource.customer)

    # admin side

    def update_status(self, entry_id: int, status: QueueStatus) -> QueueEntryPublic:
        entry = self.session.get(QueueEntry, entry_id)
        if entry is None:
            raise EntryNotFound("Queue not found")
        entry = self._transition(entry, status, TriggerSource.admin)
        return QueueEntryPublic.model_validate(entry)

    def list_entries(self, status: Optional[str] = None) -> List[QueueEntryPublic]:
        stmt = select(QueueEntry)
        if status and status != "all":
            stmt = stmt.where(QueueEntry.status == self._parse_status(status).value)
        stmt = stmt.order_by(QueueEntry.service_date.desc(), QueueEntry.queue_number)
        return [QueueEntryPublic.model_validate(e) for e in self.session.exec(stmt).all()]

    def stats(self, day: Optional[date] = None) -> QueueStats:
        day = day or self.clock.today()
        rows = self.session.exec(
            select(QueueEntry.status, func.count())
            .where(QueueEntry.service_date == day)
            .group_by(QueueEntry.status)
        ).all()
        counts = {status: count for status, count in rows}

        limit = self.session.get(DailyLimit, day)
        return QueueStats(
            waiting=counts.get(QueueStatus.waiting.value, 0),
            in_progress=counts.get(QueueStatus.in_progress.value, 0),
            completed=counts.get(QueueStatus.completed.value, 0),
            cancelled=counts.get(QueueStatus.cancelled.value, 0),
            total=sum(counts.values()),
            max_customers=limit.max_customers if limit else None,
            current_count=limit.current_count if limit else 0,
        )

    def records(
        self,
        period: RecordsPeriod = RecordsPeriod.today,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> RecordsPage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        filters = []
        if period == RecordsPeriod.today:
            filters.append(QueueEntry.service_date == self.clock.today())
        elif period in PERIOD_DAYS:
            since = self.clock.utcnow() - timedelta(days=PERIOD_DAYS[period])
            filters.append(QueueEntry.check_in_time >= since)
        if status and status != "all":
            filters.append(QueueEntry.status == self._parse_status(status).value)

        total = self.session.exec(
            select(func.count()).select_from(QueueEntry).where(*filters)
        ).one()
        entries = self.session.exec(
            select(QueueEntry)
            .where(*filters)
            .order_by(QueueEntry.check_in_time.desc(), QueueEntry.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        return RecordsPage(
            records=[QueueEntryPublic.model_validate(e) for e in entries],
            total_pages=math.ceil(total / limit),
            current_page=page,
            total=total,
        )

    def purge(self, days: Optional[int] = None) -> int:
        days = self.default_retention_days if days is None else days
        if days < 0:
            raise ValidationError("days must not be negative")

        cutoff = self.clock.utcnow() - timedelta(days=days)
        result = self.session.exec(delete(QueueEntry).where(QueueEntry.check_in_time < cutoff))
        deleted = result.rowcount
        self.session.commit()
        logger.info("Purged %d queue entries checked in before %s", deleted, cutoff)
        return deleted

    def set_daily_limit(self, max_customers: int) -> DailyLimit:
        return self.ledger.set_max(self.clock.today(), max_customers)

    # helpers

    def _parse_status(self, status: str) -> QueueStatus:
        try:
            return QueueStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status '{status}'")

    def _transition(self, entry: QueueEntry, status: QueueStatus, source: TriggerSource) -> QueueEntry:
        previous = entry.status
        kind = self.machine.apply(entry, status, self.clock.utcnow(), source)

        # compare-and-swap on the old status so two concurrent updates cannot both apply
        with self.session.no_autoflush:
            result = self.session.exec(
                update(QueueEntry)
                .where(QueueEntry.id == entry.id)
                .where(QueueEntry.status == previous)
                .values(status=entry.status, start_time=entry.start_time, end_time=entry.end_time)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            self.session.rollback()
            raise InvalidTransition(entry.status, QueueStatus(status).value)

        self.session.expire(entry)
        self.session.commit()

        if kind is not None:
            customer = entry.customer
            self.notifier.notify(
                kind.value,
                customer.mobile,
                name=customer.name,
                queue_number=entry.queue_number,
                estimated_wait_time=entry.estimated_wait_time,
            )
        return entry
