# walkin_queue/admission.py

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from .clock import Clock
from .errors import AlreadyQueued, ServiceNotFound, StoreUnavailable
from .ledger import DailyCapacityLedger
from .models import Customer, QueueEntry, Service
from .notifications import Notifier
from .schemas import ACTIVE_STATUSES, QueueStatus
from .sequencer import QueueSequencer
from .state_machine import NotificationKind

logger = logging.getLogger(__name__)


@dataclass
class Admission:
    queue_number: int
    estimated_wait_time: int
    entry_id: int


def find_customer(session: Session, mobile: str) -> Optional[Customer]:
    return session.exec(
        select(Customer).where(Customer.mobile == mobile).order_by(Customer.id)
    ).first()


def find_active_entry(session: Session, mobile: str, statuses=ACTIVE_STATUSES) -> Optional[QueueEntry]:
    # by mobile, so duplicate customer rows for one phone still count
    return session.exec(
        select(QueueEntry)
        .join(Customer, QueueEntry.customer_id == Customer.id)
        .where(Customer.mobile == mobile)
        .where(QueueEntry.status.in_(statuses))
        .order_by(QueueEntry.check_in_time.desc())
    ).first()


class AdmissionService:
    """Admits a walk-in customer into today's queue.

    The capacity reservation, the queue number and the new entry are written
    in one transaction. Any failure after the reservation (an unknown service,
    a duplicate found on the re-check, a store fault) rolls all three back,
    so a slot is never consumed without an entry and numbers stay contiguous.
    The customer record is kept once created.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock,
        notifier: Notifier,
        default_daily_limit: int = 50,
        minutes_per_customer: int = 15,
    ):
        self.session = session
        self.clock = clock
        self.notifier = notifier
        self.default_daily_limit = default_daily_limit
        self.ledger = DailyCapacityLedger(session)
        self.sequencer = QueueSequencer(session, minutes_per_customer)

    def join_queue(self, name: str, mobile: str, service_id: int) -> Admission:
        try:
            admission = self._admit(name, mobile, service_id)
        except (OperationalError, IntegrityError) as exc:
            self.session.rollback()
            logger.exception("Admission for %s failed on the store", mobile)
            raise StoreUnavailable() from exc

        # 8) Confirmation SMS, best-effort and after commit
        self.notifier.notify(
            NotificationKind.joined.value,
            mobile,
            name=name,
            queue_number=admission.queue_number,
            estimated_wait_time=admission.estimated_wait_time,
        )
        return admission

    def _admit(self, name: str, mobile: str, service_id: int) -> Admission:
        today = self.clock.today()

        # 1) Resolve or create the customer
        customer = self._resolve_customer(name, mobile)

        # 2) One active entry per customer
        if find_active_entry(self.session, mobile) is not None:
            raise AlreadyQueued()

        # 3) Reserve a slot; holds the day's lock until commit/rollback
        self.ledger.get_or_create(today, self.default_daily_limit)
        try:
            self.ledger.try_reserve_slot(today)

            # 2b) Re-check now that concurrent joins for today are serialized
            if find_active_entry(self.session, mobile) is not None:
                raise AlreadyQueued()

            # 4) Resolve the service
            service = self.session.get(Service, service_id)
            if service is None:
                raise ServiceNotFound()

            # 5) + 6) Number and estimate
            queue_number = self.sequencer.next_number(today)
            estimated_wait_time = self.sequencer.estimate_wait(self.sequencer.waiting_count(today))

            # 7) Create the entry
            entry = QueueEntry(
                customer_id=customer.id,
                service_id=service.id,
                service_date=today,
                queue_number=queue_number,
                status=QueueStatus.waiting.value,
                estimated_wait_time=estimated_wait_time,
                check_in_time=self.clock.utcnow(),
            )
            self.session.add(entry)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(entry)
        logger.info(
            "Admitted %s as #%d on %s (wait %d min)",
            mobile, queue_number, today, estimated_wait_time,
        )
        return Admission(
            queue_number=queue_number,
            estimated_wait_time=estimated_wait_time,
            entry_id=entry.id,
        )

    def _resolve_customer(self, name: str, mobile: str) -> Customer:
        customer = find_customer(self.session, mobile)
        if customer is not None:
            return customer

        customer = Customer(name=name, mobile=mobile)
        self.session.add(customer)
        self.session.commit()
        self.session.refresh(customer)
        logger.info("Registered customer %s", mobile)
        return customer
