# walkin_queue/state_machine.py

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import InvalidTransition
from .models import QueueEntry
from .schemas import QueueStatus

logger = logging.getLogger(__name__)


class TriggerSource(str, Enum):
    customer = "customer"
    admin = "admin"


class NotificationKind(str, Enum):
    joined = "joined"
    ready = "ready"
    cancelled_by_customer = "cancelled_by_customer"
    cancelled_by_admin = "cancelled_by_admin"


TRANSITIONS = {
    QueueStatus.waiting: {QueueStatus.in_progress, QueueStatus.cancelled},
    QueueStatus.in_progress: {QueueStatus.completed, QueueStatus.cancelled},
    QueueStatus.completed: set(),
    QueueStatus.cancelled: set(),
}


class QueueEntryStateMachine:
    """Moves a QueueEntry through waiting, in-progress, completed and cancelled.

    ``apply`` mutates the entry in place and returns the notification owed for
    the transition, if any. Persisting the entry is up to the caller.
    """

    def can_transition(self, current: QueueStatus, requested: QueueStatus) -> bool:
        return requested in TRANSITIONS[current]

    def apply(
        self,
        entry: QueueEntry,
        requested: QueueStatus,
        now: datetime,
        source: TriggerSource = TriggerSource.admin,
    ) -> Optional[NotificationKind]:
        current = QueueStatus(entry.status)
        requested = QueueStatus(requested)
        if not self.can_transition(current, requested):
            raise InvalidTransition(current.value, requested.value)

        entry.status = requested.value
        logger.info(
            "Queue entry %s moved %s -> %s by %s",
            entry.id, current.value, requested.value, source.value,
        )

        if requested == QueueStatus.in_progress:
            entry.start_time = now
            return NotificationKind.ready

        if requested == QueueStatus.completed:
            entry.end_time = now
            return None

        # cancelled
        entry.end_time = now
        if source == TriggerSource.customer:
            return NotificationKind.cancelled_by_customer
        return NotificationKind.cancelled_by_admin
