# walkin_queue/notifications.py

import logging
from typing import Callable, Dict, Optional, Protocol

from .data import MESSAGES

logger = logging.getLogger(__name__)


class NotificationGateway(Protocol):
    def send(self, destination: str, message: str) -> bool:
        ...


class LoggingSMSGateway:
    """Development gateway: writes the SMS to the log instead of a carrier."""

    def __init__(self, sender: str = "QueueMe"):
        self.sender = sender

    def send(self, destination: str, message: str) -> bool:
        logger.info("SMS from %s to %s: %s", self.sender, destination, message)
        return True


def _call_now(func: Callable, *args) -> None:
    func(*args)


class Notifier:
    """Renders status messages and hands them off for best-effort delivery.

    ``dispatch`` decides when delivery runs; the HTTP layer passes
    ``BackgroundTasks.add_task`` so sending happens after the response and
    outside the transaction that produced the change.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        dispatch: Callable[..., None] = _call_now,
        templates: Optional[Dict[str, str]] = None,
    ):
        self.gateway = gateway
        self.dispatch = dispatch
        self.templates = templates or MESSAGES

    def render(self, kind: str, **fields) -> str:
        return self.templates[kind].format(**fields)

    def notify(self, kind: str, destination: str, **fields) -> None:
        message = self.render(kind, **fields)
        self.dispatch(self.deliver, destination, message)

    def deliver(self, destination: str, message: str) -> bool:
        try:
            sent = self.gateway.send(destination, message)
        except Exception:
            logger.exception("SMS to %s failed", destination)
            return False
        if not sent:
            logger.warning("SMS to %s was not accepted by the gateway", destination)
        return bool(sent)
