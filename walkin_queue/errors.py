# walkin_queue/errors.py

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class QueueError(Exception):
    """Base class for errors surfaced to HTTP callers as ``{"message": ...}``."""

    status_code = 400
    message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class AlreadyQueued(QueueError):
    message = "You are already in the queue"


class CapacityExceeded(QueueError):
    message = "Sorry, we have reached our daily customer limit. Please try again tomorrow."


class ServiceNotFound(QueueError):
    status_code = 404
    message = "Service not found"


class EntryNotFound(QueueError):
    status_code = 404
    message = "No active queue found"


class StyleNotFound(QueueError):
    status_code = 404
    message = "Haircut style not found"


class InvalidTransition(QueueError):
    status_code = 409

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move queue entry from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class ValidationError(QueueError):
    status_code = 422
    message = "Invalid input"


class StoreUnavailable(QueueError):
    status_code = 503
    message = "Queue store is temporarily unavailable"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QueueError)
    async def queue_error_handler(request: Request, exc: QueueError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(OperationalError)
    async def store_error_handler(request: Request, exc: OperationalError):
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=StoreUnavailable.status_code,
            content={"message": StoreUnavailable.message},
        )
