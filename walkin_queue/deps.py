# walkin_queue/deps.py

from fastapi import BackgroundTasks, Depends, HTTPException
from sqlmodel import Session

from .admission import AdmissionService
from .auth import get_current_principal
from .clock import Clock
from .config import get_settings
from .db import get_session
from .notifications import LoggingSMSGateway, NotificationGateway, Notifier
from .queue_service import QueueService
from .schemas import Principal, UserRole
from .styles import StyleCatalog


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin role required.")
    return principal


def get_clock() -> Clock:
    return Clock(get_settings().timezone)


def get_gateway() -> NotificationGateway:
    return LoggingSMSGateway(get_settings().sms_sender)


def get_notifier(
    background_tasks: BackgroundTasks,
    gateway: NotificationGateway = Depends(get_gateway),
) -> Notifier:
    # SMS goes out after the response is sent
    return Notifier(gateway, dispatch=background_tasks.add_task)


def get_admission_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: Notifier = Depends(get_notifier),
) -> AdmissionService:
    settings = get_settings()
    return AdmissionService(
        session,
        clock,
        notifier,
        default_daily_limit=settings.default_daily_limit,
        minutes_per_customer=settings.minutes_per_customer,
    )


def get_queue_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
    notifier: Notifier = Depends(get_notifier),
) -> QueueService:
    settings = get_settings()
    return QueueService(
        session,
        clock,
        notifier,
        minutes_per_customer=settings.minutes_per_customer,
        default_retention_days=settings.default_retention_days,
    )


def get_style_catalog(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> StyleCatalog:
    return StyleCatalog(session, clock)
