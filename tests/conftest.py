from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from walkin_queue.admission import AdmissionService
from walkin_queue.auth import ensure_admin_user
from walkin_queue.clock import Clock
from walkin_queue.db import build_engine, get_session, init_db
from walkin_queue.deps import get_clock, get_gateway
from walkin_queue.main import create_app, seed_services
from walkin_queue.models import Service
from walkin_queue.notifications import Notifier
from walkin_queue.queue_service import QueueService

TZ = "America/New_York"
ADMIN_PASSWORD = "barber-admin-1"


class FixedClock(Clock):
    def __init__(self, current: datetime):
        super().__init__(TZ)
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class RecordingGateway:
    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, destination: str, message: str) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((destination, message))
        return True


@pytest.fixture
def engine(tmp_path: Path):
    engine = build_engine(f"sqlite:///{tmp_path / 'queue.db'}", busy_timeout=30.0)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        seed_services(session)
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 10, 0, tzinfo=ZoneInfo(TZ)))


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def notifier(gateway) -> Notifier:
    return Notifier(gateway)


@pytest.fixture
def haircut(session) -> Service:
    return session.get(Service, 1)


@pytest.fixture
def admission(session, clock, notifier) -> AdmissionService:
    return AdmissionService(session, clock, notifier, default_daily_limit=50, minutes_per_customer=15)


@pytest.fixture
def queue(session, clock, notifier) -> QueueService:
    return QueueService(session, clock, notifier, minutes_per_customer=15, default_retention_days=30)


@pytest.fixture
def client(engine, session, clock, gateway) -> TestClient:
    app = create_app()

    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_gateway] = lambda: gateway
    return TestClient(app)


@pytest.fixture
def admin_headers(client, session) -> dict:
    ensure_admin_user(session, "admin", ADMIN_PASSWORD)
    response = client.post("/api/auth/login", data={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
