# walkin_queue/db.py

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from .config import get_settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, busy_timeout: float = 30.0) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # required for SQLite + FastAPI; writers wait on the file lock instead of failing
        connect_args = {"check_same_thread": False, "timeout": busy_timeout}
    return create_engine(
        database_url,
        echo=False,  # set to True to see SQL
        connect_args=connect_args,
    )


settings = get_settings()
engine = build_engine(settings.database_url, settings.sqlite_busy_timeout_seconds)


def init_db(bind: Engine = engine) -> None:
    # import for table registration
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind)
    logger.info("Database schema ready at %s", bind.url)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
