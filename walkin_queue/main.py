# walkin_queue/main.py

"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session, select

from . import db
from .auth import ensure_admin_user
from .config import get_settings
from .data import DEFAULT_SERVICES
from .errors import register_exception_handlers
from .models import Service
from .routers import admin_routes, auth_routes, services_routes, users_routes

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def seed_services(session: Session) -> None:
    if session.exec(select(Service)).first() is not None:
        return
    for service in DEFAULT_SERVICES:
        session.add(Service(**service))
    session.commit()
    logger.info("Seeded %d default services", len(DEFAULT_SERVICES))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    db.init_db(db.engine)
    with Session(db.engine) as session:
        if settings.seed_services:
            seed_services(session)
        ensure_admin_user(session, settings.admin_username, settings.admin_password)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_exception_handlers(app)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(users_routes.router, prefix=settings.api_prefix)
    app.include_router(services_routes.router, prefix=settings.api_prefix)
    app.include_router(auth_routes.router, prefix=settings.api_prefix)
    app.include_router(admin_routes.router, prefix=settings.api_prefix)
    return app


app = create_app()
