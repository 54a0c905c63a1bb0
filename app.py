"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.logging_provider import LoggingEmailProvider
from infrastructure.email.protocol import EmailProvider
from infrastructure.storage.local import LocalFileStorage
from repositories.indexes import ensure_indexes
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.otp_routes import router as otp_router
from routes.profile_routes import router as profile_router
from schemas.dto.responses.common import ErrorResponse
from services.token_service import TokenService
from shared.log_context import RequestLoggingMiddleware
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)

# Routes are served both at the root and under the legacy /api prefix
API_PREFIXES = ("", "/api")

# Documented error bodies; every AppError renders as ErrorResponse
ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def configure_state(
    app: FastAPI,
    settings: AppSettings,
    db: AsyncDatabase,
    email_provider: Optional[EmailProvider] = None,
) -> None:
    """Attach the process-wide handles that dependencies.py reads from app.state."""
    storage = LocalFileStorage(
        settings.upload.upload_dir, settings.upload.upload_url_prefix
    )
    storage.ensure_root()

    app.state.settings = settings
    app.state.db = db
    app.state.token_service = TokenService(settings.jwt)
    app.state.email_provider = email_provider or LoggingEmailProvider()
    app.state.storage = storage


def include_routers(app: FastAPI, settings: AppSettings) -> None:
    app.include_router(health_router)
    for prefix in API_PREFIXES:
        # Only the root copy goes into the OpenAPI schema
        kwargs = {"prefix": prefix, "responses": ERROR_RESPONSES, "include_in_schema": not prefix}
        app.include_router(auth_router, **kwargs)
        app.include_router(profile_router, **kwargs)
        app.include_router(otp_router, **kwargs)

    app.mount(
        settings.upload.upload_url_prefix,
        StaticFiles(directory=settings.upload.upload_dir, check_dir=False),
        name="uploads",
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    setup_logging(settings.logging, env=settings.env)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        app.state.mongo_client = mongo_client
        db = mongo_client[settings.db.db_name]
        configure_state(app, settings, db)

        await ensure_indexes(db, settings.session.session_retention_seconds)
        log.info(
            "app_started",
            db_name=settings.db.db_name,
            session_store_enabled=settings.session.session_store_enabled,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await mongo_client.close()
        log.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)
    include_routers(app, settings)

    return app
