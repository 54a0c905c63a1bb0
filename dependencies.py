"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Process-wide handles (settings, database, email
provider, file storage) live on app.state and are created once in the
lifespan; repositories and services are cheap wrappers built per request.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.asynchronous.database import AsyncDatabase

from config import AppSettings
from infrastructure.email.protocol import EmailProvider
from infrastructure.storage.local import LocalFileStorage
from repositories.account_repository import AccountRepository
from repositories.indexes import (
    ACCOUNTS_COLLECTION,
    OTP_COLLECTION,
    SESSIONS_COLLECTION,
)
from repositories.otp_repository import OtpRepository
from repositories.session_repository import SessionRepository
from services.auth_service import AuthContext, AuthService
from services.otp_service import OtpService
from services.profile_service import ProfileService
from services.token_service import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_db(request: Request) -> AsyncDatabase:
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


def get_storage(request: Request) -> LocalFileStorage:
    return request.app.state.storage


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_account_repository(db: AsyncDatabase = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db[ACCOUNTS_COLLECTION])


def get_session_repository(
    db: AsyncDatabase = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> Optional[SessionRepository]:
    """Session store, or ``None`` when SESSION_STORE_ENABLED is off."""
    if not settings.session.session_store_enabled:
        return None
    return SessionRepository(
        db[SESSIONS_COLLECTION],
        retention_seconds=settings.session.session_retention_seconds,
    )


def get_otp_repository(db: AsyncDatabase = Depends(get_db)) -> OtpRepository:
    return OtpRepository(db[OTP_COLLECTION])


def get_auth_service(
    settings: AppSettings = Depends(get_settings),
    accounts: AccountRepository = Depends(get_account_repository),
    sessions: Optional[SessionRepository] = Depends(get_session_repository),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        accounts,
        tokens,
        sessions,
        password_min_length=settings.password_min_length,
        password_max_length=settings.password_max_length,
    )


def get_profile_service(
    settings: AppSettings = Depends(get_settings),
    accounts: AccountRepository = Depends(get_account_repository),
    storage: LocalFileStorage = Depends(get_storage),
) -> ProfileService:
    return ProfileService(
        accounts, storage, max_upload_bytes=settings.upload.upload_max_bytes
    )


def get_otp_service(
    settings: AppSettings = Depends(get_settings),
    codes: OtpRepository = Depends(get_otp_repository),
    accounts: AccountRepository = Depends(get_account_repository),
    email_provider: EmailProvider = Depends(get_email_provider),
) -> OtpService:
    return OtpService(
        codes, accounts, email_provider, ttl_seconds=settings.otp.otp_ttl_seconds
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthContext:
    """Auth gate for protected routes: resolve the bearer token or raise 401."""
    token = credentials.credentials if credentials else None
    return await auth_service.authenticate(token)
