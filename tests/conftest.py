"""
Shared fixtures.

MongoDB is replaced by mongomock. mongomock is synchronous, so a thin adapter
exposes the awaitable subset of pymongo's AsyncCollection API that the
repositories use. Unique indexes created through the adapter are enforced by
mongomock and raise pymongo's DuplicateKeyError, so uniqueness behaves as it
does against a real server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import mongomock
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import configure_state, include_routers
from config import (
    AppSettings,
    DatabaseSettings,
    JWTSettings,
    OtpSettings,
    SessionSettings,
    UploadSettings,
)
from errors import register_error_handlers
from repositories.indexes import ensure_indexes

TEST_JWT_SECRET = "test-secret-for-unit-tests-only-0123456789"


class AsyncCollectionAdapter:
    def __init__(self, collection) -> None:
        self._col = collection

    @property
    def sync(self):
        """The underlying mongomock collection, for direct inspection in tests."""
        return self._col

    async def insert_one(self, *args, **kwargs):
        return self._col.insert_one(*args, **kwargs)

    async def find_one(self, *args, **kwargs):
        return self._col.find_one(*args, **kwargs)

    async def update_one(self, *args, **kwargs):
        return self._col.update_one(*args, **kwargs)

    async def find_one_and_update(self, *args, **kwargs):
        return self._col.find_one_and_update(*args, **kwargs)

    async def delete_one(self, *args, **kwargs):
        return self._col.delete_one(*args, **kwargs)

    async def count_documents(self, *args, **kwargs):
        return self._col.count_documents(*args, **kwargs)

    async def create_index(self, *args, **kwargs):
        return self._col.create_index(*args, **kwargs)


class AsyncDatabaseAdapter:
    def __init__(self, db) -> None:
        self._db = db

    def __getitem__(self, name: str) -> AsyncCollectionAdapter:
        return AsyncCollectionAdapter(self._db[name])


class RecordingEmailProvider:
    """EmailProvider that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.otp_emails: list[tuple[str, str, int]] = []
        self.welcome_emails: list[tuple[str, Optional[str]]] = []

    async def send_otp_email(self, email: str, otp_code: str, expires_in_seconds: int) -> bool:
        self.otp_emails.append((email, otp_code, expires_in_seconds))
        return True

    async def send_welcome_email(self, email: str, name: Optional[str]) -> bool:
        self.welcome_emails.append((email, name))
        return True

    def last_code_for(self, email: str) -> str:
        for to_email, code, _ in reversed(self.otp_emails):
            if to_email == email:
                return code
        raise AssertionError(f"no code sent to {email}")


def make_settings(tmp_path, session_store_enabled: bool = True, **overrides) -> AppSettings:
    return AppSettings(
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/", db_name="accounts-test"),
        jwt=JWTSettings(jwt_secret=TEST_JWT_SECRET, jwt_private_key="", jwt_public_key=""),
        session=SessionSettings(session_store_enabled=session_store_enabled),
        otp=OtpSettings(otp_ttl_seconds=600),
        upload=UploadSettings(upload_dir=str(tmp_path / "uploads"), upload_max_bytes=1024),
        **overrides,
    )


def build_test_app(settings: AppSettings, db, email_provider) -> FastAPI:
    """Mirror create_app() without a real MongoDB client, Sentry or logging setup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_state(app, settings, db, email_provider)
        await ensure_indexes(db, settings.session.session_retention_seconds)
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    include_routers(app, settings)
    return app


@pytest.fixture
def mock_db():
    return AsyncDatabaseAdapter(mongomock.MongoClient().db)


@pytest.fixture
def email_provider():
    return RecordingEmailProvider()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(settings, mock_db, email_provider):
    app = build_test_app(settings, mock_db, email_provider)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def stateless_client(tmp_path, mock_db, email_provider):
    app = build_test_app(
        make_settings(tmp_path, session_store_enabled=False), mock_db, email_provider
    )
    with TestClient(app) as client:
        yield client
