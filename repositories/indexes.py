"""
Collection names and index creation.

Called once from the application lifespan. The unique indexes here are what
make email registration and session issuance race-free; application code
never does check-then-insert for uniqueness.
"""

from __future__ import annotations

from pymongo import ASCENDING
from pymongo.errors import OperationFailure
from pymongo.asynchronous.database import AsyncDatabase

from shared.logging import get_logger

log = get_logger(__name__)

ACCOUNTS_COLLECTION = "accounts"
SESSIONS_COLLECTION = "sessions"
OTP_COLLECTION = "otp-codes"

SESSION_TTL_INDEX = "session_ttl"

# MongoDB error code for an existing index with different options
INDEX_OPTIONS_CONFLICT = 85


async def ensure_indexes(db: AsyncDatabase, session_retention_seconds: int = 604800) -> None:
    """Create the indexes every collection relies on (idempotent)."""
    accounts = db[ACCOUNTS_COLLECTION]
    await accounts.create_index([("email", ASCENDING)], unique=True)

    sessions = db[SESSIONS_COLLECTION]
    await sessions.create_index([("token_hash", ASCENDING)], unique=True)
    await sessions.create_index([("user_id", ASCENDING)])
    try:
        await sessions.create_index(
            [("created_at", ASCENDING)],
            name=SESSION_TTL_INDEX,
            expireAfterSeconds=session_retention_seconds,
        )
    except OperationFailure as exc:
        if exc.code != INDEX_OPTIONS_CONFLICT:
            raise
        # Retention was changed since the index was built
        await db.command(
            "collMod",
            SESSIONS_COLLECTION,
            index={"name": SESSION_TTL_INDEX, "expireAfterSeconds": session_retention_seconds},
        )
        log.info("session_ttl_updated", expire_after_seconds=session_retention_seconds)

    otp_codes = db[OTP_COLLECTION]
    await otp_codes.create_index([("email", ASCENDING)], unique=True)

    log.info("indexes_ensured")
