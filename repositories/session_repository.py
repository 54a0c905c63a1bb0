"""
Repository for the `sessions` collection: the server-side session store.

A session row binds an issued token to its account for a fixed retention
window, independent of the token's own `exp` claim. Deleting the row revokes
the token even though its signature and expiry are still valid.

Tokens are looked up by their SHA-256 hash; the raw token is never stored.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable

from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.base import to_object_id
from schemas.models.session import SessionDoc
from shared.crypto import hash_token
from shared.datetime_utils import as_utc, utc_now


class SessionRepository:
    def __init__(
        self,
        collection: AsyncCollection,
        retention_seconds: int = 604800,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._col = collection
        self._retention = timedelta(seconds=retention_seconds)
        self._clock = clock

    async def open(self, account_id: Any, token: str) -> SessionDoc:
        """Persist a new session for *token*."""
        oid = to_object_id(account_id)
        if oid is None:
            raise ValueError(f"invalid account id: {account_id!r}")
        doc = SessionDoc(
            token_hash=hash_token(token),
            user_id=oid,
            created_at=self._clock(),
        )
        result = await self._col.insert_one(doc.to_mongo())
        return doc.model_copy(update={"id": result.inserted_id})

    async def is_live(self, token: str, account_id: Any) -> bool:
        """True iff a session for *token* exists, belongs to *account_id* and is unexpired."""
        oid = to_object_id(account_id)
        if oid is None:
            return False
        data = await self._col.find_one({"token_hash": hash_token(token)})
        session = SessionDoc.from_mongo(data)
        if session is None or session.user_id != oid:
            return False
        return as_utc(session.created_at) + self._retention > self._clock()

    async def close(self, token: str) -> bool:
        """Delete the session for *token*.

        Idempotent: closing a session that does not exist is not an error.

        Returns:
            Whether a session row was deleted.
        """
        result = await self._col.delete_one({"token_hash": hash_token(token)})
        return result.deleted_count > 0
