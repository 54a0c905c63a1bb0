"""
Repository for the `accounts` collection.

Every lookup and write normalises the email first. Reads project
password_hash away unless the caller asks for credentials explicitly
(include_password=True), so documents handed back for responses never carry
the hash.

Email uniqueness is enforced by the unique index on `email` (see
repositories/indexes.py); create() turns the index violation into
DuplicateEmailError instead of checking first.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from errors import DuplicateEmailError
from schemas.models.account import PROFILE_FIELDS, AccountDoc
from schemas.models.base import to_object_id
from shared.datetime_utils import date_to_datetime, utc_now
from shared.logging import get_logger
from shared.validators import normalize_email

log = get_logger(__name__)

_WITHOUT_PASSWORD = {"password_hash": 0}


def _projection(include_password: bool) -> Optional[dict]:
    return None if include_password else _WITHOUT_PASSWORD


class AccountRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def create(self, email: str, name: str, password_hash: str) -> AccountDoc:
        """Insert a new account and return it without the password hash.

        Raises:
            DuplicateEmailError: an account with this email already exists.
        """
        now = utc_now()
        doc = AccountDoc(
            email=normalize_email(email),
            name=name,
            password_hash=password_hash,
            password_last_updated=now,
            created_at=now,
            updated_at=now,
        )
        data = doc.to_mongo()
        try:
            result = await self._col.insert_one(data)
        except DuplicateKeyError as exc:
            log.warning("account_create_failed", reason="duplicate_email")
            raise DuplicateEmailError(
                "email already registered", field="email"
            ) from exc
        return doc.model_copy(update={"id": result.inserted_id, "password_hash": None})

    async def find_by_email(
        self, email: str, include_password: bool = False
    ) -> Optional[AccountDoc]:
        data = await self._col.find_one(
            {"email": normalize_email(email)}, _projection(include_password)
        )
        return AccountDoc.from_mongo(data)

    async def find_by_id(
        self, account_id: Any, include_password: bool = False
    ) -> Optional[AccountDoc]:
        oid = to_object_id(account_id)
        if oid is None:
            return None
        data = await self._col.find_one({"_id": oid}, _projection(include_password))
        return AccountDoc.from_mongo(data)

    async def email_exists(self, email: str) -> bool:
        data = await self._col.find_one({"email": normalize_email(email)}, {"_id": 1})
        return data is not None

    async def update_profile(
        self, account_id: Any, fields: Mapping[str, Any]
    ) -> Optional[AccountDoc]:
        """Apply a partial profile update atomically.

        Only keys present in *fields* are written; updated_at is always
        refreshed. Keys outside the editable profile set (plus
        profile_picture) are ignored.

        Returns:
            The updated account, or ``None`` if no account has this id.
        """
        oid = to_object_id(account_id)
        if oid is None:
            return None

        updates: dict[str, Any] = {}
        for key, value in fields.items():
            if key not in PROFILE_FIELDS and key != "profile_picture":
                continue
            if key == "birthday" and value is not None:
                value = date_to_datetime(value)
            updates[key] = value
        updates["updated_at"] = utc_now()

        data = await self._col.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            projection=_WITHOUT_PASSWORD,
            return_document=ReturnDocument.AFTER,
        )
        return AccountDoc.from_mongo(data)

    async def update_password(self, account_id: Any, new_hash: str) -> bool:
        """Replace the password hash and bump password_last_updated / updated_at."""
        oid = to_object_id(account_id)
        if oid is None:
            return False
        now = utc_now()
        result = await self._col.update_one(
            {"_id": oid},
            {
                "$set": {
                    "password_hash": new_hash,
                    "password_last_updated": now,
                    "updated_at": now,
                }
            },
        )
        return result.matched_count > 0

    async def mark_email_verified(self, email: str) -> bool:
        result = await self._col.update_one(
            {"email": normalize_email(email)},
            {"$set": {"email_verified": True, "updated_at": utc_now()}},
        )
        return result.matched_count > 0
