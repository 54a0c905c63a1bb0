"""
Repository for the `otp-codes` collection.

One row per email. Issuing a code upserts the row (replacing any previous
code); consuming a code unsets code_hash / expires_at with a filter on the
hash, so two concurrent verifications of the same code cannot both succeed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.otp import OtpCodeDoc
from shared.datetime_utils import utc_now
from shared.validators import normalize_email


class OtpRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def upsert_code(self, email: str, code_hash: str, expires_at: datetime) -> None:
        now = utc_now()
        await self._col.update_one(
            {"email": normalize_email(email)},
            {
                "$set": {
                    "code_hash": code_hash,
                    "expires_at": expires_at,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

    async def find_by_email(self, email: str) -> Optional[OtpCodeDoc]:
        data = await self._col.find_one({"email": normalize_email(email)})
        return OtpCodeDoc.from_mongo(data)

    async def consume(self, email: str, code_hash: str) -> bool:
        """Clear the stored code if it still equals *code_hash*.

        Returns:
            ``True`` if this call consumed the code, ``False`` if it was
            already gone or had been replaced.
        """
        result = await self._col.update_one(
            {"email": normalize_email(email), "code_hash": code_hash},
            {
                "$unset": {"code_hash": "", "expires_at": ""},
                "$set": {"verified_at": utc_now(), "updated_at": utc_now()},
            },
        )
        return result.modified_count > 0
