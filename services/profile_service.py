"""
Profile read/update and profile-picture upload.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from errors import NotFoundError, ValidationError
from infrastructure.storage.local import LocalFileStorage
from repositories.account_repository import AccountRepository
from schemas.models.account import AccountDoc
from shared.generators import generate_upload_filename
from shared.logging import get_logger
from shared.validators import image_extension, validate_phone

log = get_logger(__name__)


class ProfileService:
    def __init__(
        self,
        accounts: AccountRepository,
        storage: LocalFileStorage,
        max_upload_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._accounts = accounts
        self._storage = storage
        self._max_upload_bytes = max_upload_bytes

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    async def get_profile(self, account_id: str) -> AccountDoc:
        account = await self._accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError("user not found")
        return account

    async def update_profile(
        self,
        account_id: str,
        name: Optional[str],
        phone: Optional[str] = None,
        birthday: Optional[date] = None,
        gender: Optional[str] = None,
        address: Optional[str] = None,
    ) -> AccountDoc:
        """Update name plus whichever optional fields were provided.

        Optional fields passed as ``None`` or blank are left untouched.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("name is required", field="name")

        fields: dict[str, Any] = {"name": name}
        if phone is not None and phone.strip():
            phone = phone.strip()
            if not validate_phone(phone):
                raise ValidationError("phone number format is invalid", field="phone")
            fields["phone"] = phone
        if birthday is not None:
            fields["birthday"] = birthday
        if gender is not None and gender.strip():
            fields["gender"] = gender.strip()
        if address is not None and address.strip():
            fields["address"] = address.strip()

        account = await self._accounts.update_profile(account_id, fields)
        if account is None:
            raise NotFoundError("user not found")

        log.info("profile_updated", user_id=account_id, fields=sorted(fields))
        return account

    async def upload_picture(
        self,
        account_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> tuple[str, AccountDoc]:
        """Store an uploaded image and point the account's profile_picture at it.

        Returns:
            ``(url, updated_account)``
        """
        if not data:
            raise ValidationError("no file uploaded", field="file")
        ext = image_extension(content_type)
        if ext is None:
            raise ValidationError("only image files are allowed", field="file")
        if len(data) > self._max_upload_bytes:
            raise ValidationError(
                "file is too large",
                field="file",
                details={"max_bytes": self._max_upload_bytes},
            )

        if await self._accounts.find_by_id(account_id) is None:
            raise NotFoundError("user not found")

        url = await self._storage.save(generate_upload_filename(account_id, ext), data)
        account = await self._accounts.update_profile(account_id, {"profile_picture": url})
        if account is None:
            raise NotFoundError("user not found")

        log.info(
            "profile_picture_uploaded", user_id=account_id, size=len(data), original_name=filename
        )
        return url, account
