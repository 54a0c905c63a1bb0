"""
Account document model.

Maps to the `accounts` MongoDB collection.

email is stored normalised (trimmed, lowercase) and is unique by index.
password_hash is only populated when the repository is explicitly asked for
credentials; every other read projects it away, so an AccountDoc that reaches
a response builder normally has password_hash=None.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel

# Profile fields a client may change through update-profile
PROFILE_FIELDS = ("name", "phone", "birthday", "gender", "address")


class AccountDoc(MongoBaseModel):
    """Document model for the `accounts` collection."""

    email: str
    name: str
    password_hash: Optional[str] = None
    phone: Optional[str] = None
    birthday: Optional[datetime] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[str] = None
    email_verified: bool = False
    password_last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
