"""
One-time code document model.

Maps to the `otp-codes` MongoDB collection, one row per email address.

code_hash stores SHA-256(code); the plain code is never stored.
code_hash and expires_at are unset once the code has been used.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel


class OtpCodeDoc(MongoBaseModel):
    """Document model for the `otp-codes` collection."""

    email: str
    code_hash: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
