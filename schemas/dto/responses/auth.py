"""
Response DTOs for authentication and profile endpoints.

AccountProfileResponse — public view of an account (never includes a password)
AuthResponse           — POST /register (201), POST /login (200)
CheckEmailResponse     — POST /check-email
VerifyOtpResponse      — POST /verify-otp
OtpSentResponse        — POST /send-otp
ProfileResponse        — GET /profile, PUT /update-profile
UploadPictureResponse  — POST /upload-profile-picture
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.account import AccountDoc


class AccountProfileResponse(BaseModel):
    """User shape returned by every endpoint that includes an account.

    Built with from_account(); there is deliberately no password field, so
    the hash cannot leak through serialization.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    birthday: Optional[datetime] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[str] = None
    email_verified: bool = False
    password_last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: AccountDoc) -> "AccountProfileResponse":
        data = account.model_dump(exclude={"id", "password_hash"})
        return cls(id=str(account.id), **data)


class AuthResponse(BaseModel):
    """Response body for POST /register (201) and POST /login (200)."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    token: str
    user: AccountProfileResponse


class CheckEmailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exists: bool


class OtpSentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    expires_in: int


class VerifyOtpResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    verified: bool


class ProfileResponse(BaseModel):
    """Response body for GET /profile and PUT /update-profile."""

    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user: AccountProfileResponse


class UploadPictureResponse(BaseModel):
    """Response body for POST /upload-profile-picture."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    url: str
    user: AccountProfileResponse
