"""
Request DTOs for authentication endpoints.

RegisterRequest        — POST /register
LoginRequest           — POST /login
CheckEmailRequest      — POST /check-email
ChangePasswordRequest  — POST /change-password
SendOtpRequest         — POST /send-otp
VerifyOtpRequest       — POST /verify-otp

Fields are optional at this layer: a missing value reaches the service as
``None`` and is reported there as a 400 with the offending field.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None


class CheckEmailRequest(BaseModel):
    """Request body for POST /check-email."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Request body for POST /change-password.

    Accepts the camelCase keys used by existing clients as well as snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("current_password", "currentPassword"),
    )
    new_password: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )


class SendOtpRequest(BaseModel):
    """Request body for POST /send-otp."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    """Request body for POST /verify-otp.

    ``code`` is the 6-digit OTP sent to the email address.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    code: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("code", "otp")
    )

    @field_validator("code", mode="before")
    @classmethod
    def numeric_code_as_text(cls, v: object) -> object:
        # JSON clients often send the code as a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
