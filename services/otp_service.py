"""
Email one-time codes.

send_code() stores SHA-256(code) with an expiry, keyed by email, and hands
the plain code to the EmailProvider. verify_code() accepts a code once: the
stored hash is unset by a conditional update, so a replay (or a concurrent
second attempt) finds nothing to consume.

There is no cap on verification attempts per code.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional

from errors import ValidationError
from infrastructure.email.protocol import EmailProvider
from repositories.account_repository import AccountRepository
from repositories.otp_repository import OtpRepository
from shared.crypto import hash_token
from shared.datetime_utils import as_utc, utc_now
from shared.generators import generate_otp_code
from shared.logging import get_logger
from shared.validators import normalize_email, validate_email

log = get_logger(__name__)


class OtpService:
    def __init__(
        self,
        codes: OtpRepository,
        accounts: AccountRepository,
        email_provider: EmailProvider,
        ttl_seconds: int = 600,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._codes = codes
        self._accounts = accounts
        self._email = email_provider
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    async def send_code(self, email: Optional[str]) -> None:
        """Issue a fresh code for *email*, replacing any outstanding one."""
        email = normalize_email(email)
        if not email:
            raise ValidationError("email is required", field="email")
        if not validate_email(email):
            raise ValidationError("email is not valid", field="email")

        code = generate_otp_code()
        expires_at = self._clock() + timedelta(seconds=self._ttl_seconds)
        await self._codes.upsert_code(email, hash_token(code), expires_at)

        delivered = await self._email.send_otp_email(email, code, self._ttl_seconds)
        if not delivered:
            log.error("otp_delivery_failed", email=email)
        log.info("otp_code_issued", email=email, expires_in=self._ttl_seconds)

    async def verify_code(self, email: Optional[str], code: Optional[str]) -> bool:
        """Return True iff *code* is the unexpired, unused code issued for *email*."""
        email = normalize_email(email)
        code = (code or "").strip()
        if not email or not code:
            raise ValidationError("email and code are required")

        stored = await self._codes.find_by_email(email)
        if stored is None or not stored.code_hash or stored.expires_at is None:
            log.info("otp_verification_failed", email=email, reason="no_code")
            return False

        code_hash = hash_token(code)
        if stored.code_hash != code_hash:
            log.info("otp_verification_failed", email=email, reason="mismatch")
            return False

        if as_utc(stored.expires_at) <= self._clock():
            log.info("otp_verification_failed", email=email, reason="expired")
            return False

        if not await self._codes.consume(email, code_hash):
            log.info("otp_verification_failed", email=email, reason="already_used")
            return False

        account = await self._accounts.find_by_email(email)
        if account is not None and not account.email_verified:
            await self._accounts.mark_email_verified(email)
            await self._email.send_welcome_email(email, account.name)
        log.info("otp_verified_success", email=email)
        return True
