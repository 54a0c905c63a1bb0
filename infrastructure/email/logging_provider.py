"""EmailProvider that writes messages to the application log instead of sending them.

Stand-in for a real delivery service: the OTP code ends up in the log, where
an operator (or a test) can pick it up.
"""

from typing import Optional

from shared.logging import get_logger

log = get_logger(__name__)


class LoggingEmailProvider:
    async def send_otp_email(
        self, email: str, otp_code: str, expires_in_seconds: int
    ) -> bool:
        log.info(
            "otp_email_logged",
            to_email=email,
            otp_code=otp_code,
            expires_in=expires_in_seconds,
        )
        return True

    async def send_welcome_email(self, email: str, name: Optional[str]) -> bool:
        log.info("welcome_email_logged", to_email=email, has_name=bool(name))
        return True
