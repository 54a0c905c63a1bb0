"""
Token issuance and verification.

Access tokens are JWTs signed with RS256 when a key pair is configured, HS256
with JWT_SECRET otherwise. Claims:

    sub  account id (ObjectId hex)
    iat  issued-at
    exp  expiry (ACCESS_TOKEN_TTL_SECONDS after iat)
    iss  / aud  from JWTSettings
    jti  random id, so two tokens issued in the same second still differ

verify() is the only entry point for client-supplied tokens and never raises:
anything wrong with the token resolves to ``None``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional

import jwt
from bson import ObjectId

from config import JWTSettings
from shared.datetime_utils import utc_now
from shared.generators import generate_token_id
from shared.logging import get_logger

log = get_logger(__name__)

_REQUIRED_CLAIMS = ["sub", "exp", "iat"]


class TokenService:
    def __init__(
        self,
        settings: JWTSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings
        self._clock = clock
        if settings.use_rs256:
            # Support keys provided via env with literal \n sequences
            self._signing_key = settings.jwt_private_key.replace("\\n", "\n")
            self._verify_key = settings.jwt_public_key.replace("\\n", "\n")
            self._algorithm = "RS256"
        else:
            if not settings.jwt_secret:
                raise RuntimeError(
                    "JWT_SECRET must be set when RS256 keys are not provided"
                )
            self._signing_key = self._verify_key = settings.jwt_secret
            self._algorithm = "HS256"

    @property
    def ttl_seconds(self) -> int:
        return self._settings.access_token_ttl_seconds

    def issue(self, account_id: str) -> str:
        """Return a signed token binding *account_id*."""
        now = self._clock()
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(account_id),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.ttl_seconds)).timestamp()),
            "jti": generate_token_id(),
        }
        return jwt.encode(claims, self._signing_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        """Decode and validate *token*; raises ``jwt.PyJWTError`` on any problem."""
        return jwt.decode(
            token,
            self._verify_key,
            algorithms=[self._algorithm],
            audience=self._settings.jwt_audience,
            issuer=self._settings.jwt_issuer,
            options={"require": _REQUIRED_CLAIMS},
        )

    def verify(self, token: Optional[str]) -> Optional[str]:
        """Return the account id bound by *token*, or ``None`` if it is not acceptable.

        Rejects bad signatures, malformed payloads, wrong issuer/audience,
        missing claims, expired tokens and subjects that are not account ids.
        """
        if not token:
            return None
        try:
            claims = self.decode(token)
        except jwt.ExpiredSignatureError:
            log.info("token_rejected", reason="expired")
            return None
        except jwt.PyJWTError as e:
            log.info("token_rejected", reason="invalid", error_type=type(e).__name__)
            return None

        subject = claims.get("sub")
        if not isinstance(subject, str) or not ObjectId.is_valid(subject):
            log.info("token_rejected", reason="bad_subject")
            return None
        return subject
