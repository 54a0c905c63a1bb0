"""
Authentication service: registration, login, logout, password change and the
bearer-token gate used by every protected route.

When a SessionRepository is supplied, issued tokens are recorded server-side
and authenticate() requires a live session row in addition to a valid
signature. Without one, tokens are stateless and logout is a no-op on the
server.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from errors import (
    AuthenticationError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    NotFoundError,
    ValidationError,
)
from repositories.account_repository import AccountRepository
from repositories.session_repository import SessionRepository
from schemas.models.account import AccountDoc
from services.token_service import TokenService
from shared.crypto import hash_password, verify_password
from shared.logging import get_logger
from shared.validators import normalize_email, validate_email, validate_password

log = get_logger(__name__)

_INVALID_TOKEN = "invalid or expired token"


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved from a request's bearer token."""

    user_id: str
    token: str


class AuthService:
    def __init__(
        self,
        accounts: AccountRepository,
        tokens: TokenService,
        sessions: Optional[SessionRepository] = None,
        password_min_length: int = 6,
        password_max_length: int = 128,
    ) -> None:
        self._accounts = accounts
        self._tokens = tokens
        self._sessions = sessions
        self._pw_min = password_min_length
        self._pw_max = password_max_length

    @property
    def sessions_enabled(self) -> bool:
        return self._sessions is not None

    def _check_password_rules(self, password: str, field: str) -> None:
        if not validate_password(password, self._pw_min, self._pw_max):
            raise ValidationError(
                f"password must be between {self._pw_min} and {self._pw_max} characters",
                field=field,
            )

    async def _issue(self, account_id: str) -> str:
        token = self._tokens.issue(account_id)
        if self._sessions is not None:
            await self._sessions.open(account_id, token)
        return token

    async def register(
        self, name: Optional[str], email: Optional[str], password: Optional[str]
    ) -> tuple[str, AccountDoc]:
        """Create an account and sign it in.

        Raises:
            ValidationError: a field is missing or malformed.
            DuplicateEmailError: the email is already registered.
        """
        name = (name or "").strip()
        email = normalize_email(email)
        password = password or ""

        if not name:
            raise ValidationError("name is required", field="name")
        if not email:
            raise ValidationError("email is required", field="email")
        if not password:
            raise ValidationError("password is required", field="password")
        if not validate_email(email):
            raise ValidationError("email is not valid", field="email")
        self._check_password_rules(password, "password")

        account = await self._accounts.create(email, name, hash_password(password))
        account_id = str(account.id)
        token = await self._issue(account_id)

        log.info("user_registered", user_id=account_id)
        return token, account

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> tuple[str, AccountDoc]:
        """Check credentials and issue a token.

        Unknown email and wrong password produce the same error.
        """
        email = normalize_email(email)
        password = password or ""
        if not email or not password:
            raise ValidationError("email and password are required")

        account = await self._accounts.find_by_email(email, include_password=True)
        if account is None or not account.password_hash:
            # Do not reveal which part failed
            log.warning("login_failed", reason="invalid_credentials", email_exists=bool(account))
            raise InvalidCredentialsError("invalid email or password")

        if not verify_password(password, account.password_hash):
            log.warning("login_failed", reason="invalid_password", user_id=str(account.id))
            raise InvalidCredentialsError("invalid email or password")

        account_id = str(account.id)
        token = await self._issue(account_id)
        log.info("login_success", user_id=account_id)
        return token, account.model_copy(update={"password_hash": None})

    async def authenticate(self, token: Optional[str]) -> AuthContext:
        """Resolve a bearer token to an identity or raise AuthenticationError.

        Order of checks: token present, signature/claims/expiry, then (with
        the session store enabled) a live session row for this exact token.
        """
        if not token:
            raise AuthenticationError("missing access token")

        account_id = self._tokens.verify(token)
        if account_id is None:
            raise AuthenticationError(_INVALID_TOKEN)

        if self._sessions is not None and not await self._sessions.is_live(token, account_id):
            log.info("token_rejected", reason="no_live_session", user_id=account_id)
            raise AuthenticationError(_INVALID_TOKEN)

        return AuthContext(user_id=account_id, token=token)

    async def logout(self, ctx: AuthContext) -> None:
        if self._sessions is not None:
            await self._sessions.close(ctx.token)
        log.info("logout", user_id=ctx.user_id)

    async def change_password(
        self,
        account_id: str,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """Replace the password after checking the current one.

        Raises:
            ValidationError: a field is missing or the new password is too short.
            NotFoundError: the account no longer exists.
            InvalidCurrentPasswordError: *current_password* does not match.
        """
        current_password = current_password or ""
        new_password = new_password or ""
        if not current_password or not new_password:
            raise ValidationError("current and new password are required")
        self._check_password_rules(new_password, "new_password")

        account = await self._accounts.find_by_id(account_id, include_password=True)
        if account is None:
            raise NotFoundError("user not found")

        if not account.password_hash or not verify_password(
            current_password, account.password_hash
        ):
            log.warning("password_change_failed", reason="invalid_current_password", user_id=account_id)
            raise InvalidCurrentPasswordError(
                "current password is incorrect", field="current_password"
            )

        if not await self._accounts.update_password(account_id, hash_password(new_password)):
            raise NotFoundError("user not found")
        log.info("password_changed", user_id=account_id)

    async def check_email(self, email: Optional[str]) -> bool:
        email = normalize_email(email)
        if not email:
            raise ValidationError("email is required", field="email")
        return await self._accounts.email_exists(email)
