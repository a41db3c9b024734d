"""Session lifecycle for the super admin: login, refresh, logout, verify.

Every operation finishes persisting the account before it returns.
"""

import hmac
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from gameads.core import settings
from gameads.models.admin_account import AdminAccount
from gameads.services import lockout
from gameads.services.credential_store import (
    CredentialStore,
    hash_password,
    is_hashed,
    needs_rehash,
    validate_password_strength,
    verify_password,
)
from gameads.services.errors import (
    Forbidden,
    InvalidCredentials,
    InvalidInput,
    Locked,
    RefreshRequired,
    SessionExpired,
    SessionInvalidated,
    TokenExpired,
    TokenInvalid,
)
from gameads.services.tokens import (
    ACCESS,
    REFRESH,
    TokenPair,
    issue_token_pair,
    new_session_id,
    verify_token,
)

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash verified against when the email is unknown so both failure paths cost the same."""
    return hash_password("dummy-password-for-timing")


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class AdminIdentity:
    """Identity attached to an authenticated request."""

    id: str
    username: str
    email: str
    session_id: str | None
    role: str = ADMIN_ROLE

    @classmethod
    def from_account(cls, account: AdminAccount, session_id: str | None = None) -> "AdminIdentity":
        return cls(
            id=str(account.id),
            username=account.username,
            email=account.email,
            session_id=session_id,
        )


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    identity: AdminIdentity


@dataclass(frozen=True)
class AuthStatus:
    locked: bool
    attempts_remaining: int
    lock_time_remaining: int
    has_active_session: bool
    last_activity: datetime | None


class SessionManager:
    """Orchestrates the credential store, lockout policy and token issuer."""

    def __init__(self, db: AsyncSession):
        self.store = CredentialStore(db)

    @property
    def max_attempts(self) -> int:
        return settings.login_max_attempts

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate the admin and open a new session.

        Raises Locked while a lockout is active, and InvalidCredentials (with
        attempts remaining and lock state) for an unknown email or a wrong
        password alike.
        """
        now = _now()
        account = await self.store.get_or_create_account()

        if lockout.is_locked(account, now):
            remaining = lockout.remaining_lock_seconds(account, now)
            logger.warning(f"Login attempt while locked ({remaining}s remaining)")
            raise Locked(remaining)

        matched = await self.store.get_by_email(email)
        if matched is None:
            verify_password(password, dummy_password_hash())
            await self._fail_login(account, now)

        if not await self._check_password(account, password):
            await self._fail_login(account, now)

        lockout.reset(account)
        session_id = new_session_id()
        tokens = issue_token_pair(account, session_id)
        account.set_session(session_id, tokens.refresh_token, now)
        account.last_login_at = now
        await self.store.save(account)

        logger.info(f"Super admin logged in: {account.username}")
        return LoginResult(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            identity=AdminIdentity.from_account(account, session_id),
        )

    async def _fail_login(self, account: AdminAccount, now: datetime) -> NoReturn:
        lockout.record_failed_attempt(account, now, self.max_attempts)
        await self.store.save(account)

        state = lockout.snapshot(account, now, self.max_attempts)
        if state.locked:
            logger.warning(
                f"Admin login locked after {account.failed_attempt_count} failed attempts "
                f"for {state.lock_time_remaining}s"
            )
        else:
            logger.warning(f"Failed admin login ({state.attempts_remaining} attempts remaining)")

        raise InvalidCredentials(
            attemptsRemaining=state.attempts_remaining,
            locked=state.locked,
            lockTimeRemaining=state.lock_time_remaining,
        )

    async def _check_password(self, account: AdminAccount, password: str) -> bool:
        if is_hashed(account):
            if not verify_password(password, account.password_hash):
                return False
            if needs_rehash(account.password_hash):
                account.password_hash = hash_password(password)
            return True

        # Legacy plaintext credential: compare once, then migrate to a hash
        if not hmac.compare_digest(password.encode(), account.password_hash.encode()):
            return False
        await self.store.upgrade_legacy_password(account, password)
        return True

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        """Rotate the token pair for the active session.

        A token that differs from the stored one is treated as a replay and
        ends the session.
        """
        if not refresh_token:
            raise RefreshRequired()

        now = _now()
        account = await self.store.get_or_create_account()

        stored = account.current_refresh_token
        if stored is None or not hmac.compare_digest(refresh_token.encode(), stored.encode()):
            await self._end_session(account)
            logger.warning("Refresh token mismatch - session invalidated")
            raise SessionInvalidated()

        if self._inactivity_exceeded(account, now):
            await self._end_session(account)
            logger.info("Admin session expired due to inactivity")
            raise SessionExpired("Session expired due to inactivity")

        try:
            payload = verify_token(refresh_token, REFRESH)
        except TokenExpired as e:
            await self._end_session(account)
            raise SessionExpired() from e
        except TokenInvalid as e:
            await self._end_session(account)
            raise SessionInvalidated("Invalid token") from e

        if payload["sid"] != account.active_session_id or payload["sub"] != str(account.id):
            await self._end_session(account)
            raise SessionInvalidated("Invalid token")

        session_id = account.active_session_id
        tokens = issue_token_pair(account, session_id)
        account.set_session(session_id, tokens.refresh_token, now)
        await self.store.save(account)
        return tokens

    def _inactivity_exceeded(self, account: AdminAccount, now: datetime) -> bool:
        timeout = settings.session_inactivity_timeout_minutes
        if not timeout or account.last_activity_at is None:
            return False
        return now - lockout.as_utc(account.last_activity_at) > timedelta(minutes=timeout)

    async def _end_session(self, account: AdminAccount) -> None:
        account.clear_session()
        await self.store.save(account)

    async def logout(self) -> None:
        """End the current session. Safe to call repeatedly."""
        account = await self.store.get_or_create_account()
        await self._end_session(account)
        logger.info(f"Super admin logged out: {account.username}")

    async def verify(self, access_token: str) -> AdminIdentity:
        """Validate an access token against the active session and touch it."""
        payload = verify_token(access_token, ACCESS)
        account = await self.store.get_or_create_account()

        if payload["sub"] != str(account.id):
            raise Forbidden()
        if account.active_session_id is None or payload["sid"] != account.active_session_id:
            raise Forbidden("Session is no longer active")

        await self.touch(account)
        return AdminIdentity.from_account(account, payload["sid"])

    async def touch(self, account: AdminAccount) -> None:
        account.last_activity_at = _now()
        await self.store.save(account)

    async def status(self) -> AuthStatus:
        now = _now()
        account = await self.store.get_or_create_account()
        state = lockout.snapshot(account, now, self.max_attempts)
        # Persists an expired lock being cleared
        await self.store.save(account)
        return AuthStatus(
            locked=state.locked,
            attempts_remaining=state.attempts_remaining,
            lock_time_remaining=state.lock_time_remaining,
            has_active_session=account.has_active_session,
            last_activity=account.last_activity_at,
        )

    async def update_credentials(self, username: str, email: str, password: str) -> AdminAccount:
        """Replace the admin identity and password. The current session stays valid."""
        problems = validate_password_strength(password)
        if problems:
            raise InvalidInput(
                "Password does not meet security requirements",
                details=problems,
            )
        return await self.store.update_credentials(username, email, password)

