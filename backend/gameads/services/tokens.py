"""Token issuer for JWT access/refresh pairs bound to a session id."""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

import jwt
from jwt.exceptions import PyJWTError

from gameads.core import settings
from gameads.models.admin_account import AdminAccount
from gameads.services.errors import TokenExpired, TokenInvalid

TokenKind = Literal["access", "refresh"]

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def new_session_id() -> str:
    """Opaque random session identifier."""
    return secrets.token_hex(32)


def _encode(payload: dict[str, Any], lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        **payload,
        "iat": now,
        "exp": now + lifetime,
        # Unique per token so a rotated token never equals its predecessor
        "jti": secrets.token_hex(16),
    }
    token = jwt.encode(
        payload,
        settings.effective_jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return str(token)


def create_access_token(account: AdminAccount, session_id: str) -> str:
    """Create a short-lived access token."""
    return _encode(
        {
            "sub": str(account.id),
            "email": account.email,
            "sid": session_id,
            "type": ACCESS,
        },
        timedelta(minutes=settings.jwt_access_token_expire_minutes),
    )


def create_refresh_token(account: AdminAccount, session_id: str) -> str:
    """Create a longer-lived refresh token."""
    return _encode(
        {
            "sub": str(account.id),
            "sid": session_id,
            "type": REFRESH,
        },
        timedelta(minutes=settings.jwt_refresh_token_expire_minutes),
    )


def issue_token_pair(account: AdminAccount, session_id: str) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(account, session_id),
        refresh_token=create_refresh_token(account, session_id),
    )


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token's signature and expiry."""
    try:
        return jwt.decode(
            token,
            settings.effective_jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub", "sid", "type"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired("Token expired") from e
    except PyJWTError as e:
        raise TokenInvalid(f"Invalid token: {e}") from e


def verify_token(token: str, expected_kind: TokenKind) -> dict[str, Any]:
    """Decode a token and check that it is of the expected kind."""
    payload = decode_token(token)
    if payload.get("type") != expected_kind:
        raise TokenInvalid("Invalid token type")
    return payload
