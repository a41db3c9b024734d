"""Authentication error taxonomy.

Each error carries the HTTP status it maps to and optional metadata that is
rendered next to the message (attempts remaining, lock seconds, ...), so the
dashboard can drive its UI from response fields alone.
"""

from typing import Any


class AuthError(Exception):
    """Base authentication error."""

    status_code = 401
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class InvalidInput(AuthError):
    """Malformed request; raised before lockout state is touched."""

    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    default_message = "Invalid credentials"


class Locked(AuthError):
    """Login temporarily blocked after repeated failures."""

    status_code = 423

    def __init__(self, lock_time_remaining: int):
        super().__init__(
            f"Account locked. Try again in {lock_time_remaining} seconds.",
            locked=True,
            lockTimeRemaining=lock_time_remaining,
        )


class TokenError(AuthError):
    """JWT token error."""


class TokenExpired(TokenError):
    default_message = "Token expired"

    def __init__(self, message: str | None = None):
        super().__init__(message, expired=True)


class TokenInvalid(TokenError):
    status_code = 403
    default_message = "Invalid token"


class RefreshRequired(AuthError):
    default_message = "Refresh token required"


class SessionInvalidated(AuthError):
    """Presented refresh token does not match the stored one (possible theft)."""

    default_message = "Invalid refresh token. Please login again."


class SessionExpired(AuthError):
    default_message = "Session expired. Please login again."


class Unauthorized(AuthError):
    default_message = "Access token required"


class Forbidden(AuthError):
    status_code = 403
    default_message = "Unauthorized"


class ServerError(AuthError):
    """Unexpected failure; details stay in the server log."""

    status_code = 500
    default_message = "Server error"
