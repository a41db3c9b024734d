"""Pydantic schemas for the admin authentication API.

JSON field names are camelCase to match the dashboard client.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(CamelModel):
    """Request for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """Public view of the admin identity."""

    id: str
    username: str
    email: str
    role: str = "admin"


class LoginResponse(CamelModel):
    """Response with JWT tokens after a successful login."""

    token: str = Field(description="Short-lived access token")
    refresh_token: str
    user: UserResponse


class RefreshRequest(CamelModel):
    """Request for token refresh.

    The token is optional at the schema level so that a missing token is
    reported as an authentication failure rather than a validation error.
    """

    refresh_token: str | None = None


class TokenResponse(CamelModel):
    """Rotated token pair."""

    token: str
    refresh_token: str


class MessageResponse(CamelModel):
    """Generic message response."""

    message: str


class VerifyResponse(CamelModel):
    valid: bool = True
    user: UserResponse


class MeResponse(CamelModel):
    user: UserResponse


class AuthStatusResponse(CamelModel):
    """Lockout and session state for the login screen."""

    locked: bool
    attempts_remaining: int
    lock_time_remaining: int = Field(description="Seconds until the lock expires")
    has_active_session: bool
    last_activity: datetime | None = None


class UpdateSuperAdminRequest(CamelModel):
    """Request to replace the admin identity and password."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UpdateSuperAdminResponse(CamelModel):
    message: str
    username: str
    email: str
