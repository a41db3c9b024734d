# Game Ads Schemas
from gameads.schemas.auth import (
    AuthStatusResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    RefreshRequest,
    TokenResponse,
    UpdateSuperAdminRequest,
    UpdateSuperAdminResponse,
    UserResponse,
    VerifyResponse,
)

__all__ = [
    "AuthStatusResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "RefreshRequest",
    "TokenResponse",
    "UpdateSuperAdminRequest",
    "UpdateSuperAdminResponse",
    "UserResponse",
    "VerifyResponse",
]
