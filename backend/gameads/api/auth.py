"""Super admin authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends

from gameads.api.deps import get_session_manager, require_admin
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
from gameads.services.session_manager import AdminIdentity, SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user(identity: AdminIdentity) -> UserResponse:
    return UserResponse(
        id=identity.id,
        username=identity.username,
        email=identity.email,
        role=identity.role,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid input"},
        401: {"description": "Invalid credentials (with attempts remaining and lock state)"},
        423: {"description": "Login locked"},
    },
)
async def login(
    request: LoginRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Authenticate the super admin and start a session.

    Repeated failures lock login for an escalating period.
    """
    result = await manager.login(email=request.email, password=request.password)
    return LoginResponse(
        token=result.access_token,
        refresh_token=result.refresh_token,
        user=_user(result.identity),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_tokens(
    request: RefreshRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> TokenResponse:
    """Exchange the current refresh token for a new token pair (rotation).

    Presenting any other refresh token ends the session.
    """
    tokens = await manager.refresh(request.refresh_token)
    return TokenResponse(token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    manager: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    """End the admin session. Always succeeds."""
    await manager.logout()
    return MessageResponse(message="Logged out successfully")


@router.get("/verify", response_model=VerifyResponse)
async def verify(identity: AdminIdentity = Depends(require_admin)) -> VerifyResponse:
    """Check that the access token is still valid."""
    return VerifyResponse(valid=True, user=_user(identity))


@router.get("/me", response_model=MeResponse)
async def me(identity: AdminIdentity = Depends(require_admin)) -> MeResponse:
    """Get the current admin's information."""
    return MeResponse(user=_user(identity))


@router.get("/status", response_model=AuthStatusResponse)
async def get_auth_status(
    manager: SessionManager = Depends(get_session_manager),
) -> AuthStatusResponse:
    """Lockout and session state. Does not require authentication."""
    auth_status = await manager.status()
    return AuthStatusResponse(
        locked=auth_status.locked,
        attempts_remaining=auth_status.attempts_remaining,
        lock_time_remaining=auth_status.lock_time_remaining,
        has_active_session=auth_status.has_active_session,
        last_activity=auth_status.last_activity,
    )


@router.post("/update-super-admin", response_model=UpdateSuperAdminResponse)
async def update_super_admin(
    request: UpdateSuperAdminRequest,
    identity: AdminIdentity = Depends(require_admin),
    manager: SessionManager = Depends(get_session_manager),
) -> UpdateSuperAdminResponse:
    """Replace the admin username, email and password.

    The current session stays valid; no re-login is needed.
    """
    account = await manager.update_credentials(
        username=request.username,
        email=request.email,
        password=request.password,
    )
    logger.info(f"Super admin updated by session of {identity.email}")
    return UpdateSuperAdminResponse(
        message="Super admin credentials updated successfully",
        username=account.username,
        email=account.email,
    )
