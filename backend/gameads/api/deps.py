"""Route guard for admin-only endpoints.

Routers protect themselves with ``Depends(require_admin)``. The guard
distinguishes a missing token (401), an expired token (401, ``expired: true``)
and a token that is the wrong kind or no longer matches the admin session (403).
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gameads.core import get_db
from gameads.services.errors import Forbidden, TokenExpired, TokenInvalid, Unauthorized
from gameads.services.session_manager import AdminIdentity, SessionManager

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def get_session_manager(db: AsyncSession = Depends(get_db)) -> SessionManager:
    """Dependency to get the session manager."""
    return SessionManager(db)


def extract_bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.strip().partition(" ")
    # Auth schemes are case-insensitive (RFC 7235)
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


async def require_admin(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> AdminIdentity:
    """Authenticate the request and expose the admin identity on ``request.state.admin``."""
    token = extract_bearer_token(request)
    if token is None:
        logger.warning(f"Admin request without token: {request.method} {request.url.path}")
        raise Unauthorized()

    try:
        identity = await manager.verify(token)
    except TokenExpired:
        logger.debug(f"Expired token for: {request.method} {request.url.path}")
        raise
    except TokenInvalid as e:
        logger.warning(f"Invalid token for: {request.method} {request.url.path} - {e}")
        raise Forbidden("Invalid token") from e
    except Forbidden as e:
        logger.warning(f"Rejected token for: {request.method} {request.url.path} - {e}")
        raise

    request.state.admin = identity
    return identity
