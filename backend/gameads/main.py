"""Game Ads Admin Backend - FastAPI Application Factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gameads.api import api_router
from gameads.api.errors import register_exception_handlers
from gameads.api.health import router as health_router
from gameads.core import async_session_maker, init_db, settings, setup_logging
from gameads.core.logging import get_logger
from gameads.services.credential_store import CredentialStore

logger = get_logger("main")


async def _ensure_admin_account() -> None:
    """Seed the admin account on first boot."""
    async with async_session_maker() as db:
        account = await CredentialStore(db).get_or_create_account()
        logger.info(f"Super admin account ready: {account.email}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    setup_logging(
        level=settings.log_level,
        format_type="structured" if not settings.debug else "dev",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    for warning in settings.check_security_configuration():
        logger.warning(f"SECURITY: {warning}")

    await init_db()
    await _ensure_admin_account()

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Admin authentication for the game ads catalog",
        version=settings.app_version,
        lifespan=lifespan,
        # API docs only in debug; the schema would otherwise be public
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
        ],
    )

    register_exception_handlers(app)

    app.include_router(health_router)  # Health at root level
    app.include_router(api_router)  # API at /api

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
        }

    return app


# Application instance
app = create_app()
