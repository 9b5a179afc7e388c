"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from login_service import __version__
from login_service.api.router import api_router
from login_service.config import Settings, get_settings
from login_service.core.auth import (
    PasswordHasher,
    RequestIdMiddleware,
    SecurityHeadersMiddleware,
    build_signers,
)
from login_service.core.database import Base, create_engine, create_session_factory
from login_service.core.email import build_email_sender
from login_service.core.errors import register_exception_handlers
from login_service.core.logging import RequestLoggingMiddleware, configure_logging


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    if settings.database_auto_create:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created")

    yield

    # Shutdown
    logger.info("application_shutdown")
    await app.state.engine.dispose()
    logger.info("database_engine_disposed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the application from; read from the
            environment when omitted.

    Returns:
        Configured FastAPI application instance.

    Raises:
        KeyConfigurationError: If the signing keys are unusable
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Account registration, authentication and token lifecycle service",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    # Collaborators built once from explicit settings
    access_signer, reset_signer = build_signers(settings)
    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.access_signer = access_signer
    app.state.reset_signer = reset_signer
    app.state.email_sender = build_email_sender(settings)

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    app.add_middleware(SecurityHeadersMiddleware, strict_transport=settings.is_production)

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Add request ID middleware (outermost, runs first)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router)

    return app
