"""Root API router with health endpoints and module mounting."""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from login_service.api.dependencies import AppSettings
from login_service.core.auth.routes import account_router
from login_service.core.auth.routes import router as auth_router
from login_service.modules import discover_modules


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


# Create root API router
api_router = APIRouter()

# Health check endpoints (no /api/v1 prefix)
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns 200 if the process is running.",
)
async def liveness() -> HealthResponse:
    """Liveness probe endpoint."""
    return HealthResponse(status="alive")


@health_router.get(
    "/info",
    summary="Application info",
    description="Returns application metadata.",
)
async def info(settings: AppSettings) -> dict[str, Any]:
    """Application info endpoint."""
    return {
        "app": settings.app_name,
        "environment": settings.environment,
        "debug": settings.debug,
    }


# Create versioned API router
v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
v1_router.include_router(account_router)

# Mount discovered module routers
for module_router in discover_modules():
    v1_router.include_router(module_router)

# Include routers in main api_router
api_router.include_router(health_router)
api_router.include_router(v1_router)
