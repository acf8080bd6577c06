"""Health check endpoints for monitoring application status."""

from datetime import datetime
from datetime import timezone

from fastapi import APIRouter
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

ROUTER_HEALTH = APIRouter(tags=["Health"])

SERVICE_NAME = "Secret Santa API"
SERVICE_VERSION = "v1"


@ROUTER_HEALTH.get(
    "/health",
    summary="Health check endpoint",
    description="Basic health check that returns application status and metadata",
    responses={
        status.HTTP_200_OK: {
            "description": "Application is healthy",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "timestamp": "2026-01-05T12:00:00.000000Z",
                        "service": SERVICE_NAME,
                        "version": SERVICE_VERSION,
                    }
                }
            },
        }
    },
)
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Lightweight; does not touch the store.
    """
    settings = request.app.state.settings

    response_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "storage": "postgresql" if settings.domain_db_connection_string else "memory",
    }

    logger.debug("Health check requested", status="healthy")

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)


@ROUTER_HEALTH.get("/health/live", summary="Liveness probe")
async def liveness_check():
    """Process is up and serving requests."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()},
    )


@ROUTER_HEALTH.get(
    "/health/ready",
    summary="Readiness probe",
    responses={
        status.HTTP_200_OK: {"description": "Store reachable"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Store unreachable"},
    },
)
async def readiness_check(request: Request):
    """Ready when the workflow store answers its health check."""
    store_ok = await request.app.state.store.health_check()

    response_data = {
        "status": "ready" if store_ok else "not_ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "checks": {"store": "ok" if store_ok else "unavailable"},
    }

    if not store_ok:
        logger.warning("Readiness check failed", checks=response_data["checks"])
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response_data)

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)
