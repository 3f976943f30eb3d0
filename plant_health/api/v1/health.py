# 📄 File: plant_health/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# A quick check-up for the app itself: is it running, and can it reach its database?
# 🧪 Purpose (Technical Summary):
# Liveness and readiness endpoints. Readiness pings the database through the connection
# manager on app.state and answers 503 when it is unavailable.
# 🔗 Dependencies:
# FastAPI, plant_health.shared.config.settings, plant_health.shared.infrastructure.database.connection
# 🔄 Connected Modules / Calls From:
# plant_health.main (mounted without prefix), load balancers, container probes

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from plant_health.shared.config.settings import get_settings

logger = logging.getLogger(__name__)

# Create router for health endpoints
health_router = APIRouter()


@health_router.get("/health",
                   summary="Basic Health Check",
                   description="Liveness check for load balancers and monitoring",
                   tags=["Health Check"])
async def health_check() -> JSONResponse:
    """
    Basic health check endpoint

    Returns OK without touching any dependency.
    """
    settings = get_settings()
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }
    )


@health_router.get("/health/ready",
                   summary="Readiness Probe",
                   description="Ready only when the database answers",
                   tags=["Health Check"])
async def readiness_probe(request: Request) -> JSONResponse:
    """
    Readiness probe endpoint

    Returns 200 when the database answers ``SELECT 1``, 503 otherwise.
    """
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        database = {"status": "unhealthy", "error": "Database not initialized"}
    else:
        database = await db_manager.health_check()

    ready = database.get("status") == "healthy"
    if not ready:
        logger.warning(f"Readiness check failed: {database.get('error')}")

    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {"database": database},
        }
    )
