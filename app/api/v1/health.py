# 📄 File: app/api/v1/health.py
# 🧭 Purpose (Layman Explanation):
# Lets load balancers and on-call engineers ask "is the garden service alive, and can it
# reach its database and message relay?"
# 🧪 Purpose (Technical Summary):
# Health check endpoints: basic, detailed (database + Redis when the Redis change feed
# is configured), liveness and readiness probes.
# 🔗 Dependencies:
# FastAPI, app.shared.config.*, app.shared.infrastructure.database.connection,
# app.modules.shared_garden.presentation.dependencies (service readiness)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, Kubernetes probes, monitoring

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from app.shared.config.redis import redis_config
from app.shared.config.settings import get_settings
from app.shared.infrastructure.database.connection import database_health_check as db_health_check
from app.modules.shared_garden.presentation.dependencies import garden_services

logger = logging.getLogger(__name__)

health_router = APIRouter()

_app_start_time = datetime.now(timezone.utc)

SERVICE_NAME = "shared-garden-api"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@health_router.get(
    "",
    summary="Basic Health Check",
    description="Basic health check endpoint for load balancers and monitoring",
)
async def health_check() -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": _now(),
            "service": SERVICE_NAME,
            "version": get_settings().APP_VERSION,
        },
    )


@health_router.get(
    "/detailed",
    summary="Detailed Health Check",
    description="Checks the garden store database and, when configured, the Redis change feed",
)
async def detailed_health_check() -> JSONResponse:
    """
    Comprehensive health check.

    The database is critical (unhealthy -> 503). Redis only degrades the
    service: committed changes still land, live updates stop.
    """
    settings = get_settings()
    overall_status = "healthy"
    components = {}

    db_health = await db_health_check()
    components["database"] = db_health
    if db_health["status"] != "healthy":
        overall_status = "unhealthy"

    if settings.GARDEN_CHANGE_FEED == "redis":
        redis_health = await redis_config.health_check()
        components["redis"] = redis_health
        if redis_health["status"] != "healthy" and overall_status == "healthy":
            overall_status = "degraded"
    else:
        components["redis"] = {"status": "not_configured"}

    components["garden_services"] = {
        "status": "healthy" if garden_services.is_initialized else "unhealthy",
        "change_feed": settings.GARDEN_CHANGE_FEED,
        "dev_tools_enabled": settings.GARDEN_DEV_TOOLS_ENABLED,
    }
    if not garden_services.is_initialized:
        overall_status = "unhealthy"

    return JSONResponse(
        status_code=503 if overall_status == "unhealthy" else 200,
        content={
            "status": overall_status,
            "timestamp": _now(),
            "service": SERVICE_NAME,
            "version": settings.APP_VERSION,
            "uptime_seconds": (datetime.now(timezone.utc) - _app_start_time).total_seconds(),
            "components": components,
        },
    )


@health_router.get("/live", summary="Liveness Probe")
async def liveness_probe() -> Response:
    return Response(status_code=200, content="OK")


@health_router.get("/ready", summary="Readiness Probe")
async def readiness_probe() -> JSONResponse:
    """Ready once the garden services are wired and the database answers."""
    if not garden_services.is_initialized:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "garden_services_uninitialized", "timestamp": _now()},
        )

    db_health = await db_health_check()
    if db_health["status"] != "healthy":
        logger.warning(f"Readiness probe failed: {db_health.get('error')}")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unhealthy", "timestamp": _now()},
        )
    return JSONResponse(status_code=200, content={"status": "ready", "timestamp": _now()})
