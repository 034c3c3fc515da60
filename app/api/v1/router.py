# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends garden requests to the garden
# endpoints and health checks to the health endpoints.
# 🧪 Purpose (Technical Summary):
# API v1 router aggregation combining the health router and module routers under their
# configured prefixes.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.modules.shared_garden.presentation.api.v1.garden
# 🔄 Connected Modules / Calls From:
# app.main

import logging

from fastapi import APIRouter

from . import ROUTE_PREFIXES, get_api_info
from .health import health_router
from app.modules.shared_garden.presentation.api.v1.garden import garden_router

logger = logging.getLogger(__name__)

api_v1_router = APIRouter()

api_v1_router.include_router(
    health_router,
    prefix=ROUTE_PREFIXES["health"],
    tags=["Health Check"],
)

api_v1_router.include_router(
    garden_router,
    prefix=ROUTE_PREFIXES["gardens"],
    tags=["Shared Garden"],
)


# =========================================================================
# API V1 INFO ENDPOINT
# =========================================================================

@api_v1_router.get(
    "/",
    summary="API v1 Information",
    description="Get API v1 version information and available route prefixes",
    tags=["API Info"],
)
async def api_v1_info() -> dict:
    return {
        **get_api_info(),
        "documentation": {
            "openapi_schema": "/openapi.json",
            "swagger_ui": "/docs",
        },
    }
