# 📄 File: app/api/v1/__init__.py
# 🧭 Purpose (Layman Explanation):
# Version 1 of the garden service's web API, kept in its own section so later versions
# can be added without breaking phones that still speak v1.
# 🧪 Purpose (Technical Summary):
# Package initialization for API version 1: version metadata, route prefixes and
# OpenAPI tags shared by the v1 router.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main

"""
Shared Garden API Version 1

Structure:
    v1/
    ├── __init__.py          # This file
    ├── router.py            # v1 router aggregation
    └── health.py            # Health check endpoints

Module routers (mounted by router.py):
    gardens -> app.modules.shared_garden.presentation.api.v1.garden
"""

from typing import Any, Dict

__version__ = "1.0.0"
__api_version__ = "v1"
__status__ = "stable"

API_V1_CONFIG = {
    "version": __version__,
    "api_version": __api_version__,
    "status": __status__,
    "description": "Shared Garden API Version 1",
    "features": [
        "shared_garden",
        "watering_and_harmony",
        "planting_economy",
        "landmarks",
        "live_updates",
    ],
}

ROUTE_PREFIXES = {
    "health": "/health",
    "gardens": "/gardens",
}

API_TAGS = [
    {
        "name": "Shared Garden",
        "description": "Watering, planting and arranging a couple's shared garden",
    },
    {
        "name": "Garden Dev Tools",
        "description": "Rule-bypassing mutators, available only when enabled",
    },
    {
        "name": "Health Check",
        "description": "System health and status monitoring",
    },
]


def get_api_info() -> Dict[str, Any]:
    """Get API v1 metadata for the info endpoint."""
    return {
        "api_info": API_V1_CONFIG,
        "route_prefixes": ROUTE_PREFIXES,
        "tags": API_TAGS,
    }


__all__ = [
    "API_V1_CONFIG",
    "ROUTE_PREFIXES",
    "API_TAGS",
    "get_api_info",
]
