# 📄 File: app/api/__init__.py
# 🧭 Purpose (Layman Explanation):
# Marks the api folder as a package: the doorway through which phones talk to the garden.
# 🧪 Purpose (Technical Summary):
# Package initialization for the HTTP layer: versioned routers and middleware.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.main

"""
Shared Garden API Package

Structure:
    api/
    ├── __init__.py          # This file
    ├── middleware/          # Request logging
    └── v1/                  # API version 1
        ├── router.py        # v1 router aggregation
        └── health.py        # Health check endpoints
"""

API_PREFIX = "/api"
CURRENT_VERSION = "v1"
SUPPORTED_VERSIONS = ["v1"]

__all__ = [
    "API_PREFIX",
    "CURRENT_VERSION",
    "SUPPORTED_VERSIONS",
]
