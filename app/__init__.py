# 📄 File: app/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this 'app' folder holds the shared garden service and records which
# version of it this is.
#
# 🧪 Purpose (Technical Summary):
# Application package initialization with version and package metadata for the Shared
# Garden FastAPI service.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.main (application entry point)
# - pyproject.toml (package discovery)

"""
Shared Garden - State engine for a garden two partners grow together

Each couple owns one garden document. Both partners water it, plant in it and
arrange it from their own devices; the engine keeps their concurrent changes
consistent and pushes every committed change back to both of them.
"""

__version__ = "1.0.0"
__title__ = "Shared Garden API"
__description__ = "Shared garden state engine for paired couples"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
]
