# 📄 File: app/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the settings that tell the garden service where its database and Redis live and
# how strict the garden rules are.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization exporting settings management.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - Infrastructure components

"""
Configuration Management Package

- Environment-based settings and garden rule thresholds (settings.py)
- Redis connection configuration for the change feed (redis.py)
"""

from .settings import Settings, get_settings

__all__ = [
    "get_settings",
    "Settings",
]
