# 📄 File: app/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The shared toolbox every part of the garden service can reach into: settings, error
# types, logging and the database connection.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for cross-cutting concerns used by the application modules.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden (all layers)
# - app.main, app.api

"""
Shared Kernel - Common Utilities and Infrastructure

- config: settings (pydantic-settings) and Redis configuration
- core: exception hierarchy
- infrastructure.database: async engine and session management
- utils: structured logging
"""

__all__ = []
