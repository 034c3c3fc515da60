# 📄 File: app/shared/utils/__init__.py
# 🧭 Purpose (Layman Explanation):
# Small shared helpers, currently the service's logging setup.
# 🧪 Purpose (Technical Summary):
# Shared utilities package exporting structured logging helpers.
# 🔗 Dependencies:
# logging, python-json-logger
# 🔄 Connected Modules / Calls From:
# app.main, app.api.middleware

from .logging import log_context, setup_logging

__all__ = [
    "setup_logging",
    "log_context",
]
