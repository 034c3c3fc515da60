# 📄 File: app/api/middleware/__init__.py
# 🧭 Purpose (Layman Explanation):
# The checkpoints every request passes through before it reaches the garden.
# 🧪 Purpose (Technical Summary):
# Middleware package for the HTTP surface. Currently request logging with context binding.
# 🔗 Dependencies:
# Starlette, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
