# 📄 File: app/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request to the garden service: who asked, what for, how long it
# took and how it ended, with a tracking number to follow one request through the logs.
# 🧪 Purpose (Technical Summary):
# Request logging middleware. Binds request id and caller id into the logging context
# variables for the lifetime of the request, times it, and echoes X-Request-ID back.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main (middleware registration)

import logging
import time
from typing import Iterable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.shared.utils.logging import log_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-ID"

DEFAULT_EXCLUDED_PATHS = ("/api/v1/health/live", "/favicon.ico")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    The request id comes from X-Request-ID when the gateway supplies one and is
    generated otherwise.
    """

    def __init__(self, app: ASGIApp, excluded_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.excluded_paths = set(excluded_paths or DEFAULT_EXCLUDED_PATHS)

    async def dispatch(self, request: Request, call_next) -> Response:
        with log_context(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            user_id=request.headers.get(USER_ID_HEADER),
        ) as context:
            request.state.request_id = context["request_id"]
            quiet = request.url.path in self.excluded_paths
            start = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception:
                logger.exception(f"{request.method} {request.url.path} failed")
                raise

            elapsed_ms = (time.perf_counter() - start) * 1000
            if not quiet:
                level = logging.WARNING if response.status_code >= 500 else logging.INFO
                logger.log(
                    level,
                    f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)",
                    extra={"status_code": response.status_code, "duration_ms": round(elapsed_ms, 1)},
                )
            response.headers[REQUEST_ID_HEADER] = context["request_id"]
            return response
