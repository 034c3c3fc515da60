# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main switch of the shared garden service: starts everything up, connects the
# database and the live-update relay, and gets ready to answer both partners' phones.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point with lifespan-managed logging, database,
# session and garden service initialization, middleware setup, router registration and
# the SharedGardenException handler.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - app.shared.config.settings, app.shared.utils.logging
# - app.shared.infrastructure.database.connection / session
# - app.modules.shared_garden.presentation.dependencies
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup (python -m app.main)
# - Docker container entry point

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.middleware import RequestLoggingMiddleware
from app.api.v1.router import api_v1_router
from app.shared.config.redis import redis_config
from app.shared.config.settings import get_settings
from app.shared.core.exceptions import SharedGardenException
from app.shared.infrastructure.database.connection import close_database, initialize_database
from app.shared.infrastructure.database.session import initialize_sessions, session_manager
from app.shared.utils.logging import setup_logging
from app.modules.shared_garden.presentation.dependencies import (
    close_garden_services,
    initialize_garden_services,
)

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup order matters: the garden store needs the session factory, which
    needs the engine.
    """
    setup_logging()
    logger.info("🌱 Shared Garden API starting up...")

    try:
        await initialize_database()
        logger.info("✅ Database connection initialized")

        initialize_sessions()
        logger.info("✅ Session manager initialized")

        initialize_garden_services()
        logger.info(f"✅ Garden services initialized (change feed: {settings.GARDEN_CHANGE_FEED})")

        yield

    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise

    finally:
        logger.info("🔄 Shared Garden API shutting down...")
        await close_garden_services()
        await redis_config.close_connections()
        session_manager.close()
        await close_database()
        logger.info("✅ Shared Garden API shutdown complete")


def register_exception_handlers(app: FastAPI) -> None:
    """Render SharedGardenException subclasses as the JSON error envelope."""

    @app.exception_handler(SharedGardenException)
    async def shared_garden_exception_handler(request: Request, exc: SharedGardenException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}", extra={"path": request.url.path})
        else:
            logger.info(f"{type(exc).__name__}: {exc.message}", extra={"path": request.url.path})
        content = exc.to_dict()
        content["error"]["request_id"] = getattr(request.state, "request_id", None)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(500)
    async def internal_server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Internal server error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An internal server error occurred",
                    "details": {"error_type": type(exc).__name__} if settings.DEBUG else {},
                    "status_code": 500,
                    "request_id": getattr(request.state, "request_id", None),
                }
            },
        )


def create_application() -> FastAPI:
    """
    Application factory function.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS.split(","),
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # ROUTERS & EXCEPTION HANDLERS
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")
    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


app = create_application()


def main():
    """Run the service with uvicorn (python -m app.main)."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
