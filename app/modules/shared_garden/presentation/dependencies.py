# 📄 File: app/modules/shared_garden/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands every garden endpoint the tools it needs (who is asking, and the garden engine)
# so the endpoints themselves stay short.
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies and service wiring for the shared garden module. A process-wide
# GardenServices container is initialized at startup with the configured store and
# change feed; endpoints receive it (or pieces of it) through Depends.
# 🔗 Dependencies:
# FastAPI, app.shared.config.*, app.shared.infrastructure.database.session,
# shared_garden application + infrastructure layers
# 🔄 Connected Modules / Calls From:
# app.modules.shared_garden.presentation.api.v1.garden, app.main (lifespan)

"""
Shared Garden Module Dependencies

- get_current_user_id: caller identity from the X-User-ID header set by the gateway
- get_garden_services: the initialized service container
- get_command_handler / get_query_handler / get_dev_tools: per-endpoint helpers
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, Header

from app.shared.config.redis import redis_config
from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import AuthenticationError, DevToolsDisabledError
from app.shared.infrastructure.database.session import session_manager
from app.shared.utils.logging import user_id_var
from app.modules.shared_garden.application.dev_tools import GardenDevTools
from app.modules.shared_garden.application.engine import SharedGardenEngine
from app.modules.shared_garden.application.handlers.command_handlers import GardenCommandHandler
from app.modules.shared_garden.application.handlers.query_handlers import GardenQueryHandler
from app.modules.shared_garden.domain.models.rules import GardenRules, utc_now
from app.modules.shared_garden.domain.repositories.garden_store import GardenStore
from app.modules.shared_garden.infrastructure.database.garden_store_impl import GardenStoreImpl
from app.modules.shared_garden.infrastructure.external.change_feed import create_change_feed

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-ID"


# =============================================================================
# SERVICE CONTAINER
# =============================================================================

class GardenServices:
    """Process-wide garden engine, handlers and (optionally) dev tools."""

    def __init__(self):
        self._store: Optional[GardenStore] = None
        self._engine: Optional[SharedGardenEngine] = None
        self._commands: Optional[GardenCommandHandler] = None
        self._queries: Optional[GardenQueryHandler] = None
        self._dev_tools: Optional[GardenDevTools] = None

    def initialize(
        self,
        store: GardenStore,
        rules: GardenRules,
        dev_tools_enabled: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._engine = SharedGardenEngine(store, rules=rules, clock=clock)
        self._commands = GardenCommandHandler(self._engine)
        self._queries = GardenQueryHandler(self._engine)
        self._dev_tools = GardenDevTools(store, True, rules, clock) if dev_tools_enabled else None
        logger.info("Shared garden services initialized")

    def _require(self, component):
        if component is None:
            raise RuntimeError("Garden services not initialized. Call initialize() first.")
        return component

    @property
    def engine(self) -> SharedGardenEngine:
        return self._require(self._engine)

    @property
    def commands(self) -> GardenCommandHandler:
        return self._require(self._commands)

    @property
    def queries(self) -> GardenQueryHandler:
        return self._require(self._queries)

    @property
    def dev_tools(self) -> GardenDevTools:
        self._require(self._engine)
        if self._dev_tools is None:
            raise DevToolsDisabledError()
        return self._dev_tools

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def close(self) -> None:
        if self._store is not None:
            await self._store.close()
        self._store = None
        self._engine = None
        self._commands = None
        self._queries = None
        self._dev_tools = None


garden_services = GardenServices()


def build_garden_store(settings: Settings) -> GardenStore:
    """Database-backed store with the configured change feed. Sessions must be initialized."""
    redis_client = redis_config.create_redis_client() if settings.GARDEN_CHANGE_FEED == "redis" else None
    return GardenStoreImpl(
        session_manager.session_factory,
        create_change_feed(settings.GARDEN_CHANGE_FEED, redis_client),
        rules=settings.get_garden_rules(),
        max_retries=settings.GARDEN_TRANSACTION_MAX_RETRIES,
    )


def initialize_garden_services(store: Optional[GardenStore] = None) -> GardenServices:
    settings = get_settings()
    garden_services.initialize(
        store or build_garden_store(settings),
        rules=settings.get_garden_rules(),
        dev_tools_enabled=settings.GARDEN_DEV_TOOLS_ENABLED,
    )
    return garden_services


async def close_garden_services() -> None:
    await garden_services.close()


# =============================================================================
# FASTAPI DEPENDENCIES
# =============================================================================

async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
) -> str:
    """
    Caller identity forwarded by the upstream auth gateway.

    Raises:
        AuthenticationError: when the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError(f"Missing {USER_ID_HEADER} header")
    user_id = x_user_id.strip()
    user_id_var.set(user_id)
    return user_id


def get_garden_services() -> GardenServices:
    return garden_services


def get_command_handler(services: GardenServices = Depends(get_garden_services)) -> GardenCommandHandler:
    return services.commands


def get_query_handler(services: GardenServices = Depends(get_garden_services)) -> GardenQueryHandler:
    return services.queries


def get_dev_tools(services: GardenServices = Depends(get_garden_services)) -> GardenDevTools:
    return services.dev_tools
