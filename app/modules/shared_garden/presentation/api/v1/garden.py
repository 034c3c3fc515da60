# 📄 File: app/modules/shared_garden/presentation/api/v1/garden.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the phone app calls to look at, water, plant in and rearrange the
# garden a couple shares, plus a live connection that pushes every change instantly.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints for the shared garden. Each route builds a command (or query) for
# the caller identified by X-User-ID and the partner in the path, delegates to the
# application handlers and returns the structured outcome. GET /{partner_id}/stream is
# a WebSocket pushing each committed garden state.
#
# 🔗 Dependencies:
# - FastAPI router, WebSocket
# - shared_garden application handlers, commands, DTOs, dev tools
# - garden_schemas (request/response schemas)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /api/v1/gardens)
# - Mobile clients

"""
Shared Garden API Endpoints

Read:
- GET    /catalog                             purchasable items and prices
- GET    /{partner_id}                        full garden view for the caller
- GET    /{partner_id}/status                 derived health only
- GET    /{partner_id}/wallet                 caller's wallet
- WS     /{partner_id}/stream                 live garden updates

Write:
- POST   /{partner_id}/water
- POST   /{partner_id}/punishment-check
- POST   /{partner_id}/revive
- POST   /{partner_id}/water-drops
- POST   /{partner_id}/harmony-bonus/acknowledge
- POST   /{partner_id}/{flowers|decor|landmarks}          plant at a position
- DELETE /{partner_id}/{flowers|decor|landmarks}          remove all with refund
- PATCH  /{partner_id}/landmarks/{landmark_id}            move
- DELETE /{partner_id}/landmarks/{landmark_id}            delete (no refund)
- POST   /{partner_id}/landmarks/{landmark_id}/front|back z-order

Developer tools (GARDEN_DEV_TOOLS_ENABLED only) live under /{partner_id}/dev.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from app.shared.core.exceptions import NotFoundError, SharedGardenException
from app.modules.shared_garden.application.commands.garden_commands import (
    AcknowledgeHarmonyCommand,
    CheckPunishmentCommand,
    EarnWaterDropCommand,
    LandmarkAction,
    LandmarkActionCommand,
    PlantItemCommand,
    RemoveAllWithRefundCommand,
    ReviveGardenCommand,
    UpdateLandmarkPositionCommand,
    WaterGardenCommand,
)
from app.modules.shared_garden.application.dev_tools import GardenDevTools
from app.modules.shared_garden.application.dto.garden_dto import GardenStatusDTO, GardenViewDTO
from app.modules.shared_garden.application.handlers.command_handlers import GardenCommandHandler
from app.modules.shared_garden.application.handlers.query_handlers import GardenQueryHandler
from app.modules.shared_garden.domain.models.catalog import CATALOG, PlacementCategory
from app.modules.shared_garden.domain.models.garden import GardenState, PlantedFlower, Wallet
from app.modules.shared_garden.domain.models.outcomes import (
    HarmonyAcknowledgement,
    LandmarkOutcome,
    LandmarkResult,
    PlacementResult,
    PunishmentResult,
    RefundResult,
    RevivalResult,
    WaterDropResult,
    WateringResult,
)
from app.modules.shared_garden.presentation.api.schemas.garden_schemas import (
    CatalogItemResponse,
    CatalogResponse,
    ErrorResponse,
    GardenStreamMessage,
    GrantGoldRequest,
    LandmarkPositionRequest,
    PlantItemRequest,
    SimulateTimeRequest,
)
from app.modules.shared_garden.presentation.dependencies import (
    USER_ID_HEADER,
    GardenServices,
    get_command_handler,
    get_current_user_id,
    get_dev_tools,
    get_garden_services,
    get_query_handler,
)

logger = logging.getLogger(__name__)

garden_router = APIRouter()

_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing X-User-ID header"},
    422: {"model": ErrorResponse, "description": "Invalid partner, item type or position"},
    409: {"model": ErrorResponse, "description": "Concurrent writers kept winning, try again"},
    503: {"model": ErrorResponse, "description": "Garden store unavailable"},
}

_CATEGORY_PATHS = {
    "flowers": PlacementCategory.FLOWER,
    "decor": PlacementCategory.DECOR,
    "landmarks": PlacementCategory.LANDMARK,
}


def _ensure_found(result: LandmarkResult, landmark_id: str) -> LandmarkResult:
    if result.outcome == LandmarkOutcome.NOT_FOUND:
        raise NotFoundError("Landmark not found", resource_type="landmark", resource_id=landmark_id)
    return result


# =========================================================================
# READ ENDPOINTS
# =========================================================================

@garden_router.get(
    "/catalog",
    response_model=CatalogResponse,
    summary="List purchasable garden items",
)
async def get_catalog(
    category: Optional[PlacementCategory] = None,
    services: GardenServices = Depends(get_garden_services),
) -> CatalogResponse:
    items: List[CatalogItemResponse] = [
        CatalogItemResponse.from_item(item)
        for item in CATALOG.values()
        if category is None or item.category == category
    ]
    return CatalogResponse(items=items, refund_ratio=services.engine.rules.refund_ratio)


@garden_router.get(
    "/{partner_id}",
    response_model=GardenViewDTO,
    summary="Get the shared garden",
    description="Garden document with derived status, growth stages and the caller's wallet. "
                "The garden is created on first access.",
    responses=_ERRORS,
)
async def get_garden(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    queries: GardenQueryHandler = Depends(get_query_handler),
) -> GardenViewDTO:
    return await queries.get_garden_view(user_id, partner_id)


@garden_router.get("/{partner_id}/status", response_model=GardenStatusDTO, responses=_ERRORS)
async def get_garden_status(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    queries: GardenQueryHandler = Depends(get_query_handler),
) -> GardenStatusDTO:
    return await queries.get_status(user_id, partner_id)


@garden_router.get("/{partner_id}/wallet", response_model=Wallet, responses=_ERRORS)
async def get_wallet(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    queries: GardenQueryHandler = Depends(get_query_handler),
) -> Wallet:
    return await queries.get_wallet(user_id)


@garden_router.websocket("/{partner_id}/stream")
async def stream_garden(
    websocket: WebSocket,
    partner_id: str,
    services: GardenServices = Depends(get_garden_services),
):
    """
    Push the current garden, then every committed change, as GardenStreamMessage JSON.

    Closes with 4401 when X-User-ID is missing and 4422 for an invalid pair.
    """
    user_id = (websocket.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        await websocket.close(code=4401)
        return

    engine = services.engine
    updates: "asyncio.Queue[GardenState]" = asyncio.Queue()
    await websocket.accept()

    try:
        subscription = await engine.subscribe(user_id, partner_id, updates.put_nowait)
    except SharedGardenException as e:
        logger.info(f"Garden stream refused: {e.message}")
        await websocket.close(code=4422)
        return

    async def push() -> None:
        while True:
            state = await updates.get()
            message = GardenStreamMessage(
                garden=state,
                status=GardenStatusDTO.from_status(engine.status(state)),
                sent_at=engine.now(),
            )
            await websocket.send_text(message.model_dump_json())

    async def drain() -> None:
        # Client frames are ignored; this only notices the disconnect
        while True:
            await websocket.receive_text()

    tasks = [asyncio.create_task(push()), asyncio.create_task(drain())]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                logger.error(f"Garden stream failed: {error}")
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await subscription.unsubscribe()
        logger.debug(f"Garden stream closed for {user_id}")


# =========================================================================
# WATERING, HARMONY AND NEGLECT
# =========================================================================

@garden_router.post(
    "/{partner_id}/water",
    response_model=WateringResult,
    summary="Water the shared garden",
    description="Rejections (too soon, already watered today, wilted) come back as flags, not errors.",
    responses=_ERRORS,
)
async def water_garden(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> WateringResult:
    return await commands.handle(WaterGardenCommand(user_id=user_id, partner_id=partner_id))


@garden_router.post("/{partner_id}/punishment-check", response_model=PunishmentResult, responses=_ERRORS)
async def check_punishment(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> PunishmentResult:
    return await commands.handle(CheckPunishmentCommand(user_id=user_id, partner_id=partner_id))


@garden_router.post("/{partner_id}/revive", response_model=RevivalResult, responses=_ERRORS)
async def revive_garden(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> RevivalResult:
    return await commands.handle(ReviveGardenCommand(user_id=user_id, partner_id=partner_id))


@garden_router.post("/{partner_id}/water-drops", response_model=WaterDropResult, responses=_ERRORS)
async def earn_water_drop(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> WaterDropResult:
    return await commands.handle(EarnWaterDropCommand(user_id=user_id, partner_id=partner_id))


@garden_router.post(
    "/{partner_id}/harmony-bonus/acknowledge",
    response_model=HarmonyAcknowledgement,
    responses=_ERRORS,
)
async def acknowledge_harmony_bonus(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> HarmonyAcknowledgement:
    return await commands.handle(AcknowledgeHarmonyCommand(user_id=user_id, partner_id=partner_id))


# =========================================================================
# PLANTING AND REFUNDS
# =========================================================================

async def _plant(
    category_path: str, partner_id: str, request: PlantItemRequest,
    user_id: str, commands: GardenCommandHandler,
) -> PlacementResult:
    command = PlantItemCommand(
        user_id=user_id,
        partner_id=partner_id,
        category=_CATEGORY_PATHS[category_path],
        type=request.type,
        x=request.x,
        y=request.y,
        flipped=request.flipped,
    )
    return await commands.handle(command)


@garden_router.post(
    "/{partner_id}/flowers",
    response_model=PlacementResult,
    status_code=status.HTTP_200_OK,
    summary="Plant a flower, large plant or tree",
    responses=_ERRORS,
)
async def plant_flower(
    partner_id: str,
    request: PlantItemRequest,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> PlacementResult:
    return await _plant("flowers", partner_id, request, user_id, commands)


@garden_router.post("/{partner_id}/decor", response_model=PlacementResult, responses=_ERRORS)
async def plant_decor(
    partner_id: str,
    request: PlantItemRequest,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> PlacementResult:
    return await _plant("decor", partner_id, request, user_id, commands)


@garden_router.post("/{partner_id}/landmarks", response_model=PlacementResult, responses=_ERRORS)
async def plant_landmark(
    partner_id: str,
    request: PlantItemRequest,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> PlacementResult:
    return await _plant("landmarks", partner_id, request, user_id, commands)


@garden_router.delete(
    "/{partner_id}/{category_path}",
    response_model=RefundResult,
    summary="Remove a whole category for a partial refund",
    responses=_ERRORS,
)
async def remove_all_with_refund(
    partner_id: str,
    category_path: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> RefundResult:
    category = _CATEGORY_PATHS.get(category_path)
    if category is None:
        raise NotFoundError("Unknown garden category", resource_type="category", resource_id=category_path)
    return await commands.handle(
        RemoveAllWithRefundCommand(user_id=user_id, partner_id=partner_id, category=category)
    )


# =========================================================================
# LANDMARKS
# =========================================================================

@garden_router.patch("/{partner_id}/landmarks/{landmark_id}", response_model=LandmarkResult, responses=_ERRORS)
async def update_landmark_position(
    partner_id: str,
    landmark_id: str,
    request: LandmarkPositionRequest,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> LandmarkResult:
    result = await commands.handle(UpdateLandmarkPositionCommand(
        user_id=user_id, partner_id=partner_id, landmark_id=landmark_id, x=request.x, y=request.y,
    ))
    return _ensure_found(result, landmark_id)


@garden_router.delete("/{partner_id}/landmarks/{landmark_id}", response_model=LandmarkResult, responses=_ERRORS)
async def delete_landmark(
    partner_id: str,
    landmark_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> LandmarkResult:
    result = await commands.handle(LandmarkActionCommand(
        user_id=user_id, partner_id=partner_id, landmark_id=landmark_id, action=LandmarkAction.DELETE,
    ))
    return _ensure_found(result, landmark_id)


@garden_router.post("/{partner_id}/landmarks/{landmark_id}/front", response_model=LandmarkResult, responses=_ERRORS)
async def move_landmark_to_front(
    partner_id: str,
    landmark_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> LandmarkResult:
    result = await commands.handle(LandmarkActionCommand(
        user_id=user_id, partner_id=partner_id, landmark_id=landmark_id, action=LandmarkAction.MOVE_TO_FRONT,
    ))
    return _ensure_found(result, landmark_id)


@garden_router.post("/{partner_id}/landmarks/{landmark_id}/back", response_model=LandmarkResult, responses=_ERRORS)
async def move_landmark_to_back(
    partner_id: str,
    landmark_id: str,
    user_id: str = Depends(get_current_user_id),
    commands: GardenCommandHandler = Depends(get_command_handler),
) -> LandmarkResult:
    result = await commands.handle(LandmarkActionCommand(
        user_id=user_id, partner_id=partner_id, landmark_id=landmark_id, action=LandmarkAction.MOVE_TO_BACK,
    ))
    return _ensure_found(result, landmark_id)


# =========================================================================
# DEVELOPER TOOLS
# =========================================================================

@garden_router.post("/{partner_id}/dev/flowers", response_model=PlantedFlower, tags=["Garden Dev Tools"])
async def dev_force_add_flower(
    partner_id: str,
    request: PlantItemRequest,
    user_id: str = Depends(get_current_user_id),
    dev_tools: GardenDevTools = Depends(get_dev_tools),
) -> PlantedFlower:
    return await dev_tools.force_add_flower(user_id, partner_id, request.type, request.x, request.y, request.flipped)


@garden_router.delete("/{partner_id}/dev/flowers/last", response_model=Optional[PlantedFlower], tags=["Garden Dev Tools"])
async def dev_remove_last_flower(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    dev_tools: GardenDevTools = Depends(get_dev_tools),
) -> Optional[PlantedFlower]:
    return await dev_tools.remove_last_flower(user_id, partner_id)


@garden_router.delete("/{partner_id}/dev/garden", response_model=GardenState, tags=["Garden Dev Tools"])
async def dev_clear_garden(
    partner_id: str,
    user_id: str = Depends(get_current_user_id),
    dev_tools: GardenDevTools = Depends(get_dev_tools),
) -> GardenState:
    return await dev_tools.clear_garden(user_id, partner_id)


@garden_router.post("/{partner_id}/dev/time-travel", response_model=GardenState, tags=["Garden Dev Tools"])
async def dev_simulate_time_passing(
    partner_id: str,
    request: SimulateTimeRequest,
    user_id: str = Depends(get_current_user_id),
    dev_tools: GardenDevTools = Depends(get_dev_tools),
) -> GardenState:
    return await dev_tools.simulate_time_passing(user_id, partner_id, request.hours)


@garden_router.post("/{partner_id}/dev/gold", response_model=Wallet, tags=["Garden Dev Tools"])
async def dev_grant_gold(
    partner_id: str,
    request: GrantGoldRequest,
    user_id: str = Depends(get_current_user_id),
    dev_tools: GardenDevTools = Depends(get_dev_tools),
) -> Wallet:
    return await dev_tools.grant_gold(user_id, partner_id, request.amount, request.user_id)
