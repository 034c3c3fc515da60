# 📄 File: app/modules/shared_garden/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# Takes a filled-in order form (water, plant, clear, move a landmark) and hands it to
# the garden engine to carry out.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handler for the shared garden. Dispatches each command type to the
# matching SharedGardenEngine operation and returns the structured outcome model.
#
# 🔗 Dependencies:
# - app.modules.shared_garden.application.commands (command definitions)
# - app.modules.shared_garden.application.engine (SharedGardenEngine)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.presentation.api.v1.garden
# - app.modules.shared_garden.presentation.dependencies (handler wiring)

__all__ = ["GardenCommandHandler"]

import logging
from typing import Awaitable, Callable, Dict, Type

from pydantic import BaseModel

from app.modules.shared_garden.application.commands.garden_commands import (
    AcknowledgeHarmonyCommand,
    CheckPunishmentCommand,
    CoupleCommand,
    EarnWaterDropCommand,
    LandmarkAction,
    LandmarkActionCommand,
    PlantItemCommand,
    RemoveAllWithRefundCommand,
    ReviveGardenCommand,
    UpdateLandmarkPositionCommand,
    WaterGardenCommand,
)
from app.modules.shared_garden.application.engine import SharedGardenEngine
from app.modules.shared_garden.domain.models.catalog import PlacementCategory

logger = logging.getLogger(__name__)


class GardenCommandHandler:
    """Handles every shared garden write command."""

    def __init__(self, engine: SharedGardenEngine):
        self._engine = engine
        self._routes: Dict[Type[CoupleCommand], Callable[[CoupleCommand], Awaitable[BaseModel]]] = {
            WaterGardenCommand: self._water,
            CheckPunishmentCommand: self._check_punishment,
            ReviveGardenCommand: self._revive,
            EarnWaterDropCommand: self._earn_water_drop,
            AcknowledgeHarmonyCommand: self._acknowledge_harmony,
            PlantItemCommand: self._plant,
            RemoveAllWithRefundCommand: self._remove_all,
            UpdateLandmarkPositionCommand: self._update_landmark_position,
            LandmarkActionCommand: self._landmark_action,
        }

    async def handle(self, command: CoupleCommand) -> BaseModel:
        route = self._routes.get(type(command))
        if route is None:
            raise TypeError(f"No handler registered for {type(command).__name__}")
        logger.debug(f"Handling {type(command).__name__} for {command.user_id}")
        return await route(command)

    async def _water(self, command: WaterGardenCommand):
        return await self._engine.water(command.user_id, command.partner_id)

    async def _check_punishment(self, command: CheckPunishmentCommand):
        return await self._engine.check_and_apply_punishment(command.user_id, command.partner_id)

    async def _revive(self, command: ReviveGardenCommand):
        return await self._engine.revive(command.user_id, command.partner_id)

    async def _earn_water_drop(self, command: EarnWaterDropCommand):
        return await self._engine.earn_water_drop(command.user_id, command.partner_id)

    async def _acknowledge_harmony(self, command: AcknowledgeHarmonyCommand):
        return await self._engine.acknowledge_harmony_bonus(command.user_id, command.partner_id)

    async def _plant(self, command: PlantItemCommand):
        planters = {
            PlacementCategory.FLOWER: self._engine.plant_flower_at_position,
            PlacementCategory.DECOR: self._engine.plant_decor_at_position,
            PlacementCategory.LANDMARK: self._engine.plant_landmark_at_position,
        }
        return await planters[command.category](
            command.user_id, command.partner_id, command.type, command.x, command.y, command.flipped,
        )

    async def _remove_all(self, command: RemoveAllWithRefundCommand):
        removers = {
            PlacementCategory.FLOWER: self._engine.remove_all_plants_with_refund,
            PlacementCategory.DECOR: self._engine.remove_all_decor_with_refund,
            PlacementCategory.LANDMARK: self._engine.remove_all_landmarks_with_refund,
        }
        return await removers[command.category](command.user_id, command.partner_id)

    async def _update_landmark_position(self, command: UpdateLandmarkPositionCommand):
        return await self._engine.update_landmark_position(
            command.user_id, command.partner_id, command.landmark_id, command.x, command.y,
        )

    async def _landmark_action(self, command: LandmarkActionCommand):
        actions = {
            LandmarkAction.DELETE: self._engine.delete_landmark,
            LandmarkAction.MOVE_TO_FRONT: self._engine.move_landmark_to_front,
            LandmarkAction.MOVE_TO_BACK: self._engine.move_landmark_to_back,
        }
        return await actions[command.action](command.user_id, command.partner_id, command.landmark_id)
