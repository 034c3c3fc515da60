# 📄 File: app/modules/shared_garden/application/commands/garden_commands.py
# 🧭 Purpose (Layman Explanation):
# The "order forms" for everything a partner can do to the shared garden: water it,
# plant something somewhere, clear a whole category, or rearrange a landmark.
#
# 🧪 Purpose (Technical Summary):
# CQRS command definitions for shared garden write operations. Commands are immutable
# pydantic models carrying the acting user, their partner and the operation's inputs;
# GardenCommandHandler maps each one onto the engine.
#
# 🔗 Dependencies:
# - pydantic for command validation
# - app.modules.shared_garden.domain.models.catalog (PlacementCategory)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.application.handlers.command_handlers
# - app.modules.shared_garden.presentation.api.v1.garden (endpoints build commands)

"""
Shared Garden Commands

Every command names the acting user and their partner; the couple key is always
derived from the pair, never supplied by the caller.

- WaterGardenCommand / ReviveGardenCommand / EarnWaterDropCommand
- CheckPunishmentCommand / AcknowledgeHarmonyCommand
- PlantItemCommand: flower, decor or landmark at a canvas position
- RemoveAllWithRefundCommand: clear one category for a partial refund
- UpdateLandmarkPositionCommand / LandmarkActionCommand
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from app.modules.shared_garden.domain.models.catalog import PlacementCategory


class CoupleCommand(BaseModel):
    """Base for every garden command."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1, description="Acting partner", examples=["alice"])
    partner_id: str = Field(..., min_length=1, description="The other partner", examples=["bob"])


class WaterGardenCommand(CoupleCommand):
    pass


class CheckPunishmentCommand(CoupleCommand):
    pass


class ReviveGardenCommand(CoupleCommand):
    pass


class EarnWaterDropCommand(CoupleCommand):
    pass


class AcknowledgeHarmonyCommand(CoupleCommand):
    pass


class PlantItemCommand(CoupleCommand):
    """Place one catalog item, paid for by the acting partner."""

    category: PlacementCategory
    type: str = Field(..., min_length=1, description="Catalog type", examples=["rose"])
    x: float = Field(..., description="Canvas x coordinate")
    y: float = Field(..., description="Canvas y coordinate")
    flipped: bool = False


class RemoveAllWithRefundCommand(CoupleCommand):
    category: PlacementCategory


class UpdateLandmarkPositionCommand(CoupleCommand):
    landmark_id: str = Field(..., min_length=1)
    x: float
    y: float


class LandmarkAction(str, Enum):
    DELETE = "delete"
    MOVE_TO_FRONT = "move_to_front"
    MOVE_TO_BACK = "move_to_back"


class LandmarkActionCommand(CoupleCommand):
    landmark_id: str = Field(..., min_length=1)
    action: LandmarkAction
