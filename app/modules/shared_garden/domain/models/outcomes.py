# 📄 File: app/modules/shared_garden/domain/models/outcomes.py
# 🧭 Purpose (Layman Explanation):
# The "receipts" the garden hands back after every action: did the watering count,
# was there a harmony bonus, was the spot already taken, how much gold came back.
# 🧪 Purpose (Technical Summary):
# Structured result models for every garden command. Expected outcomes are reported
# through these flags and enums; only infrastructure failures raise.
# 🔗 Dependencies:
# pydantic, enum, garden entities
# 🔄 Connected Modules / Calls From:
# Domain services (construct), engine (returns), API schemas (serialize)

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, computed_field

from .garden import PlantedDecor, PlantedFlower, PlantedLandmark


class WateringResult(BaseModel):
    already_watered_today: bool = False
    too_soon_to_water: bool = False
    is_wilted: bool = False
    not_enough_water: bool = False
    harmony_bonus: bool = False
    streak_reward: bool = False
    punishment_applied: bool = False
    active_streak_days: int = 0
    gold_earned: int = 0

    @computed_field
    @property
    def watered(self) -> bool:
        return not (
            self.already_watered_today
            or self.too_soon_to_water
            or self.is_wilted
            or self.not_enough_water
        )


class PunishmentResult(BaseModel):
    applied: bool = False
    active_streak_days: int = 0
    couple_connection_level: int = 1
    removed_flower_id: Optional[str] = None


class RevivalResult(BaseModel):
    revived: bool = False
    not_wilted: bool = False
    insufficient_funds: bool = False
    gold_spent: int = 0


class PlacementOutcome(str, Enum):
    PLACED = "placed"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    PLACEMENT_CONFLICT = "placement_conflict"


class PlacementResult(BaseModel):
    outcome: PlacementOutcome
    item: Optional[Union[PlantedFlower, PlantedDecor, PlantedLandmark]] = None
    is_first_plant: bool = False
    cost: int = 0
    gold_remaining: int = 0
    conflicting_item_id: Optional[str] = None

    @computed_field
    @property
    def placed(self) -> bool:
        return self.outcome == PlacementOutcome.PLACED


class RefundResult(BaseModel):
    removed_count: int = 0
    refund: int = 0
    gold_after: int = 0


class LandmarkOutcome(str, Enum):
    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not_found"


class LandmarkResult(BaseModel):
    outcome: LandmarkOutcome
    landmark: Optional[PlantedLandmark] = None


class WaterDropResult(BaseModel):
    earned: bool = False
    already_earned_today: bool = False
    at_capacity: bool = False
    water: int = 0
    max_water: int = 0


class HarmonyAcknowledgement(BaseModel):
    cleared: bool = False
    still_pending_for: int = 0
