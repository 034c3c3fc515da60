# 📄 File: app/modules/shared_garden/application/dto/garden_dto.py
# 🧭 Purpose (Layman Explanation):
# Packages up everything a phone needs to draw the garden screen in one go: the garden
# itself, how healthy it looks, which plants are still saplings and what is in your purse.
#
# 🧪 Purpose (Technical Summary):
# Read-side data transfer objects. GardenStatus and WateringEligibility are plain domain
# dataclasses; these pydantic DTOs give them a stable, serializable shape for handlers
# and API responses.
#
# 🔗 Dependencies:
# - pydantic for DTO serialization
# - shared_garden domain models and health/watering services
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.application.handlers.query_handlers
# - app.modules.shared_garden.presentation.api.v1.garden

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field

from app.modules.shared_garden.domain.models.garden import GardenState, Wallet
from app.modules.shared_garden.domain.models.rules import GardenRules
from app.modules.shared_garden.domain.services.health import (
    GardenStatus,
    GrowthStage,
    HealthState,
    growth_stage,
)
from app.modules.shared_garden.domain.services.watering import WateringEligibility


class GardenStatusDTO(BaseModel):
    """Derived garden health at a moment in time."""

    health: HealthState
    hours_since_interaction: float
    flower_count: int
    streak_progress: int = Field(..., description="Harmony days towards the next streak reward")
    needs_punishment: bool

    @classmethod
    def from_status(cls, status: GardenStatus) -> "GardenStatusDTO":
        return cls(
            health=status.health,
            hours_since_interaction=round(status.hours_since_interaction, 4),
            flower_count=status.flower_count,
            streak_progress=status.streak_progress,
            needs_punishment=status.needs_punishment,
        )


class WateringEligibilityDTO(BaseModel):
    can_water: bool
    too_soon: bool
    already_watered_today: bool

    @classmethod
    def from_eligibility(cls, eligibility: WateringEligibility) -> "WateringEligibilityDTO":
        return cls(
            can_water=eligibility.can_water,
            too_soon=eligibility.too_soon,
            already_watered_today=eligibility.already_watered_today,
        )


class GardenViewDTO(BaseModel):
    """
    Everything needed to render one partner's view of the shared garden.

    growth maps each flower id to its drawn stage; decor and landmarks are
    always mature and are left out. garden is read as of today, so a day
    bucket nobody has written since midnight already shows as empty.
    """

    garden: GardenState
    status: GardenStatusDTO
    watering: WateringEligibilityDTO
    growth: Dict[str, GrowthStage]
    wallet: Wallet
    rules: GardenRules
    generated_at: datetime

    @property
    def has_pending_harmony_bonus(self) -> bool:
        return self.wallet.user_id in self.garden.pending_harmony_bonus_for


def growth_stages(state: GardenState, now: datetime) -> Dict[str, GrowthStage]:
    return {flower.id: growth_stage(flower, now) for flower in state.flowers}
