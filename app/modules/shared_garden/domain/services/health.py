# 📄 File: app/modules/shared_garden/domain/services/health.py
# 🧭 Purpose (Layman Explanation):
# Looks at the garden and the clock and says how the garden is doing: fresh, wilting
# or wilted, and whether the couple is due the "you forgot your garden" penalty.
# 🧪 Purpose (Technical Summary):
# Pure health and decay calculator. No I/O and no mutation, so it is safe for display
# code and for authoritative checks inside store transactions alike.
# 🔗 Dependencies:
# GardenState, GardenRules, catalog (growth kinds)
# 🔄 Connected Modules / Calls From:
# watering and punishment services (inside transactions), engine status query,
# garden API (status endpoint)

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..models.catalog import CATALOG, PlacementKind
from ..models.garden import GardenState, PlacedItem, PlantedFlower
from ..models.rules import GardenRules, hours_between


class HealthState(str, Enum):
    FRESH = "fresh"
    WILTING = "wilting"
    WILTED = "wilted"


class GrowthStage(str, Enum):
    SAPLING = "sapling"
    MATURE = "mature"


# Hours until a freshly placed plant is drawn fully grown
MATURITY_HOURS = {
    PlacementKind.FLOWER: 0.5,
    PlacementKind.LARGE_PLANT: 6.0,
    PlacementKind.TREE: 12.0,
}

_SEVERITY = {HealthState.FRESH: 0, HealthState.WILTING: 1, HealthState.WILTED: 2}


@dataclass(frozen=True)
class GardenStatus:
    """Derived view of a garden at a moment in time."""

    health: HealthState
    hours_since_interaction: float
    flower_count: int
    streak_progress: int
    needs_punishment: bool


def severity(health: HealthState) -> int:
    return _SEVERITY[health]


def health_for_hours(hours: float, rules: GardenRules) -> HealthState:
    """Map hours since the last positive action onto a health band."""
    if hours < rules.wilting_after_hours:
        return HealthState.FRESH
    if hours < rules.wilted_after_hours:
        return HealthState.WILTING
    return HealthState.WILTED


def hours_since_interaction(state: GardenState, now: datetime) -> float:
    return hours_between(state.last_successful_interaction, now)


def is_episode_punished(state: GardenState) -> bool:
    """The current neglect episode already carries its penalty marker."""
    return state.punished_episode_start == state.last_successful_interaction


def status(state: GardenState, now: datetime, rules: GardenRules = GardenRules()) -> GardenStatus:
    """
    Compute the derived garden status.

    needs_punishment is only true while the garden is wilted and the current
    neglect episode (identified by last_successful_interaction) has no marker.
    """
    hours = hours_since_interaction(state, now)
    health = health_for_hours(hours, rules)
    return GardenStatus(
        health=health,
        hours_since_interaction=hours,
        flower_count=len(state.flowers),
        streak_progress=state.active_streak_days % rules.streak_reward_days,
        needs_punishment=health == HealthState.WILTED and not is_episode_punished(state),
    )


def growth_stage(item: PlacedItem, now: datetime) -> GrowthStage:
    """Decor, landmarks and retired types are always drawn mature."""
    if not isinstance(item, PlantedFlower):
        return GrowthStage.MATURE
    catalog_item = CATALOG.get(item.type)
    if catalog_item is None:
        return GrowthStage.MATURE
    threshold = MATURITY_HOURS.get(catalog_item.kind)
    if threshold is None or hours_between(item.planted_at, now) >= threshold:
        return GrowthStage.MATURE
    return GrowthStage.SAPLING
