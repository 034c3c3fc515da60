# 📄 File: app/modules/shared_garden/domain/services/economy.py
# 🧭 Purpose (Layman Explanation):
# The garden's shopkeeper: checks you can pay, checks the spot is free, plants the item,
# and gives back part of the price when you clear out a whole category.
# 🧪 Purpose (Technical Summary):
# Planting and economy engine: catalog validation, canvas bounds, wallet debit, radius
# based collision for flowers and decor, first-placement tracking, flower variant
# cycling, bulk removal refunds and the daily water drop allowance.
# 🔗 Dependencies:
# catalog, GardenState, Wallet, GardenRules, app.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Shared garden engine (plant_*_at_position, remove_all_*_with_refund, earn_water_drop)

import logging
import math
import random
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.shared.core.exceptions import ValidationError

from ..models.catalog import (
    FLOWER_VARIANTS,
    PlacementCategory,
    PlacementKind,
    collision_radius,
    cost_of,
    lookup,
)
from ..models.garden import GardenState, PlacedItem, PlantedDecor, PlantedFlower, PlantedLandmark, Wallet
from ..models.outcomes import PlacementOutcome, PlacementResult, RefundResult, WaterDropResult
from ..models.rules import GardenRules

logger = logging.getLogger(__name__)


def validate_position(x: float, y: float, rules: GardenRules) -> None:
    if not rules.within_canvas(x, y):
        raise ValidationError(
            "Position is outside the garden",
            field="position",
            value=f"({x}, {y})",
            constraint=f"0..{rules.canvas_width} x 0..{rules.canvas_height}",
        )


def find_collision(state: GardenState, item_type: str, x: float, y: float) -> Optional[PlacedItem]:
    """
    First flower or decor item too close to (x, y).

    Two items collide when their anchors are closer than the larger of the two
    radii, so small items keep clear of big ones and vice versa.
    """
    new_radius = collision_radius(item_type)
    for existing in [*state.flowers, *state.decor]:
        distance = math.hypot(existing.x - x, existing.y - y)
        if distance < max(new_radius, collision_radius(existing.type)):
            return existing
    return None


def next_front_z_index(state: GardenState) -> int:
    return max((landmark.z_index for landmark in state.landmarks), default=-1) + 1


def next_back_z_index(state: GardenState) -> int:
    return min((landmark.z_index for landmark in state.landmarks), default=1) - 1


def _next_flower_variant(state: GardenState, rng: random.Random) -> str:
    if state.variant_cycle_index is None:
        index = rng.randrange(len(FLOWER_VARIANTS))
    else:
        index = (state.variant_cycle_index + 1) % len(FLOWER_VARIANTS)
    state.variant_cycle_index = index
    return FLOWER_VARIANTS[index]


def plant(
    state: GardenState,
    wallet: Wallet,
    category: PlacementCategory,
    item_type: str,
    x: float,
    y: float,
    flipped: bool,
    me: str,
    now: datetime,
    rules: GardenRules,
    rng: Optional[random.Random] = None,
) -> PlacementResult:
    """
    Place one catalog item paid for by `me`.

    Raises:
        ValidationError: unknown type for the category or position off the canvas
    """
    item = lookup(item_type, category)
    if item is None:
        raise ValidationError(
            f"Unknown {category.value} type",
            field="type",
            value=item_type,
        )
    validate_position(x, y, rules)

    if not wallet.can_afford(item.cost):
        return PlacementResult(
            outcome=PlacementOutcome.INSUFFICIENT_FUNDS,
            cost=item.cost,
            gold_remaining=wallet.gold,
        )

    if category != PlacementCategory.LANDMARK:
        blocker = find_collision(state, item_type, x, y)
        if blocker is not None:
            return PlacementResult(
                outcome=PlacementOutcome.PLACEMENT_CONFLICT,
                cost=item.cost,
                gold_remaining=wallet.gold,
                conflicting_item_id=blocker.id,
            )

    wallet.debit(item.cost)

    placed: PlacedItem
    if category == PlacementCategory.FLOWER:
        variant = _next_flower_variant(state, rng or random.Random()) if item.kind == PlacementKind.FLOWER else "v1"
        placed = PlantedFlower(
            type=item_type, variant=variant, x=x, y=y, flipped=flipped, planted_at=now, planted_by=me,
        )
        state.flowers.append(placed)
    elif category == PlacementCategory.DECOR:
        placed = PlantedDecor(type=item_type, x=x, y=y, flipped=flipped, planted_at=now, planted_by=me)
        state.decor.append(placed)
    else:
        placed = PlantedLandmark(
            type=item_type, x=x, y=y, flipped=flipped, z_index=next_front_z_index(state),
            planted_at=now, planted_by=me,
        )
        state.landmarks.append(placed)

    is_first = item.kind.value not in state.first_planted
    state.first_planted.add(item.kind.value)

    logger.info(
        f"Placed {item_type} for {item.cost} gold",
        extra={"couple_key": state.couple_key, "user_id": me},
    )
    return PlacementResult(
        outcome=PlacementOutcome.PLACED,
        item=placed,
        is_first_plant=is_first,
        cost=item.cost,
        gold_remaining=wallet.gold,
    )


def refund_for(state: GardenState, category: PlacementCategory, rules: GardenRules) -> int:
    """floor(refund_ratio x total catalog cost), computed without float drift."""
    total = sum(cost_of(item.type) for item in state.items(category))
    return math.floor(Decimal(str(rules.refund_ratio)) * total)


def remove_all_with_refund(
    state: GardenState,
    wallet: Wallet,
    category: PlacementCategory,
    rules: GardenRules,
) -> RefundResult:
    """Clear a whole category and credit the refund to the acting partner."""
    removed = len(state.items(category))
    refund = refund_for(state, category, rules)
    state.clear(category)
    wallet.credit(refund)
    return RefundResult(removed_count=removed, refund=refund, gold_after=wallet.gold)


def earn_water_drop(wallet: Wallet, now: datetime, rules: GardenRules) -> WaterDropResult:
    """Grant the once-a-day water drop while the wallet has room."""
    capacity = min(wallet.max_water, rules.max_water)
    today = rules.day_key(now)
    if wallet.last_water_earned_day_key == today:
        return WaterDropResult(already_earned_today=True, water=wallet.water, max_water=capacity)
    if wallet.water >= capacity:
        return WaterDropResult(at_capacity=True, water=wallet.water, max_water=capacity)

    wallet.water += 1
    wallet.last_water_earned_day_key = today
    return WaterDropResult(earned=True, water=wallet.water, max_water=capacity)
