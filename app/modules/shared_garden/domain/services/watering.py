# 📄 File: app/modules/shared_garden/domain/services/watering.py
# 🧭 Purpose (Layman Explanation):
# Decides whether you may water right now, records the watering, and notices when both
# partners watered on the same day ("harmony"), which grows the couple's streak.
# 🧪 Purpose (Technical Summary):
# Watering cooldown guard plus the streak and harmony evaluator. water() mutates the
# document with set-union updates only and is meant to run as a store mutator, so a
# partner's concurrent watering is always observed rather than overwritten.
# 🔗 Dependencies:
# health and punishment services, GardenState, Wallet, GardenRules
# 🔄 Connected Modules / Calls From:
# Shared garden engine (water, can_water), garden API (eligibility endpoint)

"""
Watering rules

- A user may not water twice within the cooldown window (too_soon_to_water).
- A user may water at most once per day bucket (already_watered_today).
  Both reasons are evaluated independently and may be reported together.
- A wilted garden cannot be watered back to health; it must be revived.
- When the partner already watered in the same day bucket the watering is in
  harmony: both partners are flagged for the bonus notification, both wallets
  receive the harmony gold, and the streak advances.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict

from ..models.garden import GardenState, Wallet
from ..models.outcomes import WateringResult
from ..models.rules import GardenRules, hours_between
from .health import HealthState, status
from .punishment import apply_punishment_if_due


@dataclass(frozen=True)
class WateringEligibility:
    too_soon: bool
    already_watered_today: bool

    @property
    def can_water(self) -> bool:
        return not (self.too_soon or self.already_watered_today)


def can_water(state: GardenState, user_id: str, now: datetime, rules: GardenRules) -> WateringEligibility:
    last_watered = state.last_watered_by_user.get(user_id)
    too_soon = last_watered is not None and hours_between(last_watered, now) < rules.watering_cooldown_hours
    # A stale day bucket means nobody has watered today yet
    already_today = state.day_key == rules.day_key(now) and user_id in state.watered_by_today
    return WateringEligibility(too_soon=too_soon, already_watered_today=already_today)


def advance_streak(state: GardenState, now: datetime, rules: GardenRules) -> bool:
    """
    Count today's harmony towards the streak.

    Consecutive harmony days extend the streak, any gap restarts it at one.
    Returns True when the streak lands on a reward multiple.
    """
    today = rules.day_key(now)
    if state.last_harmony_day_key == today:
        return False

    if state.last_harmony_day_key == rules.previous_day_key(now):
        state.active_streak_days += 1
    else:
        state.active_streak_days = 1
    state.last_harmony_day_key = today
    return state.active_streak_days % rules.streak_reward_days == 0


def water(
    state: GardenState,
    wallets: Dict[str, Wallet],
    me: str,
    partner: str,
    now: datetime,
    rules: GardenRules,
) -> WateringResult:
    """Record a watering by `me`. Mutates state and wallets in place."""
    state.roll_over_day(rules.day_key(now))
    punishment = apply_punishment_if_due(state, now, rules)

    eligibility = can_water(state, me, now, rules)
    if not eligibility.can_water:
        return WateringResult(
            too_soon_to_water=eligibility.too_soon,
            already_watered_today=eligibility.already_watered_today,
            punishment_applied=punishment.applied,
            active_streak_days=state.active_streak_days,
        )

    if status(state, now, rules).health == HealthState.WILTED:
        return WateringResult(
            is_wilted=True,
            punishment_applied=punishment.applied,
            active_streak_days=state.active_streak_days,
        )

    wallet = wallets[me]
    if rules.watering_water_cost:
        if wallet.water < rules.watering_water_cost:
            return WateringResult(
                not_enough_water=True,
                punishment_applied=punishment.applied,
                active_streak_days=state.active_streak_days,
            )
        wallet.water -= rules.watering_water_cost

    harmony = partner in state.watered_by_today

    state.last_watered_by_user[me] = now
    state.watered_by_today.add(me)
    state.last_successful_interaction = now

    streak_reward = False
    gold_earned = 0
    if harmony:
        state.pending_harmony_bonus_for.update((me, partner))
        gold_earned += rules.harmony_bonus_gold
        streak_reward = advance_streak(state, now, rules)
        if streak_reward:
            gold_earned += rules.streak_reward_gold
            state.couple_connection_level += 1
        for member in (me, partner):
            wallets[member].credit(gold_earned)

    return WateringResult(
        harmony_bonus=harmony,
        streak_reward=streak_reward,
        punishment_applied=punishment.applied,
        active_streak_days=state.active_streak_days,
        gold_earned=gold_earned,
    )


def acknowledge_harmony_bonus(state: GardenState, me: str) -> bool:
    """Clear `me` from the pending notification set. Returns True if it was pending."""
    if me not in state.pending_harmony_bonus_for:
        return False
    state.pending_harmony_bonus_for.discard(me)
    return True
