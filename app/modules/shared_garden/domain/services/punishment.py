# 📄 File: app/modules/shared_garden/domain/services/punishment.py
# 🧭 Purpose (Layman Explanation):
# If a couple leaves their garden alone for too long, they lose their streak and drop a
# connection level, but only once per stretch of neglect. Gold can bring it back to life.
# 🧪 Purpose (Technical Summary):
# Idempotent neglect penalty keyed by an episode marker stored inside the document. A
# penalty that actually lowers the level also wilts away the newest flower and restarts
# the variant cycle. Also the paid revival that ends a wilted episode. Both mutate state in place and must run
# inside a store transaction.
# 🔗 Dependencies:
# health service, GardenState, Wallet, GardenRules
# 🔄 Connected Modules / Calls From:
# Shared garden engine (check_and_apply_punishment, revive), watering service (opportunistic check)

import logging
from datetime import datetime
from typing import Optional

from ..models.garden import GardenState, PlantedFlower, Wallet
from ..models.outcomes import PunishmentResult, RevivalResult
from ..models.rules import GardenRules
from .health import HealthState, status

logger = logging.getLogger(__name__)

MIN_CONNECTION_LEVEL = 1


def apply_punishment_if_due(state: GardenState, now: datetime, rules: GardenRules) -> PunishmentResult:
    """
    Apply the neglect penalty once for the current episode.

    The marker written here is compared against last_successful_interaction, so a
    second caller in the same episode sees it and leaves the state untouched.
    """
    if not status(state, now, rules).needs_punishment:
        return PunishmentResult(
            applied=False,
            active_streak_days=state.active_streak_days,
            couple_connection_level=state.couple_connection_level,
        )

    new_level = max(state.couple_connection_level - 1, MIN_CONNECTION_LEVEL)
    removed = None
    if new_level < state.couple_connection_level:
        removed = _remove_newest_flower(state)

    state.active_streak_days = 0
    state.couple_connection_level = new_level
    state.punished_episode_start = state.last_successful_interaction
    logger.info(
        "Neglect penalty applied",
        extra={
            "couple_key": state.couple_key,
            "connection_level": state.couple_connection_level,
            "removed_flower": removed.type if removed else None,
        },
    )
    return PunishmentResult(
        applied=True,
        active_streak_days=state.active_streak_days,
        couple_connection_level=state.couple_connection_level,
        removed_flower_id=removed.id if removed else None,
    )


def _remove_newest_flower(state: GardenState) -> Optional[PlantedFlower]:
    if not state.flowers:
        return None
    # Latest planted_at wins; on a tie the later entry in the list
    newest = max(range(len(state.flowers)), key=lambda i: (state.flowers[i].planted_at, i))
    removed = state.flowers.pop(newest)
    state.variant_cycle_index = None
    return removed


def revive(state: GardenState, wallet: Wallet, now: datetime, rules: GardenRules) -> RevivalResult:
    """Spend gold to end a wilted episode. Watering alone cannot do this."""
    if status(state, now, rules).health != HealthState.WILTED:
        return RevivalResult(not_wilted=True)
    if not wallet.can_afford(rules.revive_cost_gold):
        return RevivalResult(insufficient_funds=True)

    # Penalise the episode before it is closed so reviving never dodges it
    apply_punishment_if_due(state, now, rules)
    wallet.debit(rules.revive_cost_gold)
    state.last_successful_interaction = now
    return RevivalResult(revived=True, gold_spent=rules.revive_cost_gold)
