# 📄 File: app/modules/shared_garden/application/dev_tools.py
# 🧭 Purpose (Layman Explanation):
# A developer's cheat panel for the shared garden: drop a flower anywhere for free, fast
# forward the clock, hand out gold. Switched off unless explicitly enabled.
#
# 🧪 Purpose (Technical Summary):
# Test/QA mutators that bypass the economy and collision rules. Lives outside the
# engine and can only be constructed when GARDEN_DEV_TOOLS_ENABLED is set, so
# production deployments never expose it. Writes still go through GardenStore.update
# so concurrent partners are never clobbered.
#
# 🔗 Dependencies:
# - GardenStore, domain models, DevToolsDisabledError
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.presentation.api.v1.garden (/dev endpoints)
# - tests

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from app.shared.core.exceptions import DevToolsDisabledError, ValidationError
from app.modules.shared_garden.domain.models.catalog import PlacementCategory, lookup
from app.modules.shared_garden.domain.models.garden import GardenState, PlantedFlower, Wallet
from app.modules.shared_garden.domain.models.rules import GardenRules, utc_now
from app.modules.shared_garden.domain.repositories.garden_store import GardenStore, GardenTransaction
from app.modules.shared_garden.domain.services.pairing import resolve_couple_key

logger = logging.getLogger(__name__)


class GardenDevTools:
    """
    Rule-bypassing mutators for development and QA.

    Raises:
        DevToolsDisabledError: on construction when the feature flag is off
    """

    def __init__(
        self,
        store: GardenStore,
        enabled: bool,
        rules: Optional[GardenRules] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not enabled:
            raise DevToolsDisabledError()
        self._store = store
        self._rules = rules or GardenRules()
        self._clock = clock
        logger.warning("Garden dev tools are enabled")

    async def force_add_flower(
        self, me: str, partner: str, item_type: str, x: float, y: float, flipped: bool = False,
    ) -> PlantedFlower:
        """Plant without charging gold or checking collisions. Unknown types are still refused."""
        if lookup(item_type, PlacementCategory.FLOWER) is None:
            raise ValidationError("Unknown flower type", field="type", value=item_type)

        def mutate(tx: GardenTransaction) -> PlantedFlower:
            flower = PlantedFlower(
                type=item_type, x=x, y=y, flipped=flipped, planted_at=self._clock(), planted_by=me,
            )
            tx.state.flowers.append(flower)
            return flower

        return await self._store.update(resolve_couple_key(me, partner), mutate)

    async def remove_last_flower(self, me: str, partner: str) -> Optional[PlantedFlower]:
        def mutate(tx: GardenTransaction) -> Optional[PlantedFlower]:
            if not tx.state.flowers:
                return None
            return tx.state.flowers.pop()

        return await self._store.update(resolve_couple_key(me, partner), mutate)

    async def clear_garden(self, me: str, partner: str) -> GardenState:
        """Empty every category. No refunds."""

        def mutate(tx: GardenTransaction) -> GardenState:
            for category in PlacementCategory:
                tx.state.clear(category)
            return tx.state.model_copy(deep=True)

        return await self._store.update(resolve_couple_key(me, partner), mutate)

    async def simulate_time_passing(self, me: str, partner: str, hours: float) -> GardenState:
        """
        Age the garden by shifting its timestamps into the past.

        The punishment marker moves with last_successful_interaction so an
        already punished episode stays punished. Day keys are left alone.
        """
        if hours <= 0:
            raise ValidationError("Hours must be positive", field="hours", value=hours)
        delta = timedelta(hours=hours)

        def mutate(tx: GardenTransaction) -> GardenState:
            state = tx.state
            if state.punished_episode_start is not None:
                state.punished_episode_start -= delta
            state.last_successful_interaction -= delta
            state.last_watered_by_user = {
                user_id: moment - delta for user_id, moment in state.last_watered_by_user.items()
            }
            for item in [*state.flowers, *state.decor, *state.landmarks]:
                item.planted_at -= delta
            return state.model_copy(deep=True)

        return await self._store.update(resolve_couple_key(me, partner), mutate)

    async def grant_gold(self, me: str, partner: str, amount: int, user_id: Optional[str] = None) -> Wallet:
        """Credit gold to `user_id` (the caller by default), who must belong to the couple."""
        if amount <= 0:
            raise ValidationError("Amount must be positive", field="amount", value=amount)
        couple = resolve_couple_key(me, partner)
        recipient = user_id or me
        couple.partner_of(recipient)

        def mutate(tx: GardenTransaction) -> Wallet:
            wallet = tx.wallet(recipient)
            wallet.credit(amount)
            return wallet.model_copy()

        wallet = await self._store.update(couple, mutate)
        logger.info(f"Granted {amount} gold to {recipient}", extra={"couple_key": couple.value})
        return wallet
