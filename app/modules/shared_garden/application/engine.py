# 📄 File: app/modules/shared_garden/application/engine.py
# 🧭 Purpose (Layman Explanation):
# The front desk of the shared garden: every action a partner takes (watering, planting,
# clearing, arranging) comes through here and is carried out as one all-or-nothing step.
# 🧪 Purpose (Technical Summary):
# Engine façade. Each command resolves the couple key, wraps the matching domain service
# in a store mutator (so it re-runs on fresh state if a concurrent writer wins) and
# returns the structured result of the attempt that committed.
# 🔗 Dependencies:
# GardenStore, domain services (pairing, health, watering, punishment, economy, landmarks)
# 🔄 Connected Modules / Calls From:
# Command/query handlers, garden API, WebSocket stream, tests

import inspect
import logging
import random
from datetime import datetime
from typing import Callable, Optional

from app.modules.shared_garden.domain.models.catalog import PlacementCategory
from app.modules.shared_garden.domain.models.garden import GardenState, Wallet
from app.modules.shared_garden.domain.models.outcomes import (
    HarmonyAcknowledgement,
    LandmarkResult,
    PlacementResult,
    PunishmentResult,
    RefundResult,
    RevivalResult,
    WaterDropResult,
    WateringResult,
)
from app.modules.shared_garden.domain.models.rules import GardenRules, utc_now
from app.modules.shared_garden.domain.repositories.garden_store import (
    GardenStore,
    GardenTransaction,
    OnChange,
    Subscription,
)
from app.modules.shared_garden.domain.services import economy, health, landmarks, punishment, watering
from app.modules.shared_garden.domain.services.pairing import CoupleKey, resolve_couple_key

logger = logging.getLogger(__name__)


class SharedGardenEngine:
    """
    Command and query surface of the shared garden.

    Expected outcomes come back as result flags. Only ValidationError (bad input),
    TransactionConflictError and DatabaseError are raised.
    """

    def __init__(
        self,
        store: GardenStore,
        rules: Optional[GardenRules] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
    ):
        self._store = store
        self._rules = rules or GardenRules()
        self._clock = clock
        self._rng = rng or random.Random()

    @property
    def rules(self) -> GardenRules:
        return self._rules

    def now(self) -> datetime:
        return self._clock()

    def couple(self, me: str, partner: str) -> CoupleKey:
        return resolve_couple_key(me, partner)

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def get_state(self, me: str, partner: str) -> GardenState:
        return self._as_of_today(await self._store.get(self.couple(me, partner)))

    def _as_of_today(self, state: GardenState) -> GardenState:
        """
        Copy of a committed state with a stale day bucket rolled over.

        Nothing is written: the stored bucket rolls with the next command that
        touches it, but readers already see today's empty watered_by_today.
        """
        today = self._rules.day_key(self._clock())
        if today <= state.day_key:
            return state
        current = state.model_copy(deep=True)
        current.roll_over_day(today)
        return current

    async def get_wallet(self, me: str) -> Wallet:
        return await self._store.get_wallet(me)

    def status(self, state: GardenState, now: Optional[datetime] = None) -> health.GardenStatus:
        """Pure status derivation, no I/O."""
        return health.status(state, now or self._clock(), self._rules)

    def can_water(self, state: GardenState, me: str, now: Optional[datetime] = None) -> watering.WateringEligibility:
        return watering.can_water(state, me, now or self._clock(), self._rules)

    async def subscribe(self, me: str, partner: str, on_change: OnChange) -> Subscription:
        """
        Watch the couple's garden.

        The current state is delivered right after subscribing, then every
        committed change, each seen as of today like get_state(). Duplicates
        are possible and must be tolerated.
        """
        couple = self.couple(me, partner)

        def as_of_today(state: GardenState):
            return on_change(self._as_of_today(state))

        subscription = await self._store.subscribe(couple.value, as_of_today)
        current = await self._store.get(couple)
        result = as_of_today(current)
        if inspect.isawaitable(result):
            await result
        return subscription

    # =========================================================================
    # WATERING, HARMONY AND NEGLECT
    # =========================================================================

    async def water(self, me: str, partner: str) -> WateringResult:
        couple = self.couple(me, partner)
        partner_id = couple.partner_of(me)

        def mutate(tx: GardenTransaction) -> WateringResult:
            return watering.water(tx.state, tx.wallets, me, partner_id, self._clock(), self._rules)

        result = await self._store.update(couple, mutate)
        logger.info(
            f"Watering by {me}: watered={result.watered} harmony={result.harmony_bonus} "
            f"streak_reward={result.streak_reward}",
            extra={"couple_key": couple.value, "user_id": me},
        )
        return result

    async def check_and_apply_punishment(self, me: str, partner: str) -> PunishmentResult:
        couple = self.couple(me, partner)

        def mutate(tx: GardenTransaction) -> PunishmentResult:
            return punishment.apply_punishment_if_due(tx.state, self._clock(), self._rules)

        return await self._store.update(couple, mutate)

    async def revive(self, me: str, partner: str) -> RevivalResult:
        couple = self.couple(me, partner)
        couple.partner_of(me)

        def mutate(tx: GardenTransaction) -> RevivalResult:
            return punishment.revive(tx.state, tx.wallet(me), self._clock(), self._rules)

        result = await self._store.update(couple, mutate)
        if result.revived:
            logger.info(f"Garden revived by {me}", extra={"couple_key": couple.value, "user_id": me})
        return result

    async def earn_water_drop(self, me: str, partner: str) -> WaterDropResult:
        couple = self.couple(me, partner)
        couple.partner_of(me)

        def mutate(tx: GardenTransaction) -> WaterDropResult:
            return economy.earn_water_drop(tx.wallet(me), self._clock(), self._rules)

        return await self._store.update(couple, mutate)

    async def acknowledge_harmony_bonus(self, me: str, partner: str) -> HarmonyAcknowledgement:
        couple = self.couple(me, partner)

        def mutate(tx: GardenTransaction) -> HarmonyAcknowledgement:
            cleared = watering.acknowledge_harmony_bonus(tx.state, me)
            return HarmonyAcknowledgement(
                cleared=cleared, still_pending_for=len(tx.state.pending_harmony_bonus_for),
            )

        return await self._store.update(couple, mutate)

    # =========================================================================
    # PLANTING AND REFUNDS
    # =========================================================================

    async def _plant(
        self, category: PlacementCategory, me: str, partner: str,
        item_type: str, x: float, y: float, flipped: bool,
    ) -> PlacementResult:
        couple = self.couple(me, partner)
        couple.partner_of(me)

        def mutate(tx: GardenTransaction) -> PlacementResult:
            return economy.plant(
                tx.state, tx.wallet(me), category, item_type, x, y, flipped, me,
                self._clock(), self._rules, self._rng,
            )

        result = await self._store.update(couple, mutate)
        if not result.placed:
            logger.info(
                f"Placement of {item_type} rejected: {result.outcome.value}",
                extra={"couple_key": couple.value, "user_id": me},
            )
        return result

    async def plant_flower_at_position(
        self, me: str, partner: str, item_type: str, x: float, y: float, flipped: bool = False,
    ) -> PlacementResult:
        return await self._plant(PlacementCategory.FLOWER, me, partner, item_type, x, y, flipped)

    async def plant_decor_at_position(
        self, me: str, partner: str, item_type: str, x: float, y: float, flipped: bool = False,
    ) -> PlacementResult:
        return await self._plant(PlacementCategory.DECOR, me, partner, item_type, x, y, flipped)

    async def plant_landmark_at_position(
        self, me: str, partner: str, item_type: str, x: float, y: float, flipped: bool = False,
    ) -> PlacementResult:
        return await self._plant(PlacementCategory.LANDMARK, me, partner, item_type, x, y, flipped)

    async def _remove_all(self, category: PlacementCategory, me: str, partner: str) -> RefundResult:
        couple = self.couple(me, partner)
        couple.partner_of(me)

        def mutate(tx: GardenTransaction) -> RefundResult:
            return economy.remove_all_with_refund(tx.state, tx.wallet(me), category, self._rules)

        result = await self._store.update(couple, mutate)
        logger.info(
            f"Removed {result.removed_count} {category.value} items, refunded {result.refund} gold",
            extra={"couple_key": couple.value, "user_id": me},
        )
        return result

    async def remove_all_plants_with_refund(self, me: str, partner: str) -> RefundResult:
        return await self._remove_all(PlacementCategory.FLOWER, me, partner)

    async def remove_all_decor_with_refund(self, me: str, partner: str) -> RefundResult:
        return await self._remove_all(PlacementCategory.DECOR, me, partner)

    async def remove_all_landmarks_with_refund(self, me: str, partner: str) -> RefundResult:
        return await self._remove_all(PlacementCategory.LANDMARK, me, partner)

    # =========================================================================
    # LANDMARKS
    # =========================================================================

    async def update_landmark_position(
        self, me: str, partner: str, landmark_id: str, x: float, y: float,
    ) -> LandmarkResult:
        return await self._store.update(
            self.couple(me, partner),
            lambda tx: landmarks.update_position(tx.state, landmark_id, x, y, self._rules),
        )

    async def delete_landmark(self, me: str, partner: str, landmark_id: str) -> LandmarkResult:
        return await self._store.update(
            self.couple(me, partner),
            lambda tx: landmarks.delete(tx.state, landmark_id),
        )

    async def move_landmark_to_front(self, me: str, partner: str, landmark_id: str) -> LandmarkResult:
        return await self._store.update(
            self.couple(me, partner),
            lambda tx: landmarks.move_to_front(tx.state, landmark_id),
        )

    async def move_landmark_to_back(self, me: str, partner: str, landmark_id: str) -> LandmarkResult:
        return await self._store.update(
            self.couple(me, partner),
            lambda tx: landmarks.move_to_back(tx.state, landmark_id),
        )
