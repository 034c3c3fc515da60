"""Tests for the shared garden engine over the in-memory store.

The engine is exercised the way two phones would use it: each partner
calls it with their own ID and the other partner's ID.
"""

import asyncio
from datetime import timedelta

import pytest

from app.shared.core.exceptions import ChangeFeedError, ValidationError
from app.modules.shared_garden.application.engine import SharedGardenEngine
from app.modules.shared_garden.domain.models.outcomes import LandmarkOutcome, PlacementOutcome
from app.modules.shared_garden.domain.services.health import HealthState
from app.modules.shared_garden.infrastructure.external.change_feed import ChangeFeed
from app.modules.shared_garden.infrastructure.memory.garden_store_memory import InMemoryGardenStore

from conftest import ALICE, BOB, earn_water


async def fund(store, couple, user_id, gold):
    def mutate(tx):
        tx.wallet(user_id).credit(gold)
    await store.update(couple, mutate)


# ============================================================================
# Lazy creation and reads
# ============================================================================

class TestReads:

    async def test_garden_created_on_first_read(self, engine, memory_store):
        state = await engine.get_state(ALICE, BOB)
        assert state.couple_key == "alice_bob"
        assert state.flowers == []
        assert memory_store.version_of("alice_bob") == 1

    async def test_both_partners_see_same_garden(self, engine):
        mine = await engine.get_state(ALICE, BOB)
        theirs = await engine.get_state(BOB, ALICE)
        assert mine.model_dump() == theirs.model_dump()

    async def test_reads_do_not_bump_version(self, engine, memory_store):
        await engine.get_state(ALICE, BOB)
        await engine.get_state(BOB, ALICE)
        assert memory_store.version_of("alice_bob") == 1

    async def test_reads_roll_a_stale_day_without_writing(self, engine, clock, memory_store, couple):
        await earn_water(engine)
        await engine.water(ALICE, BOB)
        version = memory_store.version_of("alice_bob")
        clock.advance(hours=20)

        state = await engine.get_state(ALICE, BOB)

        assert state.day_key == "2026-03-03"
        assert state.watered_by_today == set()
        assert memory_store.version_of("alice_bob") == version
        assert (await memory_store.get(couple)).watered_by_today == {ALICE}

    async def test_default_wallet(self, engine):
        wallet = await engine.get_wallet(ALICE)
        assert (wallet.gold, wallet.water, wallet.max_water) == (0, 0, 3)

    async def test_same_user_pair_rejected(self, engine):
        with pytest.raises(ValidationError):
            await engine.get_state(ALICE, ALICE)


# ============================================================================
# Watering through the store
# ============================================================================

class TestWatering:

    async def test_harmony_across_partners(self, engine, clock):
        await earn_water(engine)
        first = await engine.water(ALICE, BOB)
        clock.advance(hours=1)
        second = await engine.water(BOB, ALICE)

        assert first.watered and not first.harmony_bonus
        assert second.harmony_bonus is True
        state = await engine.get_state(ALICE, BOB)
        assert state.pending_harmony_bonus_for == {ALICE, BOB}
        assert (await engine.get_wallet(ALICE)).gold == engine.rules.harmony_bonus_gold
        assert (await engine.get_wallet(BOB)).gold == engine.rules.harmony_bonus_gold

    async def test_simultaneous_watering_is_not_lost(self, engine):
        """Both calls land and exactly one of them sees the other."""
        await earn_water(engine)
        results = await asyncio.gather(engine.water(ALICE, BOB), engine.water(BOB, ALICE))

        assert all(r.watered for r in results)
        assert sorted(r.harmony_bonus for r in results) == [False, True]
        state = await engine.get_state(ALICE, BOB)
        assert state.watered_by_today == {ALICE, BOB}
        assert state.active_streak_days == 1

    async def test_repeat_watering_rejected(self, engine, clock, memory_store):
        await earn_water(engine)
        await engine.water(ALICE, BOB)
        version = memory_store.version_of("alice_bob")
        clock.advance(minutes=5)

        result = await engine.water(ALICE, BOB)

        assert result.too_soon_to_water and result.already_watered_today
        assert memory_store.version_of("alice_bob") == version

    async def test_acknowledge_harmony(self, engine):
        await earn_water(engine)
        await engine.water(ALICE, BOB)
        await engine.water(BOB, ALICE)

        ack = await engine.acknowledge_harmony_bonus(ALICE, BOB)
        assert ack.cleared is True
        assert ack.still_pending_for == 1

        again = await engine.acknowledge_harmony_bonus(ALICE, BOB)
        assert again.cleared is False

    async def test_watering_alone_rejected(self, engine):
        with pytest.raises(ValidationError):
            await engine.water(ALICE, ALICE)


class TestNeglect:

    async def test_punishment_check_is_idempotent(self, engine, clock, memory_store):
        await engine.get_state(ALICE, BOB)
        clock.advance(hours=30)

        first = await engine.check_and_apply_punishment(ALICE, BOB)
        version = memory_store.version_of("alice_bob")
        second = await engine.check_and_apply_punishment(BOB, ALICE)

        assert first.applied is True
        assert second.applied is False
        assert memory_store.version_of("alice_bob") == version

    async def test_concurrent_punishment_checks_apply_once(self, engine, clock):
        await engine.get_state(ALICE, BOB)
        clock.advance(hours=30)

        results = await asyncio.gather(
            engine.check_and_apply_punishment(ALICE, BOB),
            engine.check_and_apply_punishment(BOB, ALICE),
        )
        assert sorted(r.applied for r in results) == [False, True]

    async def test_revive_then_water(self, engine, clock, memory_store, couple):
        await engine.get_state(ALICE, BOB)
        await earn_water(engine)
        await fund(memory_store, couple, ALICE, 15)
        clock.advance(hours=30)

        assert (await engine.water(ALICE, BOB)).is_wilted is True
        revival = await engine.revive(ALICE, BOB)
        assert revival.revived is True

        state = await engine.get_state(ALICE, BOB)
        assert engine.status(state).health == HealthState.FRESH
        assert (await engine.water(ALICE, BOB)).watered is True
        assert (await engine.get_wallet(ALICE)).gold == 5

    async def test_water_drop(self, engine):
        first = await engine.earn_water_drop(ALICE, BOB)
        second = await engine.earn_water_drop(ALICE, BOB)
        assert first.earned is True
        assert second.already_earned_today is True
        assert (await engine.get_wallet(ALICE)).water == 1

    async def test_watering_needs_a_water_drop(self, engine, memory_store):
        await engine.get_state(ALICE, BOB)
        version = memory_store.version_of("alice_bob")

        dry = await engine.water(ALICE, BOB)

        assert dry.not_enough_water is True
        assert dry.watered is False
        assert memory_store.version_of("alice_bob") == version
        assert (await engine.get_state(ALICE, BOB)).watered_by_today == set()

        await engine.earn_water_drop(ALICE, BOB)
        assert (await engine.water(ALICE, BOB)).watered is True
        assert (await engine.get_wallet(ALICE)).water == 0

    async def test_punishment_wilts_newest_flower(self, engine, clock, memory_store, couple):
        await fund(memory_store, couple, ALICE, 10)
        await memory_store.update(couple, lambda tx: setattr(tx.state, "couple_connection_level", 2))
        await engine.plant_flower_at_position(ALICE, BOB, "rose", 50, 50)
        clock.advance(minutes=10)
        newest = await engine.plant_flower_at_position(ALICE, BOB, "tulip", 200, 200)
        clock.advance(hours=30)

        result = await engine.check_and_apply_punishment(ALICE, BOB)

        state = await engine.get_state(ALICE, BOB)
        assert result.removed_flower_id == newest.item.id
        assert [flower.type for flower in state.flowers] == ["rose"]
        assert state.variant_cycle_index is None
        assert state.couple_connection_level == 1


# ============================================================================
# Planting, refunds and landmarks
# ============================================================================

class TestPlanting:

    async def test_plant_needs_gold(self, engine):
        result = await engine.plant_flower_at_position(ALICE, BOB, "rose", 100, 100)
        assert result.outcome == PlacementOutcome.INSUFFICIENT_FUNDS

    async def test_plant_and_refund(self, engine, memory_store, couple):
        await fund(memory_store, couple, ALICE, 50)
        await fund(memory_store, couple, BOB, 50)

        placed = await engine.plant_flower_at_position(ALICE, BOB, "tulip", 100, 100, flipped=True)
        assert placed.placed is True
        assert placed.item.flipped is True

        # Bob sees Alice's flower and cannot plant on top of it
        clash = await engine.plant_decor_at_position(BOB, ALICE, "pond", 100, 100)
        assert clash.outcome == PlacementOutcome.PLACEMENT_CONFLICT
        assert clash.conflicting_item_id == placed.item.id
        assert (await engine.get_wallet(BOB)).gold == 50

        refund = await engine.remove_all_plants_with_refund(ALICE, BOB)
        assert refund.refund == 3
        assert (await engine.get_wallet(ALICE)).gold == 50 - 5 + 3

    async def test_refund_goes_to_caller(self, engine, memory_store, couple):
        await fund(memory_store, couple, ALICE, 30)
        await engine.plant_landmark_at_position(ALICE, BOB, "windmill", 10, 10)

        result = await engine.remove_all_landmarks_with_refund(BOB, ALICE)

        assert result.refund == 18
        assert (await engine.get_wallet(BOB)).gold == 18
        assert (await engine.get_wallet(ALICE)).gold == 0

    async def test_decor_refund(self, engine, memory_store, couple):
        await fund(memory_store, couple, BOB, 20)
        await engine.plant_decor_at_position(BOB, ALICE, "birdbath", 200, 200)
        assert (await engine.remove_all_decor_with_refund(BOB, ALICE)).refund == 12

    async def test_landmark_lifecycle(self, engine, memory_store, couple):
        await fund(memory_store, couple, ALICE, 60)
        mountain = (await engine.plant_landmark_at_position(ALICE, BOB, "mountain", 100, 100)).item
        windmill = (await engine.plant_landmark_at_position(ALICE, BOB, "windmill", 100, 100)).item

        moved = await engine.update_landmark_position(BOB, ALICE, mountain.id, 200, 50)
        assert moved.landmark.x == 200

        front = await engine.move_landmark_to_front(BOB, ALICE, mountain.id)
        assert front.landmark.z_index > windmill.z_index
        back = await engine.move_landmark_to_back(ALICE, BOB, mountain.id)
        assert back.landmark.z_index < windmill.z_index

        deleted = await engine.delete_landmark(ALICE, BOB, windmill.id)
        assert deleted.outcome == LandmarkOutcome.DELETED
        missing = await engine.delete_landmark(ALICE, BOB, windmill.id)
        assert missing.outcome == LandmarkOutcome.NOT_FOUND

        state = await engine.get_state(ALICE, BOB)
        assert [lm.id for lm in state.landmarks] == [mountain.id]


# ============================================================================
# Subscriptions and publishing
# ============================================================================

class TestSubscribe:

    async def test_current_state_then_changes(self, engine):
        await earn_water(engine)
        seen = []
        subscription = await engine.subscribe(BOB, ALICE, seen.append)
        assert seen
        assert seen[-1].watered_by_today == set()

        await engine.water(ALICE, BOB)
        assert seen[-1].watered_by_today == {ALICE}

        await subscription.unsubscribe()
        await engine.water(BOB, ALICE)
        assert ALICE in seen[-1].watered_by_today and BOB not in seen[-1].watered_by_today

    async def test_new_subscriber_sees_todays_bucket(self, engine, clock):
        await earn_water(engine)
        await engine.water(ALICE, BOB)
        clock.advance(hours=20)

        seen = []
        await engine.subscribe(BOB, ALICE, seen.append)

        assert seen[-1].day_key == "2026-03-03"
        assert seen[-1].watered_by_today == set()

    async def test_rejected_commands_are_not_published(self, engine):
        seen = []
        await engine.subscribe(ALICE, BOB, seen.append)
        delivered = len(seen)
        await engine.plant_flower_at_position(ALICE, BOB, "rose", 100, 100)
        assert len(seen) == delivered


class _BrokenFeed(ChangeFeed):

    async def publish(self, state):
        raise ChangeFeedError("relay down")

    async def subscribe(self, couple_key, on_change):
        raise ChangeFeedError("relay down")


class TestPublishFailure:

    async def test_commit_survives_feed_outage(self, rules, clock):
        store = InMemoryGardenStore(change_feed=_BrokenFeed(), rules=rules, clock=clock)
        engine = SharedGardenEngine(store, rules=rules, clock=clock)
        await earn_water(engine)

        result = await engine.water(ALICE, BOB)

        assert result.watered is True
        assert (await engine.get_state(ALICE, BOB)).watered_by_today == {ALICE}

    async def test_subscribe_error_propagates(self, rules, clock):
        store = InMemoryGardenStore(change_feed=_BrokenFeed(), rules=rules, clock=clock)
        engine = SharedGardenEngine(store, rules=rules, clock=clock)
        with pytest.raises(ChangeFeedError):
            await engine.subscribe(ALICE, BOB, lambda state: None)
