"""Tests for the command and query handlers."""

from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.modules.shared_garden.application.commands.garden_commands import (
    AcknowledgeHarmonyCommand,
    CoupleCommand,
    LandmarkAction,
    LandmarkActionCommand,
    PlantItemCommand,
    RemoveAllWithRefundCommand,
    UpdateLandmarkPositionCommand,
    WaterGardenCommand,
)
from app.modules.shared_garden.application.handlers.command_handlers import GardenCommandHandler
from app.modules.shared_garden.application.handlers.query_handlers import GardenQueryHandler
from app.modules.shared_garden.domain.models.catalog import PlacementCategory
from app.modules.shared_garden.domain.models.outcomes import LandmarkOutcome, PlacementOutcome
from app.modules.shared_garden.domain.services.health import GrowthStage, HealthState

from conftest import ALICE, BOB, earn_water


@pytest.fixture
def commands(engine):
    return GardenCommandHandler(engine)


@pytest.fixture
def queries(engine):
    return GardenQueryHandler(engine)


async def grant(memory_store, couple, user_id, gold):
    await memory_store.update(couple, lambda tx: tx.wallet(user_id).credit(gold))


class TestCommands:

    def test_commands_are_immutable(self):
        command = WaterGardenCommand(user_id=ALICE, partner_id=BOB)
        with pytest.raises(PydanticValidationError):
            command.user_id = "mallory"

    def test_blank_ids_rejected(self):
        with pytest.raises(PydanticValidationError):
            WaterGardenCommand(user_id="", partner_id=BOB)

    async def test_unknown_command_type(self, commands):
        with pytest.raises(TypeError):
            await commands.handle(CoupleCommand(user_id=ALICE, partner_id=BOB))

    async def test_water_command(self, commands, engine):
        await earn_water(engine)
        result = await commands.handle(WaterGardenCommand(user_id=ALICE, partner_id=BOB))
        assert result.watered is True

    @pytest.mark.parametrize("category,item_type", [
        (PlacementCategory.FLOWER, "rose"),
        (PlacementCategory.DECOR, "pond"),
        (PlacementCategory.LANDMARK, "windmill"),
    ])
    async def test_plant_routes_by_category(self, commands, memory_store, couple, category, item_type):
        await grant(memory_store, couple, ALICE, 100)
        result = await commands.handle(PlantItemCommand(
            user_id=ALICE, partner_id=BOB, category=category, type=item_type, x=200, y=200,
        ))
        assert result.outcome == PlacementOutcome.PLACED

        refund = await commands.handle(RemoveAllWithRefundCommand(user_id=ALICE, partner_id=BOB, category=category))
        assert refund.removed_count == 1

    async def test_landmark_commands(self, commands, memory_store, couple):
        await grant(memory_store, couple, ALICE, 30)
        placed = await commands.handle(PlantItemCommand(
            user_id=ALICE, partner_id=BOB, category=PlacementCategory.LANDMARK, type="mountain", x=10, y=10,
        ))
        landmark_id = placed.item.id

        moved = await commands.handle(UpdateLandmarkPositionCommand(
            user_id=BOB, partner_id=ALICE, landmark_id=landmark_id, x=50, y=60,
        ))
        assert (moved.landmark.x, moved.landmark.y) == (50, 60)

        for action in (LandmarkAction.MOVE_TO_FRONT, LandmarkAction.MOVE_TO_BACK, LandmarkAction.DELETE):
            result = await commands.handle(LandmarkActionCommand(
                user_id=BOB, partner_id=ALICE, landmark_id=landmark_id, action=action,
            ))
            assert result.outcome != LandmarkOutcome.NOT_FOUND


class TestQueries:

    async def test_garden_view(self, queries, commands, engine, memory_store, couple, clock):
        await earn_water(engine)
        await grant(memory_store, couple, ALICE, 50)
        await commands.handle(PlantItemCommand(
            user_id=ALICE, partner_id=BOB, category=PlacementCategory.FLOWER, type="apple_tree", x=100, y=100,
        ))
        await commands.handle(WaterGardenCommand(user_id=ALICE, partner_id=BOB))
        clock.advance(hours=1)

        view = await queries.get_garden_view(ALICE, BOB)

        assert view.garden.couple_key == "alice_bob"
        assert view.status.health == HealthState.FRESH
        assert view.status.flower_count == 1
        assert view.watering.can_water is False
        assert view.watering.too_soon is True
        assert list(view.growth.values()) == [GrowthStage.SAPLING]
        assert view.wallet.user_id == ALICE
        assert view.wallet.gold == 30
        assert view.generated_at == clock()

    async def test_partner_view_shows_pending_bonus(self, queries, commands, engine):
        await earn_water(engine)
        await commands.handle(WaterGardenCommand(user_id=ALICE, partner_id=BOB))
        await commands.handle(WaterGardenCommand(user_id=BOB, partner_id=ALICE))
        await commands.handle(AcknowledgeHarmonyCommand(user_id=ALICE, partner_id=BOB))

        alice_view = await queries.get_garden_view(ALICE, BOB)
        bob_view = await queries.get_garden_view(BOB, ALICE)

        assert alice_view.has_pending_harmony_bonus is False
        assert bob_view.has_pending_harmony_bonus is True
        assert bob_view.watering.already_watered_today is True

    async def test_status_query(self, queries, engine, clock):
        await engine.get_state(ALICE, BOB)
        clock.advance(hours=13)
        status = await queries.get_status(BOB, ALICE)
        assert status.health == HealthState.WILTING
        assert status.hours_since_interaction == pytest.approx(13)

    async def test_build_view_at_explicit_moment(self, queries, engine, clock):
        state = await engine.get_state(ALICE, BOB)
        wallet = await engine.get_wallet(ALICE)
        later = clock() + timedelta(hours=25)
        view = queries.build_view(state, wallet, ALICE, now=later)
        assert view.status.needs_punishment is True
