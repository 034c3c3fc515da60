"""Tests for watering, harmony and streaks.

Watering functions mutate a GardenState and wallets in place, the same way
they run inside a store transaction.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.modules.shared_garden.domain.models.garden import Wallet
from app.modules.shared_garden.domain.models.rules import GardenRules
from app.modules.shared_garden.domain.services.watering import (
    acknowledge_harmony_bonus,
    advance_streak,
    can_water,
    water,
)

from conftest import ALICE, BOB, START


# ============================================================================
# Cooldown Guard Tests
# ============================================================================

class TestCooldownGuard:
    """Cooldown and daily uniqueness are separate rejection reasons."""

    def test_first_watering_succeeds(self, garden, wallets, rules):
        result = water(garden, wallets, ALICE, BOB, START, rules)
        assert result.watered is True
        assert result.harmony_bonus is False
        assert garden.watered_by_today == {ALICE}
        assert garden.last_watered_by_user[ALICE] == START
        assert garden.last_successful_interaction == START

    def test_second_watering_same_hour_reports_both_reasons(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        result = water(garden, wallets, ALICE, BOB, START + timedelta(hours=1), rules)
        assert result.watered is False
        assert result.too_soon_to_water is True
        assert result.already_watered_today is True

    def test_after_cooldown_same_day_only_daily_rule_applies(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        result = water(garden, wallets, ALICE, BOB, START + timedelta(hours=7), rules)
        assert result.too_soon_to_water is False
        assert result.already_watered_today is True

    def test_new_day_inside_cooldown_only_cooldown_applies(self, garden, wallets, rules):
        late_evening = datetime(2026, 3, 2, 22, 0, tzinfo=timezone.utc)
        water(garden, wallets, ALICE, BOB, late_evening, rules)
        result = water(garden, wallets, ALICE, BOB, late_evening + timedelta(hours=4), rules)
        assert result.too_soon_to_water is True
        assert result.already_watered_today is False

    def test_rejection_makes_no_mutation(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        before = garden.model_dump()
        water(garden, wallets, ALICE, BOB, START + timedelta(hours=1), rules)
        assert garden.model_dump() == before

    def test_day_rollover_resets_watered_set(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        next_day = START + timedelta(hours=23)
        result = water(garden, wallets, BOB, ALICE, next_day, rules)
        assert result.harmony_bonus is False
        assert garden.watered_by_today == {BOB}
        assert garden.day_key == "2026-03-03"

    def test_can_water_ignores_stale_day_bucket(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        eligibility = can_water(garden, ALICE, START + timedelta(days=1), rules)
        assert eligibility.can_water is True

    def test_wilted_garden_cannot_be_watered(self, garden, wallets, rules):
        result = water(garden, wallets, ALICE, BOB, START + timedelta(hours=30), rules)
        assert result.watered is False
        assert result.is_wilted is True
        assert result.punishment_applied is True
        assert ALICE not in garden.watered_by_today

    def test_watering_spends_a_water_drop(self, garden, rules):
        assert rules.watering_water_cost == 1
        wallets = {ALICE: Wallet(user_id=ALICE), BOB: Wallet(user_id=BOB)}
        before = garden.model_dump()

        result = water(garden, wallets, ALICE, BOB, START, rules)
        assert result.not_enough_water is True
        assert result.watered is False
        assert garden.model_dump() == before

        wallets[ALICE].water = 2
        result = water(garden, wallets, ALICE, BOB, START, rules)
        assert result.watered is True
        assert wallets[ALICE].water == 1

    def test_free_watering_when_cost_disabled(self, garden):
        wallets = {ALICE: Wallet(user_id=ALICE), BOB: Wallet(user_id=BOB)}
        result = water(garden, wallets, ALICE, BOB, START, GardenRules(watering_water_cost=0))
        assert result.watered is True
        assert wallets[ALICE].water == 0


# ============================================================================
# Harmony and Streak Tests
# ============================================================================

class TestHarmony:
    """Both partners watering on the same day."""

    def test_partner_watering_same_day_is_harmony(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        result = water(garden, wallets, BOB, ALICE, START + timedelta(hours=1), rules)

        assert result.harmony_bonus is True
        assert result.gold_earned == rules.harmony_bonus_gold
        assert result.active_streak_days == 1
        assert garden.pending_harmony_bonus_for == {ALICE, BOB}
        assert wallets[ALICE].gold == rules.harmony_bonus_gold
        assert wallets[BOB].gold == rules.harmony_bonus_gold

    def test_acknowledge_clears_only_caller(self, garden, wallets, rules):
        water(garden, wallets, ALICE, BOB, START, rules)
        water(garden, wallets, BOB, ALICE, START, rules)

        assert acknowledge_harmony_bonus(garden, ALICE) is True
        assert acknowledge_harmony_bonus(garden, ALICE) is False
        assert garden.pending_harmony_bonus_for == {BOB}

    def test_three_harmony_days_earn_streak_reward(self, garden, wallets, rules):
        results = []
        for day in range(3):
            morning = START + timedelta(days=day)
            water(garden, wallets, ALICE, BOB, morning, rules)
            results.append(water(garden, wallets, BOB, ALICE, morning + timedelta(hours=1), rules))

        assert [r.streak_reward for r in results] == [False, False, True]
        assert results[-1].gold_earned == rules.harmony_bonus_gold + rules.streak_reward_gold
        assert garden.active_streak_days == 3
        assert garden.couple_connection_level == 2
        assert wallets[ALICE].gold == 3 * rules.harmony_bonus_gold + rules.streak_reward_gold

    def test_gap_restarts_streak(self, garden, rules):
        garden.active_streak_days = 5
        garden.last_harmony_day_key = "2026-02-20"
        assert advance_streak(garden, START, rules) is False
        assert garden.active_streak_days == 1

    def test_consecutive_day_extends_streak(self, garden, rules):
        garden.active_streak_days = 2
        garden.last_harmony_day_key = "2026-03-01"
        assert advance_streak(garden, START, rules) is True
        assert garden.active_streak_days == 3

    def test_streak_counted_once_per_day(self, garden, rules):
        garden.last_harmony_day_key = "2026-03-02"
        garden.active_streak_days = 1
        assert advance_streak(garden, START, rules) is False
        assert garden.active_streak_days == 1


class TestDayBuckets:

    def test_day_key_follows_configured_timezone(self):
        """23:30 UTC is already the next day in Seoul."""
        moment = datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc)
        assert GardenRules().day_key(moment) == "2026-03-02"
        assert GardenRules(day_timezone="Asia/Seoul").day_key(moment) == "2026-03-03"

    def test_previous_day_key(self):
        assert GardenRules().previous_day_key(START) == "2026-03-01"

    @pytest.mark.parametrize("x,y,inside", [(0, 0, True), (430, 400, True), (-1, 10, False), (10, 401, False)])
    def test_within_canvas(self, x, y, inside):
        assert GardenRules().within_canvas(x, y) is inside
