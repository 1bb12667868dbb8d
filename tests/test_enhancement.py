"""Tests for the enhancement system."""

import random

import pytest

from idle_rpg.config import settings
from idle_rpg.core.enhancement import (
    DEFAULT_DESTRUCTION_RULE,
    NO_DESTRUCTION,
    EnhancementOutcome,
    EnhancementSystem,
    apply_enhancement_result,
    calculate_enhancement_cost,
    get_level_efficiency,
    get_stat_gain,
    get_success_rate,
    recalculate_bonus_stats,
)
from idle_rpg.data.models import ItemGrade, ItemStats, ItemType
from idle_rpg.errors import (
    DestructionPreventionUnavailable,
    InsufficientFunds,
    InvalidItemState,
    MaxLevelReached,
)

RICH = 10**9


class TestCurves:
    """Tests for cost, success rate and stat gain curves."""

    def test_costs(self):
        assert calculate_enhancement_cost(1, ItemGrade.COMMON) == 200
        assert calculate_enhancement_cost(5, ItemGrade.COMMON) == 600
        assert calculate_enhancement_cost(6, ItemGrade.COMMON) == 450
        assert calculate_enhancement_cost(11, ItemGrade.COMMON) == 700
        assert calculate_enhancement_cost(12, ItemGrade.COMMON) == 800
        assert calculate_enhancement_cost(12, ItemGrade.RARE) == 1040
        assert calculate_enhancement_cost(1, ItemGrade.LEGENDARY) == 440

    def test_cost_grows_past_guaranteed_range(self):
        costs = [calculate_enhancement_cost(level, ItemGrade.EPIC) for level in range(12, 26)]
        assert all(a < b for a, b in zip(costs, costs[1:]))

    def test_grade_multiplier_ordering(self):
        for level in (1, 8, 12, 20, 25):
            costs = [calculate_enhancement_cost(level, g) for g in ItemGrade]
            assert costs == sorted(costs)

    def test_success_rates(self):
        assert all(get_success_rate(level) == 1.0 for level in range(1, 12))
        assert get_success_rate(12) == 0.90
        assert get_success_rate(25) == 0.25
        assert get_success_rate(30) == 0.25
        rates = [get_success_rate(level) for level in range(1, 26)]
        assert all(a >= b for a, b in zip(rates, rates[1:]))

    def test_level_efficiency(self):
        assert get_level_efficiency(1) == 0.6
        assert get_level_efficiency(6) == pytest.approx(0.8)
        assert get_level_efficiency(12) == 1.5
        assert get_level_efficiency(25) == pytest.approx(8.5)

    def test_flat_stat_gain(self):
        assert get_stat_gain(1, ItemGrade.COMMON, ItemType.MAIN_WEAPON) == ItemStats(attack=1)
        assert get_stat_gain(12, ItemGrade.COMMON, ItemType.MAIN_WEAPON) == ItemStats(attack=4)
        assert get_stat_gain(25, ItemGrade.LEGENDARY, ItemType.MAIN_WEAPON) == ItemStats(attack=102)
        assert get_stat_gain(1, ItemGrade.COMMON, ItemType.HELMET) == ItemStats(defense=1)
        assert get_stat_gain(1, ItemGrade.COMMON, ItemType.RING) == ItemStats(defense_penetration=1)

    def test_percent_stat_gain_has_floor(self):
        gain = get_stat_gain(1, ItemGrade.COMMON, ItemType.GLOVES)
        assert gain.additional_attack_chance == pytest.approx(0.001)
        assert gain.attack == 0

    def test_no_gain_without_base_value(self):
        assert get_stat_gain(5, ItemGrade.EPIC, ItemType.MAIN_WEAPON, ItemStats()).is_zero

    def test_gain_non_decreasing_in_level(self):
        for item_type in ItemType:
            gains = [get_stat_gain(level, ItemGrade.RARE, item_type) for level in range(1, 26)]
            stat_values = [sum(g.get(s) for s in ("attack", "defense", "defense_penetration")) for g in gains]
            assert all(a <= b for a, b in zip(stat_values, stat_values[1:]))

    def test_recalculate_bonus_stats(self, make_item):
        item = make_item(level=3).model_copy(update={"bonus_stats": ItemStats()})
        assert recalculate_bonus_stats(item).bonus_stats == ItemStats(attack=3)


class TestEnhancementInfo:
    """Tests for attempt previews."""

    def test_info_for_fresh_item(self, make_item):
        info = EnhancementSystem(random.Random(42)).get_enhancement_info(make_item())
        assert info.cost == 200
        assert info.success_rate == 1.0
        assert info.destruction_rate == 0.0
        assert info.new_level == 1
        assert info.stat_gain == ItemStats(attack=1)
        assert info.prevention_cost == 0

    def test_info_with_prevention(self, make_item):
        info = EnhancementSystem(random.Random(42)).get_enhancement_info(make_item(level=20))
        assert info.destruction_rate == 0.07
        assert info.prevention_cost == 500_000

    def test_max_level(self, make_item):
        with pytest.raises(MaxLevelReached) as exc:
            EnhancementSystem().get_enhancement_info(make_item(level=25))
        assert exc.value.level == 25

    def test_can_enhance(self, make_item):
        system = EnhancementSystem(random.Random(42))
        assert system.can_enhance(make_item(), 200)
        assert not system.can_enhance(make_item(), 199)
        assert not system.can_enhance(make_item(level=25), RICH)
        assert not system.can_enhance(make_item(level=19), RICH, use_destruction_prevention=True)
        assert not system.can_enhance(None, RICH)


class TestAttempt:
    """Tests for single-draw enhancement outcomes."""

    def test_guaranteed_success(self, make_item):
        item = make_item()
        attempt = EnhancementSystem(random.Random(42)).attempt(item, 1000)
        assert attempt.outcome == EnhancementOutcome.SUCCESS
        assert attempt.previous_level == 0
        assert attempt.new_level == 1
        assert attempt.credits_paid == 200
        assert attempt.stat_delta == ItemStats(attack=1)
        assert attempt.item_id == item.id

        updated = apply_enhancement_result(item, attempt)
        assert updated.enhancement_level == 1
        assert updated.bonus_stats == ItemStats(attack=1)
        assert updated.id == item.id
        assert item.enhancement_level == 0

    def test_failure_below_downgrade_level(self, make_item, scripted_rng):
        item = make_item(level=11)
        attempt = EnhancementSystem(scripted_rng([0.95])).attempt(item, RICH)
        assert attempt.outcome == EnhancementOutcome.FAILURE
        assert attempt.new_level == 11
        assert attempt.stat_delta.is_zero
        assert apply_enhancement_result(item, attempt).enhancement_level == 11

    def test_downgrade_removes_last_gain(self, make_item, scripted_rng):
        item = make_item(level=15)
        attempt = EnhancementSystem(scripted_rng([0.99])).attempt(item, RICH)
        assert attempt.outcome == EnhancementOutcome.DOWNGRADE
        assert attempt.new_level == 14
        assert attempt.stat_delta == -get_stat_gain(15, ItemGrade.COMMON, ItemType.MAIN_WEAPON)

        downgraded = apply_enhancement_result(item, attempt)
        assert downgraded.enhancement_level == 14
        assert downgraded.bonus_stats == make_item(level=14).bonus_stats

    def test_destruction(self, make_item, scripted_rng):
        item = make_item(level=19)
        system = EnhancementSystem(scripted_rng([0.52]), DEFAULT_DESTRUCTION_RULE)
        attempt = system.attempt(item, RICH)
        assert attempt.outcome == EnhancementOutcome.DESTRUCTION
        assert attempt.destroyed
        assert apply_enhancement_result(item, attempt) is None

    def test_no_destruction_rule_downgrades_instead(self, make_item, scripted_rng):
        item = make_item(level=19)
        attempt = EnhancementSystem(scripted_rng([0.52]), NO_DESTRUCTION).attempt(item, RICH)
        assert attempt.outcome == EnhancementOutcome.DOWNGRADE
        assert attempt.new_level == 18

    def test_destruction_disabled_by_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "DESTRUCTION_ENABLED", False)
        assert EnhancementSystem().destruction_rule == NO_DESTRUCTION

    def test_prevention_turns_destruction_into_downgrade(self, make_item, scripted_rng):
        item = make_item(level=20)
        attempt = EnhancementSystem(scripted_rng([0.46]), DEFAULT_DESTRUCTION_RULE).attempt(
            item, RICH, use_destruction_prevention=True
        )
        assert attempt.outcome == EnhancementOutcome.DOWNGRADE
        assert attempt.destruction_prevented
        assert attempt.credits_paid == calculate_enhancement_cost(21, ItemGrade.COMMON) + 500_000

    def test_same_roll_without_prevention_destroys(self, make_item, scripted_rng):
        item = make_item(level=20)
        attempt = EnhancementSystem(scripted_rng([0.46]), DEFAULT_DESTRUCTION_RULE).attempt(item, RICH)
        assert attempt.destroyed

    def test_attempt_reads_enhancement_info_once(self, make_item, scripted_rng, monkeypatch):
        system = EnhancementSystem(scripted_rng([0.46]), DEFAULT_DESTRUCTION_RULE)
        calls = []
        original = system.get_enhancement_info

        def counting_info(item):
            calls.append(item.id)
            return original(item)

        monkeypatch.setattr(system, "get_enhancement_info", counting_info)
        attempt = system.attempt(make_item(level=20), RICH, use_destruction_prevention=True)
        assert len(calls) == 1
        assert attempt.credits_paid == calculate_enhancement_cost(21, ItemGrade.COMMON) + 500_000

    def test_prevention_unavailable_below_min_level(self, make_item):
        with pytest.raises(DestructionPreventionUnavailable):
            EnhancementSystem().attempt(make_item(level=19), RICH, use_destruction_prevention=True)

    def test_insufficient_funds(self, make_item):
        with pytest.raises(InsufficientFunds) as exc:
            EnhancementSystem().attempt(make_item(), 100)
        assert exc.value.required == 200
        assert exc.value.available == 100

    def test_invalid_item(self):
        with pytest.raises(InvalidItemState):
            EnhancementSystem().attempt({"id": "x"}, RICH)
        with pytest.raises(InvalidItemState):
            EnhancementSystem().attempt(None, RICH)

    def test_stale_attempt_rejected(self, make_item):
        item = make_item(level=3)
        attempt = EnhancementSystem(random.Random(42)).attempt(item, RICH)
        with pytest.raises(InvalidItemState):
            apply_enhancement_result(make_item(level=5), attempt)

    def test_enhance_applies(self, make_item):
        result = EnhancementSystem(random.Random(42)).enhance(make_item(level=2), RICH)
        assert result["attempt"].outcome == EnhancementOutcome.SUCCESS
        assert result["item"].enhancement_level == 3

    def test_seeded_runs_reproducible(self, make_item):
        def run(seed):
            system = EnhancementSystem(random.Random(seed))
            item = make_item(level=11, item_id="fixed")
            outcomes = []
            for _ in range(30):
                if item is None or item.is_max_level:
                    break
                attempt = system.attempt(item, RICH)
                outcomes.append(attempt.outcome)
                item = apply_enhancement_result(item, attempt)
            return outcomes

        assert run(42) == run(42)
