"""Tests for damage calculation."""

import random

import pytest

from idle_rpg.combat.combatant import CombatantStats
from idle_rpg.combat.damage import (
    apply_critical,
    calculate_additional_attack_chance,
    calculate_damage,
    calculate_damage_reduction,
    calculate_player_max_hp,
    resolve_attack,
    roll_additional_attack,
)
from idle_rpg.config import settings


class TestDamageFormula:
    """Tests for the defense reduction formula."""

    def test_reduction_with_penetration(self):
        assert calculate_damage_reduction(0) == 0.0
        assert calculate_damage_reduction(100) == pytest.approx(0.5)
        assert calculate_damage_reduction(108, 8) == pytest.approx(0.5)
        # Penetration past defense does not go negative
        assert calculate_damage_reduction(5, 50) == 0.0

    def test_known_values(self):
        assert calculate_damage(20, 8, 5) == 19
        assert calculate_damage(15, 10) == 13
        assert calculate_damage(10, 3) == 9
        assert calculate_damage(100, 0) == 100

    def test_minimum_damage_floor(self):
        assert calculate_damage(100, 1_000_000) == 10

    def test_non_increasing_in_defense(self):
        values = [calculate_damage(500, d) for d in range(0, 2000, 7)]
        assert all(a >= b for a, b in zip(values, values[1:]))
        assert calculate_damage(500, 100) < calculate_damage(500, 50)

    def test_non_decreasing_in_penetration(self):
        values = [calculate_damage(500, 300, p) for p in range(0, 400, 5)]
        assert all(a <= b for a, b in zip(values, values[1:]))

    def test_non_decreasing_in_attack(self):
        values = [calculate_damage(a, 150, 20) for a in range(0, 1000, 3)]
        assert all(a <= b for a, b in zip(values, values[1:]))


class TestCriticalAndExtraAttacks:
    """Tests for random rolls in attack resolution."""

    def test_apply_critical(self):
        assert apply_critical(19, 1.0) == 38
        assert apply_critical(10, 0.5) == 15

    def test_no_critical_chance_draws_nothing(self, scripted_rng):
        rng = scripted_rng([])
        roll = resolve_attack(20, 8, 5, rng=rng)
        assert roll.damage == 19
        assert not roll.is_critical

    def test_critical_hit(self, scripted_rng):
        rng = scripted_rng([0.0])
        roll = resolve_attack(20, 8, 5, critical_chance=0.5, critical_damage_multiplier=1.0, rng=rng)
        assert roll.is_critical
        assert roll.damage == 38
        assert rng.remaining == 0

    def test_critical_miss(self, scripted_rng):
        rng = scripted_rng([0.75])
        roll = resolve_attack(20, 8, 5, critical_chance=0.5, critical_damage_multiplier=1.0, rng=rng)
        assert not roll.is_critical
        assert roll.damage == 19

    def test_additional_attack_chance_is_capped(self):
        stats = CombatantStats(attack=10, defense=0, additional_attack_chance=5.0)
        assert calculate_additional_attack_chance(stats) == settings.MAX_ADDITIONAL_ATTACK_CHANCE

    def test_roll_additional_attack(self, scripted_rng):
        stats = CombatantStats(attack=10, defense=0, additional_attack_chance=0.25)
        assert roll_additional_attack(stats, scripted_rng([0.1]))
        assert not roll_additional_attack(stats, scripted_rng([0.3]))

    def test_zero_chance_never_draws(self, scripted_rng):
        stats = CombatantStats(attack=10, defense=0)
        assert not roll_additional_attack(stats, scripted_rng([]))

    def test_seeded_rolls_are_reproducible(self):
        stats = CombatantStats(attack=10, defense=0, additional_attack_chance=0.5)
        rng_a, rng_b = random.Random(42), random.Random(42)
        first = [roll_additional_attack(stats, rng_a) for _ in range(20)]
        second = [roll_additional_attack(stats, rng_b) for _ in range(20)]
        assert first == second
        assert True in first and False in first


class TestCombatantStats:
    """Tests for stat snapshots."""

    def test_player_max_hp(self):
        assert calculate_player_max_hp(CombatantStats(attack=20, defense=10)) == 120
        assert calculate_player_max_hp(CombatantStats(attack=0, defense=0)) == 100

    def test_negative_stats_rejected(self):
        with pytest.raises(ValueError):
            CombatantStats(attack=-1, defense=0)
        with pytest.raises(ValueError):
            CombatantStats(attack=1, defense=0, defense_penetration=-5)
