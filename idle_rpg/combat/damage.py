"""Damage System for turn-based combat.

Shared by player and boss attacks, the battle simulator, and boss HP
generation:
- Defense reduction with penetration
- Minimum damage floor (10% of attack)
- Critical strikes
- Additional attack rolls
"""

from dataclasses import dataclass
from typing import Optional
import logging
import math
import random

from ..config import settings
from ..core.constants import (
    DEFENSE_CONSTANT,
    MIN_DAMAGE_RATIO,
    PLAYER_BASE_HP,
    HP_PER_DEFENSE,
)
from .combatant import CombatantStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackRoll:
    """Outcome of resolving one attack."""

    damage: int
    is_critical: bool = False


def calculate_damage_reduction(defense: float, defense_penetration: float = 0) -> float:
    """
    Fraction of damage absorbed by defense after penetration.

    Approaches but never reaches 1.0.
    """
    effective_defense = max(0, defense - defense_penetration)
    return effective_defense / (effective_defense + DEFENSE_CONSTANT)


def calculate_damage(attack: int, defense: int, defense_penetration: int = 0) -> int:
    """
    Calculate damage for a single non-critical hit.

    Args:
        attack: Attacker's attack.
        defense: Target's defense.
        defense_penetration: Defense ignored by the attacker.

    Returns:
        Damage dealt, never below floor(attack * 0.1).
    """
    reduction = calculate_damage_reduction(defense, defense_penetration)
    minimum = math.floor(attack * MIN_DAMAGE_RATIO)
    reduced = math.floor(attack * (1 - reduction))
    return max(minimum, reduced)


def apply_critical(base_damage: int, critical_damage_multiplier: float) -> int:
    """Damage of a critical hit."""
    return math.floor(base_damage + base_damage * critical_damage_multiplier)


def resolve_attack(
    attacker_attack: int,
    defense: int,
    defense_penetration: int = 0,
    critical_chance: float = 0.0,
    critical_damage_multiplier: float = 0.0,
    rng: Optional[random.Random] = None,
) -> AttackRoll:
    """
    Resolve one attack, rolling for a critical hit when possible.

    The critical roll is only drawn when critical_chance > 0, so attackers
    without critical chance consume no random draws.

    Args:
        attacker_attack: Attacker's attack.
        defense: Target's defense.
        defense_penetration: Defense ignored by the attacker.
        critical_chance: Chance to critically strike (0.0-1.0).
        critical_damage_multiplier: Extra damage share on critical.
        rng: Random source.

    Returns:
        AttackRoll with final damage and critical flag.
    """
    damage = calculate_damage(attacker_attack, defense, defense_penetration)
    is_critical = False

    if critical_chance > 0:
        rng = rng or random.Random()
        if rng.random() < critical_chance:
            is_critical = True
            damage = apply_critical(damage, critical_damage_multiplier)

    logger.debug(
        "combat.attack: atk=%s def=%s pen=%s damage=%s crit=%s",
        attacker_attack, defense, defense_penetration, damage, is_critical,
    )
    return AttackRoll(damage=damage, is_critical=is_critical)


def calculate_player_max_hp(stats: CombatantStats) -> int:
    """Player HP at battle start: 100 + 2 per point of defense."""
    return PLAYER_BASE_HP + stats.defense * HP_PER_DEFENSE


def calculate_additional_attack_chance(stats: CombatantStats) -> float:
    """Additional attack chance capped at the configured maximum."""
    return max(0.0, min(settings.MAX_ADDITIONAL_ATTACK_CHANCE, stats.additional_attack_chance))


def roll_additional_attack(stats: CombatantStats, rng: random.Random) -> bool:
    """Roll for a second attack this turn; draws only when the chance is positive."""
    chance = calculate_additional_attack_chance(stats)
    if chance <= 0:
        return False
    return rng.random() < chance
