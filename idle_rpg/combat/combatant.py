"""Combatant stat snapshots."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CombatantStats:
    """
    Immutable stat snapshot used for one combat resolution.

    Percent-style stats are fractions (0.05 = 5%). A critical hit deals
    base + base * critical_damage_multiplier.
    """

    attack: int
    defense: int
    defense_penetration: int = 0
    additional_attack_chance: float = 0.0
    critical_chance: float = 0.0
    critical_damage_multiplier: float = 0.0

    def __post_init__(self):
        if self.attack < 0 or self.defense < 0 or self.defense_penetration < 0:
            raise ValueError("Combatant stats cannot be negative")
