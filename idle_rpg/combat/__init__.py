"""Turn-based combat module.

This module provides:
- The shared damage formula with penetration, criticals and extra attacks
- An immutable battle state machine with pure transitions
- Single-battle previews and Monte Carlo win-rate simulation
"""

# Combatants
from .combatant import CombatantStats

# Damage
from .damage import (
    AttackRoll,
    calculate_damage,
    calculate_damage_reduction,
    resolve_attack,
    calculate_player_max_hp,
    calculate_additional_attack_chance,
)

# Battle state machine
from .battle import (
    BattleResult,
    BattleLogEntry,
    BattleState,
    BattleStats,
    LogEntryType,
    start_battle,
    apply_player_attack,
    apply_boss_attack,
    process_battle_turn,
    restart_battle,
    calculate_battle_stats,
)

# Simulation
from .simulation import (
    BattlePreview,
    BattleSimulator,
    SimulationSummary,
    simulate_battle,
)

__all__ = [
    "CombatantStats",
    "AttackRoll",
    "calculate_damage",
    "calculate_damage_reduction",
    "resolve_attack",
    "calculate_player_max_hp",
    "calculate_additional_attack_chance",
    "BattleResult",
    "BattleLogEntry",
    "BattleState",
    "BattleStats",
    "LogEntryType",
    "start_battle",
    "apply_player_attack",
    "apply_boss_attack",
    "process_battle_turn",
    "restart_battle",
    "calculate_battle_stats",
    "BattlePreview",
    "BattleSimulator",
    "SimulationSummary",
    "simulate_battle",
]
