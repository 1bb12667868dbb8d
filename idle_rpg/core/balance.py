"""Stage Balance Analysis.

Compares a player's power with stage requirements and previews the stage
boss fight. Reference players are read from the same breakpoint curves
the stage generator uses.
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ..combat.combatant import CombatantStats
from ..combat.simulation import BattlePreview, simulate_battle
from .curves import interpolate
from .stage_generator import get_stage_info

logger = logging.getLogger(__name__)

# Default analysis points across the stage range
ANALYSIS_STAGES = [1, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100]


class BalanceRating(Enum):
    """How a player's power compares with a stage's requirements."""

    TOO_HARD = "too_hard"
    SLIGHTLY_HARD = "slightly_hard"
    BALANCED = "balanced"
    SLIGHTLY_EASY = "slightly_easy"
    TOO_EASY = "too_easy"


@dataclass
class StageBalance:
    """Balance report for one stage."""

    stage: int
    player_attack: int
    player_defense: int
    required_attack: int
    required_defense: int
    boss_hp: int
    attack_ratio: float
    defense_ratio: float
    rating: BalanceRating
    preview: BattlePreview


def reference_player(stage: int) -> CombatantStats:
    """A player geared exactly to the stage's requirements."""
    info = get_stage_info(stage)
    return CombatantStats(
        attack=info.required_attack,
        defense=info.required_defense,
        defense_penetration=math.floor(interpolate(info.stage, "reference_penetration")),
    )


def rate_balance(attack_ratio: float, defense_ratio: float) -> BalanceRating:
    """Classify power ratios (player / requirement)."""
    if attack_ratio < 0.8 or defense_ratio < 0.8:
        return BalanceRating.TOO_HARD
    if attack_ratio > 2.0 or defense_ratio > 2.0:
        return BalanceRating.TOO_EASY
    if attack_ratio < 1.0 or defense_ratio < 1.0:
        return BalanceRating.SLIGHTLY_HARD
    if attack_ratio > 1.5 or defense_ratio > 1.5:
        return BalanceRating.SLIGHTLY_EASY
    return BalanceRating.BALANCED


def analyze_stage(
    stage: int,
    player: Optional[CombatantStats] = None,
    rng: Optional[random.Random] = None,
) -> StageBalance:
    """
    Analyze one stage.

    Args:
        stage: Stage to analyze.
        player: Player to compare; defaults to the stage's reference player.
        rng: Random source for the boss fight preview.

    Returns:
        StageBalance report.
    """
    info = get_stage_info(stage)
    player = player or reference_player(info.stage)
    attack_ratio = player.attack / info.required_attack
    defense_ratio = player.defense / info.required_defense
    rating = rate_balance(attack_ratio, defense_ratio)
    logger.debug(
        "analyze.stage: stage=%s attack_ratio=%.2f defense_ratio=%.2f rating=%s",
        info.stage, attack_ratio, defense_ratio, rating.value,
    )

    return StageBalance(
        stage=info.stage,
        player_attack=player.attack,
        player_defense=player.defense,
        required_attack=info.required_attack,
        required_defense=info.required_defense,
        boss_hp=info.boss.max_hp,
        attack_ratio=attack_ratio,
        defense_ratio=defense_ratio,
        rating=rating,
        preview=simulate_battle(info.boss, player, rng=rng or random.Random(info.stage)),
    )


def analyze_stage_balance(
    stages: Optional[Iterable[int]] = None,
    player: Optional[CombatantStats] = None,
) -> List[StageBalance]:
    """Analyze several stages (ANALYSIS_STAGES by default)."""
    return [analyze_stage(stage, player) for stage in (stages or ANALYSIS_STAGES)]
