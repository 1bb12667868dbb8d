"""Stage Generator.

Builds the read-only StageInfo for each of the 100 stages: requirements,
boss, rewards and drop tables. All values come from the breakpoint curves
and the combat damage formula; output is deterministic.
"""

import logging
import math
from functools import lru_cache
from typing import Dict

from ..combat.damage import calculate_damage
from ..data.models.stage import BossDescriptor, DropRateTable, StageInfo, StageTheme
from .constants import (
    MIN_STAGE,
    MAX_STAGE,
    MIN_STAT,
    MIN_BOSS_HP,
    TARGET_TURN_RATIO,
    STAGE_CLEAR_DROP_RATES,
    IDLE_DROP_RATES,
    BOSS_NAMES,
    STAGE_THEMES,
    STAGES_PER_THEME,
)
from .curves import (
    clamp_stage,
    interpolate,
    raw_turn_limit,
    segment_index,
    turn_limit_for,
    validate_stage,
)

logger = logging.getLogger(__name__)


def _stat(stage: int, column: str) -> int:
    return max(MIN_STAT, math.floor(interpolate(stage, column)))


def calculate_stage_requirements(stage: int) -> Dict[str, int]:
    """Required attack and defense to be considered ready for a stage."""
    return {
        "required_attack": _stat(stage, "required_attack"),
        "required_defense": _stat(stage, "required_defense"),
    }


def calculate_boss_hp(stage: int) -> int:
    """
    Boss max HP for a stage.

    A reference player with the stage's required attack and the expected
    penetration should need TARGET_TURN_RATIO of the turn limit to win,
    scaled by the stage's HP multiplier.
    """
    boss_defense = _stat(stage, "boss_defense")
    reference_attack = _stat(stage, "required_attack")
    reference_penetration = math.floor(interpolate(stage, "reference_penetration"))

    per_turn = calculate_damage(reference_attack, boss_defense, reference_penetration)
    target_turns = TARGET_TURN_RATIO * raw_turn_limit(stage)
    hp = per_turn * target_turns * interpolate(stage, "hp_multiplier")
    return max(MIN_BOSS_HP, math.floor(hp))


def calculate_boss_stats(stage: int) -> Dict[str, int]:
    """Boss max HP, attack and defense for a stage."""
    return {
        "max_hp": calculate_boss_hp(stage),
        "attack": _stat(stage, "boss_attack"),
        "defense": _stat(stage, "boss_defense"),
    }


def calculate_credit_multiplier(stage: int) -> float:
    """Credit rate multiplier unlocked by clearing a stage."""
    return round(interpolate(stage, "credit_multiplier"), 4)


def calculate_clear_reward(stage: int) -> int:
    """One-time credit reward for clearing a stage."""
    return math.floor(interpolate(stage, "clear_reward"))


def calculate_drop_rates(stage: int) -> Dict[str, DropRateTable]:
    """Stage-clear and idle grade tables for the stage's range."""
    index = segment_index(stage)
    return {
        "stage_clear": DropRateTable.from_sequence(*STAGE_CLEAR_DROP_RATES[index]),
        "idle": DropRateTable.from_sequence(*IDLE_DROP_RATES[index]),
    }


def generate_boss_name(stage: int) -> str:
    """Boss name for a stage."""
    if MIN_STAGE <= stage <= len(BOSS_NAMES):
        return BOSS_NAMES[stage - 1]
    return f"Boss {stage}"


def get_stage_theme(stage: int) -> StageTheme:
    """Theme for the band of ten stages containing this one."""
    stage = max(MIN_STAGE, min(MAX_STAGE, stage))
    index = min((stage - 1) // STAGES_PER_THEME, len(STAGE_THEMES) - 1)
    theme, description, color = STAGE_THEMES[index]
    return StageTheme(theme=theme, description=description, color=color)


def generate_boss(stage: int) -> BossDescriptor:
    """Boss descriptor for a stage."""
    stats = calculate_boss_stats(stage)
    return BossDescriptor(
        name=generate_boss_name(stage),
        max_hp=stats["max_hp"],
        attack=stats["attack"],
        defense=stats["defense"],
        stage=stage,
    )


@lru_cache(maxsize=None)
def stage_info(stage: int) -> StageInfo:
    """
    Generate the StageInfo for a stage.

    Args:
        stage: Stage number in 1..100.

    Returns:
        StageInfo for the stage.

    Raises:
        UnknownStage: If the stage is outside 1..100.
    """
    validate_stage(stage)
    requirements = calculate_stage_requirements(stage)
    drop_rates = calculate_drop_rates(stage)

    info = StageInfo(
        stage=stage,
        required_attack=requirements["required_attack"],
        required_defense=requirements["required_defense"],
        credit_multiplier=calculate_credit_multiplier(stage),
        turn_limit=turn_limit_for(stage),
        clear_reward=calculate_clear_reward(stage),
        stage_clear_drop_rates=drop_rates["stage_clear"],
        idle_drop_rates=drop_rates["idle"],
        boss=generate_boss(stage),
    )
    logger.debug(
        "stage.generate: stage=%s req_atk=%s req_def=%s boss_hp=%s",
        stage, info.required_attack, info.required_defense, info.boss.max_hp,
    )
    return info


def get_stage_info(stage: int, strict: bool = False) -> StageInfo:
    """
    Look up a stage, clamping out-of-range requests by default.

    Args:
        stage: Requested stage.
        strict: Raise UnknownStage instead of clamping.

    Returns:
        StageInfo for the (possibly clamped) stage.
    """
    if strict:
        validate_stage(stage)
        return stage_info(stage)
    return stage_info(clamp_stage(stage))


@lru_cache(maxsize=1)
def generate_all_stages() -> Dict[int, StageInfo]:
    """StageInfo for every stage, keyed by stage number."""
    return {stage: stage_info(stage) for stage in range(MIN_STAGE, MAX_STAGE + 1)}
