"""Stage Difficulty Curves.

Every per-stage curve (requirements, boss stats, rewards) reads from one
ordered breakpoint table through a single interpolation function, so the
stage generator, boss generator and balance analysis cannot drift apart.
"""

import logging
import math
from typing import NamedTuple

from ..errors import UnknownStage
from .constants import (
    MIN_STAGE,
    MAX_STAGE,
    STAGE_SEGMENTS,
    BASE_TURN_LIMIT,
    TURN_LIMIT_DECAY,
    MIN_TURN_LIMIT,
    IDLE_DROP_BASE_RATE,
    IDLE_DROP_MAX_RATE,
)

logger = logging.getLogger(__name__)


class StageBreakpoint(NamedTuple):
    """Curve values pinned at one stage; stages in between are interpolated."""
    stage: int
    required_attack: float
    required_defense: float
    boss_attack: float
    boss_defense: float
    reference_penetration: float  # Penetration of expected gear at this stage
    hp_multiplier: float
    credit_multiplier: float
    clear_reward: float


# Ordered by stage. Growth per stage rises in later segments.
STAGE_BREAKPOINTS: tuple[StageBreakpoint, ...] = (
    StageBreakpoint(1,   10,   10,  6,   3,   0,   1.0,  1.0,   100),
    StageBreakpoint(5,   25,   22,  8,   6,   2,   1.0,  1.2,   500),
    StageBreakpoint(15,  80,   65,  18,  20,  8,   1.1,  2.2,   3_000),
    StageBreakpoint(30,  200,  150, 50,  50,  20,  1.2,  4.45,  15_000),
    StageBreakpoint(50,  420,  300, 140, 100, 45,  1.35, 8.45,  60_000),
    StageBreakpoint(75,  800,  560, 420, 160, 80,  1.5,  15.95, 200_000),
    StageBreakpoint(100, 1400, 950, 850, 220, 120, 1.8,  25.95, 500_000),
)

CURVE_COLUMNS = StageBreakpoint._fields[1:]


def clamp_stage(stage: int) -> int:
    """
    Clamp a stage number into the supported range.

    Args:
        stage: Requested stage.

    Returns:
        The nearest stage in MIN_STAGE..MAX_STAGE.
    """
    clamped = max(MIN_STAGE, min(MAX_STAGE, int(stage)))
    if clamped != stage:
        logger.warning("stage.clamp: requested=%s clamped=%s", stage, clamped)
    return clamped


def validate_stage(stage: int) -> int:
    """Return the stage unchanged or raise UnknownStage if it is out of range."""
    if not MIN_STAGE <= stage <= MAX_STAGE:
        raise UnknownStage(stage, MIN_STAGE, MAX_STAGE)
    return stage


def interpolate(stage: int, column: str) -> float:
    """
    Piecewise-linear value of a curve column at a stage.

    Args:
        stage: Stage number (clamped to the table's range).
        column: A StageBreakpoint field name, e.g. "required_attack".

    Returns:
        The interpolated value.
    """
    if column not in CURVE_COLUMNS:
        raise KeyError(f"Unknown curve column: {column}")

    first, last = STAGE_BREAKPOINTS[0], STAGE_BREAKPOINTS[-1]
    if stage <= first.stage:
        return getattr(first, column)
    if stage >= last.stage:
        return getattr(last, column)

    for lower, upper in zip(STAGE_BREAKPOINTS, STAGE_BREAKPOINTS[1:]):
        if lower.stage <= stage <= upper.stage:
            low_value = getattr(lower, column)
            high_value = getattr(upper, column)
            t = (stage - lower.stage) / (upper.stage - lower.stage)
            return low_value + (high_value - low_value) * t

    # Unreachable while the table is ordered
    raise ValueError(f"Stage {stage} not covered by breakpoints")


def segment_index(stage: int) -> int:
    """Index of the stage range (into STAGE_SEGMENTS) containing the stage."""
    stage = max(MIN_STAGE, min(MAX_STAGE, stage))
    for i, (low, high) in enumerate(STAGE_SEGMENTS):
        if low <= stage <= high:
            return i
    return len(STAGE_SEGMENTS) - 1


def raw_turn_limit(stage: int) -> float:
    """Unfloored turn limit; shrinks linearly with stage."""
    # Scaled to hundredths so whole-turn values stay exact under floor()
    raw = (BASE_TURN_LIMIT * 100 - round(TURN_LIMIT_DECAY * 100) * (stage - 1)) / 100
    return max(float(MIN_TURN_LIMIT), raw)


def turn_limit_for(stage: int) -> int:
    """
    Maximum number of player turns allowed at a stage.

    Starts at 30 and loses 0.15 turns per stage, never dropping below 15.
    """
    return max(MIN_TURN_LIMIT, math.floor(raw_turn_limit(stage)))


def calculate_idle_drop_base_rate(stage: int) -> float:
    """
    Gate probability for one idle drop check.

    Grows linearly from 0.1% at stage 1 to 0.2% at stage 100.
    """
    stage = max(MIN_STAGE, min(MAX_STAGE, stage))
    growth = (IDLE_DROP_MAX_RATE - IDLE_DROP_BASE_RATE) / (MAX_STAGE - MIN_STAGE)
    return IDLE_DROP_BASE_RATE + growth * (stage - MIN_STAGE)
