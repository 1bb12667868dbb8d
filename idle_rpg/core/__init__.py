# Core progression modules.
# Only dependency-free modules are re-exported here; the stage generator,
# enhancement, loot and valuation engines are imported from their modules.
from .constants import (
    MIN_STAGE,
    MAX_STAGE,
    STAGE_SEGMENTS,
    MIN_STAT,
    MIN_BOSS_HP,
    PRIMARY_STATS,
    ITEM_BASE_SALE_PRICES,
)
from .curves import (
    STAGE_BREAKPOINTS,
    StageBreakpoint,
    interpolate,
    segment_index,
    clamp_stage,
    turn_limit_for,
    calculate_idle_drop_base_rate,
)

__all__ = [
    "MIN_STAGE",
    "MAX_STAGE",
    "STAGE_SEGMENTS",
    "MIN_STAT",
    "MIN_BOSS_HP",
    "PRIMARY_STATS",
    "ITEM_BASE_SALE_PRICES",
    "STAGE_BREAKPOINTS",
    "StageBreakpoint",
    "interpolate",
    "segment_index",
    "clamp_stage",
    "turn_limit_for",
    "calculate_idle_drop_base_rate",
]
