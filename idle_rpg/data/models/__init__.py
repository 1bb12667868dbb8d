# Data Models
from .item import (
    Item,
    ItemGrade,
    ItemStats,
    ItemType,
    GRADE_ORDER,
    MAX_ENHANCEMENT_LEVEL,
    STAT_NAMES,
    PERCENT_STATS,
    ensure_item,
    grade_from_rank,
)
from .stage import (
    BossDescriptor,
    DropRateTable,
    StageInfo,
    StageTheme,
    DROP_TABLE_TOLERANCE,
)

__all__ = [
    "Item",
    "ItemGrade",
    "ItemStats",
    "ItemType",
    "GRADE_ORDER",
    "MAX_ENHANCEMENT_LEVEL",
    "STAT_NAMES",
    "PERCENT_STATS",
    "ensure_item",
    "grade_from_rank",
    "BossDescriptor",
    "DropRateTable",
    "StageInfo",
    "StageTheme",
    "DROP_TABLE_TOLERANCE",
]
