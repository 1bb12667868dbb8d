# Data Loaders
from .item_loader import (
    load_item_base_stats,
    load_grade_multipliers,
    get_base_stats,
    get_grade_multiplier,
)

__all__ = [
    "load_item_base_stats",
    "load_grade_multipliers",
    "get_base_stats",
    "get_grade_multiplier",
]
