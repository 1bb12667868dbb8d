"""Item base-stat table loader."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict

from ..models.item import ItemGrade, ItemStats, ItemType


# Get the data directory path
DATA_DIR = Path(__file__).parent.parent / "tables"
ITEMS_FILE = DATA_DIR / "items.json"


@lru_cache(maxsize=1)
def _load_raw() -> dict:
    with open(ITEMS_FILE, "r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def load_item_base_stats() -> Dict[ItemType, ItemStats]:
    """Load base stats for every equipment slot.

    Returns:
        Mapping of item type to its base stat block.
    """
    data = _load_raw()["base_stats"]
    return {ItemType(slot): ItemStats(**stats) for slot, stats in data.items()}


@lru_cache(maxsize=1)
def load_grade_multipliers() -> Dict[ItemGrade, float]:
    """Load the stat multiplier for each grade."""
    data = _load_raw()["grade_multipliers"]
    return {ItemGrade(grade): float(mult) for grade, mult in data.items()}


def get_base_stats(item_type: ItemType) -> ItemStats:
    """Get base stats for an item type (all zeros if the slot is unlisted)."""
    return load_item_base_stats().get(ItemType(item_type), ItemStats())


def get_grade_multiplier(grade: ItemGrade) -> float:
    """Get the stat multiplier for a grade (1.0 if unlisted)."""
    return load_grade_multipliers().get(ItemGrade(grade), 1.0)
