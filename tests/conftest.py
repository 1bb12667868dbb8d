"""Shared test fixtures."""

import random

import pytest

from idle_rpg.core.enhancement import recalculate_bonus_stats
from idle_rpg.data.loaders import get_base_stats
from idle_rpg.data.models import Item, ItemGrade, ItemType


class ScriptedRandom(random.Random):
    """Random source that replays a fixed list of random() values."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        if not self._values:
            raise AssertionError("ScriptedRandom ran out of values")
        return self._values.pop(0)

    @property
    def remaining(self):
        return len(self._values)


@pytest.fixture
def scripted_rng():
    """Factory for a ScriptedRandom."""
    return ScriptedRandom


_counter = {"n": 0}


def build_item(
    item_type=ItemType.MAIN_WEAPON,
    grade=ItemGrade.COMMON,
    level=0,
    item_id=None,
):
    """Create an item with table base stats and bonus stats for its level."""
    _counter["n"] += 1
    item = Item(
        id=item_id or f"item-{_counter['n']}",
        type=item_type,
        grade=grade,
        base_stats=get_base_stats(item_type),
        enhancement_level=level,
    )
    return recalculate_bonus_stats(item)


@pytest.fixture
def make_item():
    """Factory for test items."""
    return build_item
