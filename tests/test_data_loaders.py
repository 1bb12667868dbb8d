"""Tests for data loaders and models."""

import pytest

from idle_rpg.data.loaders import (
    get_base_stats,
    get_grade_multiplier,
    load_grade_multipliers,
    load_item_base_stats,
)
from idle_rpg.data.models import (
    GRADE_ORDER,
    Item,
    ItemGrade,
    ItemStats,
    ItemType,
    ensure_item,
    grade_from_rank,
)
from idle_rpg.errors import InvalidItemState


class TestItemLoader:
    """Tests for the item table."""

    def test_every_slot_has_base_stats(self):
        stats = load_item_base_stats()
        assert set(stats) == set(ItemType)
        assert all(not s.is_zero for s in stats.values())

    def test_slot_families(self):
        assert get_base_stats(ItemType.MAIN_WEAPON) == ItemStats(attack=10)
        assert get_base_stats(ItemType.ARMOR) == ItemStats(defense=8)
        assert get_base_stats(ItemType.NECKLACE) == ItemStats(defense_penetration=4)
        assert get_base_stats("shoes").additional_attack_chance == pytest.approx(0.015)

    def test_grade_multipliers_increase(self):
        multipliers = load_grade_multipliers()
        values = [multipliers[grade] for grade in GRADE_ORDER]
        assert values == sorted(values)
        assert get_grade_multiplier(ItemGrade.COMMON) == 1.0
        assert get_grade_multiplier(ItemGrade.MYTHIC) == 4.5

    def test_loaders_are_cached(self):
        assert load_item_base_stats() is load_item_base_stats()


class TestItemModels:
    """Tests for item models."""

    def test_grade_rank(self):
        assert ItemGrade.COMMON.rank == 0
        assert ItemGrade.MYTHIC.rank == 4
        assert ItemGrade.EPIC.at_least(ItemGrade.RARE)
        assert not ItemGrade.RARE.at_least(ItemGrade.EPIC)
        assert grade_from_rank(2) == ItemGrade.EPIC
        assert grade_from_rank(5) is None

    def test_stats_arithmetic(self):
        a = ItemStats(attack=3, additional_attack_chance=0.01)
        b = ItemStats(attack=1, defense=2)
        assert a + b == ItemStats(attack=4, defense=2, additional_attack_chance=0.01)
        assert (a - a).is_zero
        assert a.with_stat("defense", 7).defense == 7

    def test_total_stats(self):
        item = Item(
            id="w1",
            type=ItemType.MAIN_WEAPON,
            grade=ItemGrade.RARE,
            base_stats=ItemStats(attack=15),
            bonus_stats=ItemStats(attack=4),
            enhancement_level=3,
        )
        assert item.total_stats == ItemStats(attack=19)
        assert not item.is_max_level

    def test_level_bounds(self):
        with pytest.raises(ValueError):
            Item(id="x", type=ItemType.RING, grade=ItemGrade.COMMON, enhancement_level=26)
        with pytest.raises(ValueError):
            Item(id="x", type=ItemType.RING, grade=ItemGrade.COMMON, enhancement_level=-1)

    def test_items_are_immutable(self):
        item = Item(id="x", type=ItemType.RING, grade=ItemGrade.COMMON)
        with pytest.raises(ValueError):
            item.enhancement_level = 3

    def test_ensure_item(self):
        item = ensure_item({"id": "a", "type": "helmet", "grade": "rare"})
        assert isinstance(item, Item)
        assert ensure_item(item) is item

    @pytest.mark.parametrize("bad", [
        None,
        {"type": "helmet", "grade": "rare"},
        {"id": "a", "type": "cape", "grade": "rare"},
        {"id": "a", "type": "helmet", "grade": "rare", "enhancement_level": 99},
    ])
    def test_ensure_item_rejects(self, bad):
        with pytest.raises(InvalidItemState):
            ensure_item(bad)
