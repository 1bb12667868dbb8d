"""Tests for item synthesis."""

import random

import pytest

from idle_rpg.core.synthesis import (
    SynthesisSystem,
    can_synthesize_grade,
    generate_synthesis_preview,
    get_next_grade,
    get_synthesizable_grades,
    perform_synthesis,
)
from idle_rpg.data.models import ItemGrade, ItemStats, ItemType
from idle_rpg.errors import EngineError, SynthesisUnavailable


@pytest.fixture
def inventory(make_item):
    """Twelve common items followed by three rare ones."""
    commons = [make_item(grade=ItemGrade.COMMON, item_id=f"c-{i}") for i in range(12)]
    rares = [make_item(item_type=ItemType.RING, grade=ItemGrade.RARE, item_id=f"r-{i}") for i in range(3)]
    return commons + rares


class TestGrades:
    """Tests for grade progression."""

    def test_next_grade(self):
        assert get_next_grade(ItemGrade.COMMON) == ItemGrade.RARE
        assert get_next_grade(ItemGrade.EPIC) == ItemGrade.LEGENDARY
        assert get_next_grade(ItemGrade.LEGENDARY) == ItemGrade.MYTHIC
        assert get_next_grade(ItemGrade.MYTHIC) is None

    def test_mythic_cannot_be_synthesized(self):
        assert can_synthesize_grade(ItemGrade.LEGENDARY)
        assert not can_synthesize_grade(ItemGrade.MYTHIC)


class TestPreview:
    """Tests for synthesis previews."""

    def test_enough_items(self, inventory):
        preview = generate_synthesis_preview(inventory, ItemGrade.COMMON)
        assert preview.can_synthesize
        assert preview.target_grade == ItemGrade.RARE
        assert len(preview.available_items) == 12
        assert preview.error is None

    def test_too_few_items(self, inventory):
        preview = generate_synthesis_preview(inventory, ItemGrade.RARE)
        assert not preview.can_synthesize
        assert len(preview.available_items) == 3
        assert "10" in preview.error

    def test_mythic_preview(self, make_item):
        items = [make_item(grade=ItemGrade.MYTHIC) for _ in range(10)]
        preview = generate_synthesis_preview(items, ItemGrade.MYTHIC)
        assert not preview.can_synthesize
        assert preview.target_grade is None

    def test_synthesizable_grades(self, inventory):
        statuses = get_synthesizable_grades(inventory)
        assert [s.grade for s in statuses] == [
            ItemGrade.COMMON, ItemGrade.RARE, ItemGrade.EPIC, ItemGrade.LEGENDARY,
        ]
        assert statuses[0].count == 12 and statuses[0].can_synthesize
        assert statuses[1].count == 3 and not statuses[1].can_synthesize
        assert statuses[3].next_grade == ItemGrade.MYTHIC


class TestSynthesize:
    """Tests for performing a synthesis."""

    def test_consumes_ten_and_creates_next_grade(self, inventory):
        result = SynthesisSystem(random.Random(42)).synthesize(inventory, ItemGrade.COMMON)
        assert len(result.used_items) == 10
        assert len({item.id for item in result.used_items}) == 10
        assert all(item.grade == ItemGrade.COMMON for item in result.used_items)
        assert result.item.grade == ItemGrade.RARE
        assert result.item.enhancement_level == 0
        assert result.item.id not in {item.id for item in inventory}

    def test_scripted_synthesis(self, inventory, scripted_rng):
        # Ten picks from the front, main_weapon, variation 1.0
        rng = scripted_rng([0.0] * 10 + [0.9, 0.5])
        result = SynthesisSystem(rng).synthesize(inventory, ItemGrade.COMMON)
        assert [item.id for item in result.used_items] == [f"c-{i}" for i in range(10)]
        assert result.item.type == ItemType.MAIN_WEAPON
        assert result.item.base_stats == ItemStats(attack=15)
        assert rng.remaining == 0

    def test_picks_without_replacement(self, make_item, scripted_rng):
        items = [make_item(item_id=f"c-{i}") for i in range(10)]
        rng = scripted_rng([0.99] * 10 + [0.9, 0.5])
        result = SynthesisSystem(rng).synthesize(items, ItemGrade.COMMON)
        assert [item.id for item in result.used_items] == [f"c-{i}" for i in reversed(range(10))]

    def test_legendary_to_mythic(self, make_item, scripted_rng):
        items = [make_item(grade=ItemGrade.LEGENDARY) for _ in range(10)]
        rng = scripted_rng([0.0] * 10 + [0.9, 0.5])
        result = perform_synthesis(items, ItemGrade.LEGENDARY, rng=rng)
        assert result.item.grade == ItemGrade.MYTHIC
        assert result.item.base_stats == ItemStats(attack=45)

    def test_too_few_items_rejected(self, inventory, scripted_rng):
        with pytest.raises(SynthesisUnavailable) as exc:
            SynthesisSystem(scripted_rng([])).synthesize(inventory, ItemGrade.RARE)
        assert exc.value.grade == "rare"

    def test_mythic_rejected(self, make_item, scripted_rng):
        items = [make_item(grade=ItemGrade.MYTHIC) for _ in range(12)]
        with pytest.raises(SynthesisUnavailable, match="highest grade"):
            SynthesisSystem(scripted_rng([])).synthesize(items, ItemGrade.MYTHIC)

    def test_error_types(self):
        assert issubclass(SynthesisUnavailable, EngineError)
        assert issubclass(SynthesisUnavailable, ValueError)

    def test_seeded_synthesis_is_reproducible(self, inventory):
        first = perform_synthesis(inventory, ItemGrade.COMMON, rng=random.Random(7))
        second = perform_synthesis(inventory, ItemGrade.COMMON, rng=random.Random(7))
        assert [i.id for i in first.used_items] == [i.id for i in second.used_items]
        assert first.item.type == second.item.type
        assert first.item.base_stats == second.item.base_stats
