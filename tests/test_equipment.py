"""Tests for the equipment loadout."""

import random

import pytest

from idle_rpg.core.enhancement import EnhancementSystem
from idle_rpg.core.equipment import DEFAULT_SLOTS, Loadout, create_default_item, default_loadout
from idle_rpg.data.models import ItemGrade, ItemStats, ItemType
from idle_rpg.errors import InvalidItemState


class TestLoadout:
    """Tests for equipping and stat totals."""

    def test_default_loadout(self):
        loadout = default_loadout()
        assert len(loadout) == len(DEFAULT_SLOTS)
        stats = loadout.combatant_stats()
        assert stats.attack == 10
        assert stats.defense == 19
        assert stats.defense_penetration == 0

    def test_equip_returns_previous(self, make_item):
        loadout = Loadout()
        first = make_item()
        second = make_item(grade=ItemGrade.EPIC)
        assert loadout.equip(first) is None
        assert loadout.equip(second) == first
        assert loadout.get(ItemType.MAIN_WEAPON) == second
        assert len(loadout) == 1

    def test_unequip(self, make_item):
        ring = make_item(item_type=ItemType.RING)
        loadout = Loadout([ring])
        assert loadout.unequip(ItemType.RING) == ring
        assert loadout.get(ItemType.RING) is None
        assert loadout.unequip("ring") is None

    def test_is_equipped(self, make_item):
        helmet = make_item(item_type=ItemType.HELMET)
        loadout = Loadout([helmet])
        assert loadout.is_equipped(helmet)
        assert loadout.is_equipped(helmet.id)
        assert not loadout.is_equipped(make_item(item_type=ItemType.HELMET))

    def test_total_includes_bonus_stats(self, make_item):
        loadout = Loadout([make_item(level=3), make_item(item_type=ItemType.GLOVES)])
        total = loadout.total_stats()
        assert total.attack == 13
        assert total.additional_attack_chance == pytest.approx(0.02)

    def test_crit_passthrough(self):
        stats = default_loadout().combatant_stats(critical_chance=0.1, critical_damage_multiplier=0.5)
        assert stats.critical_chance == 0.1
        assert stats.critical_damage_multiplier == 0.5

    def test_replace_after_enhancement(self, make_item):
        weapon = make_item()
        loadout = Loadout([weapon])
        result = EnhancementSystem(random.Random(42)).enhance(weapon, 10_000)
        loadout.replace_item(result["item"])
        assert loadout.get(ItemType.MAIN_WEAPON).enhancement_level == 1
        assert loadout.combatant_stats().attack == 11

    def test_replace_ignores_other_items(self, make_item):
        weapon = make_item()
        loadout = Loadout([weapon])
        loadout.replace_item(make_item(level=5))
        assert loadout.get(ItemType.MAIN_WEAPON) == weapon

    def test_remove_destroyed_item(self, make_item):
        weapon = make_item()
        loadout = Loadout([weapon])
        assert loadout.remove_item(weapon.id) == weapon
        assert loadout.remove_item(weapon.id) is None
        assert loadout.combatant_stats().attack == 0

    def test_rejects_malformed(self):
        with pytest.raises(InvalidItemState):
            Loadout().equip({"id": ""})

    def test_create_default_item(self):
        item = create_default_item(ItemType.NECKLACE, ItemGrade.RARE)
        assert item.base_stats == ItemStats(defense_penetration=4)
        assert item.grade == ItemGrade.RARE
