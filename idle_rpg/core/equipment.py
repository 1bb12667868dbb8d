"""Equipment Loadout.

One slot per item type. The loadout turns equipped items into the
CombatantStats snapshot used by combat.
"""

from typing import Any, Dict, Iterator, List, Optional
import logging

from ..combat.combatant import CombatantStats
from ..data.loaders.item_loader import get_base_stats
from ..data.models.item import Item, ItemGrade, ItemStats, ItemType, ensure_item
from .loot import new_item_id

logger = logging.getLogger(__name__)

DEFAULT_SLOTS = (ItemType.HELMET, ItemType.ARMOR, ItemType.PANTS, ItemType.MAIN_WEAPON)


class Loadout:
    """
    Items currently equipped, one per slot.

    Iterating a loadout yields the equipped items, so it can be passed
    wherever a collection of equipped items is expected.
    """

    def __init__(self, items: Optional[List[Any]] = None):
        self._slots: Dict[ItemType, Optional[Item]] = {slot: None for slot in ItemType}
        for item in items or []:
            self.equip(item)

    def equip(self, item: Any) -> Optional[Item]:
        """
        Equip an item in its slot.

        Returns:
            The item previously in that slot, if any.
        """
        item = ensure_item(item)
        previous = self._slots[item.type]
        self._slots[item.type] = item
        logger.debug("equipment.equip: slot=%s item=%s", item.type.value, item.id)
        return previous

    def unequip(self, slot: ItemType) -> Optional[Item]:
        """Empty a slot and return what was in it."""
        slot = ItemType(slot)
        previous = self._slots[slot]
        self._slots[slot] = None
        return previous

    def get(self, slot: ItemType) -> Optional[Item]:
        return self._slots[ItemType(slot)]

    def items(self) -> List[Item]:
        return [item for item in self._slots.values() if item is not None]

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self.items())

    def is_equipped(self, item: Any) -> bool:
        item_id = item if isinstance(item, str) else ensure_item(item).id
        return any(equipped.id == item_id for equipped in self.items())

    def replace_item(self, item: Any) -> None:
        """Swap in an updated copy of an equipped item (same id), e.g. after enhancement."""
        item = ensure_item(item)
        current = self._slots[item.type]
        if current is not None and current.id == item.id:
            self._slots[item.type] = item

    def remove_item(self, item_id: str) -> Optional[Item]:
        """Unequip an item by id (e.g. after destruction)."""
        for slot, equipped in self._slots.items():
            if equipped is not None and equipped.id == item_id:
                self._slots[slot] = None
                return equipped
        return None

    def total_stats(self) -> ItemStats:
        total = ItemStats()
        for item in self.items():
            total = total + item.total_stats
        return total

    def combatant_stats(
        self,
        critical_chance: float = 0.0,
        critical_damage_multiplier: float = 0.0,
    ) -> CombatantStats:
        """Sum equipped stats into a combat snapshot."""
        total = self.total_stats()
        return CombatantStats(
            attack=max(0, total.attack),
            defense=max(0, total.defense),
            defense_penetration=max(0, total.defense_penetration),
            additional_attack_chance=max(0.0, total.additional_attack_chance),
            critical_chance=critical_chance,
            critical_damage_multiplier=critical_damage_multiplier,
        )


def create_default_item(item_type: ItemType, grade: ItemGrade = ItemGrade.COMMON) -> Item:
    """Starter item with unvaried base stats."""
    return Item(
        id=new_item_id(),
        type=ItemType(item_type),
        grade=ItemGrade(grade),
        base_stats=get_base_stats(item_type),
    )


def default_loadout() -> Loadout:
    """Starting equipment: common helmet, armor, pants and main weapon."""
    return Loadout([create_default_item(slot) for slot in DEFAULT_SLOTS])
