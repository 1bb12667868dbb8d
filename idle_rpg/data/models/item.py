"""Item data model."""

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from ...errors import InvalidItemState


MAX_ENHANCEMENT_LEVEL = 25


class ItemGrade(StrEnum):
    """Item rarity, ordered from commonest to rarest."""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        return GRADE_ORDER.index(self)

    def at_least(self, other: "ItemGrade") -> bool:
        return self.rank >= other.rank


GRADE_ORDER: tuple[ItemGrade, ...] = (
    ItemGrade.COMMON,
    ItemGrade.RARE,
    ItemGrade.EPIC,
    ItemGrade.LEGENDARY,
    ItemGrade.MYTHIC,
)


class ItemType(StrEnum):
    """Equipment slot."""
    HELMET = "helmet"
    ARMOR = "armor"
    PANTS = "pants"
    GLOVES = "gloves"
    SHOES = "shoes"
    SHOULDER = "shoulder"
    EARRING = "earring"
    RING = "ring"
    NECKLACE = "necklace"
    MAIN_WEAPON = "main_weapon"
    SUB_WEAPON = "sub_weapon"


# Stats expressed as a fraction (0.01 = 1%) rather than flat points
PERCENT_STATS = frozenset({"additional_attack_chance"})

STAT_NAMES = ("attack", "defense", "defense_penetration", "additional_attack_chance")


class ItemStats(BaseModel):
    """Stat block carried by an item."""
    attack: int = Field(default=0, description="Flat attack")
    defense: int = Field(default=0, description="Flat defense")
    defense_penetration: int = Field(default=0, description="Defense ignored on hit")
    additional_attack_chance: float = Field(default=0.0, description="Extra attack chance (0.0-1.0)")

    model_config = {"frozen": True}

    def get(self, stat: str) -> float:
        return getattr(self, stat)

    def with_stat(self, stat: str, value: float) -> "ItemStats":
        return self.model_copy(update={stat: value})

    def __add__(self, other: "ItemStats") -> "ItemStats":
        return ItemStats(
            attack=self.attack + other.attack,
            defense=self.defense + other.defense,
            defense_penetration=self.defense_penetration + other.defense_penetration,
            additional_attack_chance=self.additional_attack_chance + other.additional_attack_chance,
        )

    def __neg__(self) -> "ItemStats":
        return ItemStats(
            attack=-self.attack,
            defense=-self.defense,
            defense_penetration=-self.defense_penetration,
            additional_attack_chance=-self.additional_attack_chance,
        )

    def __sub__(self, other: "ItemStats") -> "ItemStats":
        return self + (-other)

    @property
    def is_zero(self) -> bool:
        return all(self.get(stat) == 0 for stat in STAT_NAMES)


class Item(BaseModel):
    """An owned piece of equipment.

    Grade and base stats are fixed at creation; enhancement only moves
    ``enhancement_level`` and ``bonus_stats``.
    """
    id: str = Field(..., min_length=1, description="Unique identifier")
    type: ItemType
    grade: ItemGrade
    base_stats: ItemStats = Field(default_factory=ItemStats)
    bonus_stats: ItemStats = Field(default_factory=ItemStats, description="Enhancement-derived stats")
    enhancement_level: int = Field(default=0, ge=0, le=MAX_ENHANCEMENT_LEVEL)

    model_config = {"frozen": True}

    @property
    def total_stats(self) -> ItemStats:
        return self.base_stats + self.bonus_stats

    @property
    def is_max_level(self) -> bool:
        return self.enhancement_level >= MAX_ENHANCEMENT_LEVEL


def ensure_item(obj: Any) -> Item:
    """
    Coerce an item-like object into a validated Item.

    Args:
        obj: An Item or a mapping with item fields.

    Returns:
        The validated Item.

    Raises:
        InvalidItemState: If the object is missing or malformed.
    """
    if obj is None:
        raise InvalidItemState("Item is missing")
    if isinstance(obj, Item):
        return obj
    try:
        return Item.model_validate(obj)
    except ValidationError as exc:
        raise InvalidItemState(f"Malformed item: {exc.error_count()} invalid field(s)") from exc


def grade_from_rank(rank: int) -> Optional[ItemGrade]:
    """Grade at a given rank, or None past the ends."""
    if 0 <= rank < len(GRADE_ORDER):
        return GRADE_ORDER[rank]
    return None
