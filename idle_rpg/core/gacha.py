"""Gacha System.

Credit-priced draws from one equipment category. Grades come from a fixed
table; item type is uniform within the category; stats use the same roll
as stage-1 loot.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import List, Optional
import logging
import random

from ..data.models.item import Item, ItemType
from ..data.models.stage import DropRateTable
from ..errors import InsufficientFunds
from .constants import GACHA_COSTS, GACHA_CATEGORIES, GACHA_GRADE_RATES
from .loot import new_item_id, pick_from, pick_grade, roll_item_stats

logger = logging.getLogger(__name__)

GACHA_STAGE = 1

GACHA_RATES = DropRateTable.from_sequence(*GACHA_GRADE_RATES)


class GachaCategory(StrEnum):
    """Gacha machines."""
    ARMOR = "armor"
    ACCESSORIES = "accessories"
    WEAPONS = "weapons"


@dataclass(frozen=True)
class GachaResult:
    """One gacha pull."""

    item: Item
    category: GachaCategory
    cost: int


def get_gacha_cost(category: GachaCategory) -> int:
    return GACHA_COSTS[GachaCategory(category).value]


def get_gacha_item_types(category: GachaCategory) -> List[ItemType]:
    return list(GACHA_CATEGORIES[GachaCategory(category).value])


class GachaSystem:
    """
    Performs gacha draws.

    Usage:
        gacha = GachaSystem(rng=random.Random(7))
        result = gacha.draw(GachaCategory.WEAPONS, credits=2000)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def draw(self, category: GachaCategory, credits: int) -> GachaResult:
        """
        Draw one item.

        Raises:
            InsufficientFunds: If credits are below the category cost.
        """
        category = GachaCategory(category)
        cost = get_gacha_cost(category)
        if credits < cost:
            raise InsufficientFunds(cost, credits, "gacha draw")

        grade = pick_grade(GACHA_RATES, self.rng)
        item_type = pick_from(get_gacha_item_types(category), self.rng)
        item = Item(
            id=new_item_id(),
            type=item_type,
            grade=grade,
            base_stats=roll_item_stats(item_type, grade, GACHA_STAGE, self.rng),
        )
        logger.debug(
            "gacha.draw: category=%s grade=%s type=%s cost=%s",
            category.value, grade.value, item_type.value, cost,
        )
        return GachaResult(item=item, category=category, cost=cost)

    def draw_multiple(self, category: GachaCategory, credits: int, count: int) -> List[GachaResult]:
        """
        Draw several items at once; all-or-nothing on cost.

        Raises:
            InsufficientFunds: If credits do not cover every draw.
            ValueError: If count is not positive.
        """
        if count <= 0:
            raise ValueError("count must be positive")
        total = get_gacha_cost(category) * count
        if credits < total:
            raise InsufficientFunds(total, credits, f"{count} gacha draws")

        results = []
        remaining = credits
        for _ in range(count):
            result = self.draw(category, remaining)
            remaining -= result.cost
            results.append(result)
        return results
