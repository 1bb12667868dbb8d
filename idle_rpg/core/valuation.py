"""Item Sale Valuation.

Sale prices, batch totals, and validation of bulk-sell requests.
Equipped items can never be sold; count ceilings are hard limits unless
the caller is selling everything; value and grade checks are advisory.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Union
import logging
import math

from ..config import settings
from ..data.models.item import Item, ItemGrade, ensure_item
from .constants import ITEM_BASE_SALE_PRICES, ENHANCEMENT_SALE_BONUS
from .enhancement import calculate_enhancement_cost

logger = logging.getLogger(__name__)

EquippedItems = Optional[Iterable[Union[Item, str, None]]]

# Grades at or above this one trigger a confirmation warning
RARE_GRADE_WARNING = ItemGrade.RARE


@dataclass
class SaleValidation:
    """Validation result for a sale request."""

    is_valid: bool
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class ItemSaleResult:
    """Result of processing a sale."""

    success: bool
    credits: int
    sold_items: List[Item] = field(default_factory=list)
    failed_items: List[Item] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(frozen=True)
class ItemSaleStatus:
    can_sell: bool
    sale_price: int
    reason: Optional[str] = None


def _equipped_ids(equipped: EquippedItems) -> Set[str]:
    if not equipped:
        return set()
    ids = set()
    for entry in equipped:
        if entry is None:
            continue
        ids.add(entry if isinstance(entry, str) else entry.id)
    return ids


def calculate_item_sale_price(item: Any) -> int:
    """
    Sale price of an item.

    Base price by grade plus 5% of the base per enhancement level (floored).

    Raises:
        InvalidItemState: If the item is malformed.
    """
    item = ensure_item(item)
    base_price = ITEM_BASE_SALE_PRICES[item.grade]
    bonus = math.floor(base_price * ENHANCEMENT_SALE_BONUS * item.enhancement_level)
    return base_price + bonus


def calculate_total_sale_price(items: Iterable[Any]) -> int:
    """Total sale price of several items."""
    return sum(calculate_item_sale_price(item) for item in items)


def can_sell_item(item: Any, equipped: EquippedItems = None) -> bool:
    """Equipped items cannot be sold."""
    return ensure_item(item).id not in _equipped_ids(equipped)


def validate_item_sale(
    items: List[Any],
    equipped: EquippedItems = None,
    select_all: bool = False,
) -> SaleValidation:
    """
    Validate a bulk-sell request.

    Args:
        items: Items to sell.
        equipped: Equipped items (or their ids).
        select_all: The caller is selling everything; lifts the count ceiling.

    Returns:
        SaleValidation; errors make it invalid, warnings are advisory.
    """
    items = [ensure_item(item) for item in items]
    equipped_ids = _equipped_ids(equipped)
    errors: List[str] = []
    warnings: List[str] = []

    if not items:
        errors.append("Select at least one item to sell.")

    if len(items) > settings.MAX_ITEMS_PER_SALE and not select_all:
        errors.append(
            f"At most {settings.MAX_ITEMS_PER_SALE} items can be sold at once "
            f"({len(items)} selected)."
        )

    equipped_count = sum(1 for item in items if item.id in equipped_ids)
    if equipped_count:
        errors.append(f"{equipped_count} equipped item(s) cannot be sold.")

    total_value = calculate_total_sale_price(items)
    if total_value >= settings.HIGH_VALUE_SALE_THRESHOLD:
        warnings.append(f"Selling items worth {total_value:,} credits in total.")

    rare_items = [item for item in items if item.grade.at_least(RARE_GRADE_WARNING)]
    if rare_items:
        grades = sorted({item.grade for item in rare_items}, key=lambda g: g.rank)
        warnings.append(
            f"Includes {len(rare_items)} item(s) of grade "
            f"{', '.join(g.value for g in grades)}."
        )

    if errors:
        logger.warning("sale.rejected: items=%s errors=%s", len(items), errors)
    return SaleValidation(is_valid=not errors, warnings=warnings, errors=errors)


def process_item_sale(
    items: List[Any],
    equipped: EquippedItems = None,
    skip_validation: bool = False,
    select_all: bool = False,
) -> ItemSaleResult:
    """
    Sell items.

    With validation, any error rejects the whole request. Without it,
    sellable items are sold and equipped items are returned as failed.
    """
    items = [ensure_item(item) for item in items]

    if not skip_validation:
        validation = validate_item_sale(items, equipped, select_all=select_all)
        if not validation.is_valid:
            return ItemSaleResult(
                success=False,
                credits=0,
                failed_items=list(items),
                error=" ".join(validation.errors),
            )

    equipped_ids = _equipped_ids(equipped)
    sold: List[Item] = []
    failed: List[Item] = []
    credits = 0
    for item in items:
        if item.id in equipped_ids:
            failed.append(item)
        else:
            sold.append(item)
            credits += calculate_item_sale_price(item)

    logger.debug("sale.process: sold=%s failed=%s credits=%s", len(sold), len(failed), credits)
    return ItemSaleResult(success=bool(sold), credits=credits, sold_items=sold, failed_items=failed)


def get_item_sale_status(item: Any, equipped: EquippedItems = None) -> ItemSaleStatus:
    """Whether an item can be sold, why not, and its price."""
    price = calculate_item_sale_price(item)
    if not can_sell_item(item, equipped):
        return ItemSaleStatus(can_sell=False, sale_price=price, reason="Equipped items cannot be sold.")
    return ItemSaleStatus(can_sell=True, sale_price=price)


def get_grade_sale_prices() -> Dict[ItemGrade, int]:
    return dict(ITEM_BASE_SALE_PRICES)


def calculate_sale_efficiency(item: Any) -> Dict[str, float]:
    """
    Compare an item's sale price with the credits spent enhancing it.

    Returns:
        Dict with sale_price, enhancement_cost (sum of successful level
        costs) and efficiency (price / cost, 0 when nothing was spent).
    """
    item = ensure_item(item)
    price = calculate_item_sale_price(item)
    spent = sum(
        calculate_enhancement_cost(level, item.grade)
        for level in range(1, item.enhancement_level + 1)
    )
    return {
        "sale_price": price,
        "enhancement_cost": spent,
        "efficiency": price / spent if spent > 0 else 0.0,
    }
