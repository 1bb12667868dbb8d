"""Item Drop System.

Two-stage drop resolution:
1. Gate: draw against the event's base rate (stage clear always passes;
   idle checks use a small per-second rate).
2. Roll: pick a grade from the stage's table, a uniform item type, and
   stats from base x grade x stage growth with +/-10% variation.

Only rng.random() is drawn, in this order: gate (idle only), grade,
item type, then one variation draw per non-zero base stat.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence
import logging
import math
import random
import uuid

from ..config import settings
from ..data.loaders.item_loader import get_base_stats, get_grade_multiplier
from ..data.models.item import (
    GRADE_ORDER,
    Item,
    ItemGrade,
    ItemStats,
    ItemType,
    PERCENT_STATS,
    STAT_NAMES,
)
from ..data.models.stage import DropRateTable
from .constants import (
    STAGE_STAT_GROWTH,
    STAT_VARIATION_MIN,
    STAT_VARIATION_SPAN,
    MIN_PERCENT_STAT,
)
from .curves import calculate_idle_drop_base_rate, clamp_stage
from .stage_generator import get_stage_info

logger = logging.getLogger(__name__)


class DropEvent(Enum):
    """What triggered a drop check."""

    STAGE_CLEAR = "guaranteed"
    IDLE = "idle"


@dataclass(frozen=True)
class ItemDropResult:
    """Outcome of one drop check."""

    success: bool
    drop_event: DropEvent
    stage: int
    item: Optional[Item] = None


def new_item_id() -> str:
    return str(uuid.uuid4())


def calculate_stage_multiplier(stage: int) -> float:
    """Stat growth for items dropped at a stage: +20% per stage."""
    return 1 + (stage - 1) * STAGE_STAT_GROWTH


def roll_item_stats(
    item_type: ItemType,
    grade: ItemGrade,
    stage: int,
    rng: random.Random,
) -> ItemStats:
    """
    Roll base stats for a new item.

    Each non-zero base stat is scaled by grade and stage, then varied
    independently by 0.9x-1.1x. Flat stats are floored (minimum 1),
    percentage stats rounded (minimum 0.1%).
    """
    base = get_base_stats(item_type)
    scale = get_grade_multiplier(grade) * calculate_stage_multiplier(stage)

    values = {}
    for stat in STAT_NAMES:
        base_value = base.get(stat)
        if base_value <= 0:
            continue
        variation = STAT_VARIATION_MIN + STAT_VARIATION_SPAN * rng.random()
        value = base_value * scale * variation
        if stat in PERCENT_STATS:
            values[stat] = max(MIN_PERCENT_STAT, round(value, 4))
        else:
            values[stat] = max(1, math.floor(value))
    return ItemStats(**values)


def pick_grade(table: DropRateTable, rng: random.Random) -> ItemGrade:
    """
    Cumulative draw against a grade table, rarest grade first.

    Falls back to the commonest grade if the draw exceeds the table total.
    """
    roll = rng.random()
    cumulative = 0.0
    for grade in reversed(GRADE_ORDER):
        cumulative += table.get(grade)
        if roll < cumulative:
            return grade
    return GRADE_ORDER[0]


def pick_from(options: Sequence, rng: random.Random):
    """Uniform choice using a single rng.random() draw."""
    index = min(int(rng.random() * len(options)), len(options) - 1)
    return options[index]


class ItemDropSystem:
    """
    Decides item drops for stage clears and idle time.

    Usage:
        drops = ItemDropSystem(rng=random.Random(42))
        result = drops.check_stage_clear_drop(stage=12)
        if result.success:
            inventory.append(result.item)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize drop system.

        Args:
            rng: Random number generator for deterministic simulation.
        """
        self.rng = rng or random.Random()

    def get_base_drop_rate(self, stage: int, event: DropEvent) -> float:
        """Gate probability for a drop check."""
        if event == DropEvent.STAGE_CLEAR:
            return 1.0
        return calculate_idle_drop_base_rate(stage)

    def get_drop_rates_for_stage(self, stage: int, event: DropEvent) -> DropRateTable:
        """Grade table for a stage and event type."""
        info = get_stage_info(stage)
        if event == DropEvent.STAGE_CLEAR:
            return info.stage_clear_drop_rates
        return info.idle_drop_rates

    def roll_for_drop(self, probability: float) -> bool:
        """Gate draw; certain gates consume no random draw."""
        if probability >= 1.0:
            return True
        if probability <= 0.0:
            return False
        return self.rng.random() < probability

    def determine_item_grade(self, table: DropRateTable) -> ItemGrade:
        return pick_grade(table, self.rng)

    def pick_item_type(self) -> ItemType:
        return pick_from(list(ItemType), self.rng)

    def generate_item_stats(self, item_type: ItemType, grade: ItemGrade, stage: int) -> ItemStats:
        return roll_item_stats(item_type, grade, stage, self.rng)

    def generate_random_item(self, stage: int, table: DropRateTable) -> Item:
        """
        Roll a new item at enhancement level 0.

        Args:
            stage: Stage the item drops at.
            table: Grade table to draw from.

        Returns:
            The new Item.
        """
        grade = self.determine_item_grade(table)
        item_type = self.pick_item_type()
        return Item(
            id=new_item_id(),
            type=item_type,
            grade=grade,
            base_stats=self.generate_item_stats(item_type, grade, stage),
        )

    def check_drop(self, stage: int, event: DropEvent) -> ItemDropResult:
        """
        Run one drop check.

        Args:
            stage: Current stage (clamped to 1..100).
            event: Stage clear or idle.

        Returns:
            ItemDropResult, with the item when the gate passed.
        """
        stage = clamp_stage(stage)
        if not self.roll_for_drop(self.get_base_drop_rate(stage, event)):
            return ItemDropResult(success=False, drop_event=event, stage=stage)

        item = self.generate_random_item(stage, self.get_drop_rates_for_stage(stage, event))
        logger.debug(
            "loot.drop: stage=%s event=%s grade=%s type=%s",
            stage, event.value, item.grade.value, item.type.value,
        )
        return ItemDropResult(success=True, drop_event=event, stage=stage, item=item)

    def check_stage_clear_drop(self, stage: int) -> ItemDropResult:
        return self.check_drop(stage, DropEvent.STAGE_CLEAR)

    def check_idle_drop(self, stage: int) -> ItemDropResult:
        return self.check_drop(stage, DropEvent.IDLE)

    def roll_idle_drops(self, stage: int, elapsed_seconds: float) -> List[Item]:
        """
        Run the idle checks owed for a span of idle time.

        One check per IDLE_CHECK_INTERVAL_SECONDS of elapsed time.

        Returns:
            Items that dropped, in check order.
        """
        interval = max(1, settings.IDLE_CHECK_INTERVAL_SECONDS)
        checks = int(max(0.0, elapsed_seconds) // interval)
        items = []
        for _ in range(checks):
            result = self.check_idle_drop(stage)
            if result.success:
                items.append(result.item)
        return items


def generate_item_drop(
    stage: int,
    event: DropEvent = DropEvent.STAGE_CLEAR,
    rng: Optional[random.Random] = None,
) -> ItemDropResult:
    """One-off drop check."""
    return ItemDropSystem(rng).check_drop(stage, event)


def create_random_item(
    item_type: ItemType,
    stage: int = 1,
    grade: ItemGrade = ItemGrade.COMMON,
    rng: Optional[random.Random] = None,
) -> Item:
    """Create an item of a given type and grade with rolled stats."""
    rng = rng or random.Random()
    return Item(
        id=new_item_id(),
        type=ItemType(item_type),
        grade=ItemGrade(grade),
        base_stats=roll_item_stats(item_type, grade, stage, rng),
    )
