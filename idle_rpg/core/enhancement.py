"""Item Enhancement System.

Handles upgrading one item at a time:
- Cost, success-rate and stat-gain curves by level
- One random draw per attempt resolving to success, failure,
  downgrade or destruction
- Destruction rates and prevention supplied as a DestructionRule
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional
import logging
import math
import random

from ..config import settings
from ..data.loaders.item_loader import get_base_stats
from ..data.models.item import Item, ItemGrade, ItemStats, ItemType, PERCENT_STATS, ensure_item
from ..errors import (
    DestructionPreventionUnavailable,
    InsufficientFunds,
    InvalidItemState,
    MaxLevelReached,
)
from .constants import (
    MAX_ENHANCEMENT_LEVEL,
    GUARANTEED_SUCCESS_MAX_LEVEL,
    SUCCESS_RATES,
    MIN_SUCCESS_RATE,
    ENHANCEMENT_COST_MULTIPLIER,
    GRADE_BASE_INCREASE,
    PERCENT_GAIN_SCALE,
    MIN_PERCENT_STAT,
    PRIMARY_STATS,
    DESTRUCTION_RATES,
    DESTRUCTION_PREVENTION_MIN_LEVEL,
    DESTRUCTION_PREVENTION_COSTS,
)

logger = logging.getLogger(__name__)


class EnhancementOutcome(Enum):
    """Result of one enhancement attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    DOWNGRADE = "downgrade"
    DESTRUCTION = "destruction"


@dataclass(frozen=True)
class DestructionRule:
    """
    When enhancement failures destroy items, and how to prevent it.

    Attributes:
        rates: Destruction chance keyed by target level (missing = 0).
        prevention_min_level: Lowest current level that may buy prevention.
        prevention_costs: Prevention cost keyed by current level; levels past
            the table use the highest listed level's cost.
    """

    rates: Mapping[int, float] = field(default_factory=dict)
    prevention_min_level: int = DESTRUCTION_PREVENTION_MIN_LEVEL
    prevention_costs: Mapping[int, int] = field(default_factory=dict)

    def destruction_rate(self, target_level: int) -> float:
        return self.rates.get(target_level, 0.0)

    def can_prevent(self, current_level: int) -> bool:
        return current_level >= self.prevention_min_level

    def prevention_cost(self, current_level: int) -> int:
        """Cost to suppress destruction for one attempt (0 if unavailable)."""
        if not self.can_prevent(current_level) or not self.prevention_costs:
            return 0
        if current_level in self.prevention_costs:
            return self.prevention_costs[current_level]
        return self.prevention_costs[max(self.prevention_costs)]


DEFAULT_DESTRUCTION_RULE = DestructionRule(
    rates=dict(DESTRUCTION_RATES),
    prevention_min_level=DESTRUCTION_PREVENTION_MIN_LEVEL,
    prevention_costs=dict(DESTRUCTION_PREVENTION_COSTS),
)

NO_DESTRUCTION = DestructionRule()


@dataclass(frozen=True)
class EnhancementInfo:
    """Preview of the next enhancement attempt."""

    cost: int
    success_rate: float
    destruction_rate: float
    stat_gain: ItemStats
    new_level: int
    prevention_cost: int = 0


@dataclass(frozen=True)
class EnhancementAttempt:
    """Result record for one attempt."""

    outcome: EnhancementOutcome
    previous_level: int
    new_level: int
    credits_paid: int
    stat_delta: ItemStats
    destruction_prevented: bool = False
    item_id: str = ""

    @property
    def destroyed(self) -> bool:
        return self.outcome == EnhancementOutcome.DESTRUCTION


# =============================================================================
# CURVES
# =============================================================================

def calculate_enhancement_cost(target_level: int, grade: ItemGrade) -> int:
    """
    Credits needed to attempt reaching a level.

    Args:
        target_level: Level the attempt would reach.
        grade: Item grade.

    Returns:
        Cost in credits.
    """
    if target_level <= 5:
        base_cost = 100 + target_level * 100
    elif target_level <= 11:
        base_cost = 400 + (target_level - 5) * 50
    else:
        base_cost = 800 * 1.4 ** (target_level - 12)

    return math.floor(base_cost * ENHANCEMENT_COST_MULTIPLIER[ItemGrade(grade)])


def get_success_rate(target_level: int) -> float:
    """Success chance for reaching a level: 100% up to 11, then 90% down to 25%."""
    if target_level <= GUARANTEED_SUCCESS_MAX_LEVEL:
        return 1.0
    return SUCCESS_RATES.get(target_level, MIN_SUCCESS_RATE)


def get_level_efficiency(level: int) -> float:
    """Stat-gain multiplier for a level; late levels gain much more."""
    if level <= 5:
        return 0.6
    if level <= 11:
        return 0.8 + (level - 6) * 0.06
    return 1.5 + (level - 12) * 7 / 13


def get_primary_stat(item_type: ItemType) -> str:
    """The single stat enhancement raises for an item type."""
    return PRIMARY_STATS[ItemType(item_type)]


def get_stat_gain(
    level: int,
    grade: ItemGrade,
    item_type: ItemType,
    base_stats: Optional[ItemStats] = None,
) -> ItemStats:
    """
    Stat gain granted when an item reaches a level.

    Only the item type's primary stat increases. Flat stats gain at least 1,
    percentage stats at least 0.1%.

    Args:
        level: Level being reached.
        grade: Item grade.
        item_type: Item type.
        base_stats: The item's base stats; defaults to the slot's table entry.

    Returns:
        ItemStats with only the primary stat set (all zero if the item has
        no base value for its primary stat).
    """
    stat = get_primary_stat(item_type)
    if base_stats is None:
        base_stats = get_base_stats(item_type)
    if base_stats.get(stat) == 0:
        return ItemStats()

    value = GRADE_BASE_INCREASE[ItemGrade(grade)] * get_level_efficiency(level)
    if stat in PERCENT_STATS:
        gain = max(MIN_PERCENT_STAT, value * PERCENT_GAIN_SCALE)
    else:
        gain = max(1, math.floor(value))
    return ItemStats().with_stat(stat, gain)


def recalculate_bonus_stats(item: Any) -> Item:
    """Rebuild an item's bonus stats from the gains of levels 1..n."""
    item = ensure_item(item)
    bonus = ItemStats()
    for level in range(1, item.enhancement_level + 1):
        bonus = bonus + get_stat_gain(level, item.grade, item.type, item.base_stats)
    return item.model_copy(update={"bonus_stats": bonus})


def apply_enhancement_result(item: Any, attempt: EnhancementAttempt) -> Optional[Item]:
    """
    Apply an attempt to the item it was rolled for.

    Args:
        item: The item before the attempt.
        attempt: Result of EnhancementSystem.attempt.

    Returns:
        The updated Item, or None if the item was destroyed.
    """
    item = ensure_item(item)
    if item.enhancement_level != attempt.previous_level:
        raise InvalidItemState(
            f"Attempt was rolled at +{attempt.previous_level} "
            f"but item is +{item.enhancement_level}"
        )
    if attempt.destroyed:
        return None
    return item.model_copy(update={
        "enhancement_level": attempt.new_level,
        "bonus_stats": item.bonus_stats + attempt.stat_delta,
    })


class EnhancementSystem:
    """
    Resolves enhancement attempts.

    Usage:
        system = EnhancementSystem(rng=random.Random(42))
        attempt = system.attempt(item, credits=5000)
        item = apply_enhancement_result(item, attempt)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        destruction_rule: Optional[DestructionRule] = None,
    ):
        """
        Initialize enhancement system.

        Args:
            rng: Random number generator for deterministic simulation.
            destruction_rule: Destruction configuration; defaults to
                DEFAULT_DESTRUCTION_RULE, or NO_DESTRUCTION when
                settings.DESTRUCTION_ENABLED is off.
        """
        self.rng = rng or random.Random()
        if destruction_rule is None:
            destruction_rule = (
                DEFAULT_DESTRUCTION_RULE if settings.DESTRUCTION_ENABLED else NO_DESTRUCTION
            )
        self.destruction_rule = destruction_rule

    def get_enhancement_info(self, item: Any) -> EnhancementInfo:
        """
        Preview the next attempt.

        Raises:
            InvalidItemState: If the item is malformed.
            MaxLevelReached: If the item is already at the level cap.
        """
        item = ensure_item(item)
        target_level = item.enhancement_level + 1
        if target_level > MAX_ENHANCEMENT_LEVEL:
            raise MaxLevelReached(item.enhancement_level, MAX_ENHANCEMENT_LEVEL)

        return EnhancementInfo(
            cost=calculate_enhancement_cost(target_level, item.grade),
            success_rate=get_success_rate(target_level),
            destruction_rate=self.destruction_rule.destruction_rate(target_level),
            stat_gain=get_stat_gain(target_level, item.grade, item.type, item.base_stats),
            new_level=target_level,
            prevention_cost=self.destruction_rule.prevention_cost(item.enhancement_level),
        )

    def can_enhance(self, item: Any, credits: int, use_destruction_prevention: bool = False) -> bool:
        """Check whether an attempt is allowed (below cap and affordable)."""
        try:
            item = ensure_item(item)
            total = self._total_cost(item, self.get_enhancement_info(item), use_destruction_prevention)
        except (InvalidItemState, MaxLevelReached, DestructionPreventionUnavailable):
            return False
        return credits >= total

    def _total_cost(self, item: Item, info: EnhancementInfo, use_destruction_prevention: bool) -> int:
        if not use_destruction_prevention:
            return info.cost
        if not self.destruction_rule.can_prevent(item.enhancement_level):
            raise DestructionPreventionUnavailable(
                item.enhancement_level, self.destruction_rule.prevention_min_level
            )
        return info.cost + info.prevention_cost

    def attempt(
        self,
        item: Any,
        credits: int,
        use_destruction_prevention: bool = False,
    ) -> EnhancementAttempt:
        """
        Roll one enhancement attempt.

        A single draw r decides the outcome: r < success is a success;
        r < success + destruction destroys the item; otherwise the item
        drops one level if it is at DOWNGRADE_MIN_LEVEL or above, else
        nothing changes.

        Args:
            item: Item to enhance.
            credits: Available credits.
            use_destruction_prevention: Pay extra to suppress destruction.

        Returns:
            EnhancementAttempt describing the outcome.

        Raises:
            InvalidItemState: If the item is malformed.
            MaxLevelReached: If the item is already at the level cap.
            DestructionPreventionUnavailable: If prevention is requested
                below its minimum level.
            InsufficientFunds: If credits do not cover the cost.
        """
        item = ensure_item(item)
        info = self.get_enhancement_info(item)
        total_cost = self._total_cost(item, info, use_destruction_prevention)
        if credits < total_cost:
            raise InsufficientFunds(total_cost, credits, "enhancement")

        previous_level = item.enhancement_level
        destruction_rate = 0.0 if use_destruction_prevention else info.destruction_rate

        roll = self.rng.random()
        if roll < info.success_rate:
            outcome = EnhancementOutcome.SUCCESS
            new_level = info.new_level
            delta = info.stat_gain
        elif roll < info.success_rate + destruction_rate:
            outcome = EnhancementOutcome.DESTRUCTION
            new_level = 0
            delta = ItemStats()
        elif previous_level >= settings.DOWNGRADE_MIN_LEVEL:
            outcome = EnhancementOutcome.DOWNGRADE
            new_level = max(0, previous_level - 1)
            delta = -get_stat_gain(previous_level, item.grade, item.type, item.base_stats)
        else:
            outcome = EnhancementOutcome.FAILURE
            new_level = previous_level
            delta = ItemStats()

        logger.debug(
            "enhance.attempt: item=%s level=%s roll=%.4f outcome=%s cost=%s",
            item.id, previous_level, roll, outcome.value, total_cost,
        )
        return EnhancementAttempt(
            outcome=outcome,
            previous_level=previous_level,
            new_level=new_level,
            credits_paid=total_cost,
            stat_delta=delta,
            destruction_prevented=use_destruction_prevention,
            item_id=item.id,
        )

    def enhance(
        self,
        item: Any,
        credits: int,
        use_destruction_prevention: bool = False,
    ) -> Dict[str, Any]:
        """Attempt and apply in one step; returns the attempt and the new item."""
        attempt = self.attempt(item, credits, use_destruction_prevention)
        return {"attempt": attempt, "item": apply_enhancement_result(item, attempt)}
