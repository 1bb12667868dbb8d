"""Item Synthesis.

Ten items of one grade are consumed to create one new item of the next
grade. Mythic is the top grade and cannot be synthesized.

Only rng.random() is drawn, in this order: one draw per consumed item
(picked without replacement), item type, then one variation draw per
non-zero base stat of the new item.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import logging
import random

from ..data.models.item import GRADE_ORDER, Item, ItemGrade, ItemType, grade_from_rank
from ..errors import SynthesisUnavailable
from .constants import SYNTHESIS_REQUIRED_COUNT, SYNTHESIS_STAGE
from .loot import new_item_id, pick_from, roll_item_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthesisPreview:
    """What a synthesis of one grade would consume and produce."""

    can_synthesize: bool
    source_grade: ItemGrade
    target_grade: Optional[ItemGrade]
    available_items: List[Item] = field(default_factory=list)
    required_count: int = SYNTHESIS_REQUIRED_COUNT
    error: Optional[str] = None


@dataclass(frozen=True)
class SynthesisResult:
    """A completed synthesis."""

    item: Item
    used_items: List[Item]
    source_grade: ItemGrade


@dataclass(frozen=True)
class GradeSynthesisStatus:
    """Synthesis availability for one grade of an inventory."""

    grade: ItemGrade
    count: int
    can_synthesize: bool
    next_grade: Optional[ItemGrade]


def get_next_grade(grade: ItemGrade) -> Optional[ItemGrade]:
    """Grade one step rarer, or None for the top grade."""
    return grade_from_rank(ItemGrade(grade).rank + 1)


def can_synthesize_grade(grade: ItemGrade) -> bool:
    return get_next_grade(grade) is not None


def get_item_count_by_grade(items: Iterable[Item], grade: ItemGrade) -> int:
    return sum(1 for item in items if item.grade == grade)


def generate_synthesis_preview(items: Iterable[Item], grade: ItemGrade) -> SynthesisPreview:
    """
    Check whether an inventory can synthesize one grade.

    Args:
        items: Candidate items; the caller leaves out equipped items.
        grade: Grade to consume.

    Returns:
        SynthesisPreview with the matching items and, when synthesis is
        not possible, the reason.
    """
    grade = ItemGrade(grade)
    target = get_next_grade(grade)
    if target is None:
        return SynthesisPreview(
            can_synthesize=False,
            source_grade=grade,
            target_grade=None,
            error=f"{grade.value} is the highest grade",
        )

    available = [item for item in items if item.grade == grade]
    if len(available) < SYNTHESIS_REQUIRED_COUNT:
        return SynthesisPreview(
            can_synthesize=False,
            source_grade=grade,
            target_grade=target,
            available_items=available,
            error=f"requires {SYNTHESIS_REQUIRED_COUNT} {grade.value} items, found {len(available)}",
        )
    return SynthesisPreview(
        can_synthesize=True,
        source_grade=grade,
        target_grade=target,
        available_items=available,
    )


def get_synthesizable_grades(items: Iterable[Item]) -> List[GradeSynthesisStatus]:
    """Synthesis status for every grade below the top one."""
    items = list(items)
    statuses = []
    for grade in GRADE_ORDER[:-1]:
        count = get_item_count_by_grade(items, grade)
        statuses.append(GradeSynthesisStatus(
            grade=grade,
            count=count,
            can_synthesize=count >= SYNTHESIS_REQUIRED_COUNT,
            next_grade=get_next_grade(grade),
        ))
    return statuses


class SynthesisSystem:
    """
    Combines items into a higher grade.

    Usage:
        synthesis = SynthesisSystem(rng=random.Random(42))
        result = synthesis.synthesize(inventory, ItemGrade.COMMON)
        inventory = [i for i in inventory if i not in result.used_items]
        inventory.append(result.item)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def pick_used_items(self, candidates: List[Item]) -> List[Item]:
        """Pick the consumed items at random, without replacement."""
        pool = list(candidates)
        used = []
        for _ in range(SYNTHESIS_REQUIRED_COUNT):
            index = min(int(self.rng.random() * len(pool)), len(pool) - 1)
            used.append(pool.pop(index))
        return used

    def create_item(self, grade: ItemGrade) -> Item:
        item_type = pick_from(list(ItemType), self.rng)
        return Item(
            id=new_item_id(),
            type=item_type,
            grade=grade,
            base_stats=roll_item_stats(item_type, grade, SYNTHESIS_STAGE, self.rng),
        )

    def synthesize(self, items: Iterable[Item], grade: ItemGrade) -> SynthesisResult:
        """
        Consume items of one grade and create one item of the next grade.

        Args:
            items: Candidate items; the caller leaves out equipped items.
            grade: Grade to consume.

        Returns:
            SynthesisResult with the new item and the consumed items.

        Raises:
            SynthesisUnavailable: If the grade is the highest or there are
                too few items of it.
        """
        preview = generate_synthesis_preview(items, grade)
        if not preview.can_synthesize:
            raise SynthesisUnavailable(preview.source_grade.value, preview.error)

        used = self.pick_used_items(preview.available_items)
        item = self.create_item(preview.target_grade)
        logger.debug(
            "synthesis.done: grade=%s -> %s type=%s used=%s",
            preview.source_grade.value, item.grade.value, item.type.value, len(used),
        )
        return SynthesisResult(item=item, used_items=used, source_grade=preview.source_grade)


def perform_synthesis(
    items: Iterable[Item],
    grade: ItemGrade,
    rng: Optional[random.Random] = None,
) -> SynthesisResult:
    """One-off synthesis."""
    return SynthesisSystem(rng).synthesize(items, grade)
