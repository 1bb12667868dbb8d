"""Stage Progression.

Connects the engines for the caller's game loop: boss previews, stage
access, victory rewards (credits, drops, credit rate) and offline income.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import math
import random

from ..combat.combatant import CombatantStats
from ..combat.simulation import BattlePreview, simulate_battle
from ..config import settings
from ..core.constants import MIN_STAGE, MAX_STAGE, BASE_CREDIT_RATE
from ..core.loot import DropEvent, ItemDropSystem
from ..core.stage_generator import get_stage_info
from ..data.models.item import Item
from ..data.models.stage import StageInfo

logger = logging.getLogger(__name__)


@dataclass
class VictoryRewards:
    """Everything a boss victory grants."""

    new_stage: int
    new_credit_rate: float
    credit_reward: int
    dropped_items: List[Item] = field(default_factory=list)
    stage_info: Optional[StageInfo] = None
    is_game_complete: bool = False


@dataclass(frozen=True)
class StageProgress:
    """How far through the stages a player is."""

    current_stage: int
    cleared_stages: int
    total_stages: int
    progress: float  # 0.0 to 1.0


def get_battle_preview(
    player: CombatantStats,
    stage: int,
    rng: Optional[random.Random] = None,
) -> BattlePreview:
    """Simulate the stage boss fight without committing to it."""
    info = get_stage_info(stage)
    return simulate_battle(info.boss, player, rng=rng)


def can_win_boss_battle(
    player: CombatantStats,
    stage: int,
    rng: Optional[random.Random] = None,
) -> bool:
    return get_battle_preview(player, stage, rng).can_win


def can_access_stage(target_stage: int, current_stage: int) -> bool:
    """Stages up to the current one are open."""
    return MIN_STAGE <= target_stage <= current_stage


def can_progress_to_next_stage(
    player: CombatantStats,
    current_stage: int,
    rng: Optional[random.Random] = None,
) -> bool:
    """The next stage opens by beating the current stage's boss."""
    if current_stage + 1 > MAX_STAGE:
        return False
    return can_win_boss_battle(player, current_stage, rng)


def calculate_new_credit_rate(base_credit_rate: float, new_stage: int) -> float:
    """Credit rate after reaching a stage: base rate x the stage's multiplier."""
    if not MIN_STAGE <= new_stage <= MAX_STAGE:
        return base_credit_rate
    return base_credit_rate * get_stage_info(new_stage).credit_multiplier


def calculate_stage_clear_reward(stage: int) -> int:
    """One-time credit reward for clearing a stage."""
    return get_stage_info(stage).clear_reward


def get_required_stats_gap(player: CombatantStats, stage: int) -> Dict[str, int]:
    """Attack and defense still missing for a stage's requirements."""
    info = get_stage_info(stage)
    return {
        "attack": max(0, info.required_attack - player.attack),
        "defense": max(0, info.required_defense - player.defense),
    }


def meets_stage_requirements(player: CombatantStats, stage: int) -> bool:
    gap = get_required_stats_gap(player, stage)
    return gap["attack"] == 0 and gap["defense"] == 0


def calculate_stage_progress(current_stage: int) -> StageProgress:
    """Share of stages cleared (the current stage is not yet cleared)."""
    current = max(MIN_STAGE, min(MAX_STAGE, current_stage))
    cleared = current - MIN_STAGE
    total = MAX_STAGE - MIN_STAGE + 1
    return StageProgress(
        current_stage=current,
        cleared_stages=cleared,
        total_stages=total,
        progress=cleared / total,
    )


def process_battle_victory_rewards(
    stage: int,
    rng: Optional[random.Random] = None,
) -> List[Item]:
    """
    Roll the item drops for a boss victory.

    A guaranteed stage-clear drop, plus a bonus drop with
    settings.BONUS_DROP_CHANCE from settings.BONUS_DROP_MIN_STAGE onward.
    """
    rng = rng or random.Random()
    drops = ItemDropSystem(rng)
    items: List[Item] = []

    result = drops.check_drop(stage, DropEvent.STAGE_CLEAR)
    if result.success:
        items.append(result.item)

    if stage >= settings.BONUS_DROP_MIN_STAGE and rng.random() < settings.BONUS_DROP_CHANCE:
        bonus = drops.check_drop(stage, DropEvent.STAGE_CLEAR)
        if bonus.success:
            items.append(bonus.item)

    return items


def process_battle_victory(
    current_stage: int,
    base_credit_rate: float = BASE_CREDIT_RATE,
    rng: Optional[random.Random] = None,
) -> VictoryRewards:
    """
    Resolve a boss victory at the current stage.

    Args:
        current_stage: Stage whose boss was beaten.
        base_credit_rate: Credit rate before stage multipliers.
        rng: Random source for drops.

    Returns:
        VictoryRewards; beating the final stage completes the game and
        does not advance the stage.
    """
    items = process_battle_victory_rewards(current_stage, rng)
    reward = calculate_stage_clear_reward(current_stage)

    if current_stage >= MAX_STAGE:
        logger.info("progression.complete: stage=%s", current_stage)
        return VictoryRewards(
            new_stage=current_stage,
            new_credit_rate=base_credit_rate,
            credit_reward=reward,
            dropped_items=items,
            is_game_complete=True,
        )

    new_stage = current_stage + 1
    logger.debug(
        "progression.victory: stage=%s new_stage=%s reward=%s drops=%s",
        current_stage, new_stage, reward, len(items),
    )
    return VictoryRewards(
        new_stage=new_stage,
        new_credit_rate=calculate_new_credit_rate(base_credit_rate, new_stage),
        credit_reward=reward,
        dropped_items=items,
        stage_info=get_stage_info(new_stage),
    )


def calculate_offline_credits(
    elapsed_seconds: float,
    credit_per_second: float,
    max_offline_hours: Optional[float] = None,
) -> int:
    """
    Credits earned while away, capped at max_offline_hours.

    Args:
        elapsed_seconds: Time since the last save.
        credit_per_second: Current credit rate.
        max_offline_hours: Cap (defaults to settings.MAX_OFFLINE_HOURS).
    """
    hours = settings.MAX_OFFLINE_HOURS if max_offline_hours is None else max_offline_hours
    seconds = min(math.floor(max(0.0, elapsed_seconds)), hours * 3600)
    return math.floor(seconds * credit_per_second)
