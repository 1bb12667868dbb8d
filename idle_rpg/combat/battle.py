"""Turn-based Boss Battle State Machine.

BattleState is an immutable value; every transition returns a new state:

    state = start_battle(boss, player)
    state = apply_player_attack(state, player, rng)
    state = apply_boss_attack(state, player)

ongoing -> {ongoing, victory, defeat, timeout}; terminal once not ongoing.
The player acts first, and the turn counter increments once per player turn.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple
import logging
import random
import time

from ..core.curves import turn_limit_for
from ..data.models.stage import BossDescriptor
from ..errors import InvalidTurn
from .combatant import CombatantStats
from .damage import (
    calculate_damage,
    calculate_player_max_hp,
    resolve_attack,
    roll_additional_attack,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class BattleResult(Enum):
    """Battle outcome."""

    ONGOING = "ongoing"
    VICTORY = "victory"
    DEFEAT = "defeat"
    TIMEOUT = "timeout"


class LogEntryType(Enum):
    """Kinds of battle log entries."""

    BATTLE_START = "battle_start"
    PLAYER_ATTACK = "player_attack"
    BOSS_ATTACK = "boss_attack"
    BATTLE_END = "battle_end"


@dataclass(frozen=True)
class BattleLogEntry:
    """One line of the battle transcript (display only)."""

    seq: int
    timestamp: float
    type: LogEntryType
    message: str
    damage: Optional[int] = None
    is_critical: bool = False


@dataclass(frozen=True)
class BattleState:
    """Snapshot of a battle. Owned by a single caller; never shared."""

    boss: BossDescriptor
    boss_hp: int
    player_hp: int
    player_max_hp: int
    turn: int
    turn_limit: int
    log: Tuple[BattleLogEntry, ...] = ()
    result: BattleResult = BattleResult.ONGOING
    is_player_turn: bool = True
    started_at: float = 0.0
    ended_at: Optional[float] = None

    @property
    def is_over(self) -> bool:
        return self.result != BattleResult.ONGOING

    @property
    def boss_max_hp(self) -> int:
        return self.boss.max_hp


@dataclass
class BattleStats:
    """Totals derived from a battle log."""

    total_player_damage: int = 0
    total_boss_damage: int = 0
    player_attacks: int = 0
    boss_attacks: int = 0
    critical_hits: int = 0
    turns: int = 0
    duration: float = 0.0


def _append_log(
    state: BattleState,
    entry_type: LogEntryType,
    message: str,
    clock: Clock,
    damage: Optional[int] = None,
    is_critical: bool = False,
) -> Tuple[BattleLogEntry, ...]:
    entry = BattleLogEntry(
        seq=len(state.log),
        timestamp=clock(),
        type=entry_type,
        message=message,
        damage=damage,
        is_critical=is_critical,
    )
    return state.log + (entry,)


def _finish(state: BattleState, result: BattleResult, message: str, clock: Clock) -> BattleState:
    log = _append_log(state, LogEntryType.BATTLE_END, message, clock)
    logger.debug(
        "battle.end: boss=%s result=%s turn=%s boss_hp=%s player_hp=%s",
        state.boss.name, result.value, state.turn, state.boss_hp, state.player_hp,
    )
    return replace(state, log=log, result=result, ended_at=log[-1].timestamp)


def _reject(state: BattleState, reason: str, strict: bool) -> BattleState:
    if strict:
        raise InvalidTurn(reason, state.result.value)
    logger.debug("battle.invalid_turn: %s result=%s", reason, state.result.value)
    return state


def start_battle(
    boss: BossDescriptor,
    player: CombatantStats,
    turn_limit: Optional[int] = None,
    clock: Clock = time.time,
) -> BattleState:
    """
    Create the initial state for a boss battle.

    Args:
        boss: Boss to fight.
        player: Player stat snapshot.
        turn_limit: Override for the stage's turn limit.
        clock: Timestamp source for log entries.

    Returns:
        Ongoing BattleState with the player to act.
    """
    player_max_hp = calculate_player_max_hp(player)
    limit = turn_limit if turn_limit is not None else turn_limit_for(boss.stage)
    now = clock()
    start_entry = BattleLogEntry(
        seq=0,
        timestamp=now,
        type=LogEntryType.BATTLE_START,
        message=f"Battle against {boss.name} begins!",
    )
    logger.debug(
        "battle.start: boss=%s hp=%s player_hp=%s turn_limit=%s",
        boss.name, boss.max_hp, player_max_hp, limit,
    )
    return BattleState(
        boss=boss,
        boss_hp=boss.max_hp,
        player_hp=player_max_hp,
        player_max_hp=player_max_hp,
        turn=0,
        turn_limit=limit,
        log=(start_entry,),
        started_at=now,
    )


def apply_player_attack(
    state: BattleState,
    player: CombatantStats,
    rng: Optional[random.Random] = None,
    strict: bool = False,
    clock: Clock = time.time,
) -> BattleState:
    """
    Resolve the player's turn.

    One attack, plus a second attack in the same turn if the additional
    attack roll succeeds. Then: boss HP <= 0 is a victory, reaching the
    turn limit is a timeout, otherwise the boss acts next.

    Args:
        state: Current battle state.
        player: Player stat snapshot.
        rng: Random source for critical and additional attack rolls.
        strict: Raise InvalidTurn instead of returning the state unchanged.
        clock: Timestamp source for log entries.

    Returns:
        The next BattleState.
    """
    if state.is_over:
        return _reject(state, "Battle is already over", strict)
    if not state.is_player_turn:
        return _reject(state, "It is not the player's turn", strict)

    rng = rng or random.Random()
    boss = state.boss

    roll = resolve_attack(
        player.attack,
        boss.defense,
        player.defense_penetration,
        player.critical_chance,
        player.critical_damage_multiplier,
        rng,
    )
    boss_hp = max(0, state.boss_hp - roll.damage)
    crit_text = " Critical hit!" if roll.is_critical else ""
    log = _append_log(
        state, LogEntryType.PLAYER_ATTACK,
        f"You deal {roll.damage} damage to {boss.name}.{crit_text}",
        clock, roll.damage, roll.is_critical,
    )
    state = replace(state, boss_hp=boss_hp, log=log)

    if state.boss_hp > 0 and roll_additional_attack(player, rng):
        extra = resolve_attack(
            player.attack,
            boss.defense,
            player.defense_penetration,
            player.critical_chance,
            player.critical_damage_multiplier,
            rng,
        )
        crit_text = " Critical hit!" if extra.is_critical else ""
        log = _append_log(
            state, LogEntryType.PLAYER_ATTACK,
            f"Additional attack! You deal {extra.damage} damage to {boss.name}.{crit_text}",
            clock, extra.damage, extra.is_critical,
        )
        state = replace(state, boss_hp=max(0, state.boss_hp - extra.damage), log=log)

    state = replace(state, turn=state.turn + 1)

    if state.boss_hp <= 0:
        return _finish(state, BattleResult.VICTORY, f"{boss.name} has been defeated!", clock)
    if state.turn >= state.turn_limit:
        return _finish(state, BattleResult.TIMEOUT, "Time is up! The boss survived.", clock)

    return replace(state, is_player_turn=False)


def apply_boss_attack(
    state: BattleState,
    player: CombatantStats,
    strict: bool = False,
    clock: Clock = time.time,
) -> BattleState:
    """
    Resolve the boss's turn: a single attack, no critical, no extra attack.

    Args:
        state: Current battle state.
        player: Player stat snapshot (defense absorbs the hit).
        strict: Raise InvalidTurn instead of returning the state unchanged.
        clock: Timestamp source for log entries.

    Returns:
        The next BattleState.
    """
    if state.is_over:
        return _reject(state, "Battle is already over", strict)
    if state.is_player_turn:
        return _reject(state, "It is not the boss's turn", strict)

    boss = state.boss
    damage = calculate_damage(boss.attack, player.defense, 0)
    player_hp = max(0, state.player_hp - damage)
    log = _append_log(
        state, LogEntryType.BOSS_ATTACK,
        f"{boss.name} deals {damage} damage to you.",
        clock, damage,
    )
    state = replace(state, player_hp=player_hp, log=log)

    if state.player_hp <= 0:
        return _finish(state, BattleResult.DEFEAT, "You have been defeated...", clock)

    return replace(state, is_player_turn=True)


def process_battle_turn(
    state: BattleState,
    player: CombatantStats,
    rng: Optional[random.Random] = None,
    is_player_action: bool = True,
    strict: bool = False,
    clock: Clock = time.time,
) -> BattleState:
    """Dispatch to the player or boss transition."""
    if is_player_action:
        return apply_player_attack(state, player, rng, strict=strict, clock=clock)
    return apply_boss_attack(state, player, strict=strict, clock=clock)


def restart_battle(
    state: BattleState,
    player: CombatantStats,
    clock: Clock = time.time,
) -> BattleState:
    """Start a fresh battle against the same boss with the same turn limit."""
    return start_battle(state.boss, player, turn_limit=state.turn_limit, clock=clock)


def calculate_battle_stats(state: BattleState) -> BattleStats:
    """
    Summarize a battle from its log.

    Args:
        state: Any battle state (ongoing or finished).

    Returns:
        BattleStats with damage totals, attack counts and duration.
    """
    stats = BattleStats(turns=state.turn)
    for entry in state.log:
        if entry.type == LogEntryType.PLAYER_ATTACK:
            stats.player_attacks += 1
            stats.total_player_damage += entry.damage or 0
            if entry.is_critical:
                stats.critical_hits += 1
        elif entry.type == LogEntryType.BOSS_ATTACK:
            stats.boss_attacks += 1
            stats.total_boss_damage += entry.damage or 0

    end = state.ended_at if state.ended_at is not None else state.log[-1].timestamp
    stats.duration = max(0.0, end - state.started_at)
    return stats
