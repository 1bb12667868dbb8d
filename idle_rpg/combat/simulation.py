"""Battle Simulation.

Runs battles to completion through the same transitions as the interactive
path, either once (a preview before committing to a fight) or many times
(Monte Carlo win-rate estimate).
"""

from dataclasses import dataclass
from typing import Optional, List, Tuple
import logging
import random
import statistics

from ..config import settings
from ..core.curves import turn_limit_for
from ..data.models.stage import BossDescriptor
from .battle import (
    BattleResult,
    BattleState,
    apply_boss_attack,
    apply_player_attack,
    start_battle,
)
from .combatant import CombatantStats

logger = logging.getLogger(__name__)


def _fixed_clock() -> float:
    return 0.0


@dataclass(frozen=True)
class BattlePreview:
    """Outcome of one simulated battle."""

    can_win: bool
    estimated_rounds: int
    player_survival_rate: float  # Remaining player HP share (0.0 to 1.0)
    result: BattleResult


@dataclass
class SimulationSummary:
    """
    Result of Monte Carlo battle simulation.

    Contains outcome rates and round statistics over many runs.
    """

    win_rate: float  # 0.0 to 1.0
    timeout_rate: float
    defeat_rate: float

    avg_rounds: float
    min_rounds: int
    max_rounds: int

    avg_player_survival_rate: float

    iterations: int

    # Confidence interval (95%)
    win_rate_confidence: Tuple[float, float] = (0.0, 1.0)


def run_to_completion(
    boss: BossDescriptor,
    player: CombatantStats,
    rng: Optional[random.Random] = None,
    max_rounds: Optional[int] = None,
    turn_limit: Optional[int] = None,
) -> BattleState:
    """
    Drive a battle to a terminal state.

    The effective turn limit is min(max_rounds, turn_limit).

    Returns:
        The final BattleState.
    """
    rng = rng or random.Random()
    rounds = max_rounds if max_rounds is not None else settings.MAX_BATTLE_ROUNDS
    limit = turn_limit if turn_limit is not None else turn_limit_for(boss.stage)
    limit = max(1, min(rounds, limit))

    state = start_battle(boss, player, turn_limit=limit, clock=_fixed_clock)
    while not state.is_over:
        if state.is_player_turn:
            state = apply_player_attack(state, player, rng, clock=_fixed_clock)
        else:
            state = apply_boss_attack(state, player, clock=_fixed_clock)
    return state


def simulate_battle(
    boss: BossDescriptor,
    player: CombatantStats,
    rng: Optional[random.Random] = None,
    max_rounds: Optional[int] = None,
    turn_limit: Optional[int] = None,
) -> BattlePreview:
    """
    Simulate a battle to preview its outcome.

    Args:
        boss: Boss to fight.
        player: Player stat snapshot.
        rng: Random source for critical and additional attack rolls.
        max_rounds: Safety bound on player turns (defaults to settings).
        turn_limit: Override for the stage's turn limit.

    Returns:
        BattlePreview for the simulated battle.
    """
    state = run_to_completion(boss, player, rng, max_rounds, turn_limit)
    survival = state.player_hp / state.player_max_hp if state.player_max_hp > 0 else 0.0
    preview = BattlePreview(
        can_win=state.result == BattleResult.VICTORY,
        estimated_rounds=state.turn,
        player_survival_rate=survival,
        result=state.result,
    )
    logger.debug(
        "battle.simulate: boss=%s result=%s rounds=%s survival=%.2f",
        boss.name, state.result.value, state.turn, survival,
    )
    return preview


class BattleSimulator:
    """
    Monte Carlo battle simulator.

    Usage:
        simulator = BattleSimulator(base_seed=42)
        summary = simulator.simulate(boss, player, iterations=500)
        print(f"Win rate: {summary.win_rate:.1%}")
    """

    def __init__(self, base_seed: Optional[int] = None):
        """
        Initialize simulator.

        Args:
            base_seed: Base seed for reproducibility (seeds will be derived).
        """
        self.base_seed = base_seed
        self.rng = random.Random(base_seed)

    def simulate(
        self,
        boss: BossDescriptor,
        player: CombatantStats,
        iterations: Optional[int] = None,
        max_rounds: Optional[int] = None,
    ) -> SimulationSummary:
        """
        Run Monte Carlo simulation.

        Args:
            boss: Boss to fight.
            player: Player stat snapshot.
            iterations: Number of runs (defaults to settings, capped at
                settings.MAX_SIMULATION_COUNT).
            max_rounds: Safety bound on player turns per run.

        Returns:
            SimulationSummary with statistical analysis.
        """
        if iterations is None:
            iterations = settings.DEFAULT_SIMULATION_COUNT
        iterations = max(0, min(iterations, settings.MAX_SIMULATION_COUNT))

        results: List[BattleState] = []
        for i in range(iterations):
            rng = random.Random(self._get_iteration_seed(i))
            results.append(run_to_completion(boss, player, rng, max_rounds))

        return self._analyze_results(results, iterations)

    def _get_iteration_seed(self, iteration: int) -> int:
        """Get deterministic seed for an iteration."""
        if self.base_seed is not None:
            return self.base_seed + iteration
        return self.rng.randint(0, 2**31)

    def _analyze_results(self, results: List[BattleState], iterations: int) -> SimulationSummary:
        """Analyze simulation results."""
        wins = sum(1 for r in results if r.result == BattleResult.VICTORY)
        timeouts = sum(1 for r in results if r.result == BattleResult.TIMEOUT)
        defeats = sum(1 for r in results if r.result == BattleResult.DEFEAT)

        rounds = [r.turn for r in results]
        survival = [r.player_hp / r.player_max_hp for r in results if r.player_max_hp > 0]

        return SimulationSummary(
            win_rate=wins / iterations if iterations > 0 else 0.0,
            timeout_rate=timeouts / iterations if iterations > 0 else 0.0,
            defeat_rate=defeats / iterations if iterations > 0 else 0.0,
            avg_rounds=statistics.mean(rounds) if rounds else 0.0,
            min_rounds=min(rounds) if rounds else 0,
            max_rounds=max(rounds) if rounds else 0,
            avg_player_survival_rate=statistics.mean(survival) if survival else 0.0,
            iterations=iterations,
            win_rate_confidence=self._calculate_confidence_interval(wins, iterations),
        )

    def _calculate_confidence_interval(self, successes: int, n: int) -> Tuple[float, float]:
        """Calculate Wilson score confidence interval."""
        if n == 0:
            return (0.0, 1.0)

        z = 1.96  # 95% confidence
        p = successes / n

        denominator = 1 + z * z / n
        center = (p + z * z / (2 * n)) / denominator

        spread = z * ((p * (1 - p) / n + z * z / (4 * n * n)) ** 0.5) / denominator

        lower = max(0.0, center - spread)
        upper = min(1.0, center + spread)
        return (lower, upper)
