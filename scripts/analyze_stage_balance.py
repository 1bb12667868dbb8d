#!/usr/bin/env python
"""
Stage Balance Report.

Compares a player (the stage's reference player by default) with each
stage's requirements and boss.
Run with: python scripts/analyze_stage_balance.py --stages 1 10 50 100
"""

import argparse

from idle_rpg.combat.combatant import CombatantStats
from idle_rpg.config import configure_logging
from idle_rpg.core.balance import ANALYSIS_STAGES, analyze_stage_balance


def main():
    parser = argparse.ArgumentParser(description="Idle RPG Stage Balance Report")
    parser.add_argument(
        "--stages",
        type=int,
        nargs="+",
        default=ANALYSIS_STAGES,
        help="Stages to analyze",
    )
    parser.add_argument("--attack", type=int, default=None, help="Player attack")
    parser.add_argument("--defense", type=int, default=None, help="Player defense")
    parser.add_argument("--penetration", type=int, default=0, help="Player defense penetration")
    parser.add_argument("--log-level", type=str, default=None, help="Log level")
    args = parser.parse_args()

    configure_logging(args.log_level)

    player = None
    if args.attack is not None and args.defense is not None:
        player = CombatantStats(
            attack=args.attack,
            defense=args.defense,
            defense_penetration=args.penetration,
        )

    print("=" * 60)
    print("Stage Balance Report")
    print("=" * 60)

    for report in analyze_stage_balance(args.stages, player):
        print(f"\nStage {report.stage}:")
        print(f"  Player:   attack {report.player_attack}, defense {report.player_defense}")
        print(f"  Required: attack {report.required_attack}, defense {report.required_defense}")
        print(f"  Boss HP:  {report.boss_hp}")
        print(f"  Ratios:   attack {report.attack_ratio:.2f}x, defense {report.defense_ratio:.2f}x")
        print(f"  Rating:   {report.rating.value}")
        outcome = "WIN" if report.preview.can_win else report.preview.result.value.upper()
        print(
            f"  Preview:  {outcome} in {report.preview.estimated_rounds} rounds "
            f"({report.preview.player_survival_rate:.0%} HP left)"
        )


if __name__ == "__main__":
    main()
