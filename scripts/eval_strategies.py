#!/usr/bin/env python3
"""
Head-to-head evaluator for computer-player strategies.

Example:
  PYTHONPATH=src python3 scripts/eval_strategies.py \
    --challenger optimal \
    --baseline random \
    --games 200
"""

from __future__ import annotations

import argparse
import math
import os
import sys
from typing import Optional

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tictactoe.ai import AIAgent, Strategy, run_matchup

STRATEGIES = [s.value for s in Strategy]


def elo_from_score(score: float) -> float:
    score = min(0.9999, max(0.0001, score))
    return -400.0 * math.log10((1.0 / score) - 1.0)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate a strategy against a baseline.")
    parser.add_argument("--challenger", choices=STRATEGIES, default="optimal")
    parser.add_argument("--baseline", choices=STRATEGIES, default="random")
    parser.add_argument("--games", type=int, default=200, help="Number of games (default: 200).")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42).")
    args = parser.parse_args(argv)

    challenger = AIAgent(strategy=Strategy(args.challenger), seed=args.seed)
    baseline = AIAgent(strategy=Strategy(args.baseline), seed=args.seed + 1)
    summary = run_matchup(challenger, baseline, games=args.games)

    total = summary.games
    score = summary.score
    elo = elo_from_score(score)
    variance = score * (1.0 - score) / max(1, total)
    ci = 1.96 * math.sqrt(variance)
    elo_lo = elo_from_score(max(0.0001, score - ci))
    elo_hi = elo_from_score(min(0.9999, score + ci))

    print(f"{args.challenger} vs {args.baseline}")
    print(f"Games: {total}  Wins: {summary.wins}  Losses: {summary.losses}  Draws: {summary.draws}")
    print(f"Score: {score:.4f}")
    print(f"Elo estimate: {elo:+.1f} (95% CI: {elo_lo:+.1f} .. {elo_hi:+.1f})")
    if args.challenger == Strategy.OPTIMAL.value and summary.losses:
        print("Optimal strategy lost a game.")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
