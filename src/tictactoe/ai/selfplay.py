from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from tictactoe.engine import GameState, Mark, Move, Outcome, apply_move, initial_state

from .agent import AIAgent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    outcome: Outcome
    plies: int
    history: List[Move] = field(default_factory=list)

    @property
    def winner(self) -> Optional[Mark]:
        return self.outcome.winner


@dataclass
class MatchupSummary:
    wins: int = 0
    losses: int = 0
    draws: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.draws

    @property
    def score(self) -> float:
        return (self.wins + 0.5 * self.draws) / max(1, self.games)


def play_game(x_agent: AIAgent, o_agent: AIAgent) -> MatchResult:
    """Play one full game between two agents, X moving first."""
    if x_agent.mark is not Mark.X or o_agent.mark is not Mark.O:
        raise ValueError("x_agent must play X and o_agent must play O")
    state: GameState = initial_state()
    plies = 0
    while state.active:
        agent = x_agent if state.turn is Mark.X else o_agent
        index = agent.select_move(state)
        if index is None:
            raise RuntimeError(f"{agent!r} returned no move for an active game")
        state = apply_move(state, index, agent.mark)
        plies += 1
    return MatchResult(outcome=state.outcome, plies=plies, history=state.history)


def run_matchup(
    challenger: AIAgent,
    baseline: AIAgent,
    games: int,
) -> MatchupSummary:
    """Play ``games`` games, swapping sides every game; counts from the challenger's view."""
    summary = MatchupSummary()
    for game_idx in range(games):
        challenger.mark, baseline.mark = (
            (Mark.X, Mark.O) if game_idx % 2 == 0 else (Mark.O, Mark.X)
        )
        if challenger.mark is Mark.X:
            result = play_game(challenger, baseline)
        else:
            result = play_game(baseline, challenger)
        if result.winner is None:
            summary.draws += 1
        elif result.winner is challenger.mark:
            summary.wins += 1
        else:
            summary.losses += 1
    logger.info(
        "%r vs %r: %d wins, %d losses, %d draws",
        challenger,
        baseline,
        summary.wins,
        summary.losses,
        summary.draws,
    )
    return summary
