from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional, Sequence

from tictactoe.engine import (
    Board,
    Cell,
    GameState,
    Mark,
    Outcome,
    empty_cells,
    evaluate_outcome,
)

logger = logging.getLogger(__name__)

WIN_SCORE = 10


class Strategy(str, Enum):
    RANDOM = "random"
    OPTIMAL = "optimal"


def random_move(board: Sequence[Cell], rng: Optional[random.Random] = None) -> int:
    """Pick an empty cell uniformly at random."""
    open_cells = empty_cells(board)
    if not open_cells:
        raise ValueError("No empty cells to choose from")
    chooser = rng or random
    return chooser.choice(open_cells)


def shaped_score(score: int, depth: int) -> int:
    """Pull a leaf score towards zero by ``depth``: win sooner, lose later."""
    if score == 0:
        return 0
    return score - depth * (score // abs(score))


def _leaf_score(outcome: Outcome, mark: Mark) -> int:
    if outcome.winner is mark:
        return WIN_SCORE
    if outcome.winner is mark.opponent():
        return -WIN_SCORE
    return 0


def minimax(scratch: Board, mark: Mark, depth: int, maximizing: bool) -> int:
    """Score ``scratch`` for ``mark``; the board is restored before returning."""
    outcome = evaluate_outcome(scratch)
    if outcome.terminal:
        return shaped_score(_leaf_score(outcome, mark), depth)

    mover = mark if maximizing else mark.opponent()
    best = -WIN_SCORE * 2 if maximizing else WIN_SCORE * 2
    for idx in empty_cells(scratch):
        scratch[idx] = mover
        value = minimax(scratch, mark, depth + 1, not maximizing)
        scratch[idx] = None
        if maximizing:
            best = max(best, value)
        else:
            best = min(best, value)
    return best


def minimax_move(board: Sequence[Cell], mark: Mark) -> int:
    """Exhaustive minimax; ties go to the lowest cell index."""
    if evaluate_outcome(board).terminal:
        raise ValueError("Game already finished")
    scratch: Board = list(board)
    best_value: Optional[int] = None
    best_index = -1
    for idx in empty_cells(scratch):
        scratch[idx] = mark
        value = minimax(scratch, mark, 1, maximizing=False)
        scratch[idx] = None
        if best_value is None or value > best_value:
            best_value = value
            best_index = idx
    if best_index < 0:
        raise ValueError("No empty cells to choose from")
    logger.debug("minimax picked %d for %s (value %d)", best_index, mark.value, best_value)
    return best_index


def select_move(
    board: Sequence[Cell],
    mark: Mark,
    strategy: Strategy,
    rng: Optional[random.Random] = None,
) -> int:
    if evaluate_outcome(board).terminal:
        raise ValueError("Game already finished")
    if Strategy(strategy) is Strategy.OPTIMAL:
        return minimax_move(board, mark)
    return random_move(board, rng)


class AIAgent:
    """Computer opponent playing one mark with a fixed strategy."""

    def __init__(
        self,
        mark: Mark = Mark.O,
        strategy: Strategy = Strategy.RANDOM,
        seed: Optional[int] = None,
    ) -> None:
        self.mark = mark
        self.strategy = Strategy(strategy)
        self.rng = random.Random(seed)

    def select_move(self, state: GameState) -> Optional[int]:
        if not state.active or not empty_cells(state.board):
            return None
        return select_move(list(state.board), self.mark, self.strategy, self.rng)

    def __repr__(self) -> str:
        return f"AIAgent(mark={self.mark.value}, strategy={self.strategy.value})"
