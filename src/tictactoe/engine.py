"""Core rules engine for Tic-Tac-Toe.

The engine is deterministic and UI-agnostic so it can be shared by the
session layer, the computer player and the HTTP bridge. Cells are addressed
by a zero-based, row-major index (0-2 top row, 3-5 middle, 6-8 bottom).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

BOARD_SIZE = 9
ROW_LENGTH = 3
Line = Tuple[int, int, int]

# Fixed enumeration order: rows, columns, then both diagonals.
LINES: Sequence[Line] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Mark(str, Enum):
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


Cell = Optional[Mark]
Board = List[Cell]


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"

    @classmethod
    def won_by(cls, mark: Mark) -> "Outcome":
        return cls.X_WINS if mark is Mark.X else cls.O_WINS

    @property
    def terminal(self) -> bool:
        return self is not Outcome.IN_PROGRESS

    @property
    def winner(self) -> Optional[Mark]:
        if self is Outcome.X_WINS:
            return Mark.X
        if self is Outcome.O_WINS:
            return Mark.O
        return None


class IllegalMove(ValueError):
    """Raised when a move violates the rules for the current state."""


@dataclass(frozen=True)
class Move:
    index: int
    mark: Mark


@dataclass
class GameState:
    board: Board = field(default_factory=lambda: empty_board())
    turn: Mark = Mark.X
    outcome: Outcome = Outcome.IN_PROGRESS
    history: List[Move] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.outcome is Outcome.IN_PROGRESS

    @property
    def winner(self) -> Optional[Mark]:
        return self.outcome.winner


def empty_board() -> Board:
    return [None] * BOARD_SIZE


def index_in_bounds(index: int) -> bool:
    return 0 <= index < BOARD_SIZE


def index_to_coord(index: int) -> Tuple[int, int]:
    """Return the zero-based (row, column) of a cell index."""
    if not index_in_bounds(index):
        raise ValueError(f"Out of bounds cell index: {index}")
    return divmod(index, ROW_LENGTH)


def empty_cells(board: Sequence[Cell]) -> List[int]:
    return [idx for idx, cell in enumerate(board) if cell is None]


def winning_line(board: Sequence[Cell]) -> Optional[Line]:
    """Return the first line holding three identical marks, if any."""
    for a, b, c in LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return (a, b, c)
    return None


def evaluate_outcome(board: Sequence[Cell]) -> Outcome:
    line = winning_line(board)
    if line is not None:
        return Outcome.won_by(board[line[0]])
    if all(cell is not None for cell in board):
        return Outcome.DRAW
    return Outcome.IN_PROGRESS


def initial_state() -> GameState:
    """Create an empty board with X to move."""
    return GameState(board=empty_board(), turn=Mark.X)


def apply_move(state: GameState, index: int, mark: Optional[Mark] = None) -> GameState:
    if not state.active:
        raise IllegalMove("Game already finished")
    if isinstance(index, bool) or not isinstance(index, int) or not index_in_bounds(index):
        raise IllegalMove(f"Cell index out of range: {index!r}")
    if state.board[index] is not None:
        raise IllegalMove(f"Cell {index} is already occupied")
    mover = state.turn if mark is None else mark
    if mover is not state.turn:
        raise IllegalMove(f"Not {mover.value}'s turn")

    board = list(state.board)
    board[index] = mover
    outcome = evaluate_outcome(board)

    history = list(state.history)
    history.append(Move(index=index, mark=mover))

    return GameState(
        board=board,
        turn=mover.opponent() if outcome is Outcome.IN_PROGRESS else mover,
        outcome=outcome,
        history=history,
    )


def serialize_state(state: GameState) -> Dict:
    """Serialize GameState to a JSON-friendly dict."""
    line = winning_line(state.board) if state.winner is not None else None
    return {
        "board": [cell.value if cell else None for cell in state.board],
        "turn": state.turn.value,
        "outcome": state.outcome.value,
        "winner": state.winner.value if state.winner else None,
        "winning_line": list(line) if line else None,
        "history": [{"index": m.index, "mark": m.mark.value} for m in state.history],
    }


def deserialize_state(payload: Dict) -> GameState:
    raw_board = payload.get("board") or [None] * BOARD_SIZE
    if len(raw_board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(raw_board)}")
    board: Board = [Mark(cell) if cell else None for cell in raw_board]
    history = [
        Move(index=int(m["index"]), mark=Mark(m["mark"])) for m in payload.get("history") or []
    ]
    return GameState(
        board=board,
        turn=Mark(payload.get("turn", "X")),
        outcome=evaluate_outcome(board),
        history=history,
    )
