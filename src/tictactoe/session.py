"""Mutable game session shared with the UI layer.

A session owns the current :class:`GameState`, the score tally and the game
configuration. Invalid move requests are ignored rather than raised; the
boolean returned by :meth:`GameSession.apply_move` tells programmatic
callers whether the move was taken.
"""
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from tictactoe.ai.agent import Strategy, select_move
from tictactoe.engine import (
    Board,
    GameState,
    IllegalMove,
    Mark,
    Move,
    Outcome,
    apply_move,
    empty_cells,
    initial_state,
    serialize_state,
)
from tictactoe.scheduler import AsyncioScheduler, Cancellable, Scheduler

logger = logging.getLogger(__name__)

DEFAULT_COMPUTER_DELAY = 0.5
MoveListener = Callable[[Move, GameState], None]


class GameMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


class GameSession:
    def __init__(
        self,
        mode: Union[GameMode, str] = GameMode.SINGLE,
        difficulty: Union[Strategy, str] = Strategy.RANDOM,
        computer_mark: Mark = Mark.O,
        computer_delay: float = DEFAULT_COMPUTER_DELAY,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.mode = GameMode(mode)
        self.difficulty = Strategy(difficulty)
        self.computer_mark = computer_mark
        self.computer_delay = computer_delay
        self.feedback_enabled = True
        self.state: GameState = initial_state()
        self._scores: Dict[Mark, int] = {Mark.X: 0, Mark.O: 0}
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._rng = rng or random.Random()
        self._listeners: List[Tuple[MoveListener, bool]] = []
        self._pending: Optional[Cancellable] = None
        self._maybe_schedule_computer()

    # --- read accessors ---
    @property
    def board(self) -> Board:
        return list(self.state.board)

    @property
    def turn(self) -> Mark:
        return self.state.turn

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome

    @property
    def scores(self) -> Dict[Mark, int]:
        return dict(self._scores)

    @property
    def computer_pending(self) -> bool:
        return self._pending is not None

    @property
    def computer_to_move(self) -> bool:
        return (
            self.mode is GameMode.SINGLE
            and self.state.active
            and self.state.turn is self.computer_mark
        )

    @property
    def status_text(self) -> str:
        if self.outcome is Outcome.DRAW:
            return "It's a Draw!"
        if self.state.winner is not None:
            return f"Winner: {self.state.winner.value}"
        return f"Current Player: {self.turn.value}"

    def snapshot(self) -> Dict:
        payload = serialize_state(self.state)
        payload.update(
            {
                "mode": self.mode.value,
                "difficulty": self.difficulty.value,
                "computer_mark": self.computer_mark.value,
                "scores": {mark.value: count for mark, count in self._scores.items()},
                "status": self.status_text,
                "feedback_enabled": self.feedback_enabled,
                "computer_pending": self.computer_pending,
            }
        )
        return payload

    # --- listeners ---
    def subscribe(self, listener: MoveListener, feedback: bool = True) -> Callable[[], None]:
        """Call ``listener(move, state)`` after every placed mark.

        Feedback listeners (sound, haptics) are skipped while feedback is
        disabled; observers registered with ``feedback=False`` always run.
        """
        entry = (listener, feedback)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def _notify(self, move: Move) -> None:
        for listener, feedback in list(self._listeners):
            if feedback and not self.feedback_enabled:
                continue
            try:
                listener(move, self.state)
            except Exception:
                logger.exception("Move listener %r failed", listener)

    # --- moves ---
    def apply_move(self, index: int) -> bool:
        """Play ``index`` for the side to move on behalf of a human."""
        if self.computer_to_move:
            logger.debug("Ignoring move %r: waiting for the computer", index)
            return False
        return self._place(index, self.state.turn)

    def select_move(self) -> Optional[int]:
        """Return the move the configured strategy would play for the side to move."""
        if not self.state.active or not empty_cells(self.state.board):
            return None
        return select_move(list(self.state.board), self.state.turn, self.difficulty, self._rng)

    def computer_move(self) -> bool:
        """Play the computer's move immediately, dropping any pending timer."""
        self._cancel_pending()
        if not self.computer_to_move:
            return False
        index = self.select_move()
        if index is None:
            return False
        return self._place(index, self.computer_mark)

    def _place(self, index: int, mark: Mark) -> bool:
        try:
            new_state = apply_move(self.state, index, mark)
        except IllegalMove as exc:
            logger.debug("Rejected move %r for %s: %s", index, mark.value, exc)
            return False

        self.state = new_state
        move = new_state.history[-1]
        logger.debug("%s played %d", mark.value, index)
        winner = new_state.winner
        if winner is not None:
            self._scores[winner] += 1
            logger.info("%s wins (score %d)", winner.value, self._scores[winner])
        elif new_state.outcome is Outcome.DRAW:
            logger.info("Game drawn")

        self._notify(move)
        self._maybe_schedule_computer()
        return True

    # --- deferred computer move ---
    def _maybe_schedule_computer(self) -> None:
        if self._pending is not None or not self.computer_to_move:
            return
        self._pending = self._scheduler.call_later(self.computer_delay, self._fire_computer_move)

    def _fire_computer_move(self) -> None:
        self._pending = None
        if not self.computer_to_move:
            return
        self.computer_move()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # --- configuration ---
    def reset_game(self) -> None:
        """Start a new board with X to move; the score tally is kept."""
        self._cancel_pending()
        self.state = initial_state()
        logger.info("Game reset (%s, %s)", self.mode.value, self.difficulty.value)
        self._maybe_schedule_computer()

    def set_mode(self, mode: Union[GameMode, str]) -> None:
        self.mode = GameMode(mode)
        self.reset_game()

    def set_difficulty(self, level: Union[Strategy, str]) -> None:
        self.difficulty = Strategy(level)
        self.reset_game()

    def set_feedback_enabled(self, enabled: bool) -> None:
        self.feedback_enabled = bool(enabled)
