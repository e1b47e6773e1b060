"""tictactoe package."""

from .engine import (  # noqa: F401
    GameState,
    IllegalMove,
    Mark,
    Move,
    Outcome,
    apply_move,
    deserialize_state,
    evaluate_outcome,
    initial_state,
    serialize_state,
)
from .ai import AIAgent, Strategy, select_move  # noqa: F401
from .session import GameMode, GameSession  # noqa: F401
__all__ = [
    "__version__",
    "GameState",
    "IllegalMove",
    "Mark",
    "Move",
    "Outcome",
    "apply_move",
    "deserialize_state",
    "evaluate_outcome",
    "initial_state",
    "serialize_state",
    "AIAgent",
    "Strategy",
    "select_move",
    "GameMode",
    "GameSession",
    "create_app",
]

__version__ = "0.1.0"


def create_app(settings=None):
    """Lazy import to avoid requiring FastAPI unless requested."""
    from tictactoe.api import create_app as factory

    return factory(settings)
