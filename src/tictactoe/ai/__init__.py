"""Computer players: move selection strategies and head-to-head play."""

from .agent import AIAgent, Strategy, minimax_move, random_move, select_move  # noqa: F401
from .selfplay import MatchResult, MatchupSummary, play_game, run_matchup  # noqa: F401
