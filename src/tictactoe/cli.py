"""Command line entrypoint for tictactoe."""
import argparse
import logging

from . import __version__
from .ai import AIAgent, Strategy, run_matchup
from .config import LOG_LEVELS, Settings
from .session import GameMode


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="tictactoe")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--serve", action="store_true", help="Run the FastAPI UI bridge")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=8000, help="Server port")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Logging level (default: TICTACTOE_LOG_LEVEL or INFO).",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GameMode],
        default=None,
        help="Initial game mode for --serve (default: TICTACTOE_MODE or single).",
    )
    parser.add_argument(
        "--difficulty",
        choices=[s.value for s in Strategy],
        default=None,
        help="Initial difficulty for --serve (default: TICTACTOE_DIFFICULTY or random).",
    )
    parser.add_argument(
        "--bench",
        type=int,
        default=0,
        metavar="GAMES",
        help="Play GAMES head-to-head games between two strategies and print the tally.",
    )
    parser.add_argument(
        "--challenger",
        choices=[s.value for s in Strategy],
        default=Strategy.OPTIMAL.value,
        help="Challenger strategy for --bench (default: optimal).",
    )
    parser.add_argument(
        "--baseline",
        choices=[s.value for s in Strategy],
        default=Strategy.RANDOM.value,
        help="Baseline strategy for --bench (default: random).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --bench.")
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    try:
        settings = Settings.from_env().with_overrides(
            log_level=args.log_level,
            mode=GameMode(args.mode) if args.mode else None,
            difficulty=Strategy(args.difficulty) if args.difficulty else None,
        )
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(settings.log_level)

    if args.bench:
        challenger = AIAgent(strategy=Strategy(args.challenger), seed=args.seed)
        baseline = AIAgent(
            strategy=Strategy(args.baseline),
            seed=None if args.seed is None else args.seed + 1,
        )
        summary = run_matchup(challenger, baseline, games=args.bench)
        print(f"{args.challenger} vs {args.baseline}")
        print(
            f"Games: {summary.games}  Wins: {summary.wins}  "
            f"Losses: {summary.losses}  Draws: {summary.draws}"
        )
        print(f"Score: {summary.score:.4f}")
        return 0

    if args.serve:
        try:
            from uvicorn import run
            from tictactoe.api import create_app
        except ImportError:
            print("uvicorn and fastapi are required to serve the API. Install extras.")
            return 1

        run(create_app(settings), host=args.host, port=args.port, reload=False)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
