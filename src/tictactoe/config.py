"""Runtime settings read from ``TICTACTOE_*`` environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from tictactoe.ai.agent import Strategy
from tictactoe.engine import Mark
from tictactoe.session import DEFAULT_COMPUTER_DELAY, GameMode

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    mode: GameMode = GameMode.SINGLE
    difficulty: Strategy = Strategy.RANDOM
    computer_mark: Mark = Mark.O
    computer_delay: float = DEFAULT_COMPUTER_DELAY
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            mode=_parse_enum(env, "TICTACTOE_MODE", GameMode, defaults.mode),
            difficulty=_parse_enum(env, "TICTACTOE_DIFFICULTY", Strategy, defaults.difficulty),
            computer_mark=_parse_mark(env, defaults.computer_mark),
            computer_delay=_parse_delay(env, defaults.computer_delay),
            log_level=_parse_log_level(env, defaults.log_level),
        )

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the non-None ``changes`` applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def _parse_enum(env: Mapping[str, str], name: str, enum_cls, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{name} must be one of: {valid} (got {raw!r})") from None


def _parse_mark(env: Mapping[str, str], default: Mark) -> Mark:
    raw = env.get("TICTACTOE_COMPUTER_MARK")
    if raw is None or not raw.strip():
        return default
    try:
        return Mark(raw.strip().upper())
    except ValueError:
        raise ValueError(f"TICTACTOE_COMPUTER_MARK must be X or O (got {raw!r})") from None


def _parse_delay(env: Mapping[str, str], default: float) -> float:
    raw = env.get("TICTACTOE_COMPUTER_DELAY_MS")
    if raw is None or not raw.strip():
        return default
    try:
        millis = int(raw)
    except ValueError:
        raise ValueError(f"TICTACTOE_COMPUTER_DELAY_MS must be an integer (got {raw!r})") from None
    if millis < 0:
        raise ValueError("TICTACTOE_COMPUTER_DELAY_MS must not be negative")
    return millis / 1000.0


def _parse_log_level(env: Mapping[str, str], default: str) -> str:
    raw = env.get("TICTACTOE_LOG_LEVEL")
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"TICTACTOE_LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
    return level
