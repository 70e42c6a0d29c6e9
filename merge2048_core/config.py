from __future__ import annotations

import os
from dataclasses import dataclass

WIN_VALUE = 2048
MAX_SETUP_VALUE = 32768
SPAWN_FOUR_PROBABILITY = 0.1
DEFAULT_SIZE = 4
DEFAULT_START_TILES = 2
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_DB = "data/merge2048.db"
DEFAULT_SESSION_LIMIT = 256


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class GameConfig:
    """Settings shared by the CLI and the Flask app."""
    size: int = DEFAULT_SIZE
    start_tiles: int = DEFAULT_START_TILES
    history_limit: int = DEFAULT_HISTORY_LIMIT
    db_path: str = DEFAULT_DB
    debug: bool = False
    session_limit: int = DEFAULT_SESSION_LIMIT  # live sessions the web app keeps in memory

    def __post_init__(self) -> None:
        if self.size < 2:
            raise ValueError("board size must be at least 2")
        if not 0 <= self.start_tiles <= self.size * self.size:
            raise ValueError("start_tiles must fit on the board")
        if self.history_limit < 1:
            raise ValueError("history_limit must be positive")
        if self.session_limit < 1:
            raise ValueError("session_limit must be positive")

    @classmethod
    def from_env(cls) -> 'GameConfig':
        return cls(
            size=_env_int("MERGE2048_SIZE", DEFAULT_SIZE),
            start_tiles=_env_int("MERGE2048_START_TILES", DEFAULT_START_TILES),
            history_limit=_env_int("MERGE2048_HISTORY", DEFAULT_HISTORY_LIMIT),
            db_path=os.getenv("MERGE2048_DB", DEFAULT_DB),
            debug=_env_flag("MERGE2048_DEBUG"),
            session_limit=_env_int("MERGE2048_SESSIONS", DEFAULT_SESSION_LIMIT),
        )
