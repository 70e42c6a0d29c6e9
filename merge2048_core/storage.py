from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

GAME_STATE_KEY = "gameState"
BEST_SCORE_KEY = "bestScore"


class GameStorage(Protocol):
    """Persistence sink for the in-progress game and the best score."""

    def get_game_state(self) -> Optional[Dict[str, Any]]: ...

    def set_game_state(self, state: Dict[str, Any]) -> None: ...

    def clear_game_state(self) -> None: ...

    def get_best_score(self) -> int: ...

    def set_best_score(self, score: int) -> None: ...


class MemoryStorage:
    """Process-local storage, e.g. for tests or a throwaway CLI session."""

    def __init__(self, game_state: Optional[Dict[str, Any]] = None, best_score: int = 0) -> None:
        self._game_state = json.loads(json.dumps(game_state)) if game_state is not None else None
        self._best_score = best_score

    def get_game_state(self) -> Optional[Dict[str, Any]]:
        if self._game_state is None:
            return None
        # Hand out a copy so callers can't mutate what is stored
        return json.loads(json.dumps(self._game_state))

    def set_game_state(self, state: Dict[str, Any]) -> None:
        self._game_state = json.loads(json.dumps(state))

    def clear_game_state(self) -> None:
        self._game_state = None

    def get_best_score(self) -> int:
        return self._best_score

    def set_best_score(self, score: int) -> None:
        self._best_score = int(score)


def _make_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _writable_db_path(db_path: str) -> str:
    """Returns ``db_path``, or the same file name in the first directory we can create.

    Fallbacks, in order: ``$MERGE2048_DB_DIR``, ``./data``, ``/tmp``, then the
    bare file name in the working directory.
    """
    try:
        _make_parent_dir(db_path)
        return db_path
    except PermissionError:
        logger.warning("Cannot create the directory for %s, trying fallbacks", db_path)
    name = os.path.basename(db_path) or 'merge2048.db'
    for directory in (os.getenv('MERGE2048_DB_DIR'), os.path.join(os.getcwd(), 'data'), '/tmp'):
        if not directory:
            continue
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError:
            continue
        return os.path.join(directory, name)
    return name


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the key/value table exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            namespace TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (namespace, key)
        )
        """
    )
    conn.commit()


class SqliteStorage:
    """Key/value storage in SQLite, one namespace per player session."""

    def __init__(self, db_path: str, namespace: str = "default") -> None:
        self.db_path = _writable_db_path(db_path)
        self.namespace = namespace

    def _connect(self) -> sqlite3.Connection:
        _make_parent_dir(self.db_path)
        conn = sqlite3.connect(self.db_path)
        _ensure_db(conn)
        return conn

    def _get(self, key: str) -> Optional[Any]:
        conn = self._connect()
        try:
            cur = conn.execute("SELECT value FROM kv WHERE namespace = ? AND key = ?", (self.namespace, key))
            row = cur.fetchone()
            return json.loads(row[0]) if row else None
        finally:
            conn.close()

    def _set(self, key: str, value: Any) -> None:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv (namespace, key, value, updated_at) VALUES (?, ?, ?, ?)",
                (
                    self.namespace,
                    key,
                    json.dumps(value),
                    datetime.now(timezone.utc).isoformat(timespec='seconds'),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def _delete(self, key: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv WHERE namespace = ? AND key = ?", (self.namespace, key))
            conn.commit()
        finally:
            conn.close()

    def get_game_state(self) -> Optional[Dict[str, Any]]:
        return self._get(GAME_STATE_KEY)

    def set_game_state(self, state: Dict[str, Any]) -> None:
        self._set(GAME_STATE_KEY, state)

    def clear_game_state(self) -> None:
        self._delete(GAME_STATE_KEY)

    def get_best_score(self) -> int:
        value = self._get(BEST_SCORE_KEY)
        return int(value) if value else 0

    def set_best_score(self, score: int) -> None:
        self._set(BEST_SCORE_KEY, int(score))
