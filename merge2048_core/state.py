from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .board import Board

SNAPSHOT_VERSION = 1


class SnapshotError(ValueError):
    """Raised when a serialized session does not match the expected schema."""


@dataclass(frozen=True)
class SessionSnapshot:
    """A full, serializable copy of the session: board, score and flags.

    ``grid`` holds ``Board.serialize()`` output and is treated as read-only.
    """
    grid: Dict[str, Any]
    score: int
    over: bool
    won: bool
    keep_playing: bool

    @classmethod
    def capture(cls, board: Board, score: int, over: bool, won: bool, keep_playing: bool) -> 'SessionSnapshot':
        return cls(grid=board.serialize(), score=score, over=over, won=won, keep_playing=keep_playing)

    def board(self) -> Board:
        return Board.from_serialized(self.grid)

    def to_json(self) -> Dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "grid": self.grid,
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "keepPlaying": self.keep_playing,
        }

    @classmethod
    def from_json(cls, obj: Any, expected_size: Optional[int] = None) -> 'SessionSnapshot':
        """Validates and loads a serialized session.

        Snapshots written before versioning (no ``version`` key) share the
        version 1 layout and are accepted as such. When ``expected_size`` is
        given, a board of any other size is rejected.
        """
        if not isinstance(obj, dict):
            raise SnapshotError("snapshot must be an object")
        version = obj.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise SnapshotError(f"unsupported snapshot version: {version!r}")
        grid = validate_grid(obj.get("grid"), expected_size)
        score = obj.get("score")
        if not _is_int(score) or score < 0:
            raise SnapshotError(f"score must be a non-negative integer, got {score!r}")
        flags = {}
        for key in ("over", "won", "keepPlaying"):
            value = obj.get(key)
            if not isinstance(value, bool):
                raise SnapshotError(f"{key} must be a boolean, got {value!r}")
            flags[key] = value
        return cls(grid=grid, score=score, over=flags["over"], won=flags["won"], keep_playing=flags["keepPlaying"])


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_grid(grid: Any, expected_size: Optional[int] = None) -> Dict[str, Any]:
    """Checks a serialized board and returns a normalized copy of it."""
    if not isinstance(grid, dict):
        raise SnapshotError("grid must be an object")
    size = grid.get("size")
    if not _is_int(size) or size < 1:
        raise SnapshotError(f"grid size must be a positive integer, got {size!r}")
    if expected_size is not None and size != expected_size:
        raise SnapshotError(f"grid size {size} does not match board size {expected_size}")
    cells = grid.get("cells")
    if not isinstance(cells, list) or len(cells) != size:
        raise SnapshotError(f"grid cells must be a list of {size} columns")
    out: List[List[Optional[Dict[str, Any]]]] = []
    for x, column in enumerate(cells):
        if not isinstance(column, list) or len(column) != size:
            raise SnapshotError(f"column {x} must hold {size} cells")
        out_col: List[Optional[Dict[str, Any]]] = []
        for y, entry in enumerate(column):
            if entry is None:
                out_col.append(None)
                continue
            if not isinstance(entry, dict):
                raise SnapshotError(f"cell ({x},{y}) must be null or an object")
            pos = entry.get("position")
            if not isinstance(pos, dict) or pos.get("x") != x or pos.get("y") != y or not _is_int(pos.get("x")) or not _is_int(pos.get("y")):
                raise SnapshotError(f"cell ({x},{y}) has a mismatched position: {pos!r}")
            value = entry.get("value")
            if not _is_int(value) or value <= 0:
                raise SnapshotError(f"cell ({x},{y}) value must be a positive integer, got {value!r}")
            out_col.append({"position": {"x": x, "y": y}, "value": value})
        out.append(out_col)
    return {"size": size, "cells": out}
