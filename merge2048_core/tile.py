from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

Coord = Tuple[int, int]  # (x, y)

_tile_ids = itertools.count(1)


def _position_json(c: Coord) -> Dict[str, int]:
    return {"x": int(c[0]), "y": int(c[1])}


@dataclass(eq=False)
class Tile:
    """A value-bearing piece occupying one board cell.

    ``merged_from`` records the ids of the two tiles consumed to create this
    one during the current move. It is transient and never persisted.
    """
    position: Coord
    value: int
    previous_position: Optional[Coord] = None
    merged_from: Optional[Tuple[int, int]] = None
    id: int = field(default_factory=lambda: next(_tile_ids))

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value <= 0:
            raise ValueError(f"tile value must be a positive integer, got {self.value!r}")
        self.position = (int(self.position[0]), int(self.position[1]))

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    def save_position(self) -> None:
        self.previous_position = self.position

    def update_position(self, coord: Coord) -> None:
        self.position = (int(coord[0]), int(coord[1]))

    def clear_merge(self) -> None:
        self.merged_from = None

    def serialize(self) -> Dict[str, Any]:
        """Persisted form: position and value only."""
        return {"position": _position_json(self.position), "value": self.value}

    def snapshot(self) -> Dict[str, Any]:
        """Render form, including the per-move bookkeeping used for animation."""
        out = self.serialize()
        out["id"] = self.id
        out["previousPosition"] = _position_json(self.previous_position) if self.previous_position else None
        out["mergedFrom"] = list(self.merged_from) if self.merged_from else None
        return out
