from __future__ import annotations

import random
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .tile import Coord, Tile


class Board:
    """An N x N grid of cells, each holding at most one tile.

    Cells are addressed as ``cells[x][y]`` with x the column and y the row.
    """

    def __init__(self, size: int, previous_cells: Optional[List[List[Optional[Dict[str, Any]]]]] = None) -> None:
        if size < 1:
            raise ValueError(f"board size must be positive, got {size}")
        self.size = size
        self.cells: List[List[Optional[Tile]]] = [[None] * size for _ in range(size)]
        if previous_cells is not None:
            self._load(previous_cells)

    @classmethod
    def empty(cls, size: int) -> 'Board':
        return cls(size)

    @classmethod
    def from_serialized(cls, data: Dict[str, Any]) -> 'Board':
        """Rebuilds a board from ``serialize()`` output. Tile identity is not preserved."""
        return cls(int(data["size"]), data.get("cells"))

    def _load(self, cells: List[List[Optional[Dict[str, Any]]]]) -> None:
        for column in cells:
            for entry in column:
                if entry:
                    pos = entry["position"]
                    self.insert_tile(Tile((int(pos["x"]), int(pos["y"])), int(entry["value"])))

    def within_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_content(self, coord: Coord) -> Optional[Tile]:
        if self.within_bounds(coord):
            return self.cells[coord[0]][coord[1]]
        return None

    def cell_available(self, coord: Coord) -> bool:
        return not self.cell_occupied(coord)

    def cell_occupied(self, coord: Coord) -> bool:
        return self.cell_content(coord) is not None

    def each_cell(self) -> Iterator[Tuple[int, int, Optional[Tile]]]:
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self.cells[x][y]

    def tiles(self) -> List[Tile]:
        return [tile for _, _, tile in self.each_cell() if tile is not None]

    def available_cells(self) -> List[Coord]:
        return [(x, y) for x, y, tile in self.each_cell() if tile is None]

    def cells_available(self) -> bool:
        return any(tile is None for _, _, tile in self.each_cell())

    def random_available_cell(self, rng: random.Random) -> Coord:
        cells = self.available_cells()
        if not cells:
            raise ValueError("no empty cell available")
        return rng.choice(cells)

    def insert_tile(self, tile: Tile) -> None:
        if not self.within_bounds(tile.position):
            raise ValueError(f"position {tile.position} is outside a {self.size}x{self.size} board")
        if self.cell_occupied(tile.position):
            raise ValueError(f"cell {tile.position} is already occupied")
        self.cells[tile.x][tile.y] = tile

    def remove_tile(self, tile: Tile) -> None:
        if self.cells[tile.x][tile.y] is tile:
            self.cells[tile.x][tile.y] = None

    def move_tile(self, tile: Tile, coord: Coord) -> None:
        self.cells[tile.x][tile.y] = None
        self.cells[coord[0]][coord[1]] = tile
        tile.update_position(coord)

    def serialize(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "cells": [[tile.serialize() if tile else None for tile in column] for column in self.cells],
        }

    def snapshot(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "cells": [[tile.snapshot() if tile else None for tile in column] for column in self.cells],
        }

    def values(self) -> Tuple[Tuple[int, ...], ...]:
        """Row-major values (rows indexed by y), 0 for empty cells."""
        return tuple(
            tuple(self.cells[x][y].value if self.cells[x][y] else 0 for x in range(self.size))
            for y in range(self.size)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self.values() == other.values()

    def __repr__(self) -> str:
        return f"Board(size={self.size}, values={self.values()})"

    def pretty(self) -> str:
        """Generates a human-readable string representation of the board."""
        width = max([len(str(t.value)) for t in self.tiles()] + [1])
        lines: List[str] = []
        for row in self.values():
            lines.append(" ".join((str(v) if v else ".").rjust(width) for v in row))
        return "\n".join(lines)
