from __future__ import annotations

from enum import IntEnum
from typing import Dict, List, Tuple

from .board import Board
from .tile import Coord

Vector = Tuple[int, int]


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


VECTORS: Dict[Direction, Vector] = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


def to_direction(direction: int) -> Direction:
    """Converts 0..3 (or a Direction) to a Direction, rejecting anything else."""
    if isinstance(direction, bool):
        raise ValueError(f"invalid direction: {direction!r}")
    try:
        return Direction(int(direction))
    except (TypeError, ValueError):
        raise ValueError(f"invalid direction: {direction!r}") from None


def get_vector(direction: int) -> Vector:
    return VECTORS[to_direction(direction)]


def build_traversals(size: int, vector: Vector) -> Tuple[List[int], List[int]]:
    """Orders both axes so cells nearest the target edge are visited first."""
    xs = list(range(size))
    ys = list(range(size))
    if vector[0] == 1:
        xs.reverse()
    if vector[1] == 1:
        ys.reverse()
    return xs, ys


def find_farthest_position(board: Board, cell: Coord, vector: Vector) -> Tuple[Coord, Coord]:
    """
    Slides from ``cell`` along ``vector`` while the next cell is empty and in bounds.
    Returns (farthest, next): the last empty cell reached and the first obstacle
    (an occupied or out-of-bounds coordinate) after it.
    """
    previous = cell
    nxt = (cell[0] + vector[0], cell[1] + vector[1])
    while board.within_bounds(nxt) and board.cell_available(nxt):
        previous = nxt
        nxt = (nxt[0] + vector[0], nxt[1] + vector[1])
    return previous, nxt


def tile_matches_available(board: Board) -> bool:
    """True if any tile has an orthogonal neighbour of equal value."""
    for x, y, tile in board.each_cell():
        if tile is None:
            continue
        for vector in VECTORS.values():
            other = board.cell_content((x + vector[0], y + vector[1]))
            if other is not None and other.value == tile.value:
                return True
    return False


def moves_available(board: Board) -> bool:
    return board.cells_available() or tile_matches_available(board)


def positions_equal(first: Coord, second: Coord) -> bool:
    return first[0] == second[0] and first[1] == second[1]
