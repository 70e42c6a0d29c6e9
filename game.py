from __future__ import annotations

# Facade module that re-exports the Merge2048 core.
# Kept so the Flask app, the CLI entry point and the tests share one import surface.
# Single-responsibility modules live under merge2048_core/*.

from merge2048_core.actuator import Actuator, NullActuator, RecordingActuator, TextActuator
from merge2048_core.board import Board
from merge2048_core.config import (
    MAX_SETUP_VALUE,
    SPAWN_FOUR_PROBABILITY,
    WIN_VALUE,
    GameConfig,
)
from merge2048_core.history import StateHistory
from merge2048_core.input import (
    InputManager,
    cell_for_click,
    direction_for_key,
    direction_for_swipe,
    position_from_payload,
)
from merge2048_core.manager import GameManager
from merge2048_core.moves import (
    VECTORS,
    Direction,
    build_traversals,
    find_farthest_position,
    get_vector,
    moves_available,
    positions_equal,
    tile_matches_available,
    to_direction,
)
from merge2048_core.state import SessionSnapshot, SnapshotError, validate_grid
from merge2048_core.storage import GameStorage, MemoryStorage, SqliteStorage
from merge2048_core.tile import Coord, Tile

__all__ = [
    "Actuator", "NullActuator", "RecordingActuator", "TextActuator",
    "Board", "Coord", "Tile",
    "MAX_SETUP_VALUE", "SPAWN_FOUR_PROBABILITY", "WIN_VALUE", "GameConfig",
    "StateHistory", "SessionSnapshot", "SnapshotError", "validate_grid",
    "InputManager", "cell_for_click", "direction_for_key", "direction_for_swipe", "position_from_payload",
    "GameManager",
    "VECTORS", "Direction", "build_traversals", "find_farthest_position", "get_vector",
    "moves_available", "positions_equal", "tile_matches_available", "to_direction",
    "GameStorage", "MemoryStorage", "SqliteStorage",
]


def main() -> None:
    # CLI driver delegated to merge2048_core.cli
    from merge2048_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
