from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

from .actuator import Actuator, NullActuator
from .board import Board
from .config import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SIZE,
    DEFAULT_START_TILES,
    MAX_SETUP_VALUE,
    SPAWN_FOUR_PROBABILITY,
    WIN_VALUE,
    GameConfig,
)
from .history import StateHistory
from .moves import VECTORS, build_traversals, find_farthest_position, moves_available, positions_equal, to_direction
from .state import SessionSnapshot, SnapshotError
from .storage import GameStorage, MemoryStorage
from .tile import Coord, Tile

logger = logging.getLogger(__name__)


class GameManager:
    """
    Session controller: the only code that mutates the board and tiles once the
    session exists. Each public intent runs to completion and then notifies the
    actuator (render) and the storage (persistence) via ``actuate``.

    Intents that are not allowed in the current mode are no-ops and return False.
    """

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        actuator: Optional[Actuator] = None,
        storage: Optional[GameStorage] = None,
        rng: Optional[random.Random] = None,
        start_tiles: int = DEFAULT_START_TILES,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.size = size
        self.actuator: Actuator = actuator if actuator is not None else NullActuator()
        self.storage: GameStorage = storage if storage is not None else MemoryStorage()
        self.rng = rng if rng is not None else random.Random()
        self.start_tiles = start_tiles

        self.setup_mode = False
        self.state_history = StateHistory(history_limit)
        self.setup_state: Optional[Dict[str, Any]] = None  # board captured when leaving setup mode

        self.grid = Board(size)
        self.score = 0
        self.over = False
        self.won = False
        self.kept_playing = False

        self.setup()

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        actuator: Optional[Actuator] = None,
        storage: Optional[GameStorage] = None,
        rng: Optional[random.Random] = None,
    ) -> 'GameManager':
        return cls(
            size=config.size,
            actuator=actuator,
            storage=storage,
            rng=rng,
            start_tiles=config.start_tiles,
            history_limit=config.history_limit,
        )

    # ---------- Session lifecycle ----------

    def setup(self) -> None:
        """Reloads the saved game if there is a valid one, otherwise deals a fresh board."""
        previous = self._load_saved_state()
        if previous is not None:
            self._restore(previous)
            logger.debug("Resumed saved game (score=%d)", self.score)
        else:
            self.grid = Board(self.size)
            self.score = 0
            self.over = False
            self.won = False
            self.kept_playing = False
            self.add_start_tiles()
        self.actuate()

    def _load_saved_state(self) -> Optional[SessionSnapshot]:
        raw = self.storage.get_game_state()
        if raw is None:
            return None
        try:
            snapshot = SessionSnapshot.from_json(raw, expected_size=self.size)
        except SnapshotError as e:
            logger.warning("Discarding saved game: %s", e)
            self.storage.clear_game_state()
            return None
        return snapshot

    def _restore(self, snapshot: SessionSnapshot) -> None:
        self.grid = snapshot.board()
        self.score = snapshot.score
        self.over = snapshot.over
        self.won = snapshot.won
        self.kept_playing = snapshot.keep_playing

    def restart(self) -> None:
        logger.info("Restarting game")
        self.storage.clear_game_state()
        self.actuator.continue_game()
        self.state_history.clear()
        self.setup_state = None
        if self.setup_mode:
            self.setup_mode = False
            self.actuator.exit_setup_mode()
        self.actuator.hide_reset_setup_button()
        self.setup()

    def keep_playing(self) -> bool:
        """Lets play continue past the winning tile. Sticky until restart."""
        if not self.won or self.kept_playing:
            return False
        self.kept_playing = True
        self.actuator.continue_game()
        self.actuate()
        return True

    def is_game_terminated(self) -> bool:
        return self.over or (self.won and not self.kept_playing)

    @property
    def can_undo(self) -> bool:
        return not self.setup_mode and bool(self.state_history)

    @property
    def can_reset_setup(self) -> bool:
        return not self.setup_mode and self.setup_state is not None

    # ---------- Tiles ----------

    def add_start_tiles(self) -> None:
        for _ in range(self.start_tiles):
            self.add_random_tile()

    def add_random_tile(self) -> Optional[Tile]:
        if not self.grid.cells_available():
            return None
        value = 2 if self.rng.random() < 1 - SPAWN_FOUR_PROBABILITY else 4
        tile = Tile(self.grid.random_available_cell(self.rng), value)
        self.grid.insert_tile(tile)
        return tile

    def prepare_tiles(self) -> None:
        for tile in self.grid.tiles():
            tile.clear_merge()
            tile.save_position()

    # ---------- Rendering / persistence ----------

    def metadata(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "bestScore": self.storage.get_best_score(),
            "terminated": self.is_game_terminated(),
        }

    def actuate(self) -> None:
        if self.storage.get_best_score() < self.score:
            self.storage.set_best_score(self.score)

        # Only a lost game is cleared; a won game stays resumable
        if self.over:
            self.storage.clear_game_state()
        else:
            self.storage.set_game_state(self.serialize())

        self.actuator.actuate(self.grid, self.metadata())

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.capture(self.grid, self.score, self.over, self.won, self.kept_playing)

    def serialize(self) -> Dict[str, Any]:
        return self.snapshot().to_json()

    # ---------- Moves ----------

    def move(self, direction: int) -> bool:
        """
        Slides every tile towards ``direction`` (0 up, 1 right, 2 down, 3 left),
        merging equal neighbours. Returns True if the board changed.
        """
        direction = to_direction(direction)
        if self.setup_mode:
            logger.debug("Ignoring move %s in setup mode", direction.name)
            return False
        if self.is_game_terminated():
            logger.debug("Ignoring move %s, game is terminated", direction.name)
            return False

        vector = VECTORS[direction]
        xs, ys = build_traversals(self.size, vector)
        moved = False

        before = self.snapshot()
        self.prepare_tiles()

        for x in xs:
            for y in ys:
                cell = (x, y)
                tile = self.grid.cell_content(cell)
                if tile is None:
                    continue

                farthest, nxt = find_farthest_position(self.grid, cell, vector)
                other = self.grid.cell_content(nxt)

                # A tile produced by a merge this move cannot merge again
                if other is not None and other.value == tile.value and other.merged_from is None:
                    merged = Tile(nxt, tile.value * 2)
                    merged.merged_from = (tile.id, other.id)

                    self.grid.remove_tile(other)
                    self.grid.remove_tile(tile)
                    self.grid.insert_tile(merged)

                    # Kept for the renderer: the consumed tile slides into the merge cell
                    tile.update_position(nxt)

                    self.score += merged.value
                    if merged.value == WIN_VALUE and not self.won:
                        self.won = True
                        logger.info("Reached %d (score=%d)", WIN_VALUE, self.score)
                else:
                    self.grid.move_tile(tile, farthest)

                if not positions_equal(cell, tile.position):
                    moved = True

        if not moved:
            return False

        self.state_history.push(before)
        self.add_random_tile()
        if not moves_available(self.grid):
            self.over = True
            logger.info("Game over (score=%d)", self.score)
        self.actuate()
        return True

    # ---------- Undo ----------

    def undo(self) -> bool:
        if self.setup_mode or not self.state_history:
            return False
        self._restore(self.state_history.pop())
        logger.debug("Undo (history=%d)", len(self.state_history))
        self.actuate()
        return True

    # ---------- Setup mode ----------

    def enter_setup(self) -> bool:
        if self.setup_mode:
            return False
        self.setup_mode = True
        logger.info("Entered setup mode")
        self.actuator.enter_setup_mode()
        return True

    def exit_setup(self) -> bool:
        """Starts play from the authored board, remembering it for ``reset_to_setup``."""
        if not self.setup_mode:
            return False
        self.setup_mode = False
        self.over = False
        self.won = False
        self.kept_playing = False
        self.score = 0
        self.state_history.clear()
        self.setup_state = self.grid.serialize()
        logger.info("Left setup mode with %d tiles", len(self.grid.tiles()))

        self.actuator.exit_setup_mode()
        self.actuator.show_reset_setup_button()
        self.actuate()
        return True

    def reset_to_setup(self) -> bool:
        if self.setup_mode or self.setup_state is None:
            return False
        self.grid = Board.from_serialized(self.setup_state)
        self.score = 0
        self.over = False
        self.won = False
        self.kept_playing = False
        self.state_history.clear()
        self.actuate()
        return True

    def clear_board(self) -> bool:
        if not self.setup_mode:
            return False
        self.grid = Board.empty(self.size)
        self.actuate()
        return True

    def cycle_tile(self, position: Coord) -> bool:
        """Advances a cell through empty -> 2 -> 4 -> ... -> 32768 -> empty."""
        if not self.setup_mode:
            return False
        pos = (int(position[0]), int(position[1]))
        if not self.grid.within_bounds(pos):
            raise ValueError(f"position {pos} is outside the board")

        current = self.grid.cell_content(pos)
        if current is None:
            new_value = 2
        elif current.value >= MAX_SETUP_VALUE:
            self.grid.remove_tile(current)
            self.actuate()
            return True
        else:
            new_value = current.value * 2
            self.grid.remove_tile(current)

        self.grid.insert_tile(Tile(pos, new_value))
        self.actuate()
        return True
