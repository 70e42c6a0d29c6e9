from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, Protocol, TextIO

from .board import Board


class Actuator(Protocol):
    """Presentation sink notified by the GameManager after state changes."""

    def actuate(self, board: Board, metadata: Dict[str, Any]) -> None: ...

    def continue_game(self) -> None: ...

    def enter_setup_mode(self) -> None: ...

    def exit_setup_mode(self) -> None: ...

    def show_reset_setup_button(self) -> None: ...

    def hide_reset_setup_button(self) -> None: ...


class NullActuator:
    """Discards every notification."""

    def actuate(self, board: Board, metadata: Dict[str, Any]) -> None:
        pass

    def continue_game(self) -> None:
        pass

    def enter_setup_mode(self) -> None:
        pass

    def exit_setup_mode(self) -> None:
        pass

    def show_reset_setup_button(self) -> None:
        pass

    def hide_reset_setup_button(self) -> None:
        pass


class RecordingActuator:
    """Keeps the latest render and a log of notifications (used by the web API and tests)."""

    def __init__(self) -> None:
        self.board: Optional[Dict[str, Any]] = None
        self.metadata: Dict[str, Any] = {}
        self.renders = 0
        self.events: List[str] = []
        self.setup_mode = False
        self.reset_setup_visible = False

    def actuate(self, board: Board, metadata: Dict[str, Any]) -> None:
        self.board = board.snapshot()
        self.metadata = dict(metadata)
        self.renders += 1
        self.events.append("actuate")

    def continue_game(self) -> None:
        self.events.append("continue_game")

    def enter_setup_mode(self) -> None:
        self.setup_mode = True
        self.events.append("enter_setup_mode")

    def exit_setup_mode(self) -> None:
        self.setup_mode = False
        self.events.append("exit_setup_mode")

    def show_reset_setup_button(self) -> None:
        self.reset_setup_visible = True
        self.events.append("show_reset_setup_button")

    def hide_reset_setup_button(self) -> None:
        self.reset_setup_visible = False
        self.events.append("hide_reset_setup_button")


class TextActuator:
    """Prints the board and a status line to a text stream (used by the CLI)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")

    def actuate(self, board: Board, metadata: Dict[str, Any]) -> None:
        self._write(board.pretty())
        status = f"score: {metadata['score']}  best: {metadata['bestScore']}"
        if metadata["over"]:
            status += "  -- game over!"
        elif metadata["won"] and metadata["terminated"]:
            status += "  -- you win! ('continue' to keep playing)"
        self._write(status)

    def continue_game(self) -> None:
        pass

    def enter_setup_mode(self) -> None:
        self._write("[setup] 'cycle X Y' edits a cell, 'clear' empties the board, 'start' begins play")

    def exit_setup_mode(self) -> None:
        self._write("[setup] finished")

    def show_reset_setup_button(self) -> None:
        self._write("'reset' returns to the authored position")

    def hide_reset_setup_button(self) -> None:
        pass
