from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Union

from .moves import Direction
from .tile import Coord

Key = Union[str, int]

KEY_DIRECTIONS: Dict[str, Direction] = {
    "arrowup": Direction.UP,
    "arrowright": Direction.RIGHT,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    # vim
    "k": Direction.UP,
    "l": Direction.RIGHT,
    "j": Direction.DOWN,
    "h": Direction.LEFT,
    "w": Direction.UP,
    "d": Direction.RIGHT,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
}

# DOM keyCode values, for hosts that only report numeric codes
KEY_CODES: Dict[int, str] = {
    38: "arrowup", 39: "arrowright", 40: "arrowdown", 37: "arrowleft",
    75: "k", 76: "l", 74: "j", 72: "h",
    87: "w", 68: "d", 83: "s", 65: "a",
    82: "r", 90: "z",
}

SWIPE_THRESHOLD = 10


def _key_name(key: Key) -> str:
    if isinstance(key, int):
        return KEY_CODES.get(key, "")
    return key.lower()


def direction_for_key(key: Key, modifiers: bool = False) -> Optional[Direction]:
    """Maps arrow, vim (hjkl) and WASD keys to a direction. Modified keys are ignored."""
    if modifiers:
        return None
    return KEY_DIRECTIONS.get(_key_name(key))


def direction_for_swipe(dx: float, dy: float, threshold: float = SWIPE_THRESHOLD) -> Optional[Direction]:
    """Picks the dominant axis of a swipe; short swipes are ignored."""
    abs_dx, abs_dy = abs(dx), abs(dy)
    if max(abs_dx, abs_dy) <= threshold:
        return None
    if abs_dx > abs_dy:
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


def cell_for_click(x: float, y: float, width: float, height: float, size: int) -> Optional[Coord]:
    """Maps a pointer position relative to the grid's top-left corner to a cell."""
    if x < 0 or y < 0 or x > width or y > height or width <= 0 or height <= 0:
        return None
    col = min(int(x // (width / size)), size - 1)
    row = min(int(y // (height / size)), size - 1)
    return (col, row)


class IntentHandler(Protocol):
    """The entry points an input source may call on the session controller."""

    size: int
    setup_mode: bool

    def move(self, direction: int) -> bool: ...

    def restart(self) -> None: ...

    def keep_playing(self) -> bool: ...

    def undo(self) -> bool: ...

    def enter_setup(self) -> bool: ...

    def exit_setup(self) -> bool: ...

    def reset_to_setup(self) -> bool: ...

    def clear_board(self) -> bool: ...

    def cycle_tile(self, position: Coord) -> bool: ...


class InputManager:
    """Translates raw key, swipe and click input into controller intents."""

    INTENTS = (
        "move", "restart", "keepPlaying", "undo", "enterSetup",
        "exitSetup", "resetSetup", "clearBoard", "cycleTile",
    )

    def __init__(self, controller: IntentHandler) -> None:
        self.controller = controller

    def dispatch(self, intent: str, payload: Any = None) -> Any:
        """Delivers a named intent. Unknown names raise ValueError."""
        c = self.controller
        if intent == "move":
            return c.move(payload)
        if intent == "restart":
            return c.restart()
        if intent == "keepPlaying":
            return c.keep_playing()
        if intent == "undo":
            return c.undo()
        if intent == "enterSetup":
            return c.enter_setup()
        if intent == "exitSetup":
            return c.exit_setup()
        if intent == "resetSetup":
            return c.reset_to_setup()
        if intent == "clearBoard":
            return c.clear_board()
        if intent == "cycleTile":
            return c.cycle_tile(position_from_payload(payload))
        raise ValueError(f"unknown intent: {intent!r}")

    def handle_key(self, key: Key, ctrl: bool = False, alt: bool = False, meta: bool = False, shift: bool = False) -> Optional[str]:
        """Returns the name of the intent the key triggered, if any."""
        modifiers = ctrl or alt or meta or shift
        direction = direction_for_key(key, modifiers)
        if direction is not None:
            self.dispatch("move", int(direction))
            return "move"
        name = _key_name(key)
        if name == "r" and not modifiers:
            self.dispatch("restart")
            return "restart"
        # Z or Ctrl+Z
        if name == "z" and (not modifiers or (ctrl and not (alt or meta or shift))):
            self.dispatch("undo")
            return "undo"
        return None

    def handle_swipe(self, dx: float, dy: float) -> Optional[Direction]:
        direction = direction_for_swipe(dx, dy)
        if direction is not None:
            self.dispatch("move", int(direction))
        return direction

    def handle_click(self, x: float, y: float, width: float, height: float) -> Optional[Coord]:
        """Cycles the clicked cell while in setup mode."""
        if not self.controller.setup_mode:
            return None
        cell = cell_for_click(x, y, width, height, self.controller.size)
        if cell is not None:
            self.dispatch("cycleTile", {"position": {"x": cell[0], "y": cell[1]}})
        return cell

    def toggle_setup(self) -> bool:
        if self.controller.setup_mode:
            return self.dispatch("exitSetup")
        return self.dispatch("enterSetup")

    def start_game(self) -> bool:
        return self.dispatch("exitSetup")


def position_from_payload(payload: Any) -> Coord:
    """Reads ``{"position": {"x": .., "y": ..}}`` (or a bare x/y object) into a Coord."""
    if not isinstance(payload, dict):
        raise ValueError("cycleTile payload must be an object")
    pos = payload.get("position", payload)
    if not isinstance(pos, dict):
        raise ValueError("position must be an object with x and y")
    x, y = pos.get("x"), pos.get("y")
    if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
        raise ValueError(f"position must have integer x and y, got {pos!r}")
    return (x, y)
