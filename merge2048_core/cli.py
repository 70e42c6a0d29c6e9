from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from .actuator import TextActuator
from .config import GameConfig
from .input import InputManager
from .manager import GameManager
from .storage import GameStorage, MemoryStorage, SqliteStorage

HELP = (
    "keys: w/a/s/d, h/j/k/l or up/down/left/right to move, z to undo, r to restart\n"
    "words: setup, start, cycle X Y, clear, reset, continue, help, quit"
)

WORD_DIRECTIONS = {"up": "arrowup", "right": "arrowright", "down": "arrowdown", "left": "arrowleft"}


def run_command(text: str, inputs: InputManager) -> bool:
    """Handles one line of input. Returns False when the user asked to quit."""
    parts = text.strip().lower().split()
    if not parts:
        return True
    word = parts[0]
    if word in ("q", "quit", "exit"):
        return False
    if word in ("?", "help"):
        print(HELP)
    elif word == "setup":
        inputs.dispatch("enterSetup")
    elif word == "start":
        inputs.start_game()
    elif word == "clear":
        inputs.dispatch("clearBoard")
    elif word == "reset":
        inputs.dispatch("resetSetup")
    elif word == "continue":
        inputs.dispatch("keepPlaying")
    elif word == "cycle":
        try:
            x_s, y_s = parts[1:3]
            position = {"x": int(x_s), "y": int(y_s)}
        except ValueError:
            print('Could not parse. Use: cycle X Y')
            return True
        try:
            inputs.dispatch("cycleTile", {"position": position})
        except ValueError as e:
            print(f"Cannot cycle that cell: {e}")
    elif word in WORD_DIRECTIONS:
        inputs.handle_key(WORD_DIRECTIONS[word])
    elif len(word) == 1:
        if inputs.handle_key(word) is None:
            print(f"Unknown key {word!r}. Type 'help' for commands.")
    else:
        print(f"Unknown command {word!r}. Type 'help' for commands.")
    return True


def main(argv: Optional[List[str]] = None) -> None:
    defaults = GameConfig.from_env()
    parser = argparse.ArgumentParser(description='Merge2048: terminal 2048 with undo and board setup')
    parser.add_argument('--size', type=int, default=defaults.size, help='Board size (NxN)')
    parser.add_argument('--start-tiles', type=int, default=defaults.start_tiles, help='Random tiles on a new board')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for tile spawns')
    parser.add_argument('--db', default=None, help='SQLite DB file for best score and resumable games')
    parser.add_argument('--session', default='cli', help='Storage namespace inside the DB')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if defaults.debug else logging.WARNING)

    config = GameConfig(
        size=args.size,
        start_tiles=args.start_tiles,
        history_limit=defaults.history_limit,
        db_path=args.db or defaults.db_path,
        debug=defaults.debug,
    )
    storage: GameStorage = SqliteStorage(config.db_path, args.session) if args.db else MemoryStorage()
    manager = GameManager.from_config(config, actuator=TextActuator(), storage=storage, rng=random.Random(args.seed))
    inputs = InputManager(manager)
    print(HELP)

    while True:
        try:
            text = input('> ')
        except EOFError:
            break
        if not run_command(text, inputs):
            break
