"""
Merge2048 core Python package.

This package contains the rules engine for the 2048 tile-merging puzzle:
board and tile data structures, the move/merge algorithm, and the session
controller with its undo history and setup (board authoring) mode.
Modules:
- board.py: Board, Coord
- tile.py: Tile
- moves.py: Direction, traversals, move availability
- history.py: StateHistory
- state.py: SessionSnapshot
- manager.py: GameManager
- actuator.py, storage.py, input.py: collaborators around the controller
"""
