from __future__ import annotations

from collections import deque
from typing import Deque, Iterator

from .config import DEFAULT_HISTORY_LIMIT
from .state import SessionSnapshot


class StateHistory:
    """Fixed-capacity undo stack. Pushing onto a full history evicts the oldest entry."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_LIMIT) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be positive")
        self._entries: Deque[SessionSnapshot] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def push(self, snapshot: SessionSnapshot) -> None:
        self._entries.append(snapshot)

    def pop(self) -> SessionSnapshot:
        if not self._entries:
            raise IndexError("pop from empty history")
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[SessionSnapshot]:
        return iter(self._entries)
