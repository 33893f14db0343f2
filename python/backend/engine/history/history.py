"""Bounded undo/redo history over successive puzzle orders."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from loguru import logger

from backend.models.tile import TileId

MAX_ENTRIES = 50


@dataclass(frozen=True)
class HistoryEntry:
    order: tuple[TileId, ...]
    timestamp: float = field(compare=False)


class History:
    """Snapshot stack with a pointer to the last undoable entry.

    Entries at or below ``pointer`` are orders to go back to; entries
    above it are orders to go forward to. ``undo`` and ``redo`` take the
    order being left and store it in the slot they return, so that a
    later move in the opposite direction gets it back.
    """

    def __init__(
        self,
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_entries = max_entries
        self._clock = clock
        self._entries: list[HistoryEntry] = []
        self.pointer: int = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def can_undo(self) -> bool:
        return self.pointer >= 0

    @property
    def can_redo(self) -> bool:
        return self.pointer < len(self._entries) - 1

    # -- mutation -------------------------------------------------------------

    def push(self, order: Sequence[TileId]) -> None:
        """Snapshot *order*, dropping any redo branch and enforcing the cap."""
        del self._entries[self.pointer + 1 :]
        self._entries.append(self._snapshot(order))

        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]
            logger.debug("History full; evicted {} oldest entries", overflow)
        self.pointer = len(self._entries) - 1

    def undo(self, current: Sequence[TileId]) -> tuple[TileId, ...] | None:
        """Step back one entry. Returns ``None`` when nothing is left to undo."""
        if self.pointer < 0:
            return None
        restored = self._entries[self.pointer].order
        self._entries[self.pointer] = self._snapshot(current)
        self.pointer -= 1
        return restored

    def redo(self, current: Sequence[TileId]) -> tuple[TileId, ...] | None:
        """Step forward one entry. Returns ``None`` at the newest entry."""
        if self.pointer >= len(self._entries) - 1:
            return None
        self.pointer += 1
        restored = self._entries[self.pointer].order
        self._entries[self.pointer] = self._snapshot(current)
        return restored

    def clear(self) -> None:
        self._entries.clear()
        self.pointer = -1

    # -- helpers --------------------------------------------------------------

    def _snapshot(self, order: Sequence[TileId]) -> HistoryEntry:
        return HistoryEntry(order=tuple(order), timestamp=self._clock())
