"""Puzzle state machine: owns the current order and applies moves."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from enum import StrEnum

from loguru import logger

from backend.engine.history import History
from backend.engine.notifier import CompletionNotifier
from backend.engine.shuffler import Shuffler
from backend.models.errors import InvalidMove
from backend.models.tile import (
    Difficulty,
    TileId,
    solved_order,
    validate_grid_size,
)


class PuzzleStatus(StrEnum):
    UNSHUFFLED = "unshuffled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Puzzle:
    """A single tile-swap puzzle.

    Created in the ``UNSHUFFLED`` state with the solved order in place;
    call :meth:`start` to scramble it. Any two tiles can be swapped,
    there is no blank slot.

    *rng* and *clock* default to the module-level random source and
    ``time.time``; tests pass deterministic replacements.
    """

    def __init__(
        self,
        grid_size: int = 3,
        difficulty: Difficulty | str = Difficulty.NORMAL,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.grid_size = validate_grid_size(grid_size)
        self.difficulty = Difficulty.parse(difficulty)
        self._rng = rng or random.Random()
        self.history = History(clock=clock)
        self.notifier = CompletionNotifier()
        self.solved_order: tuple[TileId, ...] = solved_order(self.grid_size)
        self._order: list[TileId] = list(self.solved_order)
        self._shuffled = False
        self.moves: int = 0

    # -- lifecycle ------------------------------------------------------------

    def start(
        self,
        grid_size: int | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> None:
        """Begin a new puzzle, discarding the history of the previous one."""
        size = self.grid_size if grid_size is None else validate_grid_size(grid_size)
        level = self.difficulty if difficulty is None else Difficulty.parse(difficulty)

        self.grid_size = size
        self.difficulty = level
        self.solved_order = solved_order(size)
        self.history.clear()
        self.notifier.reset()
        self.moves = 0
        self._order = Shuffler.shuffle(self.solved_order, level, self._rng)
        self._shuffled = True
        logger.info("Started {}×{} puzzle ({})", size, size, level)
        self._evaluate()

    def reshuffle(self, difficulty: Difficulty | str | None = None) -> None:
        """Scramble again from the solved order; the old order stays undoable."""
        level = self.difficulty if difficulty is None else Difficulty.parse(difficulty)
        self.difficulty = level
        if self._order:
            self.history.push(self._order)
        self.notifier.reset()
        self._order = Shuffler.shuffle(self.solved_order, level, self._rng)
        self._shuffled = True
        logger.info("Reshuffled {}×{} puzzle ({})", self.grid_size, self.grid_size, level)
        self._evaluate()

    # -- moves ----------------------------------------------------------------

    def apply_move(self, source: TileId, target: TileId) -> None:
        """Exchange the slots of *source* and *target*.

        Raises ``InvalidMove`` without touching any state when either
        tile is not part of this puzzle or both name the same tile.
        """
        try:
            source, target = TileId(*source), TileId(*target)
        except TypeError:
            raise InvalidMove(f"Not a tile id: {source!r} / {target!r}.") from None
        if source == target:
            raise InvalidMove(f"Cannot swap tile {source.key} with itself.")
        try:
            i = self._order.index(source)
            j = self._order.index(target)
        except ValueError:
            raise InvalidMove(
                f"Unknown tile in swap {source.key} ↔ {target.key}."
            ) from None

        self.history.push(self._order)
        self._order[i], self._order[j] = self._order[j], self._order[i]
        self._shuffled = True
        self.moves += 1
        logger.debug("Swapped {} (slot {}) with {} (slot {})", source.key, i, target.key, j)
        self._evaluate()

    def undo(self) -> bool:
        """Restore the previous order. Returns False if there is none."""
        restored = self.history.undo(self._order)
        if restored is None:
            return False
        self._order = list(restored)
        logger.debug("Undo; history pointer now {}", self.history.pointer)
        self._evaluate()
        return True

    def redo(self) -> bool:
        """Re-apply the last undone order. Returns False if there is none."""
        restored = self.history.redo(self._order)
        if restored is None:
            return False
        self._order = list(restored)
        logger.debug("Redo; history pointer now {}", self.history.pointer)
        self._evaluate()
        return True

    # -- queries --------------------------------------------------------------

    @property
    def current_order(self) -> tuple[TileId, ...]:
        return tuple(self._order)

    @property
    def is_completed(self) -> bool:
        return tuple(self._order) == self.solved_order

    @property
    def status(self) -> PuzzleStatus:
        if not self._shuffled:
            return PuzzleStatus.UNSHUFFLED
        if self.is_completed:
            return PuzzleStatus.COMPLETED
        return PuzzleStatus.IN_PROGRESS

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def tile_at(self, slot: int) -> TileId:
        return self._order[slot]

    def slot_of(self, tile: TileId) -> int:
        return self._order.index(TileId(*tile))

    def is_tile_correct(self, slot: int) -> bool:
        """Check if the tile in *slot* is in its original position."""
        return self._order[slot] == self.solved_order[slot]

    # -- helpers --------------------------------------------------------------

    def _evaluate(self) -> None:
        if self.notifier.update(self.is_completed):
            logger.info("Puzzle completed after {} moves", self.moves)
