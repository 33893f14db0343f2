"""Tile identity and grid geometry for the tile-swap puzzle."""

from __future__ import annotations

from enum import StrEnum
from typing import NamedTuple

from backend.models.errors import InvalidConfiguration

MIN_GRID_SIZE = 2


class Difficulty(StrEnum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Difficulty | str) -> Difficulty:
        """Coerce *value* to a ``Difficulty`` or raise ``InvalidConfiguration``."""
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidConfiguration(
                f"Unknown difficulty {value!r}; "
                f"expected one of {', '.join(d.value for d in cls)}."
            ) from None


class TileId(NamedTuple):
    """Origin cell of a tile in the unshuffled image.

    Compared by value, so snapshots of an order can be checked for
    equality without caring which list they came from.
    """

    row: int
    col: int

    @property
    def key(self) -> str:
        return f"{self.row}-{self.col}"

    @classmethod
    def parse(cls, key: str) -> TileId:
        """Read a ``"row-col"`` key back into a ``TileId``."""
        row, _, col = key.partition("-")
        return cls(int(row), int(col))


# -- geometry -----------------------------------------------------------------


def validate_grid_size(size: int) -> int:
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidConfiguration(f"Grid size must be an int, got {size!r}.")
    if size < MIN_GRID_SIZE:
        raise InvalidConfiguration(
            f"Grid size must be at least {MIN_GRID_SIZE}, got {size}."
        )
    return size


def slot_to_cell(slot: int, size: int) -> TileId:
    """Return the (row, col) of *slot* in a row-major *size*×*size* grid."""
    return TileId(slot // size, slot % size)


def cell_to_slot(row: int, col: int, size: int) -> int:
    return row * size + col


def solved_order(size: int) -> tuple[TileId, ...]:
    """Identity permutation: the tile at slot i originates from slot i.

    Example::

        solved_order(2) == ((0, 0), (0, 1), (1, 0), (1, 1))
    """
    return tuple(slot_to_cell(i, size) for i in range(size * size))
