from backend.models.errors import InvalidConfiguration, InvalidMove, PuzzleError
from backend.models.tile import (
    Difficulty,
    TileId,
    cell_to_slot,
    slot_to_cell,
    solved_order,
)

__all__ = [
    "Difficulty",
    "InvalidConfiguration",
    "InvalidMove",
    "PuzzleError",
    "TileId",
    "cell_to_slot",
    "slot_to_cell",
    "solved_order",
]
