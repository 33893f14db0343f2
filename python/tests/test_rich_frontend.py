"""Rich terminal frontend — cursor movement and pick/drop handling."""

from __future__ import annotations

import pytest

from backend.engine.puzzle import Puzzle
from backend.models.tile import TileId
from frontend.cli.input_handler import resolve
from frontend.cli.rich.app import _render_board, move_cursor, pick


@pytest.mark.parametrize(
    ("slot", "action", "expected"),
    [
        (0, "up", 0),
        (0, "left", 0),
        (0, "right", 1),
        (0, "down", 3),
        (4, "down", 7),
        (8, "right", 8),
        (8, "down", 8),
        (5, "left", 4),
    ],
)
def test_move_cursor_3x3(slot: int, action: str, expected: int) -> None:
    assert move_cursor(slot, action, 3) == expected


def test_pick_then_drop_swaps() -> None:
    puzzle = Puzzle(2)
    picked, status = pick(puzzle, 0, None)
    assert picked == TileId(0, 0)
    assert "Picked" in status
    assert puzzle.moves == 0

    picked, status = pick(puzzle, 3, picked)
    assert picked is None
    assert "Swapped" in status
    assert puzzle.current_order == ((1, 1), (0, 1), (1, 0), (0, 0))


def test_pick_same_tile_cancels() -> None:
    puzzle = Puzzle(2)
    picked, _ = pick(puzzle, 2, None)
    picked, status = pick(puzzle, 2, picked)
    assert picked is None
    assert "Cancelled" in status
    assert puzzle.moves == 0
    assert not puzzle.can_undo


def test_pick_with_stale_tile_reports_invalid_move() -> None:
    puzzle = Puzzle(2)
    picked, status = pick(puzzle, 1, TileId(4, 4))
    assert picked is None
    assert "[red]" in status
    assert puzzle.moves == 0


def test_render_board_has_one_row_per_grid_row() -> None:
    puzzle = Puzzle(3)
    table = _render_board(puzzle, cursor=4, picked=TileId(0, 0))
    assert table.row_count == 3
    assert len(table.columns) == 3


@pytest.mark.parametrize(
    ("ch", "action"),
    [
        ("W", "up"),
        ("d", "right"),
        ("\r", "pick"),
        (" ", "pick"),
        ("U", "undo"),
        ("y", "redo"),
        ("r", "reshuffle"),
        ("2", "2"),
        ("\x07", ""),
    ],
)
def test_resolve_keys(ch: str, action: str) -> None:
    assert resolve(ch) == action
