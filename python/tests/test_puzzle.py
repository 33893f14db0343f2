"""Puzzle state machine — moves, undo/redo, reshuffle, completion.

Every scrambled puzzle is seeded, so failures replay exactly.
"""

from __future__ import annotations

import random

import pytest

from backend.engine.puzzle import Puzzle, PuzzleStatus
from backend.engine.shuffler import Shuffler
from backend.models.errors import InvalidConfiguration, InvalidMove
from backend.models.tile import Difficulty, TileId, solved_order


# -- helpers ------------------------------------------------------------------


def _puzzle(size: int = 3, difficulty: str = "normal", seed: int = 0) -> Puzzle:
    puzzle = Puzzle(size, difficulty, rng=random.Random(seed))
    puzzle.start()
    return puzzle


def _random_move(puzzle: Puzzle, rng: random.Random) -> None:
    a, b = rng.sample(range(puzzle.grid_size**2), 2)
    puzzle.apply_move(puzzle.tile_at(a), puzzle.tile_at(b))


def _completion_counter(puzzle: Puzzle) -> list[int]:
    fired: list[int] = []
    puzzle.notifier.subscribe(lambda: fired.append(puzzle.moves))
    return fired


@pytest.fixture
def identity_shuffle(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every shuffle return the solved order."""
    monkeypatch.setattr(
        Shuffler,
        "shuffle",
        staticmethod(lambda base, difficulty, rng=None: list(base)),
    )


# -- construction and start ---------------------------------------------------


def test_new_puzzle_is_unshuffled() -> None:
    puzzle = Puzzle(3)
    assert puzzle.status is PuzzleStatus.UNSHUFFLED
    assert puzzle.current_order == solved_order(3)
    assert not puzzle.can_undo


@pytest.mark.parametrize("size", [1, 0, "4"])
def test_invalid_grid_size_is_rejected(size: object) -> None:
    with pytest.raises(InvalidConfiguration):
        Puzzle(size)  # type: ignore[arg-type]


def test_invalid_difficulty_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        Puzzle(3, "extreme")


def test_failed_start_leaves_state_untouched() -> None:
    puzzle = _puzzle(3)
    before = puzzle.current_order
    with pytest.raises(InvalidConfiguration):
        puzzle.start(1)
    with pytest.raises(InvalidConfiguration):
        puzzle.start(4, "impossible")
    assert puzzle.grid_size == 3
    assert puzzle.current_order == before


def test_start_shuffles_and_resets_history() -> None:
    puzzle = _puzzle(3, seed=5)
    rng = random.Random(1)
    for _ in range(4):
        _random_move(puzzle, rng)
    assert puzzle.can_undo

    puzzle.start(4, Difficulty.HARD)
    assert puzzle.grid_size == 4
    assert puzzle.difficulty is Difficulty.HARD
    assert puzzle.solved_order == solved_order(4)
    assert sorted(puzzle.current_order) == sorted(solved_order(4))
    assert not puzzle.can_undo
    assert not puzzle.can_redo
    assert puzzle.moves == 0
    assert puzzle.status is not PuzzleStatus.UNSHUFFLED


def test_start_that_lands_on_solved_is_completed(identity_shuffle: None) -> None:
    puzzle = Puzzle(3)
    fired = _completion_counter(puzzle)
    puzzle.start()
    assert puzzle.status is PuzzleStatus.COMPLETED
    assert fired == [0]


# -- moves --------------------------------------------------------------------


def test_swap_scenario_2x2() -> None:
    puzzle = Puzzle(2)
    puzzle.apply_move(TileId(0, 0), TileId(1, 1))

    assert puzzle.current_order == ((1, 1), (0, 1), (1, 0), (0, 0))
    assert not puzzle.is_completed
    assert puzzle.status is PuzzleStatus.IN_PROGRESS

    assert puzzle.undo()
    assert puzzle.current_order == ((0, 0), (0, 1), (1, 0), (1, 1))
    assert puzzle.is_completed
    assert puzzle.status is PuzzleStatus.COMPLETED


def test_move_accepts_plain_tuples() -> None:
    puzzle = Puzzle(2)
    puzzle.apply_move((0, 1), (1, 0))
    assert puzzle.current_order == ((0, 0), (1, 0), (0, 1), (1, 1))


def test_swap_is_a_transposition() -> None:
    puzzle = _puzzle(4, seed=3)
    before = puzzle.current_order
    a, b = puzzle.tile_at(2), puzzle.tile_at(13)
    puzzle.apply_move(a, b)

    after = puzzle.current_order
    assert after[2] == b
    assert after[13] == a
    assert [i for i in range(16) if before[i] != after[i]] == [2, 13]


def test_swap_is_self_inverse() -> None:
    puzzle = _puzzle(3, seed=11)
    before = puzzle.current_order
    a, b = puzzle.tile_at(0), puzzle.tile_at(4)
    puzzle.apply_move(a, b)
    puzzle.apply_move(a, b)
    assert puzzle.current_order == before


@pytest.mark.parametrize(
    ("source", "target"),
    [
        (TileId(1, 1), TileId(1, 1)),
        (TileId(0, 0), TileId(5, 5)),
        (TileId(7, 0), TileId(0, 0)),
        (3, TileId(0, 0)),
        (TileId(0, 0), None),
    ],
)
def test_invalid_move_changes_nothing(source: object, target: object) -> None:
    puzzle = _puzzle(3, seed=2)
    before = puzzle.current_order
    with pytest.raises(InvalidMove):
        puzzle.apply_move(source, target)  # type: ignore[arg-type]
    assert puzzle.current_order == before
    assert not puzzle.can_undo
    assert puzzle.moves == 0


def test_moves_are_counted() -> None:
    puzzle = _puzzle(3)
    rng = random.Random(0)
    for _ in range(5):
        _random_move(puzzle, rng)
    with pytest.raises(InvalidMove):
        puzzle.apply_move(TileId(0, 0), TileId(0, 0))
    assert puzzle.moves == 5


def test_current_order_is_a_snapshot() -> None:
    puzzle = Puzzle(2)
    snapshot = puzzle.current_order
    puzzle.apply_move(TileId(0, 0), TileId(0, 1))
    assert snapshot == solved_order(2)
    assert isinstance(snapshot, tuple)


def test_tile_queries() -> None:
    puzzle = Puzzle(2)
    puzzle.apply_move(TileId(0, 0), TileId(1, 1))
    assert puzzle.tile_at(0) == TileId(1, 1)
    assert puzzle.slot_of(TileId(0, 0)) == 3
    assert not puzzle.is_tile_correct(0)
    assert puzzle.is_tile_correct(1)


# -- undo / redo --------------------------------------------------------------


def test_undo_redo_round_trip() -> None:
    puzzle = _puzzle(4, seed=8)
    rng = random.Random(8)
    orders = [puzzle.current_order]
    for _ in range(10):
        _random_move(puzzle, rng)
        orders.append(puzzle.current_order)

    for expected in reversed(orders[:-1]):
        assert puzzle.undo()
        assert puzzle.current_order == expected
    assert not puzzle.undo()
    assert puzzle.current_order == orders[0]

    for expected in orders[1:]:
        assert puzzle.redo()
        assert puzzle.current_order == expected
    assert not puzzle.redo()
    assert puzzle.current_order == orders[-1]


def test_new_move_after_undo_discards_redo() -> None:
    puzzle = _puzzle(3, seed=4)
    rng = random.Random(4)
    for _ in range(3):
        _random_move(puzzle, rng)
    puzzle.undo()
    puzzle.undo()
    assert puzzle.can_redo

    _random_move(puzzle, rng)
    assert not puzzle.can_redo
    after = puzzle.current_order
    assert not puzzle.redo()
    assert puzzle.current_order == after


def test_history_is_capped_at_fifty() -> None:
    puzzle = _puzzle(3, seed=6)
    rng = random.Random(6)
    for _ in range(60):
        _random_move(puzzle, rng)

    assert len(puzzle.history) == 50
    undone = 0
    while puzzle.undo():
        undone += 1
    assert undone == 50


def test_empty_undo_redo_are_no_ops() -> None:
    puzzle = _puzzle(3)
    before = puzzle.current_order
    assert not puzzle.undo()
    assert not puzzle.redo()
    assert puzzle.current_order == before


# -- reshuffle ----------------------------------------------------------------


def test_reshuffle_keeps_previous_order_undoable() -> None:
    puzzle = _puzzle(3, seed=12)
    before = puzzle.current_order
    puzzle.reshuffle()
    assert sorted(puzzle.current_order) == sorted(solved_order(3))

    assert puzzle.undo()
    assert puzzle.current_order == before


def test_reshuffle_difficulty_override() -> None:
    puzzle = _puzzle(3, "easy")
    puzzle.reshuffle("hard")
    assert puzzle.difficulty is Difficulty.HARD
    puzzle.reshuffle()
    assert puzzle.difficulty is Difficulty.HARD


def test_reshuffle_rejects_unknown_difficulty() -> None:
    puzzle = _puzzle(3)
    before = puzzle.current_order
    with pytest.raises(InvalidConfiguration):
        puzzle.reshuffle("extreme")
    assert puzzle.current_order == before
    assert not puzzle.can_undo


def test_permutation_invariant_under_all_operations() -> None:
    puzzle = _puzzle(4, seed=21)
    rng = random.Random(21)
    expected = sorted(solved_order(4))
    for _ in range(300):
        op = rng.choice(("move", "move", "move", "undo", "redo", "reshuffle"))
        if op == "move":
            _random_move(puzzle, rng)
        elif op == "undo":
            puzzle.undo()
        elif op == "redo":
            puzzle.redo()
        else:
            puzzle.reshuffle(rng.choice(list(Difficulty)))
        assert sorted(puzzle.current_order) == expected
        assert -1 <= puzzle.history.pointer <= len(puzzle.history) - 1


# -- completion ---------------------------------------------------------------


def test_completion_fires_once_per_edge() -> None:
    puzzle = Puzzle(2)
    fired = _completion_counter(puzzle)
    a, b = TileId(0, 0), TileId(1, 1)

    puzzle.apply_move(a, b)
    assert fired == []

    puzzle.apply_move(a, b)
    assert puzzle.is_completed
    assert fired == [2]

    with pytest.raises(InvalidMove):
        puzzle.apply_move(a, a)
    assert fired == [2]

    puzzle.apply_move(a, b)
    puzzle.apply_move(a, b)
    assert fired == [2, 4]


def test_completion_fires_on_undo_and_redo() -> None:
    puzzle = Puzzle(2)
    fired = _completion_counter(puzzle)
    puzzle.apply_move(TileId(0, 1), TileId(1, 0))
    puzzle.apply_move(TileId(0, 1), TileId(1, 0))
    assert len(fired) == 1

    puzzle.undo()
    assert not puzzle.is_completed
    puzzle.redo()
    assert puzzle.is_completed
    assert len(fired) == 2


def test_reshuffle_rearms_completion(identity_shuffle: None) -> None:
    puzzle = Puzzle(2)
    fired = _completion_counter(puzzle)
    puzzle.start()
    puzzle.reshuffle()
    assert puzzle.is_completed
    assert len(fired) == 2


def test_listener_errors_propagate() -> None:
    puzzle = Puzzle(2)

    def boom() -> None:
        raise RuntimeError("listener failed")

    puzzle.notifier.subscribe(boom)
    puzzle.apply_move(TileId(0, 0), TileId(1, 1))
    with pytest.raises(RuntimeError, match="listener failed"):
        puzzle.undo()
