from backend.engine.puzzle.puzzle import Puzzle, PuzzleStatus

__all__ = ["Puzzle", "PuzzleStatus"]
