"""Error taxonomy for the puzzle engine."""


class PuzzleError(Exception):
    """Base class for all recoverable puzzle errors."""


class InvalidConfiguration(PuzzleError, ValueError):
    """Grid size below the minimum, or an unrecognised difficulty."""


class InvalidMove(PuzzleError, ValueError):
    """A swap between unknown tiles, or between a tile and itself."""
