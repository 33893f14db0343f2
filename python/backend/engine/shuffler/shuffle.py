"""Difficulty-parameterised shuffling of tile orders."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import TypeVar

from loguru import logger

from backend.models.tile import Difficulty

T = TypeVar("T")


class Shuffler:
    """Scrambles an order with repeated Fisher–Yates passes.

    Passes compose: each one shuffles the output of the previous pass.
    More passes mean more scrambling *in expectation*; there is no
    minimum distance from the solved order.
    """

    @staticmethod
    def pass_count(difficulty: Difficulty | str, n: int) -> int:
        """Number of full passes for *difficulty* over *n* tiles."""
        difficulty = Difficulty.parse(difficulty)
        if difficulty is Difficulty.EASY:
            return max(3, math.floor(0.3 * n))
        if difficulty is Difficulty.NORMAL:
            return n
        return math.floor(2 * n)

    @staticmethod
    def shuffle(
        base: Sequence[T],
        difficulty: Difficulty | str,
        rng: random.Random | None = None,
    ) -> list[T]:
        """Return a new, shuffled copy of *base*. *base* is left untouched."""
        order = list(base)
        passes = Shuffler.pass_count(difficulty, len(order))
        if len(order) < 2:
            return order

        rng = rng or random.Random()
        for _ in range(passes):
            Shuffler._fisher_yates(order, rng)

        logger.debug(
            "Shuffled {} tiles with {} passes ({})", len(order), passes, difficulty
        )
        return order

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _fisher_yates(order: list, rng: random.Random) -> None:
        for i in range(len(order) - 1, 0, -1):
            j = rng.randint(0, i)
            order[i], order[j] = order[j], order[i]
