"""Edge-triggered completion notification."""

from __future__ import annotations

from collections.abc import Callable

Listener = Callable[[], None]


class CompletionNotifier:
    """Fires listeners once per not-completed → completed transition.

    The latch stays set while the puzzle remains solved, and is cleared
    as soon as the order leaves the solved state or a new puzzle begins.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._latched = False

    @property
    def latched(self) -> bool:
        return self._latched

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update(self, completed: bool) -> bool:
        """Feed the latest completion state. Returns True if it fired."""
        if not completed:
            self._latched = False
            return False
        if self._latched:
            return False
        self._latched = True
        for listener in list(self._listeners):
            listener()
        return True

    def reset(self) -> None:
        self._latched = False
