"""Cross-platform single-keypress reader for CLI frontends.

Handles arrow keys, WASD, and the puzzle action keys without requiring
Enter. Works on macOS / Linux (tty+termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys


# -- low-level character readers -----------------------------------------------


def _getch_unix() -> str:
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return ch


def _getch_windows() -> str:
    import msvcrt  # type: ignore[import-not-found]

    return msvcrt.getch().decode("utf-8", errors="ignore")


_getch = _getch_windows if os.name == "nt" else _getch_unix


# -- shared key mapping --------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "u": "undo",
    "z": "undo",
    "y": "redo",
    "r": "reshuffle",
    "h": "help",
    "?": "help",
    " ": "pick",
    "\r": "pick",
    "\n": "pick",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}


def resolve(ch: str) -> str:
    """Map a raw character to its action string."""
    mapped = _KEY_MAP.get(ch) or _KEY_MAP.get(ch.lower())
    if mapped:
        return mapped
    return ch if ch.isprintable() else ""


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Read a single keypress and return a normalised action string.

    Blocks until a key is pressed.

    Possible return values:
        "up", "down", "left", "right"  — cursor movement
        "pick"                         — Enter / Space (select source, then target)
        "undo", "redo"                 — u or z / y
        "reshuffle"                    — r
        "quit"                         — q / Ctrl-C / Escape
        "help"                         — h / ?
        "<char>"                       — unmapped printable char (e.g. "1")
        ""                             — unrecognised key
    """
    ch = _getch()

    # Arrow keys (Unix escape sequences: ESC [ A/B/C/D)
    if ch == "\x1b":
        ch2 = _getch()
        if ch2 == "[":
            ch3 = _getch()
            return _ARROW_MAP.get(ch3, "")
        return "quit"  # bare Escape

    return resolve(ch)
