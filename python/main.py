#!/usr/bin/env python3
"""Tile Puzzle.

Usage::

    python main.py                          # interactive menu
    python main.py -f rich -s 3 -d hard     # Rich terminal, 3×3, hard
    python main.py -f pygame -i photo.png   # Pygame GUI with your picture
"""

import importlib
import random
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
EXPORT_DIR = PROJECT_ROOT / "exports"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.models.errors import InvalidConfiguration  # noqa: E402
from backend.models.tile import Difficulty, validate_grid_size  # noqa: E402


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# -- helpers ------------------------------------------------------------------


def configure_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Route loguru to a single sink so terminal frontends stay readable."""
    logger.remove()
    if log_file is not None:
        logger.add(log_file, level=level, rotation="1 MB")
    else:
        logger.add(sys.stderr, level=level)


def _launch(frontend: Frontend, **options: object) -> None:
    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(**options)


def _menu_loop(**options: object) -> None:
    while True:
        print()
        print("  ====================================")
        print("          T I L E   P U Z Z L E       ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return
        if choice == "1":
            _launch(Frontend.rich, **options)
        elif choice == "2":
            _launch(Frontend.pygame, **options)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    size: int = typer.Option(
        3, "-s", "--size",
        min=2, max=8,
        help="Grid size (2-8).",
    ),
    difficulty: str = typer.Option(
        Difficulty.NORMAL.value, "-d", "--difficulty",
        help="Shuffle difficulty: easy, normal or hard.",
    ),
    image: Optional[Path] = typer.Option(
        None, "-i", "--image",
        exists=True, dir_okay=False, readable=True,
        help="Picture for the Pygame GUI (default: random file in assets/images).",
    ),
    export_dir: Path = typer.Option(
        EXPORT_DIR, "-o", "--export-dir",
        file_okay=False,
        help="Directory for PNG exports.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed the shuffle for reproducible puzzles.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING, "--log-level",
        help="Minimum level of log messages.",
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file",
        help="Write logs to this file instead of stderr.",
    ),
) -> None:
    """Tile Puzzle."""
    try:
        validate_grid_size(size)
        level = Difficulty.parse(difficulty)
    except InvalidConfiguration as exc:
        raise typer.BadParameter(str(exc)) from exc

    configure_logging(log_level.value, log_file)

    options = dict(
        size=size,
        difficulty=level,
        rng=random.Random(seed),
        image=image,
        images_dir=ASSETS_DIR / "images",
        export_dir=export_dir,
    )

    if frontend is None:
        _menu_loop(**options)
        return

    _launch(frontend, **options)


if __name__ == "__main__":
    app()
