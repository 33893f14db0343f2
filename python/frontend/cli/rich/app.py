"""Rich terminal frontend — tables, colours, and panels.

Tiles are shown by their origin coordinate (``row-col``). A cursor picks
the tile to drag, a second pick drops it onto another tile and swaps the
two. Includes a built-in menu for size and difficulty selection.
"""

from __future__ import annotations

import random

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.puzzle import Puzzle
from backend.models.errors import InvalidMove
from backend.models.tile import Difficulty, TileId, cell_to_slot, slot_to_cell
from frontend.cli.input_handler import get_key

console = Console()

MIN_SIZE, MAX_SIZE = 2, 8

_DIFFICULTY_KEYS: dict[str, Difficulty] = {
    "1": Difficulty.EASY,
    "2": Difficulty.NORMAL,
    "3": Difficulty.HARD,
}

_OFFSETS: dict[str, tuple[int, int]] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


# -- selection helpers --------------------------------------------------------


def move_cursor(slot: int, action: str, size: int) -> int:
    """Return the slot the cursor lands on; it stops at the grid edge."""
    dr, dc = _OFFSETS[action]
    row, col = slot_to_cell(slot, size)
    row = min(max(row + dr, 0), size - 1)
    col = min(max(col + dc, 0), size - 1)
    return cell_to_slot(row, col, size)


def pick(puzzle: Puzzle, slot: int, picked: TileId | None) -> tuple[TileId | None, str]:
    """Handle a pick at *slot*: choose a source tile or drop onto a target.

    Returns the new picked tile (``None`` once a drop happened) and a
    status message. Picking the source tile again cancels the drag.
    """
    tile = puzzle.tile_at(slot)
    if picked is None:
        return tile, f"[yellow]Picked {tile.key}[/yellow] Choose a tile to swap with."
    if picked == tile:
        return None, "[dim]Cancelled.[/dim]"
    try:
        puzzle.apply_move(picked, tile)
    except InvalidMove as exc:
        return None, f"[red]{exc}[/red]"
    return None, f"[cyan]Swapped[/cyan] {picked.key} ↔ {tile.key}"


# -- board rendering ----------------------------------------------------------


def _render_board(
    puzzle: Puzzle, cursor: int | None = None, picked: TileId | None = None
) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    size = puzzle.grid_size
    width = len(TileId(size - 1, size - 1).key)
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        show_lines=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(size):
        table.add_column(width=width + 1, justify="center")

    for r in range(size):
        cells: list[str] = []
        for c in range(size):
            slot = cell_to_slot(r, c, size)
            tile = puzzle.tile_at(slot)
            style = "bold green" if puzzle.is_tile_correct(slot) else "bold white"
            if tile == picked:
                style = "bold black on yellow"
            if slot == cursor:
                style += " reverse"
            cells.append(f"[{style}]{tile.key:>{width}}[/{style}]")
        table.add_row(*cells)

    return table


def _controls() -> Text:
    controls = Text()
    for key, label in (
        ("↑↓←→", "move"),
        ("Enter", "pick/drop"),
        ("U", "undo"),
        ("Y", "redo"),
        ("R", "reshuffle"),
        ("1-3", "difficulty"),
        ("Q", "back"),
    ):
        controls.append(f"  {key}", style="bold cyan")
        controls.append(f" {label} ", style="dim")
    return controls


# -- menu screen --------------------------------------------------------------


def _draw_menu(sel_size: int, difficulty: Difficulty) -> None:
    """Draw the main menu."""
    console.clear()

    sizes = Text()
    for s in range(MIN_SIZE, MAX_SIZE + 1):
        if s > MIN_SIZE:
            sizes.append("  ")
        if s == sel_size:
            sizes.append(f" {s}×{s} ", style="bold green on #313244")
        else:
            sizes.append(f" {s}×{s} ", style="dim")

    levels = Text()
    for key, level in _DIFFICULTY_KEYS.items():
        levels.append(f"  {key} ", style="bold cyan")
        if level is difficulty:
            levels.append(f" {level.value} ", style="bold green on #313244")
        else:
            levels.append(f" {level.value} ", style="dim")

    nav = Text("  ← →  change size", style="dim")

    opts = Text()
    opts.append("  Enter", style="bold cyan")
    opts.append("  Play    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(sizes),
        Align.center(nav),
        Text(""),
        Align.center(levels),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]T I L E   P U Z Z L E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------


def _draw_game(
    puzzle: Puzzle, cursor: int, picked: TileId | None, status: str = ""
) -> None:
    console.clear()

    size = puzzle.grid_size
    board_table = _render_board(puzzle, cursor, picked)

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(puzzle.moves), style="bold yellow")
    stats.append("    Difficulty: ", style="dim")
    stats.append(puzzle.difficulty.value, style="bold yellow")
    stats.append("    Undo: ", style="dim")
    stats.append("yes" if puzzle.can_undo else "no", style="bold yellow")
    stats.append("  Redo: ", style="dim")
    stats.append("yes" if puzzle.can_redo else "no", style="bold yellow")

    border = "bold green" if puzzle.is_completed else "bright_blue"
    panel = Panel(
        Align.center(board_table),
        title=f"[bold cyan]Tile Puzzle  {size}×{size}[/bold cyan]",
        border_style=border,
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls()))


def _draw_win(puzzle: Puzzle) -> None:
    console.clear()

    size = puzzle.grid_size
    board_table = _render_board(puzzle)

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("CONGRATULATIONS!", style="bold green")
    congrats.append("  Puzzle complete!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(puzzle.moves), style="bold yellow")

    panel = Panel(
        Group(
            Align.center(board_table),
            Align.center(congrats),
            Align.center(stats),
        ),
        title=f"[bold green]Tile Puzzle  {size}×{size}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to continue.\n", style="dim")))


def _draw_help() -> None:
    console.clear()
    lines = Text()
    lines.append("Move the cursor to a tile and press Enter to pick it up.\n")
    lines.append("Move to another tile and press Enter again to swap them.\n")
    lines.append("Press Enter on the picked tile to put it back.\n\n")
    lines.append("Tiles already in their original place are green.\n")
    lines.append("The puzzle is complete when every tile is green.\n")
    console.print()
    console.print(
        Align.center(
            Panel(lines, title="[bold]HELP[/bold]", border_style="bright_blue", padding=(1, 2))
        )
    )
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loop ----------------------------------------------------------------


def _play_game(size: int, difficulty: Difficulty, rng: random.Random) -> None:
    puzzle = Puzzle(size, difficulty, rng=rng)
    completions: list[int] = []
    puzzle.notifier.subscribe(lambda: completions.append(puzzle.moves))
    puzzle.start()

    cursor = 0
    picked: TileId | None = None
    status = ""

    while True:
        if completions:
            completions.clear()
            _draw_win(puzzle)
            get_key()

        _draw_game(puzzle, cursor, picked, status)
        status = ""
        key = get_key()

        if key in _OFFSETS:
            cursor = move_cursor(cursor, key, size)
        elif key == "pick":
            picked, status = pick(puzzle, cursor, picked)
        elif key == "undo":
            picked = None
            if not puzzle.undo():
                status = "[dim]Nothing to undo.[/dim]"
        elif key == "redo":
            picked = None
            if not puzzle.redo():
                status = "[dim]Nothing to redo.[/dim]"
        elif key == "reshuffle":
            picked = None
            puzzle.reshuffle()
            status = "[yellow]Reshuffled![/yellow]"
        elif key in _DIFFICULTY_KEYS:
            picked = None
            puzzle.reshuffle(_DIFFICULTY_KEYS[key])
            status = f"[yellow]Reshuffled ({puzzle.difficulty.value})[/yellow]"
        elif key == "help":
            _draw_help()
        elif key == "quit":
            return


# -- menu loop ----------------------------------------------------------------


def _menu_loop(size: int, difficulty: Difficulty, rng: random.Random) -> None:
    sel_size = size

    while True:
        _draw_menu(sel_size, difficulty)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = max(MIN_SIZE, sel_size - 1)
        elif key == "right":
            sel_size = min(MAX_SIZE, sel_size + 1)
        elif key in _DIFFICULTY_KEYS:
            difficulty = _DIFFICULTY_KEYS[key]
        elif key == "pick":
            _play_game(sel_size, difficulty, rng)


# -- public entry point -------------------------------------------------------


def run(
    size: int = 3,
    difficulty: Difficulty = Difficulty.NORMAL,
    rng: random.Random | None = None,
    **_: object,
) -> None:
    """Launch the Rich CLI with interactive menu."""
    _menu_loop(size, difficulty, rng or random.Random())
