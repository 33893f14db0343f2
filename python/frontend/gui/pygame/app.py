"""Pygame GUI frontend — image tile puzzle.

The picture is cut into N×N tiles which are swapped by drag-and-drop.
Includes a menu for grid size and difficulty, undo/redo, reshuffle, an
"original image" toggle, and PNG export of the current arrangement.
"""

from __future__ import annotations

import enum
import random
import time
from collections.abc import Sequence
from pathlib import Path

import pygame
from loguru import logger

from backend.engine.puzzle import Puzzle
from backend.models.errors import InvalidMove
from backend.models.tile import Difficulty, TileId, slot_to_cell

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 500, 640
BOARD_PX = 400
BOARD_Y = 76
TILE_GAP = 2
EXPORT_PX = 400

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


# ---------------------------------------------------------------------------
# Tile geometry
# ---------------------------------------------------------------------------
def source_rect(tile: TileId, grid_size: int, width: int, height: int) -> pygame.Rect:
    """Crop rectangle of *tile* within a *width*×*height* source image.

    Edges are computed with integer division per cell, so the crops of
    all tiles cover the whole image with no gaps even when the image
    size is not a multiple of *grid_size*.
    """
    x0 = tile.col * width // grid_size
    x1 = (tile.col + 1) * width // grid_size
    y0 = tile.row * height // grid_size
    y1 = (tile.row + 1) * height // grid_size
    return pygame.Rect(x0, y0, x1 - x0, y1 - y0)


def dest_rect(
    slot: int,
    grid_size: int,
    tile_px: int,
    origin: tuple[int, int] = (0, 0),
    gap: int = 0,
) -> pygame.Rect:
    """Screen rectangle of *slot* for tiles of *tile_px* separated by *gap*."""
    row, col = slot_to_cell(slot, grid_size)
    ox, oy = origin
    return pygame.Rect(
        ox + col * (tile_px + gap),
        oy + row * (tile_px + gap),
        tile_px,
        tile_px,
    )


def compose_arrangement(
    image: pygame.Surface,
    order: Sequence[TileId],
    grid_size: int,
    side: int = EXPORT_PX,
) -> pygame.Surface:
    """Draw *order* into a fresh *side*×*side* surface, one tile per slot."""
    tile_px = side // grid_size
    out = pygame.Surface((tile_px * grid_size, tile_px * grid_size), 0, 32)
    w, h = image.get_size()
    for slot, tile in enumerate(order):
        crop = image.subsurface(source_rect(tile, grid_size, w, h))
        piece = pygame.transform.scale(crop, (tile_px, tile_px))
        out.blit(piece, dest_rect(slot, grid_size, tile_px).topleft)
    return out


def export_arrangement(
    image: pygame.Surface,
    order: Sequence[TileId],
    grid_size: int,
    export_dir: Path,
    side: int = EXPORT_PX,
) -> Path:
    """Save the current arrangement as ``puzzle-{n}x{n}-{ms}.png``."""
    export_dir.mkdir(parents=True, exist_ok=True)
    stamp = int(time.time() * 1000)
    path = export_dir / f"puzzle-{grid_size}x{grid_size}-{stamp}.png"
    pygame.image.save(compose_arrangement(image, order, grid_size, side), str(path))
    logger.info("Exported arrangement to {}", path)
    return path


def placeholder_image(side: int = EXPORT_PX) -> pygame.Surface:
    """A diagonal gradient, used when no picture is available."""
    surf = pygame.Surface((side, side))
    for y in range(side):
        for x in range(0, side, 4):
            t = (x + y) / (2 * side)
            col = (
                int(COL_BLUE[0] * (1 - t) + COL_PINK[0] * t),
                int(COL_BLUE[1] * (1 - t) + COL_PINK[1] * t),
                int(COL_BLUE[2] * (1 - t) + COL_PINK[2] * t),
            )
            surf.fill(col, pygame.Rect(x, y, 4, 1))
    return surf


def find_image(image: Path | None, images_dir: Path) -> Path | None:
    """Return *image* if given, else a random picture from *images_dir*."""
    if image is not None:
        return image
    if not images_dir.is_dir():
        return None
    candidates = [p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES]
    return random.choice(candidates) if candidates else None


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface, enabled: bool = True) -> None:
        c = self.hover if self._hot and enabled else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg if enabled else COL_OVERLAY0)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    _SIZES = tuple(range(2, 9))

    def __init__(
        self,
        default_size: int,
        difficulty: Difficulty,
        image_path: Path | None,
        export_dir: Path,
        rng: random.Random,
    ) -> None:
        self._sel_size = default_size if default_size in self._SIZES else 3
        self._difficulty = difficulty
        self._export_dir = export_dir
        self._rng = rng

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Tile Puzzle")
        self._clock = pygame.time.Clock()

        if image_path is not None:
            self._image = pygame.image.load(str(image_path)).convert()
            logger.info("Loaded image {}", image_path)
        else:
            self._image = placeholder_image().convert()
        self._tiles: dict[TileId, pygame.Surface] = {}

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.MENU
        self._puzzle: Puzzle | None = None
        self._status_msg = ""
        self._show_original = False

        # drag state: tile being dragged, and cursor offset inside the tile
        self._drag: TileId | None = None
        self._drag_offset = (0, 0)
        self._drag_pos = (0, 0)

        self._build_menu_btns()
        self._build_game_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw, bh, gap = 56, 46, 6
        total_w = len(self._SIZES) * bw + (len(self._SIZES) - 1) * gap
        sx = _cx(total_w)
        self._size_btns: dict[int, _Btn] = {
            s: _Btn((sx + i * (bw + gap), 220, bw, bh), f"{s}×{s}", self._f_btn_sm)
            for i, s in enumerate(self._SIZES)
        }

        levels = list(Difficulty)
        bw = 120
        total_w = len(levels) * bw + (len(levels) - 1) * gap
        sx = _cx(total_w)
        self._level_btns: dict[Difficulty, _Btn] = {
            d: _Btn((sx + i * (bw + gap), 310, bw, bh), d.value.upper(), self._f_btn_sm)
            for i, d in enumerate(levels)
        }

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 400, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 466, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )
        self._menu_all: list[_Btn] = [
            *self._size_btns.values(),
            *self._level_btns.values(),
            self._play_btn,
            self._quit_btn,
        ]

    def _build_game_btns(self) -> None:
        """In-game action buttons, placed below the board."""
        bw, gap = 86, 6
        labels = ("UNDO (U)", "REDO (Y)", "SHUFFLE (R)", "SAVE (S)", "ORIGINAL (O)")
        total = len(labels) * bw + (len(labels) - 1) * gap
        sx = _cx(total)
        y = BOARD_Y + BOARD_PX + 14
        self._undo_btn, self._redo_btn, self._shuffle_btn, self._save_btn, self._orig_btn = (
            _Btn((sx + i * (bw + gap), y, bw, 36), label, self._f_small)
            for i, label in enumerate(labels)
        )
        self._shuffle_btn.bg, self._shuffle_btn.fg = COL_PINK, COL_BASE
        self._save_btn.bg, self._save_btn.fg = COL_GREEN, COL_BASE
        self._game_btns = [
            self._undo_btn,
            self._redo_btn,
            self._shuffle_btn,
            self._save_btn,
            self._orig_btn,
        ]

    # ── layout helpers ──────────────────────────────────────────────────────

    def _tile_px(self) -> int:
        sz = self._puzzle.grid_size  # type: ignore[union-attr]
        return (BOARD_PX - (sz - 1) * TILE_GAP) // sz

    def _origin(self) -> tuple[int, int]:
        return _cx(BOARD_PX), BOARD_Y

    def _slot_rect(self, slot: int) -> pygame.Rect:
        return dest_rect(
            slot,
            self._puzzle.grid_size,  # type: ignore[union-attr]
            self._tile_px(),
            self._origin(),
            TILE_GAP,
        )

    def _slot_at(self, pos: tuple[int, int]) -> int | None:
        """Hit-test *pos* against the board; ``None`` outside every tile."""
        puzzle = self._puzzle
        assert puzzle is not None
        for slot in range(puzzle.grid_size * puzzle.grid_size):
            if self._slot_rect(slot).collidepoint(pos):
                return slot
        return None

    def _prepare_tile_images(self) -> None:
        """Slice the picture into per-tile surfaces sized for the board."""
        puzzle = self._puzzle
        assert puzzle is not None
        tpx = self._tile_px()
        w, h = self._image.get_size()
        self._tiles = {
            tile: pygame.transform.smoothscale(
                self._image.subsurface(source_rect(tile, puzzle.grid_size, w, h)),
                (tpx, tpx),
            )
            for tile in puzzle.solved_order
        }

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(self._surf, self._f_big.render("TILE  PUZZLE", True, COL_TEXT), 80)
        _blit_center(
            self._surf, self._f_body.render("Grid size", True, COL_SUBTEXT), 190
        )
        _blit_center(
            self._surf, self._f_body.render("Difficulty", True, COL_SUBTEXT), 280
        )

        for s, btn in self._size_btns.items():
            btn.bg = COL_GREEN if s == self._sel_size else COL_SURFACE0
            btn.fg = COL_BASE if s == self._sel_size else COL_TEXT
            btn.draw(self._surf)
        for d, btn in self._level_btns.items():
            btn.bg = COL_YELLOW if d is self._difficulty else COL_SURFACE0
            btn.fg = COL_BASE if d is self._difficulty else COL_TEXT
            btn.draw(self._surf)

        self._play_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        puzzle = self._puzzle
        assert puzzle is not None
        sz = puzzle.grid_size

        # header
        if puzzle.is_completed:
            header = self._f_title.render("★  Puzzle complete!  ★", True, COL_GREEN)
        else:
            header = self._f_title.render(
                f"Tile Puzzle  {sz}×{sz}  ({puzzle.difficulty.value})", True, COL_TEXT
            )
        _blit_center(self._surf, header, 14)
        _blit_center(
            self._surf,
            self._f_body.render(f"Moves: {puzzle.moves}", True, COL_PINK),
            44,
        )

        ox, oy = self._origin()
        pygame.draw.rect(
            self._surf,
            COL_MANTLE,
            pygame.Rect(ox - 6, oy - 6, BOARD_PX + 12, BOARD_PX + 12),
            border_radius=10,
        )

        if self._show_original:
            self._surf.blit(
                pygame.transform.smoothscale(self._image, (BOARD_PX, BOARD_PX)), (ox, oy)
            )
        else:
            for slot, tile in enumerate(puzzle.current_order):
                rect = self._slot_rect(slot)
                if tile == self._drag:
                    pygame.draw.rect(self._surf, COL_SURFACE0, rect)
                    continue
                self._surf.blit(self._tiles[tile], rect.topleft)
                if puzzle.is_completed:
                    pygame.draw.rect(self._surf, COL_GREEN, rect, width=2)

            # drop-target highlight and the dragged tile on top
            if self._drag is not None:
                target = self._slot_at(self._drag_pos)
                if target is not None:
                    pygame.draw.rect(
                        self._surf, COL_LAVENDER, self._slot_rect(target), width=3
                    )
                dx, dy = self._drag_offset
                px, py = self._drag_pos
                self._surf.blit(self._tiles[self._drag], (px - dx, py - dy))

        self._undo_btn.draw(self._surf, puzzle.can_undo)
        self._redo_btn.draw(self._surf, puzzle.can_redo)
        for btn in (self._shuffle_btn, self._save_btn, self._orig_btn):
            btn.draw(self._surf)

        footer_y = BOARD_Y + BOARD_PX + 60
        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                footer_y,
            )
        _blit_center(
            self._surf,
            self._f_small.render(
                "Drag a tile onto another to swap     M  menu     Esc  quit",
                True,
                COL_OVERLAY0,
            ),
            footer_y + 22,
        )

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for s, b in self._size_btns.items():
                if b.hit(ev.pos):
                    self._sel_size = s
                    return True
            for d, b in self._level_btns.items():
                if b.hit(ev.pos):
                    self._difficulty = d
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        puzzle = self._puzzle
        assert puzzle is not None
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_btns:
                btn.motion(ev.pos)
            self._drag_pos = ev.pos
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._undo_btn.hit(ev.pos):
                self._do_undo()
            elif self._redo_btn.hit(ev.pos):
                self._do_redo()
            elif self._shuffle_btn.hit(ev.pos):
                self._do_reshuffle()
            elif self._save_btn.hit(ev.pos):
                self._do_export()
            elif self._orig_btn.hit(ev.pos):
                self._show_original = not self._show_original
            elif not self._show_original:
                slot = self._slot_at(ev.pos)
                if slot is not None:
                    rect = self._slot_rect(slot)
                    self._drag = puzzle.tile_at(slot)
                    self._drag_offset = (ev.pos[0] - rect.x, ev.pos[1] - rect.y)
                    self._drag_pos = ev.pos
        elif ev.type == pygame.MOUSEBUTTONUP and ev.button == 1:
            self._drop(ev.pos)
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_u:
                self._do_undo()
            elif ev.key == pygame.K_y:
                self._do_redo()
            elif ev.key == pygame.K_r:
                self._do_reshuffle()
            elif ev.key == pygame.K_s:
                self._do_export()
            elif ev.key == pygame.K_o:
                self._show_original = not self._show_original
            elif ev.key == pygame.K_m:
                self._drag = None
                self._screen = _Screen.MENU
            elif ev.key == pygame.K_ESCAPE:
                return False
        return True

    def _drop(self, pos: tuple[int, int]) -> None:
        """Finish a drag; a release outside the board or on the source is no drop."""
        puzzle = self._puzzle
        source, self._drag = self._drag, None
        if puzzle is None or source is None:
            return
        slot = self._slot_at(pos)
        if slot is None:
            return
        target = puzzle.tile_at(slot)
        if target == source:
            return
        self._status_msg = ""
        try:
            puzzle.apply_move(source, target)
        except InvalidMove as exc:
            self._status_msg = str(exc)

    # ── actions ─────────────────────────────────────────────────────────────

    def _do_undo(self) -> None:
        if self._puzzle is not None and not self._puzzle.undo():
            self._status_msg = "Nothing to undo"

    def _do_redo(self) -> None:
        if self._puzzle is not None and not self._puzzle.redo():
            self._status_msg = "Nothing to redo"

    def _do_reshuffle(self) -> None:
        if self._puzzle is None:
            return
        self._status_msg = "Reshuffled!"
        self._show_original = False
        self._puzzle.reshuffle()

    def _do_export(self) -> None:
        puzzle = self._puzzle
        if puzzle is None:
            return
        try:
            path = export_arrangement(
                self._image, puzzle.current_order, puzzle.grid_size, self._export_dir
            )
        except (OSError, pygame.error) as exc:
            logger.error("Export failed: {}", exc)
            self._status_msg = "Export failed"
            return
        self._status_msg = f"Saved {path.name}"

    def _on_complete(self) -> None:
        self._status_msg = "Congratulations! The picture is complete."

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        self._puzzle = Puzzle(self._sel_size, self._difficulty, rng=self._rng)
        self._puzzle.notifier.subscribe(self._on_complete)
        self._status_msg = ""
        self._show_original = False
        self._drag = None
        self._puzzle.start()
        self._prepare_tile_images()
        self._screen = _Screen.PLAYING

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(60)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    size: int = 3,
    difficulty: Difficulty = Difficulty.NORMAL,
    rng: random.Random | None = None,
    image: Path | None = None,
    images_dir: Path = Path("assets/images"),
    export_dir: Path = Path("exports"),
) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    rng = rng or random.Random()
    app = PygameApp(size, difficulty, find_image(image, images_dir), export_dir, rng)
    app.run_loop()
