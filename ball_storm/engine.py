"""
Rendering Engine
=================
Double-buffered terminal renderer that draws a session Snapshot.

Field coordinates are scaled onto the terminal grid; particles,
lightning and the zone ring go through a braille sub-pixel canvas.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .components import DashPhase, ParticleKind
from .snapshot import Snapshot
from .constants import (
    FIELD_WIDTH, FIELD_HEIGHT, MAX_DASHES,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_GREEN, NEON_RED,
    GRAY_LIGHT, GRAY_MED, GRAY_DARK, WHITE,
)

HUD_ROWS = 3


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        """Check if two cells are visually identical."""
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        """Reset to empty state."""
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Double-buffered terminal output.

    Writes to a back buffer, then swaps to front buffer,
    only updating cells that changed. No screen clears needed.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal  # Cache reset sequence

    def _init_buffers(self):
        """Initialize both buffers with empty cells."""
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def clear_back(self):
        """Clear the back buffer by resetting cells in-place."""
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        """Put a character in the back buffer at exact position."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        """Put a string in the back buffer."""
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        """Swap buffers and generate output for changed cells only."""
        output_parts = []
        normal = self._normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if not back_cell.matches(self.front[y][x]):
                    output_parts.append(self.term.move_xy(x, y))
                    output_parts.append(normal)
                    output_parts.append(self.term.color(back_cell.fg_color))
                    output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


class BrailleCanvas:
    """
    Sub-pixel rendering using Unicode Braille patterns.

    Each character cell maps to a 2x4 pixel grid, giving 8x
    the resolution of plain characters for particle effects.
    """

    # Braille dot bits indexed by [row][column]
    DOTS = [
        [0x01, 0x08],
        [0x02, 0x10],
        [0x04, 0x20],
        [0x40, 0x80],
    ]
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = char_width
        self.char_height = char_height
        self.pixel_width = char_width * 2
        self.pixel_height = char_height * 4
        self.canvas: List[List[int]] = []
        self.colors: List[List[int]] = []
        self.clear()

    def clear(self):
        self.canvas = [[0] * self.char_width for _ in range(self.char_height)]
        self.colors = [[WHITE] * self.char_width for _ in range(self.char_height)]

    def set_pixel(self, px: int, py: int, color: int = WHITE):
        """Set a sub-pixel dot at pixel coordinates."""
        if 0 <= px < self.pixel_width and 0 <= py < self.pixel_height:
            char_x, dot_x = divmod(px, 2)
            char_y, dot_y = divmod(py, 4)
            self.canvas[char_y][char_x] |= self.DOTS[dot_y][dot_x]
            self.colors[char_y][char_x] = color

    def line(self, x0: int, y0: int, x1: int, y1: int, color: int = WHITE):
        """Bresenham line in pixel space."""
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        while True:
            self.set_pixel(x0, y0, color)
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy

    def blit_to_buffer(self, buffer: DoubleBuffer):
        """Render braille canvas onto the buffer. Only overlays empty cells."""
        for cy in range(self.char_height):
            for cx in range(self.char_width):
                pattern = self.canvas[cy][cx]
                if pattern and buffer.back[cy][cx].char == ' ':
                    buffer.put(cx, cy, chr(self.BASE + pattern), self.colors[cy][cx])


@dataclass
class GameRenderer:
    """
    Draws snapshots. The snapshot's shake offset is applied to every
    play-field coordinate; the HUD below the field stays still.
    """
    term: Terminal
    field_width: float = FIELD_WIDTH
    field_height: float = FIELD_HEIGHT
    buffer: DoubleBuffer = field(init=False)
    braille: BrailleCanvas = field(init=False)

    show_fps: bool = False
    current_fps: float = 60.0

    shake_offset: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)
        self.braille = BrailleCanvas(self.term.width, self.game_height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def game_height(self) -> int:
        """Height of the playable area (excluding HUD rows)."""
        return self.buffer.height - HUD_ROWS

    # -------------------------------------------------------------------------
    # Coordinate mapping
    # -------------------------------------------------------------------------

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        sx, sy = self.shake_offset
        return (
            int((x + sx) / self.field_width * self.width),
            int((y + sy) / self.field_height * self.game_height),
        )

    def to_pixel(self, x: float, y: float) -> Tuple[int, int]:
        sx, sy = self.shake_offset
        return (
            int((x + sx) / self.field_width * self.braille.pixel_width),
            int((y + sy) / self.field_height * self.braille.pixel_height),
        )

    def put_field(self, x: int, y: int, char: str, color: int):
        """Put a char inside the play field only."""
        if 0 <= y < self.game_height:
            self.buffer.put(x, y, char, color)

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def render(self, snapshot: Snapshot) -> str:
        """Draw one snapshot and return the terminal output for it."""
        self.buffer.clear_back()
        self.braille.clear()
        self.shake_offset = snapshot.shake_offset

        self._draw_zone(snapshot)
        self._draw_lightning(snapshot.lightning)
        self._draw_balls(snapshot)
        self._draw_player(snapshot)
        self._draw_particles(snapshot)
        self._draw_banners(snapshot)

        self.braille.blit_to_buffer(self.buffer)
        self._draw_hud(snapshot)
        return self.buffer.present()

    def _draw_zone(self, snapshot: Snapshot):
        zone = snapshot.zone
        if zone is None:
            return
        color = NEON_YELLOW if zone.fraction > 0.25 else GRAY_MED
        steps = 72
        for i in range(steps):
            angle = 2 * math.pi * i / steps
            px, py = self.to_pixel(zone.x + math.cos(angle) * zone.radius,
                                   zone.y + math.sin(angle) * zone.radius)
            self.braille.set_pixel(px, py, color)

    def _draw_lightning(self, polylines: Sequence[Sequence[Tuple[float, float]]]):
        for points in polylines:
            for (x0, y0), (x1, y1) in zip(points, points[1:]):
                a = self.to_pixel(x0, y0)
                b = self.to_pixel(x1, y1)
                self.braille.line(a[0], a[1], b[0], b[1], NEON_CYAN)

    def _draw_balls(self, snapshot: Snapshot):
        for ball in snapshot.balls:
            cx, cy = self.to_cell(ball.x + ball.size / 2, ball.y + ball.size / 2)
            char = '*' if ball.has_lightning else 'o'
            color = NEON_CYAN if ball.has_lightning else ball.color
            self.put_field(cx, cy, char, color)

    def _draw_player(self, snapshot: Snapshot):
        player = snapshot.player
        x0, y0 = self.to_cell(player.x, player.y)
        x1, y1 = self.to_cell(player.x + player.width, player.y + player.height)
        for cy in range(y0, max(y0 + 1, y1)):
            for cx in range(x0, max(x0 + 1, x1)):
                self.put_field(cx, cy, '#', player.color)
        if snapshot.abilities.bomb_available:
            # Halo marks a ready bomb
            self.put_field(x0 - 1, y0, '(', NEON_CYAN)
            self.put_field(max(x0 + 1, x1), y0, ')', NEON_CYAN)

    def _draw_particles(self, snapshot: Snapshot):
        for kind, particles in snapshot.particles.items():
            for p in particles:
                if kind is ParticleKind.TEXT:
                    if p.alpha > 0.2:
                        cx, cy = self.to_cell(p.x, p.y)
                        color = p.color if p.alpha > 0.5 else GRAY_MED
                        for i, char in enumerate(p.text):
                            self.put_field(cx + i, cy, char, color)
                    continue
                if kind is ParticleKind.TRAIL:
                    if p.alpha < 0.3:
                        continue
                    color = p.color if p.alpha > 0.6 else GRAY_DARK
                else:
                    color = p.color if p.alpha > 0.2 else GRAY_DARK
                px, py = self.to_pixel(p.x, p.y)
                self.braille.set_pixel(px, py, color)

    def _draw_banners(self, snapshot: Snapshot):
        row = self.game_height // 3
        for banner in snapshot.banners:
            if banner.alpha < 0.15:
                continue
            color = banner.color if banner.alpha > 0.5 else GRAY_MED
            x = (self.width - len(banner.text)) // 2
            self.buffer.put_string(x, row, banner.text, color)
            row += 2
        if snapshot.paused:
            text = 'PAUSED  (P to resume)'
            self.buffer.put_string((self.width - len(text)) // 2,
                                   self.game_height // 2, text, WHITE)

    def _draw_hud(self, snapshot: Snapshot):
        ui_y = self.game_height
        width = self.width
        self.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
        self.buffer.put_string(2, ui_y, ' BALL_STORM ', NEON_MAGENTA)

        score_text = f' SCORE:{snapshot.score} '
        self.buffer.put_string(width - len(score_text) - 1, ui_y, score_text, NEON_YELLOW)

        # Row 1: combo multiplier + timer bar, streak / bomb
        row1 = ui_y + 1
        combo = snapshot.combo
        bar_width = 16
        filled = int(combo.timer_fraction * bar_width)
        bar = '|' * filled + '.' * (bar_width - filled)
        combo_color = NEON_MAGENTA if combo.animation_scale > 1.05 else NEON_CYAN
        self.buffer.put_string(2, row1, f'COMBO x{combo.multiplier:.1f}', combo_color)
        self.buffer.put_string(15, row1, f'[{bar}]', GRAY_LIGHT)

        abilities = snapshot.abilities
        if abilities.bomb_available:
            self.buffer.put_string(36, row1, 'BOMB READY [B]', NEON_GREEN)
        else:
            self.buffer.put_string(36, row1, f'STREAK {abilities.streak}', GRAY_MED)

        # Row 2: dash charges, storm
        row2 = ui_y + 2
        player = snapshot.player
        if player.dash_phase is DashPhase.COOLDOWN:
            filled = int((1 - player.dash_cooldown_fraction) * 5)
            self.buffer.put_string(2, row2, f"DASH:[{'#' * filled}{'.' * (5 - filled)}]", GRAY_MED)
        else:
            pips = 'o' * player.dashes_available + '.' * (MAX_DASHES - player.dashes_available)
            self.buffer.put_string(2, row2, f'DASH:[{pips}] Q/E', NEON_CYAN)

        if abilities.storm_active:
            self.buffer.put_string(36, row2, f'STORM {int(abilities.storm_fraction * 100):3d}%', NEON_CYAN)
        elif abilities.storm_unlocked:
            self.buffer.put_string(36, row2, 'STORM READY [F]', NEON_MAGENTA)

        if self.show_fps:
            fps_text = f'{self.current_fps:4.0f} FPS'
            color = NEON_GREEN if self.current_fps >= 55 else NEON_RED
            self.buffer.put_string(width - len(fps_text) - 1, row2, fps_text, color)
