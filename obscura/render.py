"""
Pygame drawing of a grid snapshot onto a square canvas.
"""

import random
from typing import Dict, Tuple

import pygame

from .config import (
    BG_COLOR,
    FONT_CELL_RATIO,
    FONT_NAME,
    GLOW_ALPHA,
    GLOW_RADIUS,
    GLYPH_COLOR,
    JITTER_PX,
)
from .grid import GridSnapshot


def make_font(sz: int):
    try:
        return pygame.font.SysFont(FONT_NAME, sz)
    except Exception:
        return pygame.font.Font(None, sz)


class GridRenderer:
    def __init__(self, canvas_size: int, grid_size: int):
        self.grid_size = grid_size
        self.glyph_cache: Dict[Tuple[str, int], pygame.Surface] = {}
        self.resize(canvas_size)

    def resize(self, canvas_size: int) -> None:
        self.canvas_size = canvas_size
        self.cell = canvas_size / self.grid_size
        self.font = make_font(max(8, int(self.cell * FONT_CELL_RATIO)))
        self.glyph_cache = {}

    def get_glyph(self, ch: str, alpha: int) -> pygame.Surface:
        key = (ch, alpha)
        surf = self.glyph_cache.get(key)
        if surf is None:
            surf = self.font.render(ch, True, GLYPH_COLOR)
            surf.set_alpha(alpha)
            self.glyph_cache[key] = surf
        return surf

    def _blit_centered(self, target, glyph, cx: float, cy: float) -> None:
        rect = glyph.get_rect(center=(int(cx), int(cy)))
        target.blit(glyph, rect)

    def draw(self, target: pygame.Surface, snap: GridSnapshot, origin=(0, 0)) -> None:
        ox, oy = origin
        pygame.draw.rect(
            target, BG_COLOR, (ox, oy, self.canvas_size, self.canvas_size)
        )
        n = self.grid_size
        for row in range(n):
            for col in range(n):
                ch = str(snap.chars[row, col])
                cx = ox + col * self.cell + self.cell / 2
                cy = oy + row * self.cell + self.cell / 2
                if snap.active[row, col]:
                    # soft glow: faint copies around the glyph, then the glyph itself
                    halo = self.get_glyph(ch, GLOW_ALPHA)
                    for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                        self._blit_centered(
                            target, halo, cx + dx * GLOW_RADIUS, cy + dy * GLOW_RADIUS
                        )
                    self._blit_centered(target, self.get_glyph(ch, 255), cx, cy)
                else:
                    alpha = int(float(snap.opacity[row, col]) * 255)
                    jx = (random.random() - 0.5) * 2 * JITTER_PX
                    jy = (random.random() - 0.5) * 2 * JITTER_PX
                    self._blit_centered(target, self.get_glyph(ch, alpha), cx + jx, cy + jy)
