"""
Grid state: an N x N character matrix, a co-indexed opacity matrix and the
sparse map of cells currently claimed by placed lyric text.

Cells are addressed either by (row, col) or by their row-major linear index
``row * N + col``; the active map is keyed by the linear index so it doubles
as the reading-order key used during placement.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from .config import (
    ALPHABET,
    GRID_SIZE,
    OPACITY_FLOOR,
    OPACITY_SPAN,
    VOWEL_PROBABILITY,
    VOWELS,
)
from .noise import NoiseSource

logger = logging.getLogger(__name__)


@dataclass
class ActiveCell:
    ch: str
    is_lyric: bool = True


@dataclass
class PlacementCursor:
    floor: int = -1  # reading-order floor (linear index)
    placed_words: int = 0  # words placed in the current lyric pass
    last_horizontal: bool = False

    def reset(self) -> None:
        self.floor = -1
        self.placed_words = 0
        self.last_horizontal = False


@dataclass(eq=False)
class GridSnapshot:
    chars: np.ndarray  # (N, N) single characters
    opacity: np.ndarray  # (N, N) floats
    active: np.ndarray  # (N, N) bool, True where a lyric owns the cell

    def is_active(self, row: int, col: int) -> bool:
        return bool(self.active[row, col])


@dataclass(eq=False)
class GridState:
    seed: int
    size: int = GRID_SIZE
    noise: NoiseSource = field(init=False)
    chars: np.ndarray = field(init=False)
    opacity: np.ndarray = field(init=False)
    active: Dict[int, ActiveCell] = field(init=False, default_factory=dict)
    cursor: PlacementCursor = field(init=False, default_factory=PlacementCursor)

    def __post_init__(self):
        self.noise = NoiseSource(self.seed)
        self.seed = self.noise.seed
        self.chars = np.full((self.size, self.size), "a", dtype="<U1")
        self.opacity = np.zeros((self.size, self.size), dtype=np.float64)
        self.initialize()

    # -----------------------------
    # Coordinates
    # -----------------------------
    def index_of(self, row: int, col: int) -> int:
        return row * self.size + col

    def coords_of(self, idx: int) -> Tuple[int, int]:
        return divmod(idx, self.size)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) outside {self.size}x{self.size} grid")

    # -----------------------------
    # Noise draws
    # -----------------------------
    def _random_char(self) -> str:
        src = VOWELS if self.noise.chance(VOWEL_PROBABILITY) else ALPHABET
        return self.noise.pick(src).lower()

    def _random_opacity(self) -> float:
        return OPACITY_FLOOR + self.noise.next() * OPACITY_SPAN

    # -----------------------------
    # Mutators
    # -----------------------------
    def initialize(self) -> None:
        """Fill every cell, characters first and then opacities, row-major."""
        for r in range(self.size):
            for c in range(self.size):
                self.chars[r, c] = self._random_char()
        for r in range(self.size):
            for c in range(self.size):
                self.opacity[r, c] = self._random_opacity()

    def refresh_ambient(self) -> None:
        """Redraw every cell not owned by placed lyric text."""
        for r in range(self.size):
            for c in range(self.size):
                if self.index_of(r, c) in self.active:
                    continue
                self.chars[r, c] = self._random_char()
                self.opacity[r, c] = self._random_opacity()

    def claim(self, row: int, col: int, ch: str) -> None:
        self._check(row, col)
        self.active[self.index_of(row, col)] = ActiveCell(ch=ch, is_lyric=True)
        self.chars[row, col] = ch

    def clear_active(self) -> None:
        self.active.clear()
        self.refresh_ambient()
        self.cursor.reset()

    def reset(self) -> None:
        """Rewind the noise source and rebuild the grid from scratch."""
        self.noise.reseed()
        self.active.clear()
        self.initialize()
        self.cursor.reset()
        logger.debug("grid reset to seed %d", self.seed)

    # -----------------------------
    # Queries
    # -----------------------------
    def is_active(self, row: int, col: int) -> bool:
        self._check(row, col)
        return self.index_of(row, col) in self.active

    def is_free(self, row: int, col: int, halo: int = 0) -> bool:
        """True when no active cell lies within Chebyshev distance ``halo``."""
        for rr in range(row - halo, row + halo + 1):
            for cc in range(col - halo, col + halo + 1):
                if not self.in_bounds(rr, cc):
                    continue
                if self.index_of(rr, cc) in self.active:
                    return False
        return True

    def char_at(self, row: int, col: int) -> str:
        self._check(row, col)
        return str(self.chars[row, col])

    def opacity_at(self, row: int, col: int) -> float:
        self._check(row, col)
        return float(self.opacity[row, col])

    def max_active_index(self) -> int:
        return max(self.active, default=-1)

    def active_cells(self) -> List[Tuple[int, int]]:
        return [self.coords_of(idx) for idx in sorted(self.active)]

    def snapshot(self) -> GridSnapshot:
        mask = np.zeros((self.size, self.size), dtype=bool)
        for idx in self.active:
            mask[self.coords_of(idx)] = True
        return GridSnapshot(
            chars=self.chars.copy(), opacity=self.opacity.copy(), active=mask
        )
