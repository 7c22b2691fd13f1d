"""
Word placement.

Words are scattered across the grid but always in reading order: each word
must start at a linear index strictly after the start of the word placed
before it, so scanning the grid row by row spells the lyric out in sequence.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .config import (
    HALO,
    MAX_PLACEMENT_ATTEMPTS,
    ORIENT_FLIP_EVERY,
    ORIENT_HORIZONTAL_BIAS,
)
from .grid import GridState

logger = logging.getLogger(__name__)

_APOSTROPHES = re.compile(r"['‘’]")
_NON_WORD = re.compile(r"[^A-Za-z0-9\s]")


class PlacementMode(str, Enum):
    APPEND = "append"
    REPLACE = "replace"


@dataclass
class WordPlacement:
    word: str
    cells: List[Tuple[int, int]]
    start_idx: int
    horizontal: bool


def tokenize(text: str) -> List[str]:
    """
    Lowercase word tokens: apostrophes dropped, hyphens and any other
    punctuation turned into word breaks.
    """
    norm = unicodedata.normalize("NFKC", text)
    no_apos = _APOSTROPHES.sub("", norm)
    cleaned = _NON_WORD.sub(" ", no_apos.replace("-", " "))
    return [w.lower() for w in cleaned.split()]


class PlacementEngine:
    def __init__(self, grid: GridState):
        self.grid = grid

    def place(
        self, text: str, mode: PlacementMode = PlacementMode.APPEND
    ) -> List[Tuple[int, int]]:
        """
        Place the words of ``text`` and return the newly occupied cells.

        ``replace`` wipes the current lyric first. ``append`` skips the words
        already placed in this pass and places only the remainder. Placement
        stops at the first word that cannot fit; what was placed is kept.
        """
        words = tokenize(text)
        if not words:
            return []

        grid = self.grid
        cursor = grid.cursor
        if PlacementMode(mode) is PlacementMode.REPLACE:
            grid.clear_active()
            to_place = words
        else:
            to_place = words[min(cursor.placed_words, len(words)):]

        # new words start after everything already on the grid
        cursor.floor = grid.max_active_index()
        placed: List[Tuple[int, int]] = []
        for i, w in enumerate(to_place):
            result = self._place_word(w, cursor.floor)
            if result is None:
                logger.debug(
                    "no room for %r after index %d; %d word(s) left unplaced",
                    w,
                    cursor.floor,
                    len(to_place) - i,
                )
                break
            placed.extend(result.cells)
            cursor.floor = result.start_idx
            cursor.placed_words += 1
        return placed

    def _place_word(self, word: str, min_start_idx: int) -> Optional[WordPlacement]:
        grid = self.grid
        noise = grid.noise
        n = grid.size
        length = len(word)

        for halo in (HALO, max(0, HALO - 1)):
            for attempt in range(MAX_PLACEMENT_ATTEMPTS):
                horizontal = noise.chance(ORIENT_HORIZONTAL_BIAS)
                if attempt % ORIENT_FLIP_EVERY == 0:
                    horizontal = not grid.cursor.last_horizontal

                # bounds leave room for the word plus halo
                row_min, row_max = halo, n - 1 - halo
                col_min, col_max = halo, n - 1 - halo
                if horizontal:
                    col_max -= length - 1
                    if col_max < col_min:
                        continue
                else:
                    row_max -= length - 1
                    if row_max < row_min:
                        continue

                r0 = noise.between(row_min, row_max)
                c0 = noise.between(col_min, col_max)
                start_idx = grid.index_of(r0, c0)
                if start_idx <= min_start_idx:
                    continue

                cells = [
                    (r0, c0 + i) if horizontal else (r0 + i, c0) for i in range(length)
                ]
                if not all(grid.is_free(r, c, halo) for r, c in cells):
                    continue

                for (r, c), ch in zip(cells, word):
                    grid.claim(r, c, ch)
                grid.cursor.last_horizontal = horizontal
                return WordPlacement(
                    word=word, cells=cells, start_idx=start_idx, horizontal=horizontal
                )
        return None
