"""Lyrics that surface, word by word, out of a grid of shifting letters."""

from .driver import FrameDriver
from .grid import ActiveCell, GridSnapshot, GridState, PlacementCursor
from .noise import NoiseSource
from .placement import PlacementEngine, PlacementMode, tokenize
from .scheduler import (
    LyricLine,
    PacedScheduler,
    PacingMode,
    Scheduler,
    TimestampScheduler,
)

__all__ = [
    "ActiveCell",
    "FrameDriver",
    "GridSnapshot",
    "GridState",
    "LyricLine",
    "NoiseSource",
    "PacedScheduler",
    "PacingMode",
    "PlacementCursor",
    "PlacementEngine",
    "PlacementMode",
    "Scheduler",
    "TimestampScheduler",
    "tokenize",
]
