"""
Lyric schedulers.

Both variants answer "which lyric unit is current at time t?" as a pure
function of elapsed time since a start anchor. Neither keeps a playback
index; change detection belongs to the caller (see ``driver.FrameDriver``).

- ``PacedScheduler`` slices raw text into lines, words or short tokens and
  gives every unit the same fixed slot.
- ``TimestampScheduler`` walks a list of lines that each carry an onset.
"""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence

from .config import PACING_DURATIONS_MS, TOKEN_MIN_CHARS, TRAILING_GRACE_MS

logger = logging.getLogger(__name__)

_ANNOTATION = re.compile(r"\[.*?\]")
_BLANK_LINES = re.compile(r"\n\s*\n")


class PacingMode(str, Enum):
    LINE = "line"
    WORD = "word"
    TOKEN = "token"


@dataclass(frozen=True)
class LyricLine:
    text: str
    onset_ms: float


class Scheduler(Protocol):
    start_anchor: float

    def current_unit(self, now_ms: float) -> Optional[str]: ...

    def is_complete(self, now_ms: float) -> bool: ...

    def restart(self) -> None: ...

    def set_start_anchor(self, now_ms: float) -> None: ...

    def total_duration(self) -> float: ...


def split_units(raw: str, mode: PacingMode) -> List[str]:
    """
    Strip ``[section]`` annotations and blank lines, then cut the text into
    display units for the given pacing mode.
    """
    cleaned = _BLANK_LINES.sub("\n", _ANNOTATION.sub("", raw)).strip()
    mode = PacingMode(mode)
    if mode is PacingMode.LINE:
        return [ln.strip() for ln in cleaned.split("\n") if ln.strip()]
    if mode is PacingMode.WORD:
        return cleaned.split()

    # token: flush at a space once the chunk is long enough
    tokens: List[str] = []
    current = ""
    for ch in cleaned.replace("\n", " "):
        if ch == " " and len(current) >= TOKEN_MIN_CHARS:
            if current.strip():
                tokens.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        tokens.append(current.strip())
    return tokens


class PacedScheduler:
    """Fixed-length slots derived from the pacing mode and a speed multiplier."""

    def __init__(
        self,
        raw_lyrics: str,
        pacing: PacingMode = PacingMode.LINE,
        speed: float = 1.0,
    ):
        if speed <= 0:
            logger.warning("non-positive speed %r replaced with 1.0", speed)
            speed = 1.0
        self.pacing = PacingMode(pacing)
        self.speed = float(speed)
        self.units = split_units(raw_lyrics, self.pacing)
        self.start_anchor = 0.0
        logger.debug(
            "paced scheduler: %d %s unit(s) at %.2fx",
            len(self.units),
            self.pacing.value,
            self.speed,
        )

    def duration(self) -> float:
        """Slot length in milliseconds."""
        return PACING_DURATIONS_MS[self.pacing.value] / self.speed

    def index_at(self, now_ms: float) -> int:
        elapsed = max(0.0, now_ms - self.start_anchor)
        return math.floor(elapsed / self.duration())

    def current_unit(self, now_ms: float) -> Optional[str]:
        idx = self.index_at(now_ms)
        if idx < len(self.units):
            return self.units[idx]
        return None

    def is_complete(self, now_ms: float) -> bool:
        return self.index_at(now_ms) >= len(self.units)

    def restart(self) -> None:
        self.start_anchor = 0.0

    def set_start_anchor(self, now_ms: float) -> None:
        self.start_anchor = float(now_ms)

    def total_duration(self) -> float:
        return len(self.units) * self.duration()


class TimestampScheduler:
    """Lines that each become current at their own onset."""

    def __init__(self, lines: Sequence[LyricLine]):
        lines = list(lines)
        ordered = sorted(lines, key=lambda ln: ln.onset_ms)
        if ordered != lines:
            logger.warning("lyric onsets out of order; sorted %d line(s)", len(lines))
        self.lines = ordered
        self.start_anchor = 0.0

    def current_unit(self, now_ms: float) -> Optional[str]:
        elapsed = now_ms - self.start_anchor
        for line in reversed(self.lines):
            if elapsed >= line.onset_ms:
                return line.text
        return None

    def is_complete(self, now_ms: float) -> bool:
        if not self.lines:
            return True
        return now_ms - self.start_anchor > self.lines[-1].onset_ms + TRAILING_GRACE_MS

    def restart(self) -> None:
        self.start_anchor = 0.0

    def set_start_anchor(self, now_ms: float) -> None:
        self.start_anchor = float(now_ms)

    def total_duration(self) -> float:
        if not self.lines:
            return 0.0
        return self.lines[-1].onset_ms + TRAILING_GRACE_MS
