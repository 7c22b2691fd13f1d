"""
Per-frame driver tying a scheduler to the grid.

The host calls ``tick(now_ms)`` once per frame. Within a tick the scheduler
is queried once; if the current unit differs from the last one seen, the
lyric cells are cleared and the new unit placed before anything reads the
grid. Ambient cells are redrawn on their own cadence in the same tick.
"""

import logging
from typing import Optional

from .config import AMBIENT_REFRESH_MS
from .grid import GridSnapshot, GridState
from .placement import PlacementEngine, PlacementMode
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


class FrameDriver:
    def __init__(self, grid: GridState, scheduler: Scheduler):
        self.grid = grid
        self.engine = PlacementEngine(grid)
        self.scheduler = scheduler
        self.playing = False
        self.current_text: Optional[str] = None
        self.last_refresh = 0.0
        self._anchored = False
        self._paused_at: Optional[float] = None
        self.finished = False

    # -----------------------------
    # Playback controls
    # -----------------------------
    def play(self, now_ms: float) -> None:
        if self.playing:
            return
        if self.finished:
            # played through: start over from the first unit
            self.scheduler.restart()
            self._anchored = False
            self.finished = False
        elif self._anchored and self._paused_at is not None:
            # shift the anchor so the pause does not count as elapsed time
            self.scheduler.set_start_anchor(
                self.scheduler.start_anchor + (now_ms - self._paused_at)
            )
        self._paused_at = None
        self.playing = True

    def pause(self, now_ms: float) -> None:
        if not self.playing:
            return
        self.playing = False
        self._paused_at = now_ms

    def toggle(self, now_ms: float) -> None:
        if self.playing:
            self.pause(now_ms)
        else:
            self.play(now_ms)

    def restart(self) -> None:
        """Stop, rewind the scheduler and rebuild the grid from its seed."""
        self.playing = False
        self.scheduler.restart()
        self.grid.reset()
        self.current_text = None
        self._anchored = False
        self._paused_at = None
        self.finished = False

    def swap_scheduler(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self.playing = False
        self.current_text = None
        self._anchored = False
        self._paused_at = None
        self.finished = False
        self.grid.clear_active()

    def swap_grid(self, grid: GridState) -> None:
        self.grid = grid
        self.engine = PlacementEngine(grid)
        self.current_text = None

    # -----------------------------
    # Frame
    # -----------------------------
    def tick(self, now_ms: float) -> bool:
        """Advance one frame. Returns True while more frames are wanted."""
        if self.playing:
            if not self._anchored:
                self.scheduler.set_start_anchor(now_ms)
                self._anchored = True
            text = self.scheduler.current_unit(now_ms)
            if text != self.current_text:
                logger.debug("lyric change at %.0f ms: %r", now_ms, text)
                self.current_text = text
                self.grid.clear_active()
                if text:
                    self.engine.place(text, PlacementMode.APPEND)

        if now_ms - self.last_refresh >= AMBIENT_REFRESH_MS:
            self.grid.refresh_ambient()
            self.last_refresh = now_ms

        if self.playing and self.scheduler.is_complete(now_ms):
            logger.debug("playback complete at %.0f ms", now_ms)
            self.pause(now_ms)
            self.finished = True
            return False
        return self.playing

    def snapshot(self) -> GridSnapshot:
        return self.grid.snapshot()
