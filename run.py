import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame

from obscura.config import (
    BG_COLOR,
    CANVAS_SIZE,
    FPS,
    GRID_SIZE,
    LYRICS_FILE,
    MARGIN_X,
    MARGIN_Y,
    SEED,
    SPEED_STEP,
    UI_COLOR,
    WINDOW_H,
    WINDOW_W,
    clamp_speed,
)
from obscura.driver import FrameDriver
from obscura.grid import GridState
from obscura.lyrics_source import LyricsData, fetch_lyrics, load_lyrics
from obscura.render import GridRenderer, make_font
from obscura.scheduler import PacedScheduler, PacingMode, TimestampScheduler

PACING_ORDER: List[PacingMode] = [PacingMode.LINE, PacingMode.WORD, PacingMode.TOKEN]
STATUS_H = 36  # px reserved under the grid for the status line


# -----------------------------
# Session
# -----------------------------
@dataclass
class Session:
    lyrics: str
    pacing: PacingMode = PacingMode.LINE
    speed: float = 1.0
    seed: int = SEED
    fetched: Optional[LyricsData] = None

    @property
    def using_timestamps(self) -> bool:
        return self.fetched is not None

    def build_scheduler(self):
        if self.fetched is not None:
            return TimestampScheduler(self.fetched.lines)
        return PacedScheduler(self.lyrics, self.pacing, self.speed)

    def status(self, playing: bool) -> str:
        mode = "synced" if self.using_timestamps else f"{self.pacing.value} x{self.speed:.2f}"
        state = "playing" if playing else "paused"
        return f"{state} | {mode} | seed {self.seed}"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lyrics emerging from a grid of noise.")
    parser.add_argument("--lyrics", default=LYRICS_FILE, help="lyrics file for manual mode")
    parser.add_argument("--query", default=None, help="song name or URL to look up")
    parser.add_argument(
        "--pacing", choices=[m.value for m in PACING_ORDER], default=PacingMode.LINE.value
    )
    parser.add_argument("--speed", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=SEED)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def toggle_fullscreen(is_borderless_fs: bool) -> Tuple[pygame.Surface, bool]:
    if is_borderless_fs:
        return pygame.display.set_mode((WINDOW_W, WINDOW_H), pygame.RESIZABLE), False
    # Prefer real fullscreen; fallback to borderless sized to desktop
    try:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        info = pygame.display.Info()
        sw, sh = screen.get_size()
        if sw != info.current_w or sh != info.current_h:
            raise pygame.error("fullscreen size mismatch")
    except pygame.error:
        info = pygame.display.Info()
        screen = pygame.display.set_mode(
            (info.current_w, info.current_h),
            pygame.NOFRAME | pygame.SCALED,
        )
    return screen, True


def canvas_geometry(screen: pygame.Surface) -> Tuple[int, Tuple[int, int]]:
    """Largest centred square that fits the window above the status line."""
    win_w, win_h = screen.get_size()
    size = min(CANVAS_SIZE, win_w - 2 * MARGIN_X, win_h - 2 * MARGIN_Y - STATUS_H)
    size = max(GRID_SIZE, size)
    return size, ((win_w - size) // 2, MARGIN_Y)


# -----------------------------
# Main app
# -----------------------------
def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    lyrics = ""
    if os.path.exists(args.lyrics):
        lyrics = load_lyrics(args.lyrics)
    else:
        print(f"Note: {args.lyrics} not found. Search for a song or pass --lyrics.")

    session = Session(
        lyrics=lyrics,
        pacing=PacingMode(args.pacing),
        speed=clamp_speed(args.speed),
        seed=args.seed,
    )

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_W, WINDOW_H), pygame.RESIZABLE)
    pygame.display.set_caption("Obscura - Lyrics Matrix")
    clock = pygame.time.Clock()
    font_ui = make_font(22)

    size, origin = canvas_geometry(screen)
    renderer = GridRenderer(size, GRID_SIZE)
    driver = FrameDriver(GridState(session.seed), session.build_scheduler())
    is_borderless_fs = False

    def rebuild_scheduler():
        driver.swap_scheduler(session.build_scheduler())

    def draw_text_screen(messages: List[str]):
        screen.fill(BG_COLOR)
        y = MARGIN_Y
        for t in messages:
            surf = font_ui.render(t, True, UI_COLOR)
            screen.blit(surf, (MARGIN_X, y))
            y += surf.get_height() + 8
        pygame.display.flip()

    def search(query: str) -> str:
        draw_text_screen([f"Searching: {query[:60]}…"])
        pygame.event.pump()
        data = fetch_lyrics(query)
        if data is None:
            return "Could not find lyrics. Using manual lyrics."
        session.fetched = data
        session.lyrics = data.plain_text()
        rebuild_scheduler()
        return "Using synced lyrics" if data.synced else "Using fetched plain lyrics"

    input_active = False
    user_input = ""
    note = ""
    if args.query:
        note = search(args.query)
    elif not lyrics:
        input_active = True

    running = True
    while running:
        clock.tick(FPS)
        now = float(pygame.time.get_ticks())

        # Input mode: show search prompt and wait for Enter
        if input_active:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                elif ev.type == pygame.KEYDOWN:
                    if ev.key == pygame.K_RETURN:
                        if user_input.strip():
                            note = search(user_input.strip())
                        input_active = False
                    elif ev.key == pygame.K_ESCAPE:
                        input_active = False
                    elif ev.key == pygame.K_BACKSPACE:
                        user_input = user_input[:-1]
                    elif ev.unicode:
                        user_input += ev.unicode
            draw_text_screen(
                [
                    "Type a song name (e.g. 'Artist - Song Title') or paste a URL, then press Enter.",
                    "Esc keeps the current lyrics.",
                    "> " + user_input,
                ]
            )
            continue

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                size, origin = canvas_geometry(screen)
                renderer.resize(size)
            elif event.type != pygame.KEYDOWN:
                continue
            elif event.key in (pygame.K_ESCAPE, pygame.K_q):
                running = False
            elif event.key == pygame.K_SPACE:
                driver.toggle(now)
            elif event.key == pygame.K_r:
                driver.restart()
            elif event.key == pygame.K_n:
                session.seed = int(time.time() * 1000)
                driver.swap_grid(GridState(session.seed))
            elif event.key == pygame.K_TAB and not session.using_timestamps:
                nxt = (PACING_ORDER.index(session.pacing) + 1) % len(PACING_ORDER)
                session.pacing = PACING_ORDER[nxt]
                rebuild_scheduler()
            elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_MINUS):
                step = -SPEED_STEP if event.key == pygame.K_MINUS else SPEED_STEP
                session.speed = clamp_speed(session.speed + step)
                if not session.using_timestamps:
                    rebuild_scheduler()
            elif event.key == pygame.K_m and session.using_timestamps:
                session.fetched = None
                note = "Manual mode"
                rebuild_scheduler()
            elif event.key == pygame.K_RETURN:
                input_active = True
                user_input = ""
            elif event.key == pygame.K_F11:
                screen, is_borderless_fs = toggle_fullscreen(is_borderless_fs)
                size, origin = canvas_geometry(screen)
                renderer.resize(size)

        driver.tick(now)

        # Draw
        screen.fill(BG_COLOR)
        renderer.draw(screen, driver.snapshot(), origin)
        status = session.status(driver.playing)
        if note:
            status = f"{status} | {note}"
        surf = font_ui.render(status, True, UI_COLOR)
        screen.blit(surf, (origin[0], origin[1] + size + 8))
        pygame.display.flip()

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
