"""
Configuration constants for the lyric grid.
"""

# -----------------------------
# Grid
# -----------------------------
GRID_SIZE = 12  # fixed N x N
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
VOWELS = "AEIOU"
VOWEL_PROBABILITY = 0.4  # chance an ambient cell draws from VOWELS
OPACITY_FLOOR = 0.1
OPACITY_SPAN = 0.3  # ambient opacity lands in [0.1, 0.4)

# -----------------------------
# Noise (linear congruential step)
# -----------------------------
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

# -----------------------------
# Placement
# -----------------------------
HALO = 1  # padding cells around letters on the first pass
ORIENT_HORIZONTAL_BIAS = 0.6
MAX_PLACEMENT_ATTEMPTS = 700  # per halo level
ORIENT_FLIP_EVERY = 5  # every Nth attempt flips away from the last orientation

# -----------------------------
# Scheduling
# -----------------------------
PACING_DURATIONS_MS = {"line": 1800.0, "word": 750.0, "token": 450.0}
TOKEN_MIN_CHARS = 7
TRAILING_GRACE_MS = 3000.0
PLAIN_LINE_STEP_MS = 2000.0  # spacing for lyrics fetched without timestamps
SPEED_MIN = 0.5
SPEED_MAX = 2.0
SPEED_STEP = 0.25

# -----------------------------
# Frame driver
# -----------------------------
AMBIENT_REFRESH_MS = 500.0

# -----------------------------
# Rendering / app
# -----------------------------
LYRICS_FILE = "lyrics.txt"  # manual-mode lyrics, one block
FPS = 60
CANVAS_SIZE = 1080
WINDOW_W = 1080
WINDOW_H = 1080
MARGIN_X = 40
MARGIN_Y = 40
FONT_NAME = "IBM Plex Mono,Consolas"  # monospaced font recommended
FONT_CELL_RATIO = 0.6
BG_COLOR = (0, 0, 0)
GLYPH_COLOR = (191, 227, 255)  # #BFE3FF
UI_COLOR = (180, 190, 200)
JITTER_PX = 1.0  # ambient glyph wobble, +/- pixels
GLOW_RADIUS = 2  # px offsets for the lyric glow halo
GLOW_ALPHA = 70
SEED = 42  # reproducibility


def clamp_speed(speed: float) -> float:
    return max(SPEED_MIN, min(SPEED_MAX, speed))
