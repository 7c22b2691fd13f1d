"""Tests for tokenizing and reading-order word placement."""

from __future__ import annotations

import pytest

from obscura.config import GRID_SIZE
from obscura.grid import GridState
from obscura.placement import PlacementEngine, PlacementMode, tokenize


def _split_words(cells, words):
    """Chunk a flat cell list back into per-word spans."""
    out = []
    i = 0
    for w in words:
        out.append(cells[i : i + len(w)])
        i += len(w)
    assert i == len(cells)
    return out


def _assert_straight(span):
    rows = {r for r, _ in span}
    cols = {c for _, c in span}
    if len(span) == 1:
        return
    if len(rows) == 1:
        assert [c for _, c in span] == list(range(span[0][1], span[0][1] + len(span)))
    else:
        assert len(cols) == 1
        assert [r for r, _ in span] == list(range(span[0][0], span[0][0] + len(span)))


# ============================================================================
# Tokenizer
# ============================================================================


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Don't Stop-Believin'!!", ["dont", "stop", "believin"]),
        ("Don’t   cry", ["dont", "cry"]),
        ("HELLO, world.", ["hello", "world"]),
        ("ﬁre & ice", ["fire", "ice"]),
        ("line one\nline two", ["line", "one", "line", "two"]),
        ("", []),
        ("?! ... --", []),
    ],
)
def test_tokenize(text, expected):
    assert tokenize(text) == expected


# ============================================================================
# Placement
# ============================================================================


def test_empty_text_places_nothing(engine, grid):
    assert engine.place("...!!!") == []
    assert grid.active == {}


def test_first_word_always_placed(engine, grid):
    cells = engine.place("hello", PlacementMode.REPLACE)
    assert len(cells) == 5
    assert grid.cursor.placed_words == 1
    assert "".join(grid.char_at(r, c) for r, c in cells) == "hello"


@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 99991])
def test_placed_words_are_straight_ordered_and_disjoint(seed):
    grid = GridState(seed)
    engine = PlacementEngine(grid)
    text = "we are the champions my friend"
    cells = engine.place(text, PlacementMode.REPLACE)

    words = tokenize(text)[: grid.cursor.placed_words]
    assert words
    spans = _split_words(cells, words)

    assert len(set(cells)) == len(cells)
    starts = [grid.index_of(*span[0]) for span in spans]
    assert starts == sorted(starts)
    assert len(set(starts)) == len(starts)
    for word, span in zip(words, spans):
        _assert_straight(span)
        assert "".join(grid.char_at(r, c) for r, c in span) == word
        assert all(grid.is_active(r, c) for r, c in span)
    assert len(grid.active) == len(cells)


def test_append_places_only_remaining_words(engine, grid):
    first = engine.place("one two", PlacementMode.APPEND)
    placed_before = grid.cursor.placed_words
    assert placed_before >= 1
    words = tokenize("one two three four")
    floor = grid.max_active_index()

    more = engine.place("one two three four", PlacementMode.APPEND)
    assert not set(first) & set(more)

    new_words = words[placed_before : grid.cursor.placed_words]
    assert len(more) == sum(len(w) for w in new_words)
    if new_words:
        spans = _split_words(more, new_words)
        starts = [grid.index_of(*span[0]) for span in spans]
        assert starts[0] > floor
        assert starts == sorted(set(starts))


def test_append_is_noop_once_all_words_placed(engine, grid):
    engine.place("hi", PlacementMode.APPEND)
    assert engine.place("hi", PlacementMode.APPEND) == []
    assert len(grid.active) == 2


def test_replace_wipes_previous_lyric(engine, grid):
    old = engine.place("old words", PlacementMode.REPLACE)
    new = engine.place("fresh", PlacementMode.REPLACE)
    assert len(new) == 5
    assert len(grid.active) == 5
    assert sorted(grid.active_cells()) == sorted(new)
    stale = set(old) - set(new)
    assert not any(grid.is_active(r, c) for r, c in stale)


def test_overlong_word_stops_placement(engine, grid):
    cells = engine.place("ok " + "x" * (GRID_SIZE + 1) + " fine")
    assert len(cells) == 2
    assert grid.cursor.placed_words == 1


def test_overlong_first_word_places_nothing(engine, grid):
    assert engine.place("y" * (GRID_SIZE + 1)) == []
    assert grid.active == {}


def test_full_width_word_fits_without_halo(engine, grid):
    cells = engine.place("z" * GRID_SIZE)
    assert len(cells) == GRID_SIZE


def test_placement_is_deterministic(seed):
    results = []
    for _ in range(2):
        grid = GridState(seed)
        results.append(PlacementEngine(grid).place("is this the real life", "replace"))
    assert results[0] == results[1]


def test_ambient_refresh_keeps_placed_letters(engine, grid):
    cells = engine.place("stay put")
    letters = [grid.char_at(r, c) for r, c in cells]
    grid.refresh_ambient()
    assert [grid.char_at(r, c) for r, c in cells] == letters


# ============================================================================
# Halo and orientation
# ============================================================================


class ScriptedNoise:
    """Fixed orientation draws; records every anchor range asked for."""

    def __init__(self, horizontal: bool):
        self.horizontal = horizontal
        self.ranges = []

    def chance(self, p):
        return self.horizontal

    def between(self, lo, hi):
        self.ranges.append((lo, hi))
        return lo


@pytest.mark.parametrize("seed", range(1, 41))
def test_first_word_keeps_off_the_border(seed):
    grid = GridState(seed)
    cells = PlacementEngine(grid).place("hey")
    assert len(cells) == 3
    for r, c in cells:
        assert 1 <= r <= GRID_SIZE - 2
        assert 1 <= c <= GRID_SIZE - 2


@pytest.mark.parametrize("seed", range(1, 41))
def test_first_word_flips_from_previous_orientation(seed):
    grid = GridState(seed)
    cells = PlacementEngine(grid).place("hey")
    # a fresh cursor remembers vertical, so the first attempt goes horizontal
    assert len({r for r, _ in cells}) == 1
    assert grid.cursor.last_horizontal is True


@pytest.mark.parametrize("seed", range(1, 21))
def test_new_word_keeps_gap_from_placed_cells(seed):
    grid = GridState(seed)
    grid.claim(5, 5, "x")
    cells = PlacementEngine(grid).place("hi")
    assert len(cells) == 2
    for r, c in cells:
        assert max(abs(r - 5), abs(c - 5)) >= 2


def test_attempts_flip_orientation_every_fifth_try(grid, monkeypatch):
    noise = ScriptedNoise(horizontal=True)
    grid.noise = noise
    grid.cursor.last_horizontal = True
    monkeypatch.setattr(grid, "is_free", lambda row, col, halo=0: False)

    assert PlacementEngine(grid).place("abc") == []

    n = GRID_SIZE
    row_ranges = noise.ranges[0::2]
    assert len(row_ranges) == 2 * 700
    for attempt, rows in enumerate(row_ranges):
        halo = 1 if attempt < 700 else 0
        vertical = attempt % 700 % 5 == 0
        expected = (halo, n - 1 - halo - 2) if vertical else (halo, n - 1 - halo)
        assert rows == expected, attempt


def test_cursor_floor_tracks_last_word_start(engine, grid):
    cells = engine.place("hello")
    assert grid.cursor.floor == grid.index_of(*cells[0])
    grid.clear_active()
    assert grid.cursor.floor == -1
