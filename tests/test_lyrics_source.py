"""Tests for lyric parsing and lookup (network calls are mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from obscura import lyrics_source
from obscura.lyrics_source import (
    clean_title_for_query,
    fetch_lyrics,
    load_lyrics,
    parse_plain_lyrics,
    parse_synced_lyrics,
    resolve_queries,
)


# ============================================================================
# Parsing
# ============================================================================


def test_parse_synced_lyrics(sample_lrc):
    data = parse_synced_lyrics(sample_lrc, duration_s=12)
    assert [(ln.text, ln.onset_ms) for ln in data.lines] == [
        ("Start", 0.0),
        ("Hello there", 1500.0),
        ("Twice", 5000.0),
        ("Twice", 7250.0),
    ]
    assert data.duration_ms == 12_000
    assert data.synced


def test_parse_synced_without_tags_is_empty():
    assert parse_synced_lyrics("just words\nno tags").lines == []


def test_parse_plain_lyrics():
    data = parse_plain_lyrics("[Verse]\nOne\n\n  Two  \n")
    assert [(ln.text, ln.onset_ms) for ln in data.lines] == [("One", 0.0), ("Two", 2000.0)]
    assert data.duration_ms == 4000
    assert not data.synced
    assert data.plain_text() == "One\nTwo"


def test_load_lyrics(tmp_path):
    path = tmp_path / "lyrics.txt"
    path.write_text("\nfirst\nsecond\n\n", encoding="utf-8")
    assert load_lyrics(str(path)) == "first\nsecond"


# ============================================================================
# Queries
# ============================================================================


def test_clean_title_for_query():
    assert clean_title_for_query("Artist - Song (Official Video) [HD]") == "Artist - Song"
    assert clean_title_for_query("") == ""


def test_resolve_free_text():
    assert resolve_queries("  queen bohemian rhapsody ") == ["queen bohemian rhapsody"]
    assert resolve_queries("") == []


def test_resolve_url_uses_metadata(monkeypatch):
    monkeypatch.setattr(
        lyrics_source,
        "_video_metadata",
        lambda url: {"artist": "A", "track": "T", "title": "A - T (Official Video)"},
    )
    assert resolve_queries("https://example.com/watch?v=x") == [
        "A - T",
        "A T",
        "A A - T (Official Video)",
    ]


def test_resolve_url_failure(monkeypatch):
    def boom(url):
        raise RuntimeError("offline")

    monkeypatch.setattr(lyrics_source, "_video_metadata", boom)
    assert resolve_queries("https://example.com/watch?v=x") == []


# ============================================================================
# Fetching
# ============================================================================


def test_fetch_prefers_synced(monkeypatch, sample_lrc):
    search = MagicMock(return_value=sample_lrc)
    monkeypatch.setattr(lyrics_source.syncedlyrics, "search", search)
    data = fetch_lyrics("some song")
    assert data is not None and data.synced
    assert data.lines[0].text == "Start"
    search.assert_called_once_with("some song")


def test_fetch_falls_back_to_plain(monkeypatch):
    def search(term, plain_only=False):
        return "[Chorus]\nla la\nla la la" if plain_only else None

    monkeypatch.setattr(lyrics_source.syncedlyrics, "search", search)
    data = fetch_lyrics("some song")
    assert data is not None and not data.synced
    assert [ln.text for ln in data.lines] == ["la la", "la la la"]


def test_fetch_untimed_result_treated_as_plain(monkeypatch):
    monkeypatch.setattr(
        lyrics_source.syncedlyrics, "search", MagicMock(return_value="one\ntwo")
    )
    data = fetch_lyrics("some song")
    assert [ln.onset_ms for ln in data.lines] == [0.0, 2000.0]


@pytest.mark.parametrize("side_effect", [None, RuntimeError("provider down")])
def test_fetch_returns_none_when_nothing_found(monkeypatch, side_effect):
    search = MagicMock(return_value=None, side_effect=side_effect)
    monkeypatch.setattr(lyrics_source.syncedlyrics, "search", search)
    assert fetch_lyrics("nothing") is None
