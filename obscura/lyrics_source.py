"""
Lyric lookup and loading.

Fetched lyrics come back from ``syncedlyrics`` either as LRC (timestamped)
or as plain text. Both are turned into a ``LyricsData`` whose lines feed a
``TimestampScheduler``; plain lyrics get evenly spaced onsets.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import syncedlyrics  # time-synced lyrics (LRC) lookup
from yt_dlp import YoutubeDL  # resolve YouTube URLs to track metadata

from .config import PLAIN_LINE_STEP_MS
from .scheduler import LyricLine

logger = logging.getLogger(__name__)

_LRC_TAG = re.compile(r"\[(\d+):(\d+(?:\.\d+)?)\]")
_SECTION_MARKER = re.compile(r"^\[.*\]$")


@dataclass
class LyricsData:
    lines: List[LyricLine] = field(default_factory=list)
    duration_ms: float = 0.0
    synced: bool = False

    def plain_text(self) -> str:
        return "\n".join(ln.text for ln in self.lines)


def load_lyrics(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip("\n")


def parse_synced_lyrics(lrc_text: str, duration_s: float = 0.0) -> LyricsData:
    """
    Parse LRC text into lines sorted by onset (milliseconds).
    Handles multiple timestamps per line; lines with no text are dropped.
    """
    lines: List[LyricLine] = []
    for raw in lrc_text.splitlines():
        times = [(int(m.group(1)), float(m.group(2))) for m in _LRC_TAG.finditer(raw)]
        if not times:
            continue
        # text with timestamps stripped
        text = _LRC_TAG.sub("", raw).strip()
        if not text:
            continue
        for mm, ss in times:
            lines.append(LyricLine(text=text, onset_ms=(mm * 60 + ss) * 1000.0))
    lines.sort(key=lambda ln: ln.onset_ms)
    return LyricsData(lines=lines, duration_ms=float(duration_s or 0) * 1000.0, synced=True)


def parse_plain_lyrics(plain_text: str) -> LyricsData:
    """Give untimed lyrics a fixed two-second cadence."""
    texts = [
        t
        for t in (ln.strip() for ln in plain_text.splitlines())
        if t and not _SECTION_MARKER.match(t)
    ]
    lines = [LyricLine(text=t, onset_ms=i * PLAIN_LINE_STEP_MS) for i, t in enumerate(texts)]
    return LyricsData(lines=lines, duration_ms=len(texts) * PLAIN_LINE_STEP_MS)


def clean_title_for_query(title: str) -> str:
    """Clean common noise from a YouTube title for better lyric search."""
    tt = title or ""
    for frag in [
        "(official video)",
        "(lyrics)",
        "[lyrics]",
        "(audio)",
        "(live)",
        "official",
        "lyrics",
        "video",
    ]:
        tt = tt.replace(frag, " ")
        tt = tt.replace(frag.title(), " ")
        tt = tt.replace(frag.upper(), " ")
    # Drop bracketed annotations
    tt = re.sub(r"\([^)]*\)", " ", tt)
    tt = re.sub(r"\[[^\]]*\]", " ", tt)
    return re.sub(r"\s+", " ", tt).strip()


def _video_metadata(url: str) -> dict:
    ydl_opts = {
        "quiet": True,
        "skip_download": True,
        "extract_flat": False,
        "nocheckcertificate": True,
    }
    with YoutubeDL(ydl_opts) as ydl:
        info = ydl.extract_info(url, download=False)
    if isinstance(info, dict) and info.get("entries"):
        info = next((e for e in info["entries"] if isinstance(e, dict)), {})
    return info if isinstance(info, dict) else {}


def resolve_queries(query: str) -> List[str]:
    """
    Turn user input into lyric search queries, most specific first.
    URLs are resolved to artist/track/title metadata; free text is used as is.
    """
    q = (query or "").strip()
    if not q:
        return []
    if not q.lower().startswith("http"):
        return [q]

    try:
        info = _video_metadata(q)
    except Exception as e:
        logger.warning("could not resolve %s: %s", q, e)
        return []

    artist = info.get("artist") or ""
    track = info.get("track") or ""
    title = info.get("title") or ""
    channel = info.get("channel") or ""
    uploader = info.get("uploader") or ""
    queries = []
    if artist and track:
        queries.append(f"{artist} - {track}")
        queries.append(f"{artist} {track}")
    if artist and title:
        queries.append(f"{artist} {title}")
    if channel and track:
        queries.append(f"{channel} {track}")
    if uploader and title:
        queries.append(f"{uploader} {title}")
    cleaned = clean_title_for_query(title)
    if cleaned:
        queries.append(cleaned)
    # keep order, drop repeats
    return list(dict.fromkeys(queries))


def _search(term: str, plain_only: bool = False) -> Optional[str]:
    try:
        if plain_only:
            return syncedlyrics.search(term, plain_only=True)
        return syncedlyrics.search(term)
    except Exception as e:
        logger.warning("lyrics search for %r failed: %s", term, e)
        return None


def fetch_lyrics(query: str) -> Optional[LyricsData]:
    """
    Look lyrics up for a song name or URL. Synced lyrics are preferred;
    plain lyrics are the fallback. Returns None when nothing usable is found.
    """
    for term in resolve_queries(query):
        lrc_text = _search(term)
        if lrc_text:
            data = parse_synced_lyrics(lrc_text)
            if data.lines:
                logger.info("synced lyrics for %r: %d line(s)", term, len(data.lines))
                return data
            # no timestamps in what came back, treat it as plain text
            data = parse_plain_lyrics(lrc_text)
            if data.lines:
                return data
        plain = _search(term, plain_only=True)
        if plain:
            data = parse_plain_lyrics(plain)
            if data.lines:
                logger.info("plain lyrics for %r: %d line(s)", term, len(data.lines))
                return data
    logger.info("no lyrics found for %r", query)
    return None
