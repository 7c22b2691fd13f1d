"""Shared pytest fixtures for obscura tests."""

from __future__ import annotations

import pytest

from obscura.grid import GridState
from obscura.placement import PlacementEngine

# ============================================================================
# Grid Fixtures
# ============================================================================


@pytest.fixture
def seed() -> int:
    """Fixed seed so every run draws the same noise."""
    return 1234


@pytest.fixture
def grid(seed: int) -> GridState:
    """Freshly initialised 12x12 grid."""
    return GridState(seed)


@pytest.fixture
def engine(grid: GridState) -> PlacementEngine:
    return PlacementEngine(grid)


# ============================================================================
# Lyric Fixtures
# ============================================================================


@pytest.fixture
def three_lines() -> str:
    return "first line here\nsecond one\nthird and last"


@pytest.fixture
def sample_lrc() -> str:
    return "\n".join(
        [
            "[ar:Someone]",
            "[00:01.50]Hello there",
            "[00:00.00]Start",
            "[00:03.00]",
            "[00:05.00][00:07.25]Twice",
        ]
    )
