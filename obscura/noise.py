"""
Seeded noise source.

Every draw advances a single integer state with a linear congruential step
and returns ``state / M`` in [0, 1). Two sources built from the same seed
produce the same values as long as they are drawn in the same order, which
is what keeps grid initialisation and word placement reproducible.
"""

from dataclasses import dataclass, field
from typing import Sequence

from .config import LCG_INCREMENT, LCG_MODULUS, LCG_MULTIPLIER


def lcg_step(state: int) -> int:
    return (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS


def normalize_seed(seed: int) -> int:
    """Zero seeds degenerate, so they are remapped to 1."""
    seed = int(seed)
    return seed if seed != 0 else 1


@dataclass
class NoiseSource:
    seed: int
    state: int = field(init=False)

    def __post_init__(self):
        self.seed = normalize_seed(self.seed)
        self.state = self.seed

    def next(self) -> float:
        self.state = lcg_step(self.state)
        return self.state / LCG_MODULUS

    def reseed(self) -> None:
        """Rewind to the original seed."""
        self.state = self.seed

    def below(self, n: int) -> int:
        """Integer in [0, n)."""
        return int(self.next() * n)

    def between(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi], both ends inclusive."""
        return lo + self.below(hi - lo + 1)

    def pick(self, items: Sequence[str]) -> str:
        return items[self.below(len(items))]

    def chance(self, p: float) -> bool:
        return self.next() < p
