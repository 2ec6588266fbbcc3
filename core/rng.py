"""core/rng.py — Injectable random source.

Every probabilistic roll in the simulation goes through a
``RandomSource`` handed in by the composition root, never the global
``random`` module.  Seed it for reproducible runs::

    rng = RandomSource(seed=42)
    if rng.chance(0.2):
        ...

Tests that need exact outcomes can subclass it and override
``random()`` to replay a scripted sequence.
"""

from __future__ import annotations
import random


class RandomSource:
    """Thin wrapper around ``random.Random`` with game-flavoured helpers."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def chance(self, p: float) -> bool:
        """True with probability *p*."""
        return self.random() < p

    def randint(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi] inclusive, drawn from one ``random()`` roll."""
        return lo + int(self.random() * (hi - lo + 1))

    def choice(self, items):
        if not items:
            raise IndexError("choice from empty sequence")
        idx = int(self.random() * len(items))
        return items[min(idx, len(items) - 1)]
