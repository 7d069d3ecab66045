"""
Named pseudo-random sources.

Two separate sources with different seeding policies:

    NormalSource   Box–Muller normal deviates from a FIXED seed. Every
                   process run produces the same sequence, so randomly
                   initialized matrices are reproducible fixtures.
    ShuffleSource  Uniform integers from an entropy-seeded generator,
                   used for column shuffling.

Each has a process-wide default created lazily on first use. Both can be
replaced (set_normal_source / set_shuffle_source) or passed explicitly to
the operations that consume them.
"""

from __future__ import annotations

import math
import numpy as np
from numpy.typing import NDArray


DEFAULT_NORMAL_SEED = 1


class NormalSource:
    """
    Standard normal deviates via the Box–Muller transform.

    Each draw of two uniforms yields two deviates; the second is cached
    and returned by the following request. Bulk requests through fill()
    consume the cache first and leave an unused deviate cached, so any
    interleaving of next() and fill() gives the same sequence.
    """

    def __init__(self, seed: int = DEFAULT_NORMAL_SEED):
        self._seed = seed
        self._rng: np.random.Generator | None = None
        self._cached: float | None = None

    @property
    def seed(self) -> int:
        return self._seed

    def _generator(self) -> np.random.Generator:
        # seeded once, on first use
        if self._rng is None:
            self._rng = np.random.default_rng(self._seed)
        return self._rng

    def _pairs(self, n_pairs: int) -> tuple[NDArray, NDArray]:
        # uniforms are consumed pairwise so bulk and single draws agree
        u = self._generator().random(2 * n_pairs).reshape(n_pairs, 2)
        # 1 - U maps [0, 1) onto (0, 1] so log() is finite
        u1 = 1.0 - u[:, 0]
        u2 = u[:, 1]
        radius = np.sqrt(-2.0 * np.log(u1))
        theta = 2.0 * math.pi * u2
        return radius * np.cos(theta), radius * np.sin(theta)

    def next(self) -> float:
        """Return the next standard normal deviate."""
        if self._cached is not None:
            value, self._cached = self._cached, None
            return value
        z0, z1 = self._pairs(1)
        self._cached = float(z1[0])
        return float(z0[0])

    def fill(self, n: int) -> NDArray[np.float64]:
        """Return the next n deviates as a float64 array."""
        out = np.empty(n, dtype=np.float64)
        start = 0
        if n > 0 and self._cached is not None:
            out[0] = self._cached
            self._cached = None
            start = 1

        remaining = n - start
        if remaining > 0:
            n_pairs = (remaining + 1) // 2
            z0, z1 = self._pairs(n_pairs)
            interleaved = np.empty(2 * n_pairs, dtype=np.float64)
            interleaved[0::2] = z0
            interleaved[1::2] = z1
            out[start:] = interleaved[:remaining]
            if remaining % 2 == 1:
                self._cached = float(interleaved[-1])
        return out


class ShuffleSource:
    """
    Uniform integers for permutations, seeded from OS entropy.

    Pass a seed only in tests that need a reproducible permutation.
    """

    def __init__(self, seed: int | None = None):
        self._rng = np.random.default_rng(seed)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in the closed interval [low, high]."""
        return int(self._rng.integers(low, high + 1))


_normal_source: NormalSource | None = None
_shuffle_source: ShuffleSource | None = None


def get_normal_source() -> NormalSource:
    """The process-wide normal source, created with the fixed seed on first use."""
    global _normal_source
    if _normal_source is None:
        _normal_source = NormalSource()
    return _normal_source


def set_normal_source(source: NormalSource | None) -> None:
    """Replace the process-wide normal source (None restores lazy default)."""
    global _normal_source
    _normal_source = source


def get_shuffle_source() -> ShuffleSource:
    """The process-wide shuffle source, created on first use."""
    global _shuffle_source
    if _shuffle_source is None:
        _shuffle_source = ShuffleSource()
    return _shuffle_source


def set_shuffle_source(source: ShuffleSource | None) -> None:
    """Replace the process-wide shuffle source (None restores lazy default)."""
    global _shuffle_source
    _shuffle_source = source
