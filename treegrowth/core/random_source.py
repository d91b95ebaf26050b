"""
Seedable random stream used during tree generation.

One RandomSource is created per generate() call and passed explicitly
through the whole recursive pass, so a fixed seed reproduces the tree.
"""

from typing import Optional, Union
import numpy as np

SeedLike = Union[int, np.random.SeedSequence, None]


class RandomSource:
    """
    Bounded random draws backed by a numpy Generator.

    Parameters
    ----------
    seed : int or SeedSequence, optional
        Seed for the underlying PCG64 generator. None draws fresh entropy.
    """

    def __init__(self, seed: SeedLike = None):
        self._rng = np.random.default_rng(seed)

    def signed_unit(self) -> float:
        """Uniform draw in [-1, 1)."""
        return float(self._rng.uniform(-1.0, 1.0))

    def uniform(self, low: float, high: float) -> float:
        """Uniform draw in [low, high)."""
        if high <= low:
            return float(low)
        return float(self._rng.uniform(low, high))

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        return int(self._rng.integers(low, high, endpoint=True))


class SeedStream:
    """
    Hands out one independent child seed per generate() call.

    Successive trees differ from each other, but the whole sequence is
    reproducible when the stream itself is seeded.
    """

    def __init__(self, seed: Optional[int] = None):
        self._sequence = np.random.SeedSequence(seed)

    @property
    def entropy(self):
        return self._sequence.entropy

    def next_source(self) -> RandomSource:
        child = self._sequence.spawn(1)[0]
        return RandomSource(child)


__all__ = ["RandomSource", "SeedStream"]
