"""
Single random source for every randomized choice during generation.

All draws route through one seeded ``random.Random`` so that a run can be
replayed exactly from its seed.
"""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar('T')


class RandomSource:
    """Seeded uniform integer / real sampler."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self._rng = random.Random(seed)

    def range(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        return self._rng.randrange(low, high)

    def index(self, items: Sequence) -> int:
        return self.range(0, len(items))

    def choice(self, items: Sequence[T]) -> T:
        return items[self.index(items)]

    def value(self) -> float:
        """Uniform real in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.value()

    def shuffled(self, items: Sequence[T]) -> List[T]:
        """Return a uniformly shuffled copy (Fisher-Yates)."""
        result = list(items)
        self._rng.shuffle(result)
        return result
