"""
Seeded random source shared by every random decision in a generation pass.

Weighted picks, frontier pops and shuffles all draw through uniform_int so
a (seed, call sequence) pair always reproduces the same layout.
"""

import random
from typing import MutableSequence, Optional, TypeVar

T = TypeVar('T')


class SeededRandom:
    """Wrapper around random.Random that counts draws."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random()
        self._seed: Optional[int] = None
        self.draw_count = 0
        if seed is not None:
            self.set_seed(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def is_seeded(self) -> bool:
        return self._seed is not None

    def set_seed(self, seed: int) -> None:
        """Reset the stream; identical seeds replay identical draws."""
        self._seed = int(seed)
        self._rng.seed(self._seed)
        self.draw_count = 0

    def uniform_int(self, minimum: int, maximum_exclusive: int) -> int:
        """Uniform integer in [minimum, maximum_exclusive).

        An empty range returns `minimum`, matching the usual engine
        behaviour for Range(n, n).
        """
        self.draw_count += 1
        if maximum_exclusive <= minimum:
            return minimum
        return self._rng.randrange(minimum, maximum_exclusive)

    def shuffle(self, items: MutableSequence[T]) -> None:
        """In-place Fisher-Yates shuffle drawing from this stream."""
        for i in range(len(items) - 1, 0, -1):
            j = self.uniform_int(0, i + 1)
            items[i], items[j] = items[j], items[i]
