"""
Menuplan - Random source.

Every random decision in the pipeline (provider shuffle, repair
fallbacks, local plans) goes through a RandomSource so tests can pass a
deterministic stub.
"""

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def pick(self, n: int) -> int:
        """Return an index in [0, n)."""
        ...


class SystemRandomSource:
    """RandomSource backed by random.Random; seedable."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def pick(self, n: int) -> int:
        return self._rng.randrange(n)


def choice(source: RandomSource, items: Sequence[T]) -> T:
    """Uniform choice through a RandomSource. items must not be empty."""
    return items[source.pick(len(items))]


def shuffled(source: RandomSource, items: Sequence[T]) -> list[T]:
    """Fisher-Yates shuffle through a RandomSource; returns a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = source.pick(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


def sample(source: RandomSource, items: Sequence[T], k: int) -> list[T]:
    """k distinct items."""
    return shuffled(source, items)[:k]
