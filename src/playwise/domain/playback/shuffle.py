"""
Fisher-Yates shuffling for playlists and queues.

The random source is injectable: anything with a randrange(n) method works,
which lets tests substitute a fixed sequence. By default the random module's
system-seeded generator is used, so results are not reproducible.
"""

import random
from typing import MutableSequence, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Minimal random source interface used by the shuffler."""

    def randrange(self, stop: int) -> int: ...


def shuffle_in_place(
    items: MutableSequence[T], rng: Optional[RandomSource] = None
) -> MutableSequence[T]:
    """
    Uniformly permute a mutable sequence in place.

    Walks from the last index down to the second and swaps each element with
    a uniformly chosen index at or before it.

    Args:
        items: Sequence to shuffle (modified)
        rng: Random source (defaults to the random module)

    Returns:
        The same sequence, for chaining
    """
    source = rng if rng is not None else random

    for i in range(len(items) - 1, 0, -1):
        j = source.randrange(i + 1)
        items[i], items[j] = items[j], items[i]

    return items


def shuffled(items: Sequence[T], rng: Optional[RandomSource] = None) -> list[T]:
    """Return a shuffled copy of items, leaving the input untouched."""
    copy = list(items)
    shuffle_in_place(copy, rng)
    return copy
