"""Entropy providers consumed by primality testing and prime generation.

Every randomized operation in this package asks an explicit source for its numbers instead of reaching for a hidden
global generator. The default source draws from the operating system via `secrets`, while a seeded source allows
tests and demonstrations to reproduce a specific sequence of candidates and Miller-Rabin bases.

Typical usage example:

    src = SeededRandomSource(42)
    src.next_random(1000)
    default_source().next_random(2**64)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import random
import secrets
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything capable of handing out uniformly distributed naturals below a bound."""

    def next_random(self, bound: int) -> int:
        """Return a uniformly distributed integer in `[0, bound)`."""
        ...


def _check_bound(bound: int) -> None:
    if bound < 1:
        raise ValueError("bound must be >= 1")


class SystemRandomSource:
    """Operating system backed source, using `secrets.randbelow`."""

    def next_random(self, bound: int) -> int:
        """Draw a cryptographically strong natural below `bound`.

        Args:
            bound: Exclusive upper limit. Must be >= 1.

        Returns:
            An integer in `[0, bound)`.

        Raises:
            ValueError: If `bound` is not positive.
        """
        _check_bound(bound)
        return secrets.randbelow(bound)


class SeededRandomSource:
    """Reproducible source backed by a private `random.Random` instance.

    Not suitable for real keys, but two sources built from the same seed produce the same sequence, which makes key
    generation replayable.

    Attributes:
        seed: The seed the generator was initialised with.
    """

    def __init__(self, seed: int | str | bytes | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_random(self, bound: int) -> int:
        _check_bound(bound)
        return self._rng.randrange(bound)


_SYSTEM_SOURCE = SystemRandomSource()


def default_source() -> RandomSource:
    """Source used whenever a caller does not supply one."""
    return _SYSTEM_SOURCE


def resolve(source: RandomSource | None) -> RandomSource:
    """Return `source`, or the default one if none was given."""
    return default_source() if source is None else source
