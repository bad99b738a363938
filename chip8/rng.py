"""Random byte providers for the CXNN instruction."""

import random
from typing import Iterable, Protocol


class RandomSource(Protocol):
    """Anything that yields uniformly distributed bytes and can be re-seeded."""

    def seed(self, seed: int) -> None: ...

    def next_byte(self) -> int: ...


class SeededRandomSource:
    """Deterministic byte stream backed by random.Random."""

    def __init__(self, seed: int = 0):
        self._rng = random.Random(seed)

    def seed(self, seed: int) -> None:
        self._rng.seed(seed)

    def next_byte(self) -> int:
        return self._rng.getrandbits(8)


class FixedRandomSource:
    """Replays a fixed byte sequence, cycling when exhausted. Seeding rewinds it."""

    def __init__(self, values: Iterable[int]):
        self._values = [v & 0xFF for v in values]
        if not self._values:
            raise ValueError("FixedRandomSource needs at least one value")
        self._pos = 0

    def seed(self, seed: int) -> None:
        self._pos = 0

    def next_byte(self) -> int:
        value = self._values[self._pos % len(self._values)]
        self._pos += 1
        return value
