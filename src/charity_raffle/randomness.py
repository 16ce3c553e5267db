"""
Randomness sources for the draw.

The engine asks for exactly one unsigned 32-bit value per successful draw and
reduces it modulo the roster size. Fairness depends entirely on the source and
its seed: the engine does not treat any of these as adversary-resistant.
"""

from __future__ import annotations

import hashlib
from typing import Iterable, List, Protocol

from .project_constants import RANDOM_SEED


class RandomSource(Protocol):
    def next_u32(self) -> int: ...


def as_u32_be(data: bytes) -> int:
    if len(data) < 4:
        raise ValueError(f"Need at least 4 bytes, got {len(data)}.")
    return int.from_bytes(data[:4], "big")


def pick_index(random_value: int, size: int) -> int:
    if size <= 0:
        raise ValueError("Cannot pick from an empty roster.")
    return random_value % size


class SeededRandomSource:
    """sha256(seed || counter) per call, first 4 bytes big-endian."""

    def __init__(self, seed: bytes = RANDOM_SEED) -> None:
        self.seed = bytes(seed)
        self.counter = 0

    def next_u32(self) -> int:
        digest = hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
        self.counter += 1
        return as_u32_be(digest)


class SequenceRandomSource:
    """Hands out pre-recorded values in order, e.g. when replaying an audit."""

    def __init__(self, values: Iterable[int]) -> None:
        self.values: List[int] = [int(v) for v in values]
        self.position = 0

    def next_u32(self) -> int:
        if self.position >= len(self.values):
            raise RuntimeError("Random sequence exhausted (more draws than recorded).")
        value = self.values[self.position]
        self.position += 1
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Recorded random value {value} is not a u32.")
        return value


class RecordingRandomSource:
    def __init__(self, inner: RandomSource) -> None:
        self.inner = inner
        self.values: List[int] = []

    def next_u32(self) -> int:
        value = self.inner.next_u32()
        self.values.append(value)
        return value
