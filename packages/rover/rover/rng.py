"""Deterministic, string-seeded random streams.

Every gameplay roll derives its generator from a composite key so that
replaying a snapshot reproduces the same outcomes. Not cryptographic.
"""

from __future__ import annotations

from typing import Callable, Hashable, Sequence, TypeVar

T = TypeVar("T", bound=Hashable)

RandomFn = Callable[[], float]

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def seed_from_string(text: str) -> int:
    """FNV-1a 32-bit hash over UTF-16 code units."""
    h = _FNV_OFFSET
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


class Mulberry32:
    """mulberry32 generator; callable, returns floats in [0, 1)."""

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    @property
    def state(self) -> int:
        return self._state

    def __call__(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296


def rng(seed: int) -> Mulberry32:
    return Mulberry32(seed)


def derive_rng(*parts: object) -> Mulberry32:
    """Seed a stream from ``"|".join(parts)``."""
    return Mulberry32(seed_from_string("|".join(str(p) for p in parts)))


def rand_int(rand: RandomFn, lo: int, hi: int) -> int:
    """Inclusive integer in [lo, hi]; bounds may be given in either order."""
    a, b = min(lo, hi), max(lo, hi)
    return a + int(rand() * (b - a + 1))


def weighted_pick(rand: RandomFn, entries: Sequence[tuple[T, float]]) -> T | None:
    """Cumulative-weight roulette. Non-positive total falls back to the first id."""
    if not entries:
        return None
    total = sum(max(0.0, w) for _, w in entries)
    if total <= 0:
        return entries[0][0]
    roll = rand() * total
    for item_id, w in entries:
        roll -= max(0.0, w)
        if roll <= 0:
            return item_id
    return entries[-1][0]
