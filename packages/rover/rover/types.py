"""Shared types, results and numeric helpers for the rover engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class SimContext:
    """Per-step context handed to every system.

    Attributes:
        now: Virtual time (ms) this step simulates up to.
        elapsed_ms: Virtual time passed since the previous step.
        last_sim_at: Virtual time of the previous step.
    """

    now: int
    elapsed_ms: int
    last_sim_at: int


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of a player-facing operation: success flag plus reason."""

    ok: bool
    reason: str = ""
    value: Any = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(True, "", value)

    @classmethod
    def fail(cls, reason: str) -> Outcome:
        return cls(False, reason)


class SnapshotError(Exception):
    """Raised on restore failures (version mismatch, malformed data)."""


class Simulated(Protocol):
    """Anything the engine can step: owns a clock and a last-sim stamp."""

    last_sim_at: int

    def now(self) -> int: ...


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round halves towards +inf: 2.5 -> 3, -0.5 -> 0."""
    return math.floor(value + 0.5)
