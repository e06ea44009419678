"""Work paces: duration, yield and risk multipliers."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pace:
    duration: float
    yield_: float
    risk: float


PACES = {
    "safe": Pace(1.10, 0.90, 0.75),
    "normal": Pace(1.0, 1.0, 1.0),
    "push": Pace(0.85, 1.15, 1.35),
}


def pace_multipliers(pace: str) -> Pace:
    """Multipliers for *pace*; anything unknown runs at normal pace."""
    return PACES.get(pace, PACES["normal"])
