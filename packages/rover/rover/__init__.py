"""rover - deterministic, offline catch-up simulation core."""

from rover.clock import ManualTimeSource, VirtualClock, wall_clock_ms
from rover.engine import Engine
from rover.events import LOG_TYPES, EventLog, LogEntry
from rover.queue import TimedQueue, ends_at
from rover.rng import Mulberry32, derive_rng, rand_int, rng, seed_from_string, weighted_pick
from rover.types import Outcome, SimContext, SnapshotError, clamp, round_half_up

__all__ = [
    "Engine",
    "VirtualClock",
    "ManualTimeSource",
    "wall_clock_ms",
    "EventLog",
    "LogEntry",
    "LOG_TYPES",
    "TimedQueue",
    "ends_at",
    "Mulberry32",
    "rng",
    "derive_rng",
    "rand_int",
    "seed_from_string",
    "weighted_pick",
    "Outcome",
    "SimContext",
    "SnapshotError",
    "clamp",
    "round_half_up",
]
