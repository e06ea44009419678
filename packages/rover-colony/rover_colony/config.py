"""Simulation configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SimConfig:
    """Immutable tuning for the colony simulation.

    Attributes:
        world_seed: Seed mixed into every tile's biome roll.
        tile_precision: Geohash length used for tile ids.
        max_log_entries: Cap on the player-facing event log.
        hunger_per_min: Hunger lost per minute of virtual time.
        thirst_per_min: Thirst lost per minute of virtual time.
        morale_recover_per_min_rest: Morale regained per minute while resting idle.
        job_strenuous_drain_multiplier: Extra drain factor for strenuous jobs.
        auto_consume_threshold: Need level at or below which crew eat/drink.
        idle_max_cycles_per_sim: Idle jobs that may be queued in one step.
        xp_base: XP needed to go from level 0 to 1.
        xp_growth: Per-level growth of the XP requirement.
        pockets_capacity: Units a crew member can carry.
    """

    world_seed: str = "WORLD_V01"
    tile_precision: int = 7
    max_log_entries: int = 600
    hunger_per_min: float = 0.25
    thirst_per_min: float = 0.35
    morale_recover_per_min_rest: float = 0.10
    job_strenuous_drain_multiplier: float = 2.0
    auto_consume_threshold: float = 50
    idle_max_cycles_per_sim: int = 20
    xp_base: float = 100
    xp_growth: float = 1.35
    pockets_capacity: int = 6

    def __post_init__(self) -> None:
        if not self.world_seed:
            raise ValueError("world_seed must be non-empty")
        if not 1 <= self.tile_precision <= 12:
            raise ValueError(f"tile_precision must be in 1..12, got {self.tile_precision}")
        if self.hunger_per_min < 0 or self.thirst_per_min < 0:
            raise ValueError("drain rates must be >= 0")
        if self.idle_max_cycles_per_sim < 0:
            raise ValueError(f"idle_max_cycles_per_sim must be >= 0, got {self.idle_max_cycles_per_sim}")
        if self.xp_base <= 0 or self.xp_growth < 1:
            raise ValueError("xp_base must be > 0 and xp_growth >= 1")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimConfig:
        """Build from a ``config.json`` mapping (nested ``drains`` / ``xp`` keys)."""
        drains = data.get("drains") or {}
        xp = data.get("xp") or {}
        defaults = cls()
        return cls(
            world_seed=data.get("worldSeed", defaults.world_seed),
            tile_precision=int(data.get("tilePrecision", defaults.tile_precision)),
            max_log_entries=int(data.get("maxLogEntries", defaults.max_log_entries)),
            hunger_per_min=drains.get("hungerPerMin", defaults.hunger_per_min),
            thirst_per_min=drains.get("thirstPerMin", defaults.thirst_per_min),
            morale_recover_per_min_rest=drains.get(
                "moraleRecoverPerMinRest", defaults.morale_recover_per_min_rest),
            job_strenuous_drain_multiplier=data.get(
                "jobStrenuousDrainMultiplier", defaults.job_strenuous_drain_multiplier),
            auto_consume_threshold=data.get("autoConsumeThreshold", defaults.auto_consume_threshold),
            idle_max_cycles_per_sim=int(data.get("idleMaxCyclesPerSim", defaults.idle_max_cycles_per_sim)),
            xp_base=xp.get("base", defaults.xp_base),
            xp_growth=xp.get("growth", defaults.xp_growth),
            pockets_capacity=int(data.get("pocketsCapacity", defaults.pockets_capacity)),
        )
