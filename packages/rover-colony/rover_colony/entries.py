"""Job and craft queue entries, and the job variant union."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class NormalJob:
    """Plain yield job: rolls the job's own yield table."""


@dataclass
class GatherWater:
    """Fill a container: a fixed amount of water, no randomness."""

    container_item_id: str
    water_item_id: str = "water_dirty"
    water_qty: int = 1


@dataclass
class Explore:
    """Scout a neighboring tile using another job's yields.

    ``rations_reserved`` holds the ``(item_id, qty)`` lines taken from the
    explorer's pockets when queued; they go back if the entry is cancelled.
    """

    action_job_id: str
    direction: str
    rations_reserved: list[tuple[str, int]] = field(default_factory=list)


JobVariant = Union[NormalJob, GatherWater, Explore]


def variant_to_dict(variant: JobVariant) -> dict[str, Any]:
    if isinstance(variant, GatherWater):
        return {"kind": "gather_water", "container_item_id": variant.container_item_id,
                "water_item_id": variant.water_item_id, "water_qty": variant.water_qty}
    if isinstance(variant, Explore):
        return {"kind": "explore", "action_job_id": variant.action_job_id,
                "direction": variant.direction,
                "rations_reserved": [list(line) for line in variant.rations_reserved]}
    return {"kind": "normal"}


def variant_from_dict(data: dict[str, Any] | None) -> JobVariant:
    kind = (data or {}).get("kind", "normal")
    if kind == "gather_water":
        return GatherWater(data["container_item_id"], data.get("water_item_id", "water_dirty"),
                           int(data.get("water_qty", 1)))
    if kind == "explore":
        return Explore(data["action_job_id"], data.get("direction", "N"),
                       [(item_id, int(qty)) for item_id, qty in data.get("rations_reserved", [])])
    return NormalJob()


@dataclass
class JobEntry:
    id: str
    job_id: str
    pace: str
    created_at: int
    duration_ms: int
    start_at: int | None = None
    tile_id: str | None = None
    tool_ok: bool = True
    variant: JobVariant = field(default_factory=NormalJob)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "job_id": self.job_id,
            "pace": self.pace,
            "created_at": self.created_at,
            "duration_ms": self.duration_ms,
            "start_at": self.start_at,
            "tile_id": self.tile_id,
            "tool_ok": self.tool_ok,
            "variant": variant_to_dict(self.variant),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobEntry:
        fields = dict(data)
        fields["variant"] = variant_from_dict(fields.get("variant"))
        return cls(**fields)


@dataclass
class CraftEntry:
    """A paid-for craft. ``reserved_inputs`` is what a cancel refunds."""

    id: str
    recipe_id: str
    station_id: str
    created_at: int
    duration_ms: int
    start_at: int | None = None
    reserved_inputs: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "recipe_id": self.recipe_id,
            "station_id": self.station_id,
            "created_at": self.created_at,
            "duration_ms": self.duration_ms,
            "start_at": self.start_at,
            "reserved_inputs": dict(self.reserved_inputs),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CraftEntry:
        return cls(**data)
