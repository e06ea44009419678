"""Biome and tile definitions for rover-atlas."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BiomeDef:
    """Immutable biome catalog entry.

    Attributes:
        id: Unique identifier.
        name: Display name.
        weight: Base spawn weight for tile generation.
        tags: Descriptive tags (e.g. "ruins", "wet") used for job gating and
            neighbor affinity.
        yield_mult: Per-item yield multipliers applied by job resolution.
    """

    id: str
    name: str = ""
    weight: float = 1.0
    tags: tuple[str, ...] = ()
    yield_mult: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("BiomeDef id must be non-empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BiomeDef:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            weight=data.get("weight") or 1,
            tags=tuple(data.get("tags", ())),
            yield_mult=dict(data.get("yieldMult") or data.get("yield_mult") or {}),
        )


@dataclass
class Tile:
    """A discovered grid cell, bound to one biome for good."""

    tile_id: str
    biome_id: str
    created_at: int
    tutorial_overlay: bool = False
    encounter: dict[str, Any] | None = None
