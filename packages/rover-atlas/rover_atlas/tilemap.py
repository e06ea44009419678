"""TileMap - lazily discovered, seed-deterministic biome tiles."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence

from rover.rng import rng, seed_from_string, weighted_pick

from rover_atlas.geohash import neighbors
from rover_atlas.types import BiomeDef, Tile

NEIGHBOR_BONUS = 12
SHARED_TAG_BONUS = 3
CARDINALS = ("n", "s", "e", "w")


class TileMap:
    """Maps tile ids to discovered Tiles.

    A tile's biome is rolled once, from a generator seeded by the world seed
    and the tile id, then stored; later lookups never re-roll.
    """

    def __init__(self, world_seed: str, biomes: Sequence[BiomeDef]) -> None:
        if not biomes:
            raise ValueError("TileMap needs at least one biome")
        self._world_seed = world_seed
        self._biomes = list(biomes)
        self._by_id = {b.id: b for b in self._biomes}
        self._tiles: dict[str, Tile] = {}
        self.first_tile_id: str | None = None

    # --- Queries ---

    @property
    def world_seed(self) -> str:
        return self._world_seed

    def __contains__(self, tile_id: str) -> bool:
        return tile_id in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def get(self, tile_id: str) -> Tile | None:
        return self._tiles.get(tile_id)

    def tile_ids(self) -> list[str]:
        return list(self._tiles)

    def biome_for(self, tile: Tile) -> BiomeDef:
        """Biome of a tile; unknown ids (old saves, trimmed catalogs) map to the first biome."""
        return self._by_id.get(tile.biome_id, self._biomes[0])

    # --- Generation ---

    def pick_biome(self, tile_id: str) -> str:
        """Roll the biome a new tile would get given the current neighbors."""
        around = neighbors(tile_id)
        neighbor_biomes = [
            self._tiles[around[k]].biome_id
            for k in CARDINALS
            if around[k] in self._tiles
        ]

        bonus: dict[str, int] = {}
        for biome_id in neighbor_biomes:
            bonus[biome_id] = bonus.get(biome_id, 0) + NEIGHBOR_BONUS

        reference = self._by_id.get(neighbor_biomes[0]) if neighbor_biomes else None
        weighted: list[tuple[str, float]] = []
        for biome in self._biomes:
            w = (biome.weight or 1) + bonus.get(biome.id, 0)
            if reference is not None:
                shared = sum(1 for t in biome.tags if t in reference.tags)
                w += shared * SHARED_TAG_BONUS
            weighted.append((biome.id, w))

        seed = seed_from_string(f"{self._world_seed}::{tile_id}")
        picked = weighted_pick(rng(seed), weighted)
        return picked if picked is not None else self._biomes[0].id

    def get_or_create(self, tile_id: str, now: int) -> tuple[Tile, bool]:
        """Return ``(tile, created)``. Idempotent for known ids."""
        tile = self._tiles.get(tile_id)
        if tile is not None:
            return tile, False
        tile = Tile(tile_id=tile_id, biome_id=self.pick_biome(tile_id), created_at=now)
        self._tiles[tile_id] = tile
        return tile, True

    def mark_first_tile(self, tile_id: str) -> bool:
        """Record the very first discovered tile. Returns True if *tile_id* is it."""
        if self.first_tile_id is None:
            self.first_tile_id = tile_id
        return self.first_tile_id == tile_id

    # --- Snapshot / Restore ---

    def snapshot(self) -> dict[str, Any]:
        return {
            "first_tile_id": self.first_tile_id,
            "tiles": {tid: dataclasses.asdict(t) for tid, t in self._tiles.items()},
        }

    def restore(self, data: dict[str, Any]) -> None:
        self._tiles.clear()
        self.first_tile_id = data.get("first_tile_id")
        for tile_id, fields in data.get("tiles", {}).items():
            self._tiles[tile_id] = Tile(**fields)
