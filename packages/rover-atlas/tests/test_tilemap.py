"""Tests for TileMap biome generation."""
from __future__ import annotations

import pytest
from rover_atlas import BiomeDef, TileMap, encode, neighbors

BIOMES = [
    BiomeDef("wild_forest", "Wild Forest Edge", 22, ("wild",)),
    BiomeDef("riverbed", "Riverbed Flats", 12, ("wet",)),
    BiomeDef("overgrown_suburb", "Overgrown Suburb", 20, ("ruins", "wild")),
    BiomeDef("collapsed_downtown", "Collapsed Downtown", 14, ("ruins", "danger")),
    BiomeDef("industrial_scrap", "Industrial Scrapfields", 16, ("ruins", "industrial")),
    BiomeDef("desert_highway", "Desert Highway Cut", 16, ("dry",)),
]


@pytest.fixture
def tilemap() -> TileMap:
    return TileMap("WORLD_V01", BIOMES)


class TestGetOrCreate:
    def test_creates_once(self, tilemap: TileMap) -> None:
        tile, created = tilemap.get_or_create("s000000", now=100)
        assert created is True
        again, created_again = tilemap.get_or_create("s000000", now=999)
        assert created_again is False
        assert again is tile
        assert again.created_at == 100

    def test_idempotent_for_many_ids(self, tilemap: TileMap) -> None:
        ids = [encode(lat, lat * 2, 7) for lat in range(-60, 60, 7)]
        first = {tid: tilemap.get_or_create(tid, 0)[0].biome_id for tid in ids}
        second = {tid: tilemap.get_or_create(tid, 0)[0].biome_id for tid in ids}
        assert first == second

    def test_deterministic_across_instances(self) -> None:
        a = TileMap("WORLD_V01", BIOMES)
        b = TileMap("WORLD_V01", BIOMES)
        for tid in ("s000000", "u4pruyd", "dr5regw"):
            assert a.get_or_create(tid, 0)[0].biome_id == b.get_or_create(tid, 0)[0].biome_id

    def test_biome_comes_from_catalog(self, tilemap: TileMap) -> None:
        ids = {b.id for b in BIOMES}
        for lat in range(-80, 80, 5):
            tile, _ = tilemap.get_or_create(encode(lat, -lat, 6), 0)
            assert tile.biome_id in ids

    def test_world_seed_changes_distribution(self) -> None:
        tiles = [encode(lat, lat, 7) for lat in range(-80, 80, 3)]
        a = TileMap("SEED_A", BIOMES)
        b = TileMap("SEED_B", BIOMES)
        picks_a = [a.pick_biome(t) for t in tiles]
        picks_b = [b.pick_biome(t) for t in tiles]
        assert picks_a != picks_b


class TestNeighborInfluence:
    def test_neighbor_bonus_favors_contiguous_regions(self) -> None:
        biomes = [BiomeDef("a", weight=1), BiomeDef("b", weight=1)]
        same = 0
        trials = 0
        for lat in range(-70, 70, 2):
            tilemap = TileMap("INFLUENCE", biomes)
            centre = encode(lat, lat * 1.7, 7)
            around = neighbors(centre)
            seed_tile, _ = tilemap.get_or_create(around["n"], 0)
            tilemap.get_or_create(around["s"], 0)
            tilemap._tiles[around["s"]].biome_id = seed_tile.biome_id
            tile, _ = tilemap.get_or_create(centre, 0)
            trials += 1
            same += tile.biome_id == seed_tile.biome_id
        # 25 vs 1 once two cardinals agree.
        assert same / trials > 0.85

    def test_non_positive_total_falls_back_to_first(self) -> None:
        biomes = [BiomeDef("first", weight=-5), BiomeDef("second", weight=-5)]
        tilemap = TileMap("W", biomes)
        assert tilemap.pick_biome("s000000") == "first"


class TestFirstTile:
    def test_mark_first_tile_once(self, tilemap: TileMap) -> None:
        assert tilemap.mark_first_tile("abc") is True
        assert tilemap.mark_first_tile("def") is False
        assert tilemap.mark_first_tile("abc") is True
        assert tilemap.first_tile_id == "abc"


class TestSnapshot:
    def test_roundtrip(self, tilemap: TileMap) -> None:
        tilemap.get_or_create("s000000", 5)
        tilemap.mark_first_tile("s000000")
        tile = tilemap.get("s000000")
        tile.tutorial_overlay = True
        tile.encounter = {"type": "recruit_npc"}

        restored = TileMap("WORLD_V01", BIOMES)
        restored.restore(tilemap.snapshot())
        assert restored.snapshot() == tilemap.snapshot()
        assert restored.get("s000000").biome_id == tile.biome_id

    def test_unknown_biome_maps_to_first(self, tilemap: TileMap) -> None:
        tilemap.restore({"tiles": {"x": {"tile_id": "x", "biome_id": "gone", "created_at": 0}}})
        assert tilemap.biome_for(tilemap.get("x")).id == "wild_forest"

    def test_requires_biomes(self) -> None:
        with pytest.raises(ValueError):
            TileMap("W", [])
