"""rover-atlas - Geohash tiles and biome generation for the rover engine."""
from rover_atlas.geohash import OPPOSITE, adjacent, bounds, decode, encode, neighbors
from rover_atlas.tilemap import TileMap
from rover_atlas.types import BiomeDef, Tile

__all__ = [
    "BiomeDef",
    "Tile",
    "TileMap",
    "adjacent",
    "bounds",
    "decode",
    "encode",
    "neighbors",
    "OPPOSITE",
]
