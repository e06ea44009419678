"""Tile discovery, the first-tile tutorial encounter and location updates."""
from __future__ import annotations

from rover_atlas import Tile, encode

from rover_colony.state import GameState

TUTORIAL_NPC = "npc_scavenger"
TUTORIAL_OFFER = {"item_id": "ration_basic", "qty": 1, "optional": True}


def discover_tile(state: GameState, tile_id: str, now: int | None = None) -> Tile:
    """Get or create *tile_id*, attaching the tutorial encounter to the first tile once."""
    ts = state.now() if now is None else now
    tile, _ = state.tiles.get_or_create(tile_id, ts)

    if not state.meta.tutorial_done and state.tiles.mark_first_tile(tile_id):
        if not tile.tutorial_overlay:
            tile.tutorial_overlay = True
            tile.encounter = {
                "type": "recruit_npc",
                "npc_template_id": TUTORIAL_NPC,
                "requirement": dict(TUTORIAL_OFFER),
            }
            state.push_log("Tutorial overlay activated on your current tile.", "system", ts=ts)
    return tile


def current_tile_id(state: GameState) -> str:
    """The last known tile, defaulting to the cell at (0, 0)."""
    if state.meta.last_tile_id is None:
        state.meta.last_tile_id = encode(0, 0, state.config.tile_precision)
    return state.meta.last_tile_id


def set_location(state: GameState, lat: float, lon: float) -> Tile:
    tile_id = encode(lat, lon, state.config.tile_precision)
    state.meta.last_lat = lat
    state.meta.last_lon = lon
    state.meta.last_tile_id = tile_id
    return discover_tile(state, tile_id)
