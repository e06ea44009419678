"""Save and load a GameState as plain JSON-compatible data."""
from __future__ import annotations

import dataclasses
from typing import Any

from rover import SnapshotError, TimedQueue, VirtualClock
from rover.clock import TimeSource
from rover_resource import Catalog, InventoryHelper

from rover_colony.config import SimConfig
from rover_colony.entries import CraftEntry, JobEntry
from rover_colony.state import (
    Character,
    Condition,
    Conditions,
    GameState,
    Meta,
    Moodlet,
    Needs,
    recompute_derived_stats,
)

SNAPSHOT_VERSION = 1


def _character_to_dict(char: Character) -> dict[str, Any]:
    cond = char.conditions
    return {
        "id": char.id,
        "name": char.name,
        "is_player": char.is_player,
        "stats": dict(char.stats),
        "xp": dict(char.xp),
        "needs": dataclasses.asdict(char.needs),
        "moodlets": [dataclasses.asdict(m) for m in char.moodlets],
        "conditions": {
            "sickness": dataclasses.asdict(cond.sickness) if cond.sickness else None,
            "injury": dataclasses.asdict(cond.injury) if cond.injury else None,
            "downed": cond.downed,
        },
        "idle_behavior": char.idle_behavior,
        "pockets": InventoryHelper.snapshot(char.pockets),
        "equipment": dict(char.equipment),
        "perk": char.perk,
        "quirk": char.quirk,
    }


def _character_from_dict(data: dict[str, Any]) -> Character:
    cond = data.get("conditions") or {}
    sickness = cond.get("sickness")
    injury = cond.get("injury")
    char = Character(
        id=data["id"],
        name=data["name"],
        is_player=data.get("is_player", False),
        stats=dict(data.get("stats") or {}),
        xp=dict(data.get("xp") or {}),
        needs=Needs(**data.get("needs", {})),
        moodlets=[Moodlet(**m) for m in data.get("moodlets", [])],
        conditions=Conditions(
            sickness=Condition(**sickness) if sickness else None,
            injury=Condition(**injury) if injury else None,
            downed=bool(cond.get("downed", False)),
        ),
        idle_behavior=data.get("idle_behavior", "rest"),
        pockets=InventoryHelper.restore(data.get("pockets") or {}),
        perk=data.get("perk"),
        quirk=data.get("quirk"),
    )
    char.equipment.update(data.get("equipment") or {})
    return char


def snapshot(state: GameState) -> dict[str, Any]:
    """Everything needed to resume *state* later. Catalog and config are not included."""
    return {
        "version": SNAPSHOT_VERSION,
        "meta": dataclasses.asdict(state.meta),
        "last_sim_at": state.last_sim_at,
        "clock": state.clock.snapshot(),
        "tiles": state.tiles.snapshot(),
        "rv": {
            "name": state.rv.name,
            "stations": dict(state.rv.stations),
            "storage": InventoryHelper.snapshot(state.rv.storage),
            "ration_prefs": dict(state.rv.ration_prefs),
        },
        "crew": [_character_to_dict(c) for c in state.crew],
        "job_queues": {cid: [e.to_dict() for e in q] for cid, q in state.job_queues.items()},
        "craft_queues": {sid: [e.to_dict() for e in q] for sid, q in state.craft_queues.items()},
        "log": state.log.snapshot(),
    }


def restore(data: dict[str, Any], catalog: Catalog, time_source: TimeSource | None = None,
            config: SimConfig | None = None) -> GameState:
    """Rebuild a GameState from :func:`snapshot` output.

    Raises:
        SnapshotError: On a version mismatch or missing sections.
    """
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(
            f"Unsupported snapshot version {version!r}, expected {SNAPSHOT_VERSION}"
        )
    try:
        meta = Meta(**data["meta"])
        config = config if config is not None else SimConfig.from_dict(catalog.config)
        clock = VirtualClock(time_source)
        clock.restore(data.get("clock", {}))

        state = GameState(catalog, config, clock, meta.run_seed, meta.created_at)
        state.meta = meta
        state.last_sim_at = int(data["last_sim_at"])
        state.tiles.restore(data.get("tiles", {}))

        rv = data.get("rv", {})
        state.rv.name = rv.get("name", state.rv.name)
        state.rv.stations.update(rv.get("stations", {}))
        state.rv.storage = InventoryHelper.restore(rv.get("storage") or {})
        state.rv.ration_prefs = dict(rv.get("ration_prefs", {}))

        state.crew = [_character_from_dict(c) for c in data.get("crew", [])]
        state.job_queues = {
            cid: TimedQueue([JobEntry.from_dict(e) for e in entries])
            for cid, entries in data.get("job_queues", {}).items()
        }
        for sid, entries in data.get("craft_queues", {}).items():
            state.craft_queues[sid] = TimedQueue([CraftEntry.from_dict(e) for e in entries])
        state.log.restore(data.get("log", []))
    except (KeyError, TypeError) as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc

    recompute_derived_stats(state)
    return state
