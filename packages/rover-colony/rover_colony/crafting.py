"""Craft queues per station, and station upgrades."""
from __future__ import annotations

import logging
from typing import Callable

from rover import Outcome, SimContext, ends_at
from rover_resource import InventoryHelper, RecipeDef, pay, refund

from rover_colony.entries import CraftEntry
from rover_colony.state import GameState, recompute_derived_stats
from rover_colony.storage import add_to_storage

logger = logging.getLogger(__name__)


def can_craft(state: GameState, recipe: RecipeDef) -> Outcome:
    level = state.station_level(recipe.station)
    if level < recipe.station_level:
        return Outcome.fail(f"Requires {recipe.station} level {recipe.station_level}")
    missing = InventoryHelper.missing(state.rv.storage, recipe.inputs)
    if missing:
        item_id = next(iter(missing))
        return Outcome.fail(f"Missing: {state.catalog.item_name(item_id)}")
    return Outcome.success()


def start_craft(state: GameState, recipe_id: str) -> Outcome:
    """Pay the recipe's inputs and queue it on its station."""
    recipe = state.catalog.recipes.get(recipe_id)
    if recipe is None:
        return Outcome.fail("bad recipe")
    check = can_craft(state, recipe)
    if not check:
        return check
    if not pay(state.rv.storage, recipe.inputs, state.catalog.items):
        return Outcome.fail("could not pay inputs")

    now = state.now()
    entry = CraftEntry(
        id=state.next_id("craft"),
        recipe_id=recipe.id,
        station_id=recipe.station,
        created_at=now,
        duration_ms=int(recipe.time_sec * 1000),
        reserved_inputs=dict(recipe.inputs),
    )
    state.craft_queue(recipe.station).push(entry, now)
    state.push_log(f"Crafting started: {recipe.name}.", "info")
    return Outcome.success(entry)


def cancel_craft(state: GameState, station_id: str, entry_id: str) -> Outcome:
    """Remove a craft and refund its inputs; lines that no longer fit are lost."""
    queue = state.craft_queues.get(station_id)
    if not queue:
        return Outcome.fail("empty")
    removed = queue.remove(entry_id, state.now())
    if removed is None:
        return Outcome.fail("not found")
    entry, _ = removed

    dropped = refund(state.rv.storage, entry.reserved_inputs, state.catalog.items,
                     lambda: state.next_id("inst"))
    for item_id, qty in dropped:
        state.push_log(f"Storage full. Couldn't refund {qty}x {state.catalog.item_name(item_id)}.",
                       "warn")

    recipe = state.catalog.recipes.get(entry.recipe_id)
    name = recipe.name if recipe is not None else entry.recipe_id
    state.push_log(f"Canceled craft: {name}.", "info")
    return Outcome.success(entry)


def resolve_craft(state: GameState, recipe: RecipeDef | None, at: int | None = None) -> None:
    if recipe is None:
        state.push_log("Craft failed: missing recipe data.", "warn", ts=at)
        return
    for item_id, qty in recipe.outputs.items():
        if not add_to_storage(state, item_id, qty):
            state.push_log(f"Storage full. Couldn't store crafted {state.catalog.item_name(item_id)}.",
                           "warn", ts=at)
    state.push_log(f"Craft complete: {recipe.name}.", "good", ts=at)


def make_craft_system() -> Callable[[GameState, SimContext], None]:
    def craft_system(state: GameState, ctx: SimContext) -> None:
        for station_id, queue in state.craft_queues.items():
            queue.start_head(ctx.now)
            for entry in queue.pop_due(ctx.now):
                recipe = state.catalog.recipes.get(entry.recipe_id)
                at = ends_at(entry)
                try:
                    resolve_craft(state, recipe, at)
                except Exception:
                    logger.exception("craft %s (%s) failed at %s", entry.id, entry.recipe_id, station_id)
                    name = recipe.name if recipe is not None else entry.recipe_id
                    state.push_log(f"Craft error while completing {name}.", "warn", ts=at)

    return craft_system


def upgrade_station(state: GameState, station_id: str) -> Outcome:
    """Pay for the next level of a station and apply its effects."""
    station = state.catalog.stations.get(station_id)
    if station is None:
        return Outcome.fail("unknown station")
    current = state.station_level(station_id)
    nxt = station.next_level(current)
    if nxt is None:
        return Outcome.fail("maxed")

    missing = InventoryHelper.missing(state.rv.storage, nxt.cost)
    if missing:
        item_id, qty = next(iter(missing.items()))
        return Outcome.fail(f"Missing: {state.catalog.item_name(item_id)} ({qty})")
    if not pay(state.rv.storage, nxt.cost, state.catalog.items):
        return Outcome.fail("could not pay cost")

    state.rv.stations[station_id] = nxt.level
    recompute_derived_stats(state)
    state.push_log(f"{station.name} upgraded to level {nxt.level}.", "good")
    return Outcome.success(nxt.level)
