"""Job queue scheduler: per-character queues, idle jobs and the special variants."""
from __future__ import annotations

import logging
from typing import Callable

from rover import Outcome, SimContext, ends_at, round_half_up
from rover_atlas import Tile, neighbors
from rover_resource import InventoryHelper

from rover_colony.crew import tool_for
from rover_colony.entries import Explore, GatherWater, JobEntry, JobVariant, NormalJob
from rover_colony.pace import PACES, Pace, pace_multipliers
from rover_colony.resolution import resolve_job
from rover_colony.state import Character, GameState
from rover_colony.storage import return_to_pockets, storage_has
from rover_colony.world import current_tile_id, discover_tile

logger = logging.getLogger(__name__)

IDLE_PACE = "safe"
VARIANT_TYPES = {None: NormalJob, "gather_water": GatherWater, "explore": Explore}
EXPLORE_DIRECTIONS = {"N": "n", "S": "s", "E": "e", "W": "w"}


def start_job(state: GameState, char_id: str, job_id: str, pace: str = "normal", *,
              duration_ms: int | None = None, variant: JobVariant | None = None,
              tile_id: str | None = None, now: int | None = None) -> Outcome:
    """Queue *job_id* for a character. Starts immediately if their queue is empty.

    Jobs with a catalog variant only accept a matching *variant*; use
    :func:`queue_gather_water` or :func:`queue_explore` to build one.
    """
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if char.conditions.downed:
        return Outcome.fail("downed")
    job = state.catalog.jobs.get(job_id)
    if job is None:
        return Outcome.fail("bad job")
    if job.requires_item and not storage_has(state, job.requires_item):
        return Outcome.fail(f"Requires item: {job.requires_item}")
    if variant is None:
        variant = NormalJob()
    if not isinstance(variant, VARIANT_TYPES.get(job.variant, NormalJob)):
        return Outcome.fail("bad variant")

    tool_ok = True
    if job.tool_tag:
        tool_ok = tool_for(state, char, job.tool_tag) is not None

    if duration_ms is not None:
        duration = max(1000, round_half_up(duration_ms))
    else:
        duration = round_half_up(job.base_sec * pace_multipliers(pace).duration) * 1000

    ts = state.now() if now is None else now
    entry = JobEntry(
        id=state.next_id("job"),
        job_id=job_id,
        pace=pace,
        created_at=ts,
        duration_ms=duration,
        tile_id=tile_id if tile_id is not None else state.meta.last_tile_id,
        tool_ok=tool_ok,
        variant=variant,
    )
    state.job_queue(char_id).push(entry, ts)
    state.push_log(f"{char.name} queued: {job.name} ({pace}).", "info", char.id, ts=ts)
    return Outcome.success(entry)


def _refund_reservations(state: GameState, char: Character | None, entry: JobEntry) -> None:
    variant = entry.variant
    if char is None or not isinstance(variant, Explore) or not variant.rations_reserved:
        return
    return_to_pockets(state, char, variant.rations_reserved)
    variant.rations_reserved = []


def cancel_job(state: GameState, char_id: str, entry_id: str) -> Outcome:
    queue = state.job_queues.get(char_id)
    if queue is None:
        return Outcome.fail("bad char")
    removed = queue.remove(entry_id, state.now())
    if removed is None:
        return Outcome.fail("not found")
    entry, _ = removed
    char = state.character(char_id)
    _refund_reservations(state, char, entry)
    job = state.catalog.jobs.get(entry.job_id)
    name = job.name if job is not None else entry.job_id
    who = char.name if char is not None else "crew"
    state.push_log(f"Cancelled {name} for {who}.", "info", char_id)
    return Outcome.success(entry)


def clear_jobs(state: GameState, char_id: str) -> Outcome:
    """Cancel every queued entry for a character, returning any reservations."""
    queue = state.job_queues.get(char_id)
    if queue is None:
        return Outcome.fail("bad char")
    if not queue:
        return Outcome.fail("empty")
    char = state.character(char_id)
    for entry in queue.clear():
        _refund_reservations(state, char, entry)
    who = char.name if char is not None else "crew"
    state.push_log(f"Cleared job queue for {who}.", "info", char_id)
    return Outcome.success()


def set_idle_behavior(state: GameState, char_id: str, behavior: str) -> Outcome:
    """``rest``, ``none`` or the id of a job that needs no extra input."""
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if behavior not in ("rest", "none"):
        job = state.catalog.jobs.get(behavior)
        if job is None or job.variant is not None:
            return Outcome.fail("bad idle behavior")
    char.idle_behavior = behavior
    return Outcome.success()


# --- Variants ---

def queue_gather_water(state: GameState, char_id: str, container_item_id: str,
                       pace: str = "normal") -> Outcome:
    """Fill a container from storage with dirty water. The container is not used up."""
    container = state.catalog.item(container_item_id)
    if container is None or container.container is None:
        return Outcome.fail("not a container")
    if not storage_has(state, container_item_id):
        return Outcome.fail("container not in storage")
    variant = GatherWater(container_item_id, "water_dirty", container.container.water_units)
    return start_job(state, char_id, "gather_water", pace,
                     duration_ms=container.container.gather_seconds * 1000, variant=variant)


def _pocket_supply(state: GameState, char: Character, category: str) -> str | None:
    for item_id, qty in char.pockets.stacks.items():
        item = state.catalog.item(item_id)
        if qty > 0 and item is not None and item.category == category:
            return item_id
    return None


def queue_explore(state: GameState, char_id: str, action_job_id: str, direction: str,
                  pace: str = "normal") -> Outcome:
    """Send a crew member to the neighboring tile in *direction* to run *action_job_id*.

    One food and one water unit are taken from their pockets up front; both
    must be there, and both come back if queueing fails or the entry is cancelled.
    """
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    action = state.catalog.jobs.get(action_job_id)
    if action is None or action.variant is not None:
        return Outcome.fail("bad action job")
    heading = EXPLORE_DIRECTIONS.get(direction.upper())
    if heading is None:
        return Outcome.fail("bad direction")

    food = _pocket_supply(state, char, "food")
    water = _pocket_supply(state, char, "water")
    if food is None or water is None:
        return Outcome.fail("Exploration requires 1 food + 1 water in pockets")

    reserved = [(food, 1), (water, 1)]
    for item_id, qty in reserved:
        InventoryHelper.remove(char.pockets, item_id, qty)

    origin = discover_tile(state, current_tile_id(state))
    target = neighbors(origin.tile_id)[heading]
    variant = Explore(action_job_id, direction.upper(), reserved)
    outcome = start_job(state, char_id, "explore", pace, variant=variant, tile_id=target)
    if not outcome:
        return_to_pockets(state, char, reserved)
        variant.rations_reserved = []
    return outcome


def list_available_jobs(state: GameState, tile: Tile) -> list:
    """Jobs that can run on *tile* given its biome."""
    biome = state.tiles.biome_for(tile)
    jobs = []
    for job in state.catalog.jobs.values():
        if (job.always_available
                or any(tag in biome.tags for tag in job.biome_tags)
                or biome.id in job.biomes
                or not job.gated):
            jobs.append(job)
    return jobs


# --- Tick ---

def _complete(state: GameState, char: Character, entry: JobEntry, at: int) -> None:
    job = state.catalog.jobs.get(entry.job_id)
    try:
        resolve_job(state, char, entry, at)
    except Exception:
        logger.exception("job %s (%s) failed to resolve for %s", entry.id, entry.job_id, char.id)
        name = job.name if job is not None else entry.job_id
        state.push_log(f"ERROR: Job completion failed for {char.name} ({name}).", "warn", char.id, ts=at)


def _wants_idle_job(char: Character) -> bool:
    return char.idle_behavior not in ("", "none", "rest") and not char.conditions.downed


def make_job_system() -> Callable[[GameState, SimContext], None]:
    """Complete due jobs and keep idle crew busy, sharing one idle budget per step."""

    def job_system(state: GameState, ctx: SimContext) -> None:
        budget = state.config.idle_max_cycles_per_sim
        for char in list(state.crew):
            if char.conditions.downed:
                continue
            queue = state.job_queue(char.id)
            if not queue and _wants_idle_job(char) and budget > 0:
                if start_job(state, char.id, char.idle_behavior, IDLE_PACE, now=ctx.now):
                    budget -= 1
            queue.start_head(ctx.now)

            while True:
                drained_at = None
                for entry in queue.pop_due(ctx.now):
                    drained_at = ends_at(entry)
                    _complete(state, char, entry, drained_at)
                if drained_at is None or queue or budget <= 0 or not _wants_idle_job(char):
                    break
                if not start_job(state, char.id, char.idle_behavior, IDLE_PACE, now=drained_at):
                    break
                budget -= 1

    return job_system


__all__ = [
    "PACES",
    "Pace",
    "cancel_job",
    "clear_jobs",
    "list_available_jobs",
    "make_job_system",
    "pace_multipliers",
    "queue_explore",
    "queue_gather_water",
    "set_idle_behavior",
    "start_job",
]
