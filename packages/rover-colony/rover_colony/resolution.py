"""Job resolution: strain, yields, risks, tool wear, XP and the danger check.

``resolve_job`` runs exactly once per completed queue entry, at the entry's
end time. Every roll comes from a stream derived from the run seed, the end
second and the entry id, so resolving the same entry from the same state
always gives the same result.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

from rover import clamp, derive_rng, rand_int, round_half_up
from rover_atlas import Tile
from rover_resource import JobDef, YieldDef

from rover_colony.conditions import (
    HOUR_MS,
    MINUTE_MS,
    apply_injury,
    apply_moodlet,
    apply_sickness,
    clamp_need,
    down_character,
    effective_skill,
    morale_modifier,
    moodlet,
    process_level_ups,
)
from rover_colony.crew import tool_for, total_protection
from rover_colony.entries import Explore, GatherWater, JobEntry, NormalJob
from rover_colony.needs import maybe_auto_consume
from rover_colony.pace import pace_multipliers
from rover_colony.state import Character, GameState
from rover_colony.storage import add_to_storage, owns_item
from rover_colony.world import current_tile_id, discover_tile

logger = logging.getLogger(__name__)

SICK_RISK_BONUS = 0.20
MINOR_INJURY_RISK_BONUS = 0.15
MAJOR_INJURY_RISK_BONUS = 0.35

MAX_MINOR_CHANCE = 0.60
MAX_MAJOR_CHANCE = 0.35
MAX_SICK_CHANCE = 0.35
MAX_WEAR_CHANCE = 0.95

DANGER_THRESHOLD = 4
DOWNED_CHANCE = 0.15
STARVING_LEVEL = 10

EXPLORE_BASE_SUCCESS = 0.55
EXPLORE_INJURY_BASE = 0.10

TUTORIAL_ITEMS = ("spear_fishing", "trap_simple", "hatchet_stone")


@dataclass(frozen=True)
class Multipliers:
    yield_: float
    risk: float
    tool_tier: int


def compute_multipliers(state: GameState, char: Character, job: JobDef, pace: str,
                        tool_tag: str | None, tool_ok: bool = True) -> Multipliers:
    """Yield and risk multipliers from pace, skill, tool, armor, morale and conditions.

    With no matching tool equipped the tier is 1 when the entry was queued
    without a tool problem (including jobs that take no tool), else 0.
    """
    mult = pace_multipliers(pace)
    skill = effective_skill(char, job.xp_skill or "Wilderness")
    found = tool_for(state, char, tool_tag) if tool_tag else None
    if found is not None:
        tier = max(0, int(found[0].tool.tier))
    else:
        tier = 1 if tool_ok else 0
    morale_penalty = max(0.0, -morale_modifier(char)) * 0.002
    protection = total_protection(state, char)

    bonus = 0.0
    if char.conditions.sickness is not None:
        bonus += SICK_RISK_BONUS
    injury = char.conditions.injury
    if injury is not None and injury.severity == "minor":
        bonus += MINOR_INJURY_RISK_BONUS
    if injury is not None and injury.severity == "major":
        bonus += MAJOR_INJURY_RISK_BONUS

    yield_mult = mult.yield_ * (1 + skill * 0.04) * (1 + tier * 0.05) * (1 - morale_penalty)
    risk_mult = mult.risk * (1 - protection * 0.6) * (1 - tier * 0.06) * (1 + bonus)
    return Multipliers(yield_mult, risk_mult, tier)


def roll_yields(state: GameState, char: Character, yields: tuple[YieldDef, ...],
                tile: Tile, yield_mult: float, rand: Callable[[], float],
                at: int) -> list[tuple[str, int]]:
    """Roll and deposit a yield table. The first line that does not fit stops the rest."""
    biome = state.tiles.biome_for(tile)
    gained: list[tuple[str, int]] = []
    for y in yields:
        if y.chance < 1 and rand() > y.chance:
            continue
        qty = rand_int(rand, y.min, y.max)
        biome_mult = biome.yield_mult.get(y.item_id)
        if biome_mult:
            qty = math.ceil(qty * biome_mult)
        qty = max(0, math.floor(qty * yield_mult))
        if qty <= 0:
            continue
        if not add_to_storage(state, y.item_id, qty):
            state.push_log("Storage full, couldn't store yields.", "warn", char.id, ts=at)
            break
        gained.append((y.item_id, qty))
    return gained


def _describe(state: GameState, lines: list[tuple[str, int]]) -> str:
    return ", ".join(f"{qty}x {state.catalog.item_name(item_id)}" for item_id, qty in lines)


def _acting_tile(state: GameState, entry: JobEntry, at: int) -> Tile:
    tile_id = entry.tile_id or current_tile_id(state)
    return discover_tile(state, tile_id, at)


def _apply_strain(state: GameState, char: Character, job: JobDef, entry: JobEntry) -> None:
    cfg = state.config
    strain = cfg.job_strenuous_drain_multiplier if job.strenuous else 1.0
    minutes = entry.duration_ms / MINUTE_MS
    char.needs.hunger = clamp_need(char.needs.hunger - cfg.hunger_per_min * minutes * (strain - 0.2))
    char.needs.thirst = clamp_need(char.needs.thirst - cfg.thirst_per_min * minutes * (strain - 0.2))


def _resolve_gather_water(state: GameState, char: Character, variant: GatherWater,
                          at: int) -> list[tuple[str, int]]:
    qty = max(0, variant.water_qty)
    if qty <= 0:
        return []
    if not add_to_storage(state, variant.water_item_id, qty):
        state.push_log("Storage full, couldn't store gathered water.", "warn", char.id, ts=at)
        return []
    name = state.catalog.item_name(variant.water_item_id)
    state.push_log(f"{char.name} gathered {qty}x {name}.", "good", char.id, ts=at)
    return [(variant.water_item_id, qty)]


def _resolve_explore(state: GameState, char: Character, variant: Explore, tile: Tile,
                     mults: Multipliers, rand: Callable[[], float],
                     at: int) -> list[tuple[str, int]]:
    action = state.catalog.jobs.get(variant.action_job_id)
    wild = effective_skill(char, "Wilderness")
    wits = effective_skill(char, "Wits")
    grit = effective_skill(char, "Grit")

    chance = clamp(EXPLORE_BASE_SUCCESS + wild * 0.02 + wits * 0.01 + mults.tool_tier * 0.04,
                   0.25, 0.95)
    success = rand() < chance
    gained: list[tuple[str, int]] = []
    if success and action is not None and action.yields:
        gained = roll_yields(state, char, action.yields, tile,
                             mults.yield_ * (1.10 + grit * 0.01), rand, at)
        state.push_log(f"{char.name} explored and returned with loot.", "good", char.id, ts=at)
    else:
        state.push_log(f"{char.name} explored but found nothing useful.", "info", char.id, ts=at)

    # rations were eaten on the trip
    variant.rations_reserved = []

    extra = clamp(EXPLORE_INJURY_BASE - grit * 0.01, 0.02, 0.12)
    if rand() < extra and char.conditions.injury is None:
        apply_injury(state, char, "minor", "Sprained Ankle", 2 * HOUR_MS, at)
    return gained


def _roll_risks(state: GameState, char: Character, job: JobDef, risk_mult: float,
                rand: Callable[[], float], at: int) -> None:
    r = job.risk
    major = clamp(r.major_injury * risk_mult, 0, MAX_MAJOR_CHANCE)
    minor = clamp(r.minor_injury * risk_mult, 0, MAX_MINOR_CHANCE)
    sick = clamp(r.sickness * risk_mult, 0, MAX_SICK_CHANCE)

    if char.conditions.injury is None:
        if rand() < major:
            apply_injury(state, char, "major", "Broken Leg", 8 * HOUR_MS, at)
        elif rand() < minor:
            apply_injury(state, char, "minor", "Sprained Ankle", 2 * HOUR_MS, at)
    if char.conditions.sickness is None and rand() < sick:
        apply_sickness(state, char, "Ruin Dust Fever", 3 * HOUR_MS, at)


def _wear_tool(state: GameState, char: Character, job: JobDef, tool_tag: str | None,
               pace: str, risk_mult: float, rand: Callable[[], float], at: int) -> None:
    found = tool_for(state, char, tool_tag) if tool_tag else None
    if found is None:
        return
    item, inst = found
    chance = clamp(job.risk.tool_wear * risk_mult, 0, MAX_WEAR_CHANCE)
    if rand() >= chance:
        return
    wear = max(1, round_half_up((2 + item.tool.power) * pace_multipliers(pace).risk))
    inst.durability = max(0, (inst.durability or 0) - wear)
    if inst.durability <= 0:
        state.push_log(f"{char.name}'s {item.name} broke!", "bad", char.id, ts=at)
        apply_moodlet(char, moodlet("m_brokentool", "Broken Gear", -6, HOUR_MS, at,
                                    "Your tool fell apart."))


def _grant_xp(state: GameState, char: Character, job: JobDef, entry: JobEntry,
              tool_tier: int, at: int) -> None:
    if not job.xp_skill:
        return
    minutes = entry.duration_ms / MINUTE_MS
    gain = round_half_up(10 + minutes * 2 + tool_tier * 2)
    char.xp[job.xp_skill] = char.xp.get(job.xp_skill, 0) + gain
    state.push_log(f"{char.name} gained {gain} XP in {job.xp_skill}.", "info", char.id, ts=at)
    process_level_ups(state, char, at)


def danger_score(char: Character) -> int:
    score = 0
    if char.needs.hunger < STARVING_LEVEL:
        score += 1
    if char.needs.thirst < STARVING_LEVEL:
        score += 1
    injury = char.conditions.injury
    if injury is not None and injury.severity == "major":
        score += 2
    if char.conditions.sickness is not None:
        score += 1
    return score


def check_tutorial(state: GameState, at: int) -> bool:
    if state.meta.tutorial_done:
        return False
    if not all(owns_item(state, item_id) for item_id in TUTORIAL_ITEMS):
        return False
    state.meta.tutorial_done = True
    state.push_log("Tutorial complete. You're on your own now (mostly).", "system", ts=at)
    return True


def resolve_job(state: GameState, char: Character, entry: JobEntry, at: int) -> None:
    job = state.catalog.jobs.get(entry.job_id)
    if job is None:
        logger.warning("entry %s references unknown job %r", entry.id, entry.job_id)
        state.push_log(f"Dropped unknown job {entry.job_id}.", "warn", char.id, ts=at)
        return

    tile = _acting_tile(state, entry, at)
    rand = derive_rng(state.meta.run_seed, at // 1000, entry.id)

    _apply_strain(state, char, job, entry)
    maybe_auto_consume(state, char, at)

    variant = entry.variant
    tool_tag = job.tool_tag
    if isinstance(variant, Explore):
        action = state.catalog.jobs.get(variant.action_job_id)
        if action is not None:
            tool_tag = action.tool_tag or tool_tag
    mults = compute_multipliers(state, char, job, entry.pace, tool_tag, entry.tool_ok)

    if isinstance(variant, GatherWater):
        gained = _resolve_gather_water(state, char, variant, at)
    elif isinstance(variant, Explore):
        gained = _resolve_explore(state, char, variant, tile, mults, rand, at)
    elif isinstance(variant, NormalJob):
        gained = roll_yields(state, char, job.yields, tile, mults.yield_, rand, at)
        if gained:
            state.push_log(f"{char.name} gained: {_describe(state, gained)}.", "good", char.id, ts=at)
    else:
        raise TypeError(f"unhandled job variant {type(variant).__name__}")

    _roll_risks(state, char, job, mults.risk, rand, at)
    _wear_tool(state, char, job, tool_tag, entry.pace, mults.risk, rand, at)
    _grant_xp(state, char, job, entry, mults.tool_tier, at)

    if gained:
        char.needs.morale = clamp_need(char.needs.morale + 1)

    if (not char.conditions.downed and danger_score(char) >= DANGER_THRESHOLD
            and rand() < DOWNED_CHANCE):
        down_character(state, char, at)

    state.push_log(f"{char.name} finished {job.name}.", "good", char.id, ts=at)
    check_tutorial(state, at)
