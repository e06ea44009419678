"""Needs drain, auto-consume and manual eating, drinking and medicine."""
from __future__ import annotations

from typing import Callable

from rover import Outcome, SimContext, clamp, derive_rng

from rover_colony.conditions import (
    HOUR_MS,
    MINUTE_MS,
    apply_moodlet,
    apply_sickness,
    clamp_need,
    effective_skill,
    expire_effects,
    moodlet,
    revive_character,
)
from rover_colony.state import Character, GameState
from rover_colony.storage import is_ration_allowed, remove_from_storage, storage_has

QUALITY_ORDER = {"low": 0, "mid": 1, "high": 2}
WATER_PREFERENCE = ("water_clean", "water_dirty")


def make_needs_drain_system() -> Callable[[GameState, SimContext], None]:
    """Drain hunger/thirst over the elapsed span, recover morale while resting."""

    def needs_drain_system(state: GameState, ctx: SimContext) -> None:
        minutes = ctx.elapsed_ms / MINUTE_MS
        if minutes <= 0:
            return
        cfg = state.config
        for char in state.crew:
            if char.conditions.downed:
                continue
            char.needs.hunger = clamp_need(char.needs.hunger - cfg.hunger_per_min * minutes)
            char.needs.thirst = clamp_need(char.needs.thirst - cfg.thirst_per_min * minutes)
            if not state.job_queue(char.id) and char.idle_behavior == "rest":
                char.needs.morale = clamp_need(
                    char.needs.morale + cfg.morale_recover_per_min_rest * minutes)
            expire_effects(state, char, ctx.now)

    return needs_drain_system


def _roll(state: GameState, char: Character, now: int, what: str) -> float:
    return derive_rng(state.meta.run_seed, "consume", char.id, now // 1000, what)()


def dirty_water_chance(char: Character) -> float:
    grit = effective_skill(char, "Grit")
    med = effective_skill(char, "Medical")
    return clamp(0.18 - grit * 0.01 - med * 0.01, 0.04, 0.25)


def raw_food_chance(char: Character) -> float:
    return clamp(0.25 - effective_skill(char, "Grit") * 0.01, 0.06, 0.28)


def consume_best_water(state: GameState, char: Character, now: int) -> bool:
    """Drink from storage, clean before dirty. Returns False if there is none."""
    pick = next((w for w in WATER_PREFERENCE if storage_has(state, w)), None)
    if pick is None:
        return False
    item = state.catalog.item(pick)
    remove_from_storage(state, pick)
    thirst = item.water.thirst if item.water is not None else 10
    char.needs.thirst = clamp_need(char.needs.thirst + thirst)

    if item.water is not None and item.water.dirty:
        if _roll(state, char, now, pick) < dirty_water_chance(char):
            apply_sickness(state, char, "Dirty Water Sickness", 3 * HOUR_MS, now)
        apply_moodlet(char, moodlet("m_grosswater", "Ugh. Dirty Water.", -3, 30 * MINUTE_MS, now,
                                    "You drank questionable water."))

    state.push_log(f"{char.name} drank water.", "info", char.id, ts=now)
    return True


def consume_ration_food(state: GameState, char: Character, now: int) -> bool:
    """Eat the lowest-quality ration-allowed food in storage."""
    options = []
    for item_id, qty in state.rv.storage.stacks.items():
        item = state.catalog.item(item_id)
        if qty <= 0 or item is None or item.category != "food":
            continue
        if not is_ration_allowed(state, item_id):
            continue
        quality = item.food.quality if item.food is not None else "low"
        options.append((QUALITY_ORDER.get(quality, 0), item))
    if not options:
        return False

    options.sort(key=lambda pair: pair[0])
    item = options[0][1]
    remove_from_storage(state, item.id)
    food = item.food
    char.needs.hunger = clamp_need(char.needs.hunger + (food.hunger if food else 10))
    char.needs.morale = clamp_need(char.needs.morale + (food.morale if food else 0))

    quality = food.quality if food else "low"
    if quality == "low":
        apply_moodlet(char, moodlet("m_slop", "Ate Slop", -6, 2 * HOUR_MS, now, "Barely edible."))
    elif quality == "high":
        apply_moodlet(char, moodlet("m_hearty", "Hearty Meal", 10, 4 * HOUR_MS, now,
                                    "Actually delicious."))

    if food is not None and food.raw and _roll(state, char, now, item.id) < raw_food_chance(char):
        apply_sickness(state, char, "Food Poisoning", 2 * HOUR_MS, now)

    state.push_log(f"{char.name} ate rations.", "info", char.id, ts=now)
    return True


def maybe_auto_consume(state: GameState, char: Character, now: int) -> None:
    """Drink and eat when a need is at or below the threshold."""
    if char.conditions.downed:
        return
    threshold = state.config.auto_consume_threshold
    if char.needs.thirst <= threshold and not consume_best_water(state, char, now):
        apply_moodlet(char, moodlet("m_parched", "Parched", -8, HOUR_MS, now, "No water available."))
    if char.needs.hunger <= threshold and not consume_ration_food(state, char, now):
        apply_moodlet(char, moodlet("m_hungry", "Hungry", -10, HOUR_MS, now, "No rations available."))


def make_auto_consume_system() -> Callable[[GameState, SimContext], None]:
    def auto_consume_system(state: GameState, ctx: SimContext) -> None:
        for char in state.crew:
            maybe_auto_consume(state, char, ctx.now)

    return auto_consume_system


# --- Manual consumption ---

def consume_food(state: GameState, char_id: str, item_id: str) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    item = state.catalog.item(item_id)
    if item is None or item.food is None:
        return Outcome.fail("not food")
    if not storage_has(state, item_id):
        return Outcome.fail("not in storage")

    now = state.now()
    remove_from_storage(state, item_id)
    food = item.food
    char.needs.hunger = clamp_need(char.needs.hunger + food.hunger)
    char.needs.morale = clamp_need(char.needs.morale + food.morale)
    if food.quality == "low":
        apply_moodlet(char, moodlet("m_slop", "Ate Slop", -2, 2 * HOUR_MS, now, "Not your finest meal."))
    elif food.quality == "mid":
        apply_moodlet(char, moodlet("m_full", "Ate Okay", 0, 2 * HOUR_MS, now, "Good enough."))
    else:
        apply_moodlet(char, moodlet("m_tasty", "Ate Well", 2, 3 * HOUR_MS, now, "Actually delicious."))
    if food.raw and _roll(state, char, now, item_id) < raw_food_chance(char):
        apply_sickness(state, char, "Food Poisoning", 2 * HOUR_MS, now)

    state.push_log(f"{char.name} ate {item.name}.", "info", char.id)
    return Outcome.success()


def consume_water(state: GameState, char_id: str, item_id: str) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    item = state.catalog.item(item_id)
    if item is None or item.water is None:
        return Outcome.fail("not water")
    if not storage_has(state, item_id):
        return Outcome.fail("not in storage")

    now = state.now()
    remove_from_storage(state, item_id)
    char.needs.thirst = clamp_need(char.needs.thirst + item.water.thirst)
    if item.water.dirty:
        if _roll(state, char, now, item_id) < dirty_water_chance(char):
            apply_sickness(state, char, "Dirty Water Sickness", 3 * HOUR_MS, now)
        apply_moodlet(char, moodlet("m_grosswater", "Ugh. Dirty Water", -3, 30 * MINUTE_MS, now,
                                    "You can taste the pond."))

    state.push_log(f"{char.name} drank {item.name}.", "info", char.id)
    return Outcome.success()


def use_medical(state: GameState, char_id: str, item_id: str) -> Outcome:
    """Apply a medical item from storage. The item is only spent if it does something."""
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    item = state.catalog.item(item_id)
    if item is None or item.med is None:
        return Outcome.fail("not medical")
    if not storage_has(state, item_id):
        return Outcome.fail("not in storage")

    now = state.now()
    med = item.med
    injury = char.conditions.injury
    if med.revive and char.conditions.downed:
        revive_character(state, char, now)
        text = f"{char.name} was revived with {item.name}."
    elif med.cure_sickness and char.conditions.sickness is not None:
        char.conditions.sickness = None
        text = f"{char.name} was cured with {item.name}."
    elif med.minor_injury_reduce_mins and injury is not None and injury.severity == "minor":
        injury.ends_at = max(now, injury.ends_at - int(med.minor_injury_reduce_mins * MINUTE_MS))
        text = f"{char.name} patched up with {item.name}."
    else:
        return Outcome.fail("no effect")

    remove_from_storage(state, item_id)
    state.push_log(text, "good", char.id)
    expire_effects(state, char, now)
    return Outcome.success()
