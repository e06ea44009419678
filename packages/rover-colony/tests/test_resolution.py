"""Tests for job resolution."""
from __future__ import annotations

import copy
import json

import pytest

from rover import ManualTimeSource
from rover_atlas import Tile
from rover_resource import DEFAULT_DATA, Catalog, load_catalog

from rover_colony import (
    Explore,
    JobEntry,
    add_to_storage,
    apply_injury,
    apply_sickness,
    new_game,
    resolve_job,
    restore,
    roll_yields,
    simulate_to_now,
    snapshot,
    start_job,
)
from rover_colony.conditions import HOUR_MS
from rover_colony.crew import tool_for
from rover_colony.resolution import (
    Multipliers,
    _resolve_explore,
    _roll_risks,
    _wear_tool,
    check_tutorial,
    compute_multipliers,
    danger_score,
)

CATALOG = load_catalog()
T0 = 1_700_000_000_000


def make_game(catalog: Catalog = CATALOG):
    clock = ManualTimeSource(T0)
    state = new_game(catalog, time_source=clock, run_seed="resolution")
    return state, clock


def entry_for(job_id: str, duration_ms: int = 600_000, entry_id: str = "job_t") -> JobEntry:
    return JobEntry(id=entry_id, job_id=job_id, pace="normal", created_at=T0,
                    duration_ms=duration_ms, start_at=T0)


class TestMultipliers:
    def test_baseline_player(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        mults = compute_multipliers(state, char, CATALOG.jobs["forage"], "normal", "cutting")
        assert mults.tool_tier == 0
        assert mults.yield_ == pytest.approx(1 + 2 * 0.04)
        assert mults.risk == pytest.approx(1 - 0.05 * 0.6)

    def test_conditions_raise_risk_additively(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        apply_sickness(state, char, "Flu", HOUR_MS, T0)
        apply_injury(state, char, "major", "Broken Leg", HOUR_MS, T0)
        mults = compute_multipliers(state, char, CATALOG.jobs["forage"], "safe", "cutting")
        assert mults.risk == pytest.approx(0.75 * (1 - 0.05 * 0.6) * (1 + 0.20 + 0.35))

    def test_morale_penalty_lowers_yield(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        apply_sickness(state, char, "Flu", HOUR_MS, T0)
        mults = compute_multipliers(state, char, CATALOG.jobs["forage"], "normal", "cutting")
        assert mults.yield_ == pytest.approx(1.08 * (1 - 10 * 0.002))

    def test_tier_without_matching_tool(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        gather = CATALOG.jobs["gather_water"]
        assert compute_multipliers(state, char, gather, "normal", None).tool_tier == 1
        fish = CATALOG.jobs["fish"]
        assert compute_multipliers(state, char, fish, "normal", "fishing", tool_ok=False).tool_tier == 0
        assert compute_multipliers(state, char, fish, "normal", "fishing", tool_ok=True).tool_tier == 1


class TestRollYields:
    def test_biome_multiplier_ceils_before_yield_floor(self) -> None:
        data = copy.deepcopy(DEFAULT_DATA)
        data["biomes"][0]["yieldMult"] = {"stick": 1.5}
        catalog = Catalog.from_data(data)
        state, _ = make_game(catalog)
        tile = Tile("tile_x", "wild_forest", T0)
        gained = roll_yields(state, state.crew[0], catalog.jobs["forage"].yields, tile,
                             1.5, lambda: 0.0, T0)
        # stick: 2 -> ceil(3.0) = 3 -> floor(4.5) = 4; stone: 1 -> floor(1.5) = 1; fiber: 0
        assert gained == [("stick", 4), ("stone", 1)]
        assert state.rv.storage.stacks["stick"] == 4

    def test_storage_full_keeps_earlier_yields(self) -> None:
        state, _ = make_game()
        storage = state.rv.storage
        storage.capacity = sum(storage.stacks.values()) + len(storage.instances) + 2
        tile = Tile("tile_x", "wild_forest", T0)
        gained = roll_yields(state, state.crew[0], CATALOG.jobs["forage"].yields, tile,
                             1.0, lambda: 0.0, T0)
        assert gained == [("stick", 2)]
        assert "stone" not in storage.stacks
        assert state.log.last().type == "warn"

    def test_high_roll_takes_max(self) -> None:
        state, _ = make_game()
        tile = Tile("tile_x", "wild_forest", T0)
        gained = roll_yields(state, state.crew[0], CATALOG.jobs["fish"].yields, tile,
                             1.0, lambda: 0.99, T0)
        assert ("fish_raw", 3) in gained


class TestResolveJob:
    def test_strenuous_strain_and_xp(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        resolve_job(state, char, entry_for("hunt"), T0 + 600_000)
        assert char.needs.hunger == pytest.approx(80 - 0.25 * 10 * 1.8)
        assert char.needs.thirst == pytest.approx(80 - 0.35 * 10 * 1.8)
        assert char.xp["Wilderness"] == 30
        assert "Rover finished Hunt." in state.log.texts()

    def test_unknown_job_is_a_logged_no_op(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        resolve_job(state, char, entry_for("retired_job"), T0)
        assert state.log.last().text == "Dropped unknown job retired_job."
        assert char.needs.hunger == 80

    def test_loot_raises_morale(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        resolve_job(state, char, entry_for("forage"), T0 + 600_000)
        assert state.rv.storage.stacks["stick"] >= 2
        assert char.needs.morale == 71

    def test_acting_tile_is_discovered(self) -> None:
        state, _ = make_game()
        resolve_job(state, state.crew[0], entry_for("forage"), T0 + 600_000)
        assert state.meta.last_tile_id in state.tiles

    def test_same_state_same_outcome(self) -> None:
        state, clock = make_game()
        start_job(state, "player_1", "scavenge")
        start_job(state, "player_1", "hunt")
        data = json.loads(json.dumps(snapshot(state)))

        results = []
        for _ in range(2):
            source = ManualTimeSource(T0)
            copy_state = restore(data, CATALOG, time_source=source)
            source.advance(3 * HOUR_MS)
            simulate_to_now(copy_state)
            results.append(snapshot(copy_state))
        assert results[0] == results[1]


def scripted(*values: float):
    """A random source that returns *values* in order and fails if overdrawn."""
    rolls = iter(values)
    return lambda: next(rolls)


class TestRisks:
    def test_major_injury_skips_minor_roll(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _roll_risks(state, char, CATALOG.jobs["forage"], 1.0, scripted(0.0, 0.99), T0)
        injury = char.conditions.injury
        assert injury.severity == "major"
        assert injury.name == "Broken Leg"
        assert injury.ends_at == T0 + 8 * HOUR_MS
        assert char.conditions.sickness is None

    def test_minor_injury_when_major_misses(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _roll_risks(state, char, CATALOG.jobs["forage"], 1.0, scripted(0.99, 0.0, 0.99), T0)
        injury = char.conditions.injury
        assert injury.severity == "minor"
        assert injury.name == "Sprained Ankle"
        assert injury.ends_at == T0 + 2 * HOUR_MS

    def test_injured_character_only_rolls_sickness(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        apply_injury(state, char, "minor", "Sprained Ankle", HOUR_MS, T0)
        _roll_risks(state, char, CATALOG.jobs["scavenge"], 1.0, scripted(0.0), T0)
        assert char.conditions.injury.name == "Sprained Ankle"
        assert char.conditions.sickness.name == "Ruin Dust Fever"
        assert char.conditions.sickness.ends_at == T0 + 3 * HOUR_MS

    def test_chances_are_capped(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _roll_risks(state, char, CATALOG.jobs["forage"], 1000.0, scripted(0.36, 0.59, 0.99), T0)
        assert char.conditions.injury.severity == "minor"

    def test_nothing_on_high_rolls(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _roll_risks(state, char, CATALOG.jobs["scavenge"], 1.0, scripted(0.99, 0.99, 0.99), T0)
        assert char.conditions.injury is None
        assert char.conditions.sickness is None


class TestExplore:
    def explore(self):
        return Explore("forage", "N", [("ration_basic", 1), ("water_clean", 1)])

    def test_success_rolls_action_yields(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        variant = self.explore()
        tile = Tile("tile_x", "wild_forest", T0)
        # success, stick, stone, fiber, extra injury
        rand = scripted(0.0, 0.0, 0.0, 0.0, 0.99)
        gained = _resolve_explore(state, char, variant, tile, Multipliers(1.0, 1.0, 0), rand, T0)
        # Grit 2 -> 1.12x: stick floor(2 * 1.12) = 2, stone floor(1.12) = 1
        assert gained == [("stick", 2), ("stone", 1)]
        assert variant.rations_reserved == []
        assert "Rover explored and returned with loot." in state.log.texts()
        assert char.conditions.injury is None

    def test_failure_can_still_injure(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        variant = self.explore()
        tile = Tile("tile_x", "wild_forest", T0)
        gained = _resolve_explore(state, char, variant, tile, Multipliers(1.0, 1.0, 0),
                                  scripted(0.99, 0.0), T0)
        assert gained == []
        assert variant.rations_reserved == []
        assert "Rover explored but found nothing useful." in state.log.texts()
        assert char.conditions.injury.name == "Sprained Ankle"

    def test_extra_injury_skipped_when_already_hurt(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        apply_injury(state, char, "major", "Broken Leg", HOUR_MS, T0)
        tile = Tile("tile_x", "wild_forest", T0)
        _resolve_explore(state, char, self.explore(), tile, Multipliers(1.0, 1.0, 0),
                         scripted(0.99, 0.0), T0)
        assert char.conditions.injury.name == "Broken Leg"


class TestToolWear:
    def test_wear_reduces_durability(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _, knife = tool_for(state, char, "cutting")
        _wear_tool(state, char, CATALOG.jobs["forage"], "cutting", "normal", 1.0, scripted(0.0), T0)
        # (2 + power 1) * normal risk 1.0
        assert knife.durability == 57

    def test_push_pace_wears_harder(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _, knife = tool_for(state, char, "cutting")
        _wear_tool(state, char, CATALOG.jobs["forage"], "cutting", "push", 1.0, scripted(0.0), T0)
        # round(3 * 1.35) = 4
        assert knife.durability == 56

    def test_missed_roll_leaves_tool(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _, knife = tool_for(state, char, "cutting")
        _wear_tool(state, char, CATALOG.jobs["forage"], "cutting", "normal", 1.0, scripted(0.99), T0)
        assert knife.durability == 60

    def test_break_stays_equipped_at_zero(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _, knife = tool_for(state, char, "cutting")
        knife.durability = 2
        _wear_tool(state, char, CATALOG.jobs["forage"], "cutting", "normal", 1.0, scripted(0.0), T0)
        assert knife.durability == 0
        assert char.equipment["mainHand"] == knife.uid
        assert "Rover's Pocket Knife broke!" in state.log.texts()
        assert any(m.id == "m_brokentool" and m.morale_delta == -6 for m in char.moodlets)

    def test_no_matching_tool_no_roll(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        _wear_tool(state, char, CATALOG.jobs["fish"], "fishing", "normal", 1.0, scripted(), T0)
        assert tool_for(state, char, "cutting")[1].durability == 60


class TestDanger:
    def test_score(self) -> None:
        state, _ = make_game()
        char = state.crew[0]
        assert danger_score(char) == 0
        char.needs.hunger = 5
        char.needs.thirst = 5
        apply_injury(state, char, "major", "Broken Leg", HOUR_MS, T0)
        assert danger_score(char) == 4
        apply_sickness(state, char, "Flu", HOUR_MS, T0)
        assert danger_score(char) == 5


class TestTutorial:
    def test_completes_once_all_three_tools_owned(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "spear_fishing", 1)
        add_to_storage(state, "trap_simple", 1)
        assert check_tutorial(state, T0) is False
        add_to_storage(state, "hatchet_stone", 1)
        assert check_tutorial(state, T0) is True
        assert state.meta.tutorial_done
        assert state.log.last().text == "Tutorial complete. You're on your own now (mostly)."
        assert check_tutorial(state, T0) is False
