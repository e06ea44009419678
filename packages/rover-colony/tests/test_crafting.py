"""Tests for craft queues and station upgrades."""
from __future__ import annotations

import logging

from rover import ManualTimeSource
from rover_resource import load_catalog

from rover_colony import (
    CraftEntry,
    add_to_storage,
    can_craft,
    cancel_craft,
    new_game,
    simulate_to_now,
    start_craft,
    upgrade_station,
)
from rover_colony import crafting as crafting_module

CATALOG = load_catalog()
T0 = 1_700_000_000_000


def make_game():
    clock = ManualTimeSource(T0)
    state = new_game(CATALOG, time_source=clock, run_seed="crafting")
    return state, clock


class TestCanCraft:
    def test_station_level_required(self) -> None:
        state, _ = make_game()
        result = can_craft(state, CATALOG.recipes["meal_hearty"])
        assert result.reason == "Requires stove level 1"

    def test_missing_inputs(self) -> None:
        state, _ = make_game()
        result = can_craft(state, CATALOG.recipes["spear_fishing"])
        assert result.reason == "Missing: Stick"

    def test_ok(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "fiber", 3)
        assert can_craft(state, CATALOG.recipes["cordage"])


class TestStartAndCancel:
    def test_start_pays_inputs(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "fiber", 3)
        result = start_craft(state, "cordage")
        assert result
        entry = result.value
        assert "fiber" not in state.rv.storage.stacks
        assert entry.reserved_inputs == {"fiber": 3}
        assert entry.start_at == T0
        assert state.craft_queue("workbench").head() is entry

    def test_unknown_recipe(self) -> None:
        state, _ = make_game()
        assert start_craft(state, "perpetual_motion").reason == "bad recipe"

    def test_failed_start_changes_nothing(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "stick", 3)
        add_to_storage(state, "stone", 2)
        assert not start_craft(state, "spear_fishing")
        assert state.rv.storage.stacks["stick"] == 3
        assert state.rv.storage.stacks["stone"] == 2
        assert len(state.craft_queue("workbench")) == 0

    def test_cancel_refunds_inputs(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "fiber", 3)
        entry = start_craft(state, "cordage").value
        assert cancel_craft(state, "workbench", entry.id)
        assert state.rv.storage.stacks["fiber"] == 3
        assert len(state.craft_queue("workbench")) == 0

    def test_cancel_without_room_drops_and_warns(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "fiber", 3)
        entry = start_craft(state, "cordage").value
        storage = state.rv.storage
        free = storage.capacity - sum(storage.stacks.values()) - len(storage.instances)
        assert add_to_storage(state, "stick", free)
        assert cancel_craft(state, "workbench", entry.id)
        assert "fiber" not in storage.stacks
        assert "Storage full. Couldn't refund 3x Fiber/Reeds." in state.log.texts()

    def test_cancel_unknown(self) -> None:
        state, _ = make_game()
        assert cancel_craft(state, "workbench", "craft_404").reason == "empty"
        add_to_storage(state, "fiber", 3)
        start_craft(state, "cordage")
        assert cancel_craft(state, "workbench", "craft_404").reason == "not found"


class TestCraftTick:
    def test_crafts_chain_and_complete(self) -> None:
        state, clock = make_game()
        add_to_storage(state, "fiber", 8)
        first = start_craft(state, "bandage").value
        second = start_craft(state, "bandage").value
        clock.advance(241_000)
        simulate_to_now(state)
        assert state.rv.storage.stacks["bandage"] == 2
        assert second.start_at == first.start_at + 120_000
        assert len(state.craft_queue("workbench")) == 0

    def test_special_output_item(self) -> None:
        state, clock = make_game()
        add_to_storage(state, "fiber", 3)
        start_craft(state, "cordage")
        clock.advance(60_000)
        simulate_to_now(state)
        assert state.rv.storage.stacks["cordage_item"] == 1
        assert "Craft complete: Cordage." in state.log.texts()

    def test_unknown_recipe_entry_is_removed(self) -> None:
        state, clock = make_game()
        state.craft_queue("workbench").push(
            CraftEntry("craft_old", "retired_recipe", "workbench", T0, 1000), T0)
        clock.advance(2000)
        simulate_to_now(state)
        assert len(state.craft_queue("workbench")) == 0
        assert "Craft failed: missing recipe data." in state.log.texts()

    def test_output_overflow_warns(self) -> None:
        state, clock = make_game()
        add_to_storage(state, "fiber", 4)
        start_craft(state, "bandage")
        storage = state.rv.storage
        free = storage.capacity - sum(storage.stacks.values()) - len(storage.instances)
        add_to_storage(state, "stick", free)
        clock.advance(120_000)
        simulate_to_now(state)
        assert "bandage" not in storage.stacks
        assert "Storage full. Couldn't store crafted Bandage." in state.log.texts()

    def test_failed_completion_is_dropped_and_next_runs(self, monkeypatch, caplog) -> None:
        state, clock = make_game()
        add_to_storage(state, "fiber", 8)
        first = start_craft(state, "bandage").value
        start_craft(state, "bandage")
        real_resolve = crafting_module.resolve_craft
        calls = []

        def flaky_resolve(state, recipe, at=None):
            calls.append(at)
            if len(calls) == 1:
                raise RuntimeError("bad output table")
            real_resolve(state, recipe, at)

        monkeypatch.setattr(crafting_module, "resolve_craft", flaky_resolve)
        clock.advance(241_000)
        with caplog.at_level(logging.ERROR, logger="rover_colony.crafting"):
            simulate_to_now(state)

        assert len(state.craft_queue("workbench")) == 0
        assert state.rv.storage.stacks["bandage"] == 1
        error = next(e for e in state.log.query(type="warn") if e.text.startswith("Craft error"))
        assert error.text == "Craft error while completing Bandage."
        assert error.ts == first.start_at + 120_000
        assert any(r.name == "rover_colony.crafting" for r in caplog.records)


class TestUpgrade:
    def test_storage_upgrade_keeps_stock(self) -> None:
        state, _ = make_game()
        assert state.rv.storage.capacity == 60
        add_to_storage(state, "scrap_metal", 10)
        add_to_storage(state, "wiring", 3)
        before = dict(state.rv.storage.stacks)
        assert upgrade_station(state, "storage")
        assert state.rv.stations["storage"] == 1
        assert state.rv.storage.capacity == 90
        for item_id in ("ration_basic", "water_clean", "water_dirty", "bottle_empty"):
            assert state.rv.storage.stacks[item_id] == before[item_id]
        assert "scrap_metal" not in state.rv.storage.stacks
        assert "Storage upgraded to level 1." in state.log.texts()

    def test_bunks_raise_crew_cap(self) -> None:
        state, _ = make_game()
        assert state.rv.max_crew == 2
        add_to_storage(state, "fiber", 12)
        add_to_storage(state, "scrap_metal", 8)
        assert upgrade_station(state, "bunks")
        assert state.rv.max_crew == 3

    def test_rejections(self) -> None:
        state, _ = make_game()
        assert upgrade_station(state, "hot_tub").reason == "unknown station"
        assert upgrade_station(state, "storage").reason == "Missing: Scrap Metal (10)"
        state.rv.stations["stove"] = 1
        assert upgrade_station(state, "stove").reason == "maxed"

    def test_missing_part_pays_nothing(self) -> None:
        state, _ = make_game()
        add_to_storage(state, "scrap_metal", 10)
        assert not upgrade_station(state, "storage")
        assert state.rv.storage.stacks["scrap_metal"] == 10
