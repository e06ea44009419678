"""Tests for moodlets, conditions, downed state and level-ups."""
from __future__ import annotations

import pytest

from rover import ManualTimeSource
from rover_resource import load_catalog

from rover_colony import (
    add_to_storage,
    apply_injury,
    apply_moodlet,
    apply_sickness,
    down_character,
    expire_effects,
    new_game,
    revive_character,
)
from rover_colony.conditions import (
    HOUR_MS,
    MAX_LEVEL_UPS,
    clamp_need,
    effective_skill,
    morale_modifier,
    moodlet,
    process_level_ups,
    xp_to_next,
)

CATALOG = load_catalog()
T0 = 1_700_000_000_000


def make_game():
    clock = ManualTimeSource(T0)
    state = new_game(CATALOG, time_source=clock, run_seed="conditions")
    return state, state.crew[0]


class TestMoodlets:
    def test_same_id_replaces(self) -> None:
        _, char = make_game()
        apply_moodlet(char, moodlet("m_x", "X", -3, HOUR_MS, T0))
        apply_moodlet(char, moodlet("m_x", "X", -7, HOUR_MS, T0))
        assert len(char.moodlets) == 1
        assert char.moodlets[0].morale_delta == -7

    def test_morale_modifier_sums_everything(self) -> None:
        state, char = make_game()
        apply_moodlet(char, moodlet("m_slop", "Ate Slop", -6, HOUR_MS, T0))
        apply_moodlet(char, moodlet("m_hearty", "Hearty", 10, HOUR_MS, T0))
        apply_sickness(state, char, "Flu", HOUR_MS, T0)
        apply_injury(state, char, "minor", "Sprain", HOUR_MS, T0)
        assert morale_modifier(char) == -6 + 10 - 10 - 5

    def test_major_injury_and_downed_penalties(self) -> None:
        state, char = make_game()
        apply_injury(state, char, "major", "Broken Leg", HOUR_MS, T0)
        char.conditions.downed = True
        assert morale_modifier(char) == -15 - 50


class TestConditions:
    def test_bad_severity_raises(self) -> None:
        state, char = make_game()
        with pytest.raises(ValueError):
            apply_injury(state, char, "mild", "Scratch", HOUR_MS, T0)

    def test_expire_effects(self) -> None:
        state, char = make_game()
        apply_moodlet(char, moodlet("m_short", "Short", -1, 1000, T0))
        apply_moodlet(char, moodlet("m_long", "Long", -1, HOUR_MS, T0))
        apply_sickness(state, char, "Flu", 2000, T0)
        apply_injury(state, char, "minor", "Sprain", HOUR_MS, T0)

        expire_effects(state, char, T0 + 2000)
        assert [m.id for m in char.moodlets] == ["m_long"]
        assert char.conditions.sickness is None
        assert char.conditions.injury is not None
        assert "Rover recovered from sickness." in state.log.texts()

    def test_sickness_logs(self) -> None:
        state, char = make_game()
        apply_sickness(state, char, "Food Poisoning", HOUR_MS, T0)
        assert char.conditions.sickness.name == "Food Poisoning"
        assert char.conditions.sickness.ends_at == T0 + HOUR_MS
        assert state.log.last().type == "bad"

    def test_clamp_need(self) -> None:
        assert clamp_need(-5) == 0
        assert clamp_need(150) == 100
        assert clamp_need(42.5) == 42.5


class TestDowned:
    def test_down_without_revive_item(self) -> None:
        state, char = make_game()
        down_character(state, char, T0)
        assert char.downed
        assert "Rover is DOWNED!" in state.log.texts()

    def test_revive_item_used_immediately(self) -> None:
        state, char = make_game()
        add_to_storage(state, "revive_serum", 1)
        char.needs.health = 5
        down_character(state, char, T0)
        assert not char.downed
        assert char.needs.health == 60
        assert state.rv.storage.stacks.get("revive_serum", 0) == 0
        assert any(m.id == "m_revived" for m in char.moodlets)

    def test_revive_only_when_downed(self) -> None:
        state, char = make_game()
        assert revive_character(state, char, T0) is False
        char.conditions.downed = True
        assert revive_character(state, char, T0) is True
        assert not char.downed


class TestProgression:
    def test_xp_curve(self) -> None:
        assert xp_to_next(0) == 100
        assert xp_to_next(1) == 135
        assert xp_to_next(2) == 182

    def test_effective_skill_counts_banked_xp(self) -> None:
        _, char = make_game()
        char.stats["Cooking"] = 1
        char.xp["Cooking"] = 250
        assert effective_skill(char, "Cooking") == 3

    def test_level_ups_carry_remainder(self) -> None:
        state, char = make_game()
        char.stats["Medical"] = 0
        char.xp["Medical"] = 240
        assert process_level_ups(state, char, T0) == [("Medical", 2)]
        assert char.stats["Medical"] == 2
        assert char.xp["Medical"] == 5

    def test_level_ups_capped_per_call(self) -> None:
        state, char = make_game()
        char.stats["Cooking"] = 0
        char.xp["Cooking"] = 10 ** 9
        process_level_ups(state, char, T0)
        assert char.stats["Cooking"] == MAX_LEVEL_UPS
