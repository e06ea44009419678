"""rover-colony - Crew survival simulation built on the rover engine."""
from __future__ import annotations

# State and configuration
from rover_colony.config import SimConfig
from rover_colony.entries import CraftEntry, Explore, GatherWater, JobEntry, JobVariant, NormalJob
from rover_colony.state import (
    SKILLS,
    Character,
    Condition,
    Conditions,
    GameState,
    Meta,
    Moodlet,
    Needs,
    Rv,
    recompute_derived_stats,
)
from rover_colony.pace import PACES, Pace, pace_multipliers

# System factories
from rover_colony.needs import make_auto_consume_system, make_needs_drain_system
from rover_colony.jobs import make_job_system
from rover_colony.crafting import make_craft_system
from rover_colony.simulation import add_sim_time, make_engine, reset_sim_time, simulate_to_now

# Operations
from rover_colony.crew import (
    accept_encounter,
    can_recruit,
    equip,
    new_game,
    recruit_npc,
    transfer_instance_to_pockets,
    transfer_instance_to_storage,
    transfer_to_pockets,
    transfer_to_storage,
    unequip,
)
from rover_colony.jobs import (
    cancel_job,
    clear_jobs,
    list_available_jobs,
    queue_explore,
    queue_gather_water,
    set_idle_behavior,
    start_job,
)
from rover_colony.crafting import can_craft, cancel_craft, resolve_craft, start_craft, upgrade_station
from rover_colony.resolution import resolve_job, roll_yields
from rover_colony.needs import consume_food, consume_water, maybe_auto_consume, use_medical
from rover_colony.conditions import (
    apply_injury,
    apply_moodlet,
    apply_sickness,
    down_character,
    expire_effects,
    revive_character,
)
from rover_colony.storage import add_to_storage, remove_from_storage, set_ration_allowed
from rover_colony.world import discover_tile, set_location

# Persistence
from rover_colony.snapshot import SNAPSHOT_VERSION, restore, snapshot

__all__ = [
    "SimConfig",
    "CraftEntry", "Explore", "GatherWater", "JobEntry", "JobVariant", "NormalJob",
    "SKILLS", "Character", "Condition", "Conditions", "GameState", "Meta", "Moodlet", "Needs", "Rv",
    "recompute_derived_stats",
    "PACES", "Pace", "pace_multipliers",
    "make_auto_consume_system", "make_needs_drain_system", "make_job_system", "make_craft_system",
    "add_sim_time", "make_engine", "reset_sim_time", "simulate_to_now",
    "accept_encounter", "can_recruit", "equip", "new_game", "recruit_npc",
    "transfer_instance_to_pockets", "transfer_instance_to_storage",
    "transfer_to_pockets", "transfer_to_storage", "unequip",
    "cancel_job", "clear_jobs", "list_available_jobs", "queue_explore", "queue_gather_water",
    "set_idle_behavior", "start_job",
    "can_craft", "cancel_craft", "resolve_craft", "start_craft", "upgrade_station",
    "resolve_job", "roll_yields",
    "consume_food", "consume_water", "maybe_auto_consume", "use_medical",
    "apply_injury", "apply_moodlet", "apply_sickness", "down_character", "expire_effects",
    "revive_character",
    "add_to_storage", "remove_from_storage", "set_ration_allowed",
    "discover_tile", "set_location",
    "SNAPSHOT_VERSION", "restore", "snapshot",
]
