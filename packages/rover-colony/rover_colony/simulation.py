"""Wiring the colony systems into an Engine, and the admin time controls."""
from __future__ import annotations

from rover import Engine

from rover_colony.crafting import make_craft_system
from rover_colony.jobs import make_job_system
from rover_colony.needs import make_auto_consume_system, make_needs_drain_system
from rover_colony.state import GameState


def make_engine() -> Engine:
    """Engine running needs drain, crafts, jobs and auto-consume, in that order."""
    engine = Engine()
    engine.add_system(make_needs_drain_system())
    engine.add_system(make_craft_system())
    engine.add_system(make_job_system())
    engine.add_system(make_auto_consume_system())
    return engine


def simulate_to_now(state: GameState, engine: Engine | None = None) -> bool:
    """Catch *state* up to its virtual now. Returns False when no time has passed."""
    if engine is None:
        engine = make_engine()
    return engine.step(state)


def add_sim_time(state: GameState, ms: int) -> None:
    """Fast-forward virtual time. The next step simulates the skipped span."""
    state.clock.add_offset(ms)


def reset_sim_time(state: GameState) -> None:
    """Drop the offset. Going back in time makes the next steps no-ops until real time catches up."""
    state.clock.reset_offset()
