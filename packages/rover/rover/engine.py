"""Engine - catch-up step over registered systems."""

from __future__ import annotations

from typing import Any, Callable

from rover.types import SimContext, Simulated


class Engine:
    """Runs systems in registration order over whatever virtual time has
    passed since the state's last step.

    One ``step`` after a long absence and many small steps over the same
    span go through the same code path; the engine keeps no state of its
    own between steps.
    """

    def __init__(self) -> None:
        self._systems: list[Callable[[Any, SimContext], None]] = []
        self._after_hooks: list[Callable[[Any, SimContext], None]] = []

    @property
    def systems(self) -> list[Callable[[Any, SimContext], None]]:
        return list(self._systems)

    def add_system(self, system: Callable[[Any, SimContext], None]) -> None:
        self._systems.append(system)

    def on_step(self, hook: Callable[[Any, SimContext], None]) -> None:
        """Register a hook that runs after a step has fully applied."""
        self._after_hooks.append(hook)

    def step(self, state: Simulated) -> bool:
        """Simulate *state* up to its virtual now. Returns False on no-op.

        A non-positive elapsed span (clock skew, offset reduced) does
        nothing. ``last_sim_at`` only moves once every system has run.
        """
        now = state.now()
        last = state.last_sim_at
        elapsed = now - last
        if elapsed <= 0:
            return False

        ctx = SimContext(now=now, elapsed_ms=elapsed, last_sim_at=last)
        for system in self._systems:
            system(state, ctx)
        state.last_sim_at = now

        for hook in self._after_hooks:
            hook(state, ctx)
        return True

    def run_until(self, state: Simulated, clock_advance: Callable[[int], None],
                  total_ms: int, step_ms: int) -> int:
        """Advance a manual time source in *step_ms* increments, stepping each time.

        Returns the number of steps that did work.
        """
        if step_ms <= 0:
            raise ValueError("step_ms must be positive")
        steps = 0
        remaining = total_ms
        while remaining > 0:
            delta = min(step_ms, remaining)
            clock_advance(delta)
            remaining -= delta
            if self.step(state):
                steps += 1
        return steps
