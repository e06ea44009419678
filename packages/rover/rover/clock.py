"""VirtualClock - real time plus an adjustable offset, in milliseconds."""

from __future__ import annotations

import time
from typing import Any, Callable

TimeSource = Callable[[], int]


def wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class VirtualClock:
    def __init__(self, time_source: TimeSource | None = None, offset_ms: int = 0) -> None:
        self._source = time_source if time_source is not None else wall_clock_ms
        self._offset_ms = int(offset_ms)

    @property
    def offset_ms(self) -> int:
        return self._offset_ms

    def real_now(self) -> int:
        return int(self._source())

    def now(self) -> int:
        return self.real_now() + self._offset_ms

    def add_offset(self, ms: int) -> None:
        self._offset_ms += int(ms)

    def reset_offset(self) -> None:
        self._offset_ms = 0

    def snapshot(self) -> dict[str, Any]:
        return {"offset_ms": self._offset_ms}

    def restore(self, data: dict[str, Any]) -> None:
        self._offset_ms = int(data.get("offset_ms", 0))


class ManualTimeSource:
    """Settable time source for tests and headless replays."""

    def __init__(self, start_ms: int = 0) -> None:
        self.value = int(start_ms)

    def __call__(self) -> int:
        return self.value

    def advance(self, ms: int) -> None:
        self.value += int(ms)
