from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

LOG_TYPES = ("info", "good", "bad", "warn", "system")


@dataclass
class LogEntry:
    ts: int
    text: str
    type: str = "info"
    actor_id: str | None = None


class EventLog:
    """Capped, ordered, human-readable log with a severity tag per line."""

    def __init__(self, max_entries: int = 600) -> None:
        self._max = max_entries
        maxlen = max_entries if max_entries > 0 else None
        self._entries: deque[LogEntry] = deque(maxlen=maxlen)

    @property
    def max_entries(self) -> int:
        return self._max

    def push(self, ts: int, text: str, type: str = "info",
             actor_id: str | None = None) -> LogEntry:
        if type not in LOG_TYPES:
            raise ValueError(f"unknown log type {type!r}")
        entry = LogEntry(ts=ts, text=text, type=type, actor_id=actor_id)
        self._entries.append(entry)
        return entry

    def query(self, type: str | None = None, actor_id: str | None = None,
              after: int | None = None) -> list[LogEntry]:
        result: list[LogEntry] = list(self._entries)
        if type is not None:
            result = [e for e in result if e.type == type]
        if actor_id is not None:
            result = [e for e in result if e.actor_id == actor_id]
        if after is not None:
            result = [e for e in result if e.ts > after]
        return result

    def last(self, type: str | None = None) -> LogEntry | None:
        for e in reversed(self._entries):
            if type is None or e.type == type:
                return e
        return None

    def texts(self) -> list[str]:
        return [e.text for e in self._entries]

    def snapshot(self) -> list[dict[str, Any]]:
        return [{"ts": e.ts, "text": e.text, "type": e.type, "actor_id": e.actor_id}
                for e in self._entries]

    def restore(self, data: list[dict[str, Any]]) -> None:
        self._entries.clear()
        for d in data:
            self._entries.append(LogEntry(ts=d["ts"], text=d["text"],
                                          type=d.get("type", "info"),
                                          actor_id=d.get("actor_id")))

    def __len__(self) -> int:
        return len(self._entries)
