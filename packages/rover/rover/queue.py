"""TimedQueue - FIFO of timed entries that chain back to back."""
from __future__ import annotations

from collections import deque
from typing import Generic, Iterator, Protocol, TypeVar


class TimedEntry(Protocol):
    id: str
    start_at: int | None
    duration_ms: int


E = TypeVar("E", bound=TimedEntry)


def ends_at(entry: TimedEntry) -> int | None:
    if entry.start_at is None:
        return None
    return entry.start_at + entry.duration_ms


class TimedQueue(Generic[E]):
    """Ordered queue where only the head runs.

    The head is stamped when it starts; when it completes, the next head
    starts at the previous entry's end time, so consecutive entries never
    leave gaps or overlap regardless of how coarsely time is advanced.
    """

    def __init__(self, entries: list[E] | None = None) -> None:
        self._entries: deque[E] = deque(entries or ())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._entries))

    def __bool__(self) -> bool:
        return bool(self._entries)

    def head(self) -> E | None:
        return self._entries[0] if self._entries else None

    def get(self, entry_id: str) -> E | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def push(self, entry: E, now: int) -> None:
        """Append at the tail. An entry pushed onto an empty queue starts at *now*."""
        if not self._entries and entry.start_at is None:
            entry.start_at = now
        self._entries.append(entry)

    def start_head(self, now: int) -> None:
        head = self.head()
        if head is not None and head.start_at is None:
            head.start_at = now

    def pop_due(self, now: int) -> Iterator[E]:
        """Yield each entry whose end time is <= *now*, removing it first.

        The consumer may push new entries while iterating; they are
        considered on the next loop iteration.
        """
        while self._entries:
            head = self._entries[0]
            end = ends_at(head)
            if end is None or end > now:
                return
            self._entries.popleft()
            if self._entries:
                self._entries[0].start_at = end
            yield head

    def remove(self, entry_id: str, now: int) -> tuple[E, int] | None:
        """Remove an entry by id. Returns ``(entry, index)`` or None.

        Removing the running head starts the new head at *now*.
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                if index == 0:
                    self.start_head(now)
                return entry, index
        return None

    def clear(self) -> list[E]:
        removed = list(self._entries)
        self._entries.clear()
        return removed
