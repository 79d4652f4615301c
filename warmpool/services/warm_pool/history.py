"""IP allocation event history with 24 hour retention."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

logger = structlog.get_logger()

RETENTION = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class IPEvent:
    """A single allocation (+1) or deallocation (-1).

    ``in_use`` is the in-use IP count right after the event.
    """

    timestamp: datetime
    in_use: int
    op: int


class IPEventHistory:
    """Insertion-ordered IP events.

    Timestamps are not required to be monotonic, so retention cannot rely on
    evicting only from the front.
    """

    def __init__(self, retention: timedelta = RETENTION) -> None:
        self._retention = retention
        self._events: deque[IPEvent] = deque()

    @property
    def retention(self) -> timedelta:
        return self._retention

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[IPEvent]:
        return iter(self._events)

    def append(self, event: IPEvent) -> None:
        self._events.append(event)

    def snapshot(self) -> tuple[IPEvent, ...]:
        return tuple(self._events)

    def garbage_collect(self, now: datetime) -> int:
        """Drop events aged ``retention`` or more at ``now``.

        Returns:
            Number of evicted events
        """
        before = len(self._events)
        if not before:
            return 0

        survivors = [e for e in self._events if now - e.timestamp < self._retention]
        evicted = before - len(survivors)
        if evicted:
            self._events = deque(survivors)
            logger.debug(
                "warm_pool.history.garbage_collected",
                evicted=evicted,
                retained=len(survivors),
            )
        return evicted
