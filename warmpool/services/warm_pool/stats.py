"""Statistics over IP allocation history.

Pure functions: they never mutate the events they are given.

Canonical definitions used throughout the warm pool:
- standard deviation is the sample form (divides by n - 1)
- p75 picks index round((n - 1) * 0.75) of the sorted values
- rounding is half away from zero (2.5 -> 3, -0.5 -> -1)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from warmpool.services.warm_pool.history import IPEvent
from warmpool.utils.datetime import truncate_hour

HISTOGRAM_HOURS = 24


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def net_change_over(events: Iterable[IPEvent], start: datetime, end: datetime) -> int:
    """Net IP requests for events in ``[start, end)``."""
    return sum(e.op for e in events if start <= e.timestamp < end)


def hourly_net_changes(
    events: Sequence[IPEvent],
    now: datetime,
    hours: int = HISTOGRAM_HOURS,
) -> list[int]:
    """Net IP requests per clock hour, most recent first.

    Index 0 is the current (partial) clock hour, index ``i`` the hour that
    started ``i`` hours before it.
    """
    current = truncate_hour(now)
    net_arr = []
    for i in range(hours):
        start = current - timedelta(hours=i)
        end = current - timedelta(hours=i - 1)
        net_arr.append(net_change_over(events, start, end))
    return net_arr


def max_over(events: Iterable[IPEvent], start: datetime, end: datetime) -> int:
    """Peak cumulative net requests over the trailing window ``(end, start]``.

    Events are replayed in timestamp order; the result is never below 0.
    """
    ordered = sorted(events, key=lambda e: e.timestamp)
    cur_max = 0
    running = 0
    for event in ordered:
        if end < event.timestamp <= start:
            running += event.op
            cur_max = max(running, cur_max)
    return cur_max


def average(values: Sequence[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def percentile75(values: Sequence[int]) -> int:
    if not values:
        return 0
    ordered = sorted(values)
    return ordered[round_half_away((len(ordered) - 1) * 0.75)]


def standard_deviation(values: Sequence[int]) -> float:
    """Sample standard deviation; 0 for fewer than two values."""
    n = len(values)
    if n <= 1:
        return 0.0
    avg = average(values)
    squares = sum((v - avg) ** 2 for v in values)
    return math.sqrt(squares / (n - 1))
