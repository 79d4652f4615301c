"""Warm IP target decision policy.

The target is folded in a fixed order:

1. Round the standard deviation and average of the hourly net histogram
2. Start from stddev + average
3. If stddev exceeds the threshold, take at least the histogram p75
4. Take at least the recent burst
5. Take at least the configured floor
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from warmpool.services.warm_pool.stats import (
    average,
    percentile75,
    round_half_away,
    standard_deviation,
)

DEFAULT_MIN_TARGET = 2
DEFAULT_STDDEV_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class WarmTargetDecision:
    """Inputs and result of one warm target computation."""

    average: int
    std_dev: int
    p75: int
    burst: int
    target: int


def compute_warm_target(
    net_arr: Sequence[int],
    burst: int,
    *,
    min_target: int = DEFAULT_MIN_TARGET,
    stddev_threshold: int = DEFAULT_STDDEV_THRESHOLD,
) -> WarmTargetDecision:
    """Fold histogram statistics and the burst value into a warm target."""
    std_dev = round_half_away(standard_deviation(net_arr))
    avg = round_half_away(average(net_arr))
    p75 = percentile75(net_arr)

    target = std_dev + avg
    if std_dev > stddev_threshold:
        target = max(target, p75)
    target = max(target, burst)
    target = max(target, min_target)

    return WarmTargetDecision(
        average=avg,
        std_dev=std_dev,
        p75=p75,
        burst=burst,
        target=target,
    )
