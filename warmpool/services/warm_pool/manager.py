"""DynamicWarmPoolManager - adaptive warm IP target.

Tracks the in-use IP count and a 24 hour allocation history, and turns that
history into a warm IP target (see ``policy`` for the folding rule).

Burst is the net change over the most recent hour. With a live history that
is a rolling ``[now - 1h, now)`` window; when a histogram is injected its
head element stands in for it, so the result depends on the array only.

Thread-safe: history and in-use count are guarded by an internal lock.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from warmpool.services.warm_pool import stats
from warmpool.services.warm_pool.history import IPEvent, IPEventHistory
from warmpool.services.warm_pool.policy import (
    DEFAULT_MIN_TARGET,
    DEFAULT_STDDEV_THRESHOLD,
    compute_warm_target,
)
from warmpool.utils.datetime import Clock, SystemClock, ensure_utc

if TYPE_CHECKING:
    from warmpool.config import WarmPoolConfig

logger = structlog.get_logger()

BURST_WINDOW = timedelta(hours=1)


class DynamicWarmPoolManager:
    """Keeps an IP allocation history and computes the warm IP target.

    Usage:
        manager = DynamicWarmPoolManager(in_use=assigned_ips)

        manager.record_allocation()
        manager.record_deallocation()

        target = manager.get_warm_target()
    """

    def __init__(
        self,
        in_use: int = 0,
        *,
        clock: Clock | None = None,
        config: "WarmPoolConfig | None" = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._min_target = config.min_target if config else DEFAULT_MIN_TARGET
        self._stddev_threshold = (
            config.stddev_threshold if config else DEFAULT_STDDEV_THRESHOLD
        )
        self._log = logger.bind(service="dynamic_warm_pool")
        self._lock = threading.RLock()

        if in_use < 0:
            self._log.warning("warm_pool.initial_in_use_clamped", in_use=in_use)
            in_use = 0

        self._in_use = in_use
        self._history = IPEventHistory()
        self._last_garbage_collect = self._now()

    @property
    def in_use(self) -> int:
        return self._in_use

    @property
    def history(self) -> tuple[IPEvent, ...]:
        """Read-only snapshot of the retained events, in insertion order."""
        with self._lock:
            return self._history.snapshot()

    @property
    def last_garbage_collect(self) -> datetime:
        return self._last_garbage_collect

    def __len__(self) -> int:
        return len(self._history)

    def _now(self) -> datetime:
        return ensure_utc(self._clock.now())

    def _resolve(self, timestamp: datetime | None) -> datetime:
        if timestamp is None:
            return self._now()
        return ensure_utc(timestamp)

    # ---- Event log ----

    def record_allocation(self, timestamp: datetime | None = None) -> None:
        """Record a successful IP assignment."""
        ts = self._resolve(timestamp)
        with self._lock:
            self._in_use += 1
            self._history.append(IPEvent(timestamp=ts, in_use=self._in_use, op=1))
            self._history.garbage_collect(self._now())
        self._log.debug("warm_pool.allocation_recorded", in_use=self._in_use)

    def record_deallocation(self, timestamp: datetime | None = None) -> None:
        """Record a successful IP release. The in-use count never drops below 0."""
        ts = self._resolve(timestamp)
        with self._lock:
            self._in_use = max(self._in_use - 1, 0)
            self._history.append(IPEvent(timestamp=ts, in_use=self._in_use, op=-1))
            self._history.garbage_collect(self._now())
        self._log.debug("warm_pool.deallocation_recorded", in_use=self._in_use)

    def garbage_collect(self) -> int:
        """Forget events older than 24 hours. Returns the number evicted."""
        with self._lock:
            return self._history.garbage_collect(self._now())

    # ---- Statistics ----

    def net_change_over(self, start: datetime, end: datetime) -> int:
        """Net IP requests in ``[start, end)``."""
        with self._lock:
            return stats.net_change_over(self._history, ensure_utc(start), ensure_utc(end))

    def max_over(self, start: datetime, end: datetime) -> int:
        """Peak cumulative net requests in the trailing window ``(end, start]``."""
        with self._lock:
            return stats.max_over(self._history, ensure_utc(start), ensure_utc(end))

    def net_change_over_history(self) -> list[int]:
        """Net IP requests per hour over the past 24 hours, most recent first."""
        with self._lock:
            now = self._now()
            # Amortized cleanup for nodes that saw no events for a day
            if now - self._last_garbage_collect > self._history.retention:
                self._history.garbage_collect(now)
                self._last_garbage_collect = now
            return stats.hourly_net_changes(self._history.snapshot(), now)

    def check_for_bursts(self) -> int:
        """Net IP requests over the past hour."""
        now = self._now()
        return self.net_change_over(now - BURST_WINDOW, now)

    # ---- Decision ----

    def get_warm_target(self, net_arr: Sequence[int] | None = None) -> int:
        """Compute the warm IP target.

        Args:
            net_arr: Injected hourly net histogram, most recent first. Only
                meant for tests; production callers omit it.

        Returns:
            Warm IP target, never below the configured floor
        """
        if net_arr is None:
            net_arr = self.net_change_over_history()
            burst = self.check_for_bursts()
        else:
            net_arr = list(net_arr)
            burst = net_arr[0] if net_arr else 0

        decision = compute_warm_target(
            net_arr,
            burst,
            min_target=self._min_target,
            stddev_threshold=self._stddev_threshold,
        )

        self._log.debug(
            "warm_pool.target.computed",
            target=decision.target,
            average=decision.average,
            std_dev=decision.std_dev,
            p75=decision.p75,
            burst=decision.burst,
            net_history=net_arr,
        )
        return decision.target
