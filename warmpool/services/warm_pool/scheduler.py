"""WarmTargetScheduler - periodic warm target computation.

Responsibilities:
1. Periodically ask the manager for a warm IP target
2. Hand the target to the owning resource manager (``on_target``)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from warmpool.config import WarmPoolConfig
    from warmpool.services.warm_pool.manager import DynamicWarmPoolManager

logger = structlog.get_logger()

TargetSink = Callable[[int], Awaitable[None]]


class WarmTargetScheduler:
    """Scheduler for warm target refresh.

    Every ``interval_seconds`` computes the warm IP target and delivers it to
    ``on_target``. Sink failures are logged and do not stop the loop.
    """

    def __init__(
        self,
        manager: "DynamicWarmPoolManager",
        config: "WarmPoolConfig",
        on_target: TargetSink,
    ) -> None:
        self._manager = manager
        self._config = config
        self._on_target = on_target
        self._log = logger.bind(service="warm_target_scheduler")

        self._running = False
        self._task: asyncio.Task | None = None
        self._run_lock = asyncio.Lock()
        self._last_target: int | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_target(self) -> int | None:
        """Most recently delivered target, None before the first cycle."""
        return self._last_target

    async def start(self) -> None:
        """Start background refresh loop."""
        if self._running:
            self._log.warning("warm_target_scheduler.already_running")
            return

        self._running = True
        self._task = asyncio.create_task(
            self._background_loop(),
            name="warm-target-scheduler",
        )
        self._log.info(
            "warm_target_scheduler.started",
            interval_seconds=self._config.interval_seconds,
        )

    async def stop(self) -> None:
        """Stop background refresh loop gracefully."""
        if not self._running:
            return

        self._log.info("warm_target_scheduler.stopping")
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._log.info("warm_target_scheduler.stopped")

    async def run_once(self) -> int:
        """Compute and deliver one warm target.

        Returns:
            The computed target
        """
        async with self._run_lock:
            target = self._manager.get_warm_target()

            if target != self._last_target:
                self._log.info(
                    "warm_pool.target.changed",
                    previous=self._last_target,
                    target=target,
                    in_use=self._manager.in_use,
                )
            self._last_target = target

            await self._on_target(target)
            return target

    async def _background_loop(self) -> None:
        """Internal background loop.

        Note:
        - If run_on_startup is enabled, lifecycle already executed one cycle.
          Sleep before the first loop cycle to avoid an immediate duplicate.
        """
        first_iteration = True

        while self._running:
            should_sleep = (first_iteration and self._config.run_on_startup) or (
                not first_iteration
            )
            if should_sleep:
                try:
                    await asyncio.sleep(self._config.interval_seconds)
                except asyncio.CancelledError:
                    break

            first_iteration = False

            try:
                await self.run_once()
            except Exception as exc:
                self._log.exception(
                    "warm_target_scheduler.cycle_error",
                    error=str(exc),
                )
