"""Warm pool lifecycle management for application startup/shutdown.

Manages the startup and shutdown of:
- DynamicWarmPoolManager (process-wide allocation history)
- WarmTargetScheduler (periodic target refresh)
"""

from __future__ import annotations

import structlog

from warmpool.config import get_settings
from warmpool.services.warm_pool.manager import DynamicWarmPoolManager
from warmpool.services.warm_pool.scheduler import TargetSink, WarmTargetScheduler
from warmpool.utils.datetime import Clock

logger = structlog.get_logger()

# Global instances
_warm_pool_manager: DynamicWarmPoolManager | None = None
_warm_target_scheduler: WarmTargetScheduler | None = None


async def init_warm_pool(
    in_use: int = 0,
    on_target: TargetSink | None = None,
    *,
    clock: Clock | None = None,
) -> tuple[DynamicWarmPoolManager | None, WarmTargetScheduler | None]:
    """Initialize warm pool services.

    Args:
        in_use: IPs already assigned when the process starts
        on_target: Coroutine receiving each computed target. Without it no
            scheduler is started and the caller polls the manager itself.
        clock: Time source override

    Returns:
        Tuple of (DynamicWarmPoolManager, WarmTargetScheduler) instances
    """
    global _warm_pool_manager, _warm_target_scheduler

    warm_config = get_settings().warm_pool

    if not warm_config.enabled:
        logger.info("warm_pool.disabled")
        return None, None

    logger.info(
        "warm_pool.init",
        in_use=in_use,
        interval_seconds=warm_config.interval_seconds,
        min_target=warm_config.min_target,
        has_sink=on_target is not None,
    )

    _warm_pool_manager = DynamicWarmPoolManager(
        in_use,
        clock=clock,
        config=warm_config,
    )

    if on_target is not None:
        _warm_target_scheduler = WarmTargetScheduler(
            manager=_warm_pool_manager,
            config=warm_config,
            on_target=on_target,
        )

        # Run once on startup if configured
        if warm_config.run_on_startup:
            try:
                target = await _warm_target_scheduler.run_once()
                logger.info("warm_pool.run_on_startup.complete", target=target)
            except Exception as e:
                logger.exception("warm_pool.run_on_startup.failed", error=str(e))

        await _warm_target_scheduler.start()

    return _warm_pool_manager, _warm_target_scheduler


async def shutdown_warm_pool() -> None:
    """Stop warm pool services gracefully."""
    global _warm_pool_manager, _warm_target_scheduler

    if _warm_target_scheduler is not None:
        await _warm_target_scheduler.stop()
        _warm_target_scheduler = None

    _warm_pool_manager = None


def get_warm_pool_manager() -> DynamicWarmPoolManager | None:
    """Get the global warm pool manager instance."""
    return _warm_pool_manager


def get_warm_target_scheduler() -> WarmTargetScheduler | None:
    """Get the global warm target scheduler instance."""
    return _warm_target_scheduler
