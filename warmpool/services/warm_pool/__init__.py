"""Dynamic warm pool service.

This module provides:
- DynamicWarmPoolManager: IP allocation history and warm target computation
- WarmTargetScheduler: Periodic target refresh for the owning resource manager
- Lifecycle helpers for application startup/shutdown

Usage:
    from warmpool.services.warm_pool import DynamicWarmPoolManager

    manager = DynamicWarmPoolManager(in_use=assigned_ips)
    manager.record_allocation()
    target = manager.get_warm_target()
"""

from warmpool.services.warm_pool.manager import DynamicWarmPoolManager
from warmpool.services.warm_pool.policy import WarmTargetDecision, compute_warm_target
from warmpool.services.warm_pool.scheduler import WarmTargetScheduler

__all__ = [
    "DynamicWarmPoolManager",
    "WarmTargetDecision",
    "WarmTargetScheduler",
    "compute_warm_target",
]
