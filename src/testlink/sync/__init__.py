"""Forward/reverse synchronization and pruning."""

from testlink.sync.models import SyncOptions, SyncPlan, SyncResult
from testlink.sync.orchestrator import SyncOrchestrator, pair_placeholders
from testlink.sync.planner import plan_sync

__all__ = [
    "SyncOptions",
    "SyncOrchestrator",
    "SyncPlan",
    "SyncResult",
    "pair_placeholders",
    "plan_sync",
]
