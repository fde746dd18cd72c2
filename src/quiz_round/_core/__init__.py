# Area: Core
"""
Core - Generic reactive store and state machine router.

This package handles:
- Change detection and per-tick batching over plain nested data
- Declarative state machines with per-state cleanup and timers
- Deferred scheduling on the asyncio event loop
"""

from .scheduler import Scheduler, TimerHandle, LoopScheduler
from .store import ReactiveStore, StoreDict, StoreList, split_path, unwrap
from .router import INIT, StateContext, StateRouter

__all__ = [
    "Scheduler",
    "TimerHandle",
    "LoopScheduler",
    "ReactiveStore",
    "StoreDict",
    "StoreList",
    "split_path",
    "unwrap",
    "INIT",
    "StateContext",
    "StateRouter",
]
