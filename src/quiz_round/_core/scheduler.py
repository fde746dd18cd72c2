# Area: Core
"""
quiz_round._core.scheduler — Deferred callback scheduling
==========================================================

The single logical thread of control of a game instance is an asyncio
event loop. Everything that happens "later" (store change notifications,
phase timers) goes through a Scheduler so it runs to completion on that
loop without preemption.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional, Protocol


class TimerHandle(Protocol):
    """Handle of a scheduled callback. ``cancel()`` must be idempotent."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Protocol for the deferred-execution backend used by store and router."""

    def call_soon(self, fn: Callable[[], Any]) -> TimerHandle:
        """Run ``fn`` on the next tick."""
        ...

    def call_later(self, delay_ms: float, fn: Callable[[], Any]) -> TimerHandle:
        """Run ``fn`` after ``delay_ms`` milliseconds."""
        ...

    def now_ms(self) -> int:
        """Wall-clock time in epoch milliseconds."""
        ...


class LoopScheduler:
    """
    Scheduler backed by an asyncio event loop.

    The loop is resolved lazily on first use, so a scheduler can be built
    before the loop starts as long as nothing is scheduled until it runs.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_soon(self, fn: Callable[[], Any]) -> asyncio.Handle:
        return self.loop.call_soon(fn)

    def call_later(self, delay_ms: float, fn: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0) / 1000.0, fn)

    def now_ms(self) -> int:
        return int(time.time() * 1000)
