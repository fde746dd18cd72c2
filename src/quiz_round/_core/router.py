# Area: Core
"""
quiz_round._core.router — Declarative state machine router
===========================================================

Turns a ``{state: {action: handler, "init": hook}}`` configuration into a
running machine with one active state.

Each transition:
1. runs every cleanup registered since the previous transition, in order
2. moves the current-state pointer
3. opens a fresh StateContext and hands it to the new state's init hook
4. closes the context once the hook returns
5. notifies ``on_transition``, also when the hook raised

Init hooks register cleanups and timers only through the StateContext
they receive. A context is usable for the synchronous duration of its
hook; afterwards every registration raises InactiveContextError, so no
timer armed for one phase can outlive it.
"""

from __future__ import annotations

import inspect
import logging
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import AsyncInitError, InactiveContextError, RouterError, UnknownStateError
from .scheduler import LoopScheduler, Scheduler, TimerHandle

logger = logging.getLogger("quiz_round.router")

INIT = "init"

Handler = Callable[..., Any]
StateConfig = Mapping[str, Mapping[str, Handler]]


class StateContext:
    """
    Registrar handed to a state's init hook.

    Attributes:
        state: Name of the state whose init hook owns this context
    """

    def __init__(self, router: "StateRouter", state: str, generation: int) -> None:
        self.state = state
        self._router = router
        self._generation = generation
        self._open = True

    @property
    def active(self) -> bool:
        """True while the owning init hook runs and no newer transition happened."""
        return self._open and self._router._generation == self._generation

    def cleanup(self, fn: Callable[[], Any]) -> None:
        """Run ``fn`` on the next transition."""
        if not self.active:
            raise InactiveContextError(self.state)
        self._router._cleanups.append(fn)

    def timeout(self, ms: float, fn: Callable[[], Any]) -> TimerHandle:
        """
        Call ``fn`` after ``ms`` milliseconds unless a transition comes first.

        Returns the timer handle for optional early cancellation.
        """
        if not self.active:
            raise InactiveContextError(self.state)
        handle = self._router.scheduler.call_later(ms, fn)
        self._router._cleanups.append(handle.cancel)
        return handle

    def close(self) -> None:
        self._open = False


class StateRouter:
    """
    Finite state machine built from a declarative configuration.

    Construction has no side effects; ``start()`` enters the initial state.

    Usage:
        router = StateRouter({
            "idle": {"begin": on_begin},
            "running": {"init": start_timers, "stop": on_stop},
        }, "idle", on_transition=sync_phase)
        router.start()
        router.dispatch("begin")        # runs on_begin (idle defines it)
        router.dispatch("stop")         # no-op: idle does not define stop
        router.go("running")
    """

    def __init__(
        self,
        config: StateConfig,
        initial_state: str,
        on_transition: Optional[Callable[["StateRouter"], Any]] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._states: Dict[str, Dict[str, Handler]] = {
            name: dict(handlers) for name, handlers in config.items()
        }
        if initial_state not in self._states:
            raise UnknownStateError(initial_state, self._states)
        for name, handlers in self._states.items():
            init = handlers.get(INIT)
            if init is not None and inspect.iscoroutinefunction(init):
                raise AsyncInitError(name)

        self.scheduler = scheduler or LoopScheduler()
        self._initial_state = initial_state
        self._on_transition = on_transition
        self._state: Optional[str] = None
        self._cleanups: List[Callable[[], Any]] = []
        self._generation = 0

        self.actions = frozenset(
            action
            for handlers in self._states.values()
            for action in handlers
            if action != INIT
        )
        self.triggers: Dict[str, Callable[[], "StateRouter"]] = {
            name: partial(self.go, name) for name in self._states
        }

    @property
    def state(self) -> Optional[str]:
        """Name of the current state, or None before ``start()``."""
        return self._state

    @property
    def states(self) -> List[str]:
        return list(self._states)

    def start(self) -> "StateRouter":
        """Enter the initial state and run its init hook."""
        if self._state is not None:
            raise RouterError(f"Router already started (state={self._state})")
        return self.go(self._initial_state)

    def trigger(self, state: str) -> Callable[[], "StateRouter"]:
        """Return the zero-argument transition trigger for ``state``."""
        try:
            return self.triggers[state]
        except KeyError:
            raise UnknownStateError(state, self._states) from None

    def go(self, state: str) -> "StateRouter":
        """Transition to ``state`` (re-entering the current state is allowed)."""
        if state not in self._states:
            raise UnknownStateError(state, self._states)

        cleanups, self._cleanups = self._cleanups, []
        for fn in cleanups:
            fn()

        previous, self._state = self._state, state
        self._generation += 1
        logger.debug("Transition: %s → %s", previous, state)

        ctx = StateContext(self, state, self._generation)
        init = self._states[state].get(INIT)
        try:
            if init is not None:
                result = init(ctx)
                if inspect.isawaitable(result):
                    if inspect.iscoroutine(result):
                        result.close()
                    raise AsyncInitError(state)
        finally:
            ctx.close()
            # The state pointer has moved even if the hook raised
            if self._on_transition is not None:
                self._on_transition(self)
        return self

    def handler_for(self, action: str) -> Optional[Handler]:
        """Handler registered for ``action`` under the current state, if any."""
        if action == INIT or self._state is None:
            return None
        return self._states[self._state].get(action)

    def can_dispatch(self, action: str) -> bool:
        return self.handler_for(action) is not None

    def dispatch(self, action: str, *args: Any, **kwargs: Any) -> Any:
        """
        Forward a call to the current state's handler for ``action``.

        Actions the current state does not define are ignored.
        """
        handler = self.handler_for(action)
        if handler is None:
            logger.debug("Action '%s' not defined in state '%s'; ignored", action, self._state)
            return None
        return handler(*args, **kwargs)
