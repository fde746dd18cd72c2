# Area: Test fixtures
"""Shared fixtures: a manual clock scheduler and a ready-to-play game."""

import heapq
import itertools
import random
from collections import deque

import pytest

from quiz_round._core.store import ReactiveStore
from quiz_round._game.lifecycle import RoundLifecycle
from quiz_round._game.state import initial_state


class ManualTimer:
    """Handle returned by ManualScheduler; cancel() is idempotent."""

    def __init__(self, due, fn):
        self.due = due
        self.fn = fn
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler with a virtual clock.

    ``flush()`` runs the current tick's call_soon callbacks;
    ``advance(ms)`` moves the clock, firing due timers in order and
    flushing after each one.
    """

    def __init__(self, start_ms=1_700_000_000_000):
        self.time_ms = start_ms
        self._ready = deque()
        self._timers = []
        self._seq = itertools.count()

    def call_soon(self, fn):
        timer = ManualTimer(self.time_ms, fn)
        self._ready.append(timer)
        return timer

    def call_later(self, delay_ms, fn):
        timer = ManualTimer(self.time_ms + max(delay_ms, 0), fn)
        heapq.heappush(self._timers, (timer.due, next(self._seq), timer))
        return timer

    def now_ms(self):
        return self.time_ms

    def flush(self):
        while self._ready:
            timer = self._ready.popleft()
            if not timer.cancelled:
                timer.fn()

    def advance(self, ms):
        target = self.time_ms + ms
        self.flush()
        while self._timers and self._timers[0][0] <= target:
            due, _, timer = heapq.heappop(self._timers)
            self.time_ms = due
            if not timer.cancelled:
                timer.fn()
            self.flush()
        self.time_ms = target
        self.flush()

    @property
    def active_timers(self):
        return [timer for _, _, timer in self._timers if not timer.cancelled]


QUESTIONS = [
    {
        "id": "q1",
        "text": "What is the capital of France",
        "category": "Geography",
        "options": ["Paris", "Lyon", "Nice", "Lille"],
        "answer": "Paris",
    },
    {
        "id": "q2",
        "text": "Which planet is largest",
        "category": "Space",
        "options": ["Mars", "Jupiter", "Venus", "Earth"],
        "answer": "Jupiter",
    },
    {
        "id": "q3",
        "text": "Who painted the Mona Lisa",
        "category": "Art",
        "options": ["Leonardo", "Raphael", "Monet", "Picasso"],
        "answer": "Leonardo",
    },
]


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def questions():
    return [dict(q, options=list(q["options"])) for q in QUESTIONS]


@pytest.fixture
def store(scheduler):
    return ReactiveStore(initial_state("room-1"), scheduler=scheduler)


@pytest.fixture
def game(store, scheduler, questions):
    """A started game in the lobby with three questions in the bank."""
    lifecycle = RoundLifecycle(store, rng=random.Random(7))
    lifecycle.add_questions(questions)
    lifecycle.start()
    scheduler.flush()
    return lifecycle


@pytest.fixture
def join(game):
    """Join a player with its own connection ``conn-<id>``."""
    def _join(player_id, name=None):
        game.join_as_player(player_id, name or player_id.upper(), connection_id=f"conn-{player_id}")
        return game.state["players"][player_id]
    return _join


@pytest.fixture
def run_until(scheduler):
    """Advance the clock in small steps until the game reaches ``phase``."""
    def _run(game, phase, limit_ms=60_000, step_ms=50):
        waited = 0
        while game.router.state != phase.value:
            if waited >= limit_ms:
                raise AssertionError(
                    f"phase {phase.value} not reached after {limit_ms}ms "
                    f"(stuck in {game.router.state})"
                )
            scheduler.advance(step_ms)
            waited += step_ms
        return waited
    return _run
