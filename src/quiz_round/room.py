"""
quiz_round.room — Host integration for one game room
=====================================================

GameRoom glues the reactive store, the round lifecycle and the outside
world together:

    transport ──connect/close/message──▶ GameRoom ──▶ router
    store change (once per tick) ──▶ broadcast(update) + repository.save

Rooms share no mutable state; run as many as needed on one event loop.

Usage:
    room = GameRoom("ABCD", broadcast=party.broadcast, repository=repo)
    room.start()
    room.handle_connect(conn)
    room.handle_message(text, conn.id)
"""

from __future__ import annotations

import random
from typing import Any, Callable, List, Optional

from .collaborators import Connection, QuestionRepository
from .config import GameConfig
from ._core.scheduler import Scheduler
from ._core.store import ReactiveStore
from ._game.lifecycle import RoundLifecycle
from ._game.messages import build_update
from ._game.state import initial_state
from ._shared.logging_config import room_logger


class GameRoom:
    """
    One room: state, phase machine and broadcast wiring.

    Attributes:
        room_id: Identifier broadcast as ``roomId``
        store: ReactiveStore holding the GameState
        lifecycle: RoundLifecycle driving the phases
    """

    def __init__(
        self,
        room_id: str,
        broadcast: Callable[[str], Any],
        config: Optional[GameConfig] = None,
        repository: Optional[QuestionRepository] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.room_id = room_id
        self.repository = repository
        self._broadcast = broadcast
        self._saved_questions: Optional[List[Any]] = None
        self.log = room_logger("quiz_round.room", room_id)

        self.store = ReactiveStore(initial_state(room_id), scheduler=scheduler)
        self.lifecycle = RoundLifecycle(self.store, config=config, rng=rng)
        self.store.on_change(self._on_store_change)

    @property
    def router(self):
        return self.lifecycle.router

    def start(self) -> None:
        """Load the question bank, then enter the lobby."""
        if self.repository is not None:
            try:
                stored = self.repository.load()
            except Exception as e:
                self.log.error(f"Failed to load questions: {e}", exc_info=True)
                stored = []
            if stored:
                accepted = self.lifecycle.add_questions(list(stored))
                self.log.info(f"Loaded {accepted} questions from storage")
            self._saved_questions = self.store.snapshot()["questions"]
        self.lifecycle.start()

    # ── Transport callbacks ─────────────────────────────────────

    def handle_connect(self, connection: Connection) -> None:
        self._dispatch("onConnect", connection)

    def handle_close(self, connection_id: str) -> None:
        self._dispatch("onClose", connection_id)

    def handle_message(self, raw: Any, connection_id: str) -> None:
        self._dispatch("onMessage", raw, connection_id)

    def _dispatch(self, action: str, *args: Any) -> None:
        try:
            self.router.dispatch(action, *args)
        except Exception as e:
            self.log.error(f"{action} failed: {e}", exc_info=True)

    # ── Store observer ──────────────────────────────────────────

    def _on_store_change(self) -> None:
        snapshot = self.store.snapshot()
        try:
            self._broadcast(build_update(snapshot))
        except Exception as e:
            self.log.error(f"Broadcast failed: {e}", exc_info=True)

        if self.repository is not None and snapshot["questions"] != self._saved_questions:
            try:
                self.repository.save(snapshot["questions"])
                self._saved_questions = snapshot["questions"]
            except Exception as e:
                self.log.error(f"Failed to save questions: {e}", exc_info=True)
