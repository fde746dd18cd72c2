"""
quiz_round — Timed quiz round engine
=====================================

Reactive game state plus a declarative state machine that drives a
multiplayer quiz round: word-by-word question reveal, option collection,
scoring and round advancement, with one coalesced broadcast per tick.

Quick Start (inside a running event loop):
    from quiz_round import GameRoom
    room = GameRoom("ABCD", broadcast=transport.broadcast)
    room.start()
    room.handle_connect(conn)
    room.handle_message(text, conn.id)

Building blocks:
    from quiz_round import ReactiveStore, StateRouter
    store = ReactiveStore({"count": 0}, on_change=lambda: print("changed"))
    router = StateRouter({"idle": {...}, "busy": {"init": hook}}, "idle")
    router.start()

Type Definitions
----------------
    from quiz_round import GameState, Player, Round, Question
"""

from .room import GameRoom
from .config import GameConfig, load_config
from .collaborators import Connection, QuestionRepository, QuestionGenerator, Transcriber
from ._core import ReactiveStore, StoreDict, StoreList, StateRouter, StateContext, LoopScheduler
from ._game import Phase, RoundLifecycle, initial_state, parse_action, build_update, build_action
from .errors import (
    QuizRoundError,
    RouterError,
    UnknownStateError,
    InactiveContextError,
    AsyncInitError,
    MalformedMessageError,
)
from .types import (
    GameState,
    GameSettings,
    Player,
    Round,
    Question,
    ActionMessage,
    UpdateMessage,
)

__all__ = [
    # Main classes
    "GameRoom",
    "RoundLifecycle",
    "Phase",
    "GameConfig",
    "load_config",
    "initial_state",
    # Framework
    "ReactiveStore",
    "StoreDict",
    "StoreList",
    "StateRouter",
    "StateContext",
    "LoopScheduler",
    # Wire helpers
    "parse_action",
    "build_update",
    "build_action",
    # Collaborators
    "Connection",
    "QuestionRepository",
    "QuestionGenerator",
    "Transcriber",
    # Errors
    "QuizRoundError",
    "RouterError",
    "UnknownStateError",
    "InactiveContextError",
    "AsyncInitError",
    "MalformedMessageError",
    # Types
    "GameState",
    "GameSettings",
    "Player",
    "Round",
    "Question",
    "ActionMessage",
    "UpdateMessage",
]
__version__ = "1.0.0"
