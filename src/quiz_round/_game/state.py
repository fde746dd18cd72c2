# Area: Game
"""
quiz_round._game.state — Game phases and initial state
=======================================================

Phases of the round lifecycle and the factory for a room's initial
GameState, including migration of settings stored by older versions.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ..types import GameSettings, GameState, Question


class Phase(Enum):
    """Current phase of the round lifecycle (the router's state name)."""
    LOBBY                    = "lobby"                   # Waiting for startGame
    PRE_QUESTIONING          = "preQuestioning"          # Short pause before the question
    QUESTIONING              = "questioning"             # Revealing the question word by word
    AFTER_QUESTIONING        = "afterQuestioning"        # Full question shown, options hidden
    SHOWING_OPTIONS          = "showingOptions"          # Collecting player choices
    REVEALING_ANSWER         = "revealingAnswer"         # Correct option shown
    GIVING_POINTS            = "givingPoints"            # Scores applied
    FINISHING_ROUND          = "finishingRound"          # Waiting for nextRound
    TRANSITIONING_NEXT_ROUND = "transitioningNextRound"  # Advancing to the next round or lobby


DEFAULT_SETTINGS: GameSettings = {
    "language": "American",
    "voiceId": "Daniel",
    "ttsProvider": "unrealspeech",
}


def merge_settings(settings: Optional[Mapping[str, Any]] = None) -> GameSettings:
    """Fill missing settings with defaults; unknown or non-string values are dropped."""
    merged: GameSettings = dict(DEFAULT_SETTINGS)  # type: ignore[assignment]
    for key, value in (settings or {}).items():
        if key in DEFAULT_SETTINGS and isinstance(value, str) and value:
            merged[key] = value  # type: ignore[literal-required]
    return merged


def initial_state(
    room_id: str = "",
    questions: Optional[Iterable[Question]] = None,
    settings: Optional[Mapping[str, Any]] = None,
) -> GameState:
    """Build the state of a room with no active game."""
    return {
        "roomId": room_id,
        "rounds": [],
        "currentRound": 0,
        "players": {},
        "questions": list(questions or []),
        "phase": Phase.LOBBY.value,
        "connections": {},
        "settings": merge_settings(settings),
    }
