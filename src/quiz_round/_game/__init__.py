# Area: Game
"""
Game - The quiz round lifecycle built on the core framework.

This package handles:
- Phase timing (question reveal, option collection, answer reveal)
- Player and connection bookkeeping
- Scoring and round advancement
- Wire message parsing and update serialization
"""

from .state import Phase, DEFAULT_SETTINGS, initial_state, merge_settings
from .players import upsert_player, drop_connection
from .rounds import build_rounds, current_round, find_question, award_points
from .messages import (
    ActionEnvelope,
    QuestionModel,
    parse_action,
    build_update,
    build_action,
    validate_question,
)
from .lifecycle import RoundLifecycle

__all__ = [
    "Phase",
    "DEFAULT_SETTINGS",
    "initial_state",
    "merge_settings",
    "upsert_player",
    "drop_connection",
    "build_rounds",
    "current_round",
    "find_question",
    "award_points",
    "ActionEnvelope",
    "QuestionModel",
    "parse_action",
    "build_update",
    "build_action",
    "validate_question",
    "RoundLifecycle",
]
