"""
quiz_round.config — Game configuration
=======================================

Timing and scoring constants for the round lifecycle.

Values come from, in increasing priority:
    1. GameConfig defaults
    2. A JSON config file
    3. Environment variables (a local ``.env`` file is honoured)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger("quiz_round.config")

TIMING_KEYS = (
    "pre_question_delay_ms",
    "reveal_word_ms",
    "after_question_ms",
    "option_selection_ms",
    "reveal_answer_ms",
    "give_points_ms",
    "next_round_delay_ms",
)

ENV_MAPPINGS = {
    "QUIZ_PRE_QUESTION_DELAY_MS": "pre_question_delay_ms",
    "QUIZ_REVEAL_WORD_MS": "reveal_word_ms",
    "QUIZ_AFTER_QUESTION_MS": "after_question_ms",
    "QUIZ_OPTION_SELECTION_MS": "option_selection_ms",
    "QUIZ_REVEAL_ANSWER_MS": "reveal_answer_ms",
    "QUIZ_GIVE_POINTS_MS": "give_points_ms",
    "QUIZ_NEXT_ROUND_DELAY_MS": "next_round_delay_ms",
    "QUIZ_POINTS_PER_CORRECT": "points_per_correct",
    "QUIZ_MAX_NAME_LENGTH": "max_name_length",
    "QUIZ_DEFAULT_AVATAR": "default_avatar",
}


@dataclass(frozen=True)
class GameConfig:
    """Phase durations (milliseconds) and scoring rules."""
    pre_question_delay_ms: int = 2000
    reveal_word_ms: int = 100
    after_question_ms: int = 3000
    option_selection_ms: int = 5000
    reveal_answer_ms: int = 3000
    give_points_ms: int = 500
    next_round_delay_ms: int = 1000
    points_per_correct: int = 10
    max_name_length: int = 20
    default_avatar: str = "robot-1"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameConfig":
        validate_config(data)
        return cls(**dict(data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def scaled(self, factor: float) -> "GameConfig":
        """Copy with every phase duration multiplied by ``factor``."""
        return replace(self, **{key: int(getattr(self, key) * factor) for key in TIMING_KEYS})


def validate_config(config: Mapping[str, Any]) -> None:
    """
    Validate a config mapping.

    Args:
        config: Mapping of GameConfig field names to values

    Raises:
        ValueError: On unknown keys, wrong types or negative numbers
    """
    known = {f.name for f in fields(GameConfig)}
    unknown = sorted(k for k in config if k not in known)
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")

    for key, value in config.items():
        if key == "default_avatar":
            if not isinstance(value, str) or not value:
                raise ValueError("default_avatar must be a non-empty string")
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{key} must be an integer, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"{key} must not be negative, got {value}")

    if config.get("max_name_length", 1) == 0:
        raise ValueError("max_name_length must be at least 1")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """Load config from an optional JSON file, then environment overrides."""
    load_dotenv()
    data: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            logger.warning(f"Config file not found: {config_path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value = os.environ[env_key]
            if config_key != "default_avatar":
                try:
                    value = int(value)
                except ValueError:
                    raise ValueError(f"{env_key} must be an integer, got {value!r}") from None
            data[config_key] = value

    return GameConfig.from_dict(data)
