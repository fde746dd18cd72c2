# Area: Game
"""
quiz_round._game.rounds — Round construction, lookup and scoring
=================================================================
"""

from __future__ import annotations

import random
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..types import Question, Round


def build_rounds(questions: Iterable[Mapping[str, Any]], rng: random.Random) -> List[Round]:
    """One fresh round per question, each with its own option order."""
    rounds: List[Round] = []
    for question in questions:
        options = list(question["options"])
        rng.shuffle(options)
        rounds.append({
            "questionId": question["id"],
            "chosenOptions": {},
            "revealedWordsIndex": 0,
            "shuffledOptions": options,
        })
    return rounds


def current_round(state: Mapping[str, Any]) -> Optional[Any]:
    """The active round, or None when ``currentRound`` is out of range."""
    index = state["currentRound"]
    rounds = state["rounds"]
    if not 1 <= index <= len(rounds):
        return None
    return rounds[index - 1]


def find_question(state: Mapping[str, Any], question_id: str) -> Optional[Any]:
    for question in state["questions"]:
        if question["id"] == question_id:
            return question
    return None


def question_words(question: Mapping[str, Any]) -> List[str]:
    return question["text"].split()


def award_points(
    state: Mapping[str, Any],
    round_: Mapping[str, Any],
    question: Question,
    points: int,
) -> Dict[str, int]:
    """
    Add ``points`` to every player whose choice equals the answer exactly.

    Returns:
        Dict of player_id → points awarded (players who scored only)
    """
    answer = question["answer"]
    chosen = round_["chosenOptions"]
    awarded: Dict[str, int] = {}
    for player_id, player in state["players"].items():
        if chosen.get(player_id) == answer:
            player["points"] += points
            awarded[player_id] = points
    return awarded
