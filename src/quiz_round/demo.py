"""
quiz_round.demo — Scripted demo game
=====================================

Runs one GameRoom on the current event loop with bot players that
answer during showingOptions and an admin that presses "next round".
Useful to watch the phase timing without a UI.

Usage:
    import asyncio
    from quiz_round.demo import run_demo, DEMO_QUESTIONS
    standings = asyncio.run(run_demo(GameConfig().scaled(0.1), DEMO_QUESTIONS))
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from .config import GameConfig
from .room import GameRoom
from ._game.messages import build_action
from ._game.rounds import question_words
from ._game.state import Phase

logger = logging.getLogger("quiz_round.demo")

ADMIN_CONNECTION_ID = "admin"
DEFAULT_BOT_NAMES = ("ADA", "BORIS", "CHLOE")

DEMO_QUESTIONS: List[Dict[str, Any]] = [
    {
        "id": "demo-1",
        "text": "Which planet is known as the red planet?",
        "category": "Space",
        "options": ["Mars", "Venus", "Jupiter", "Mercury"],
        "answer": "Mars",
    },
    {
        "id": "demo-2",
        "text": "What is the capital city of Australia?",
        "category": "Geography",
        "options": ["Sydney", "Canberra", "Melbourne", "Perth"],
        "answer": "Canberra",
    },
    {
        "id": "demo-3",
        "text": "Who wrote the novel Frankenstein?",
        "category": "Literature",
        "options": ["Mary Shelley", "Bram Stoker", "Jane Austen", "Emily Bronte"],
        "answer": "Mary Shelley",
    },
]


class DemoConnection:
    """In-process stand-in for a transport connection."""

    def __init__(self, connection_id: str) -> None:
        self.id = connection_id
        self.received: List[str] = []

    def send(self, text: str) -> None:
        self.received.append(text)


class DemoAudience:
    """
    Bot players plus an admin reacting to room broadcasts.

    Each bot picks the correct option with probability ``accuracy``.
    """

    def __init__(
        self,
        names: Sequence[str],
        config: GameConfig,
        accuracy: float = 0.6,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.accuracy = accuracy
        self._rng = rng or random.Random()
        self.bots = [(DemoConnection(f"bot-{i + 1}"), name) for i, name in enumerate(names)]
        self._room: Optional[GameRoom] = None
        self._finished: Optional[asyncio.Event] = None
        self._seen: Set[Tuple[str, int]] = set()
        self._game_started = False

    def attach(self, room: GameRoom, finished: asyncio.Event) -> None:
        self._room = room
        self._finished = finished

    def on_update(self, text: str) -> None:
        """Broadcast callback of the room."""
        state = json.loads(text)["data"]
        phase = state["phase"]
        key = (phase, state["currentRound"])
        if key in self._seen:
            return
        self._seen.add(key)
        logger.info(f"[demo] {phase} (round {state['currentRound']}/{len(state['rounds'])})")

        if phase == Phase.SHOWING_OPTIONS.value:
            self._choose_options(state)
        elif phase == Phase.FINISHING_ROUND.value:
            self._log_scores(state)
            self._send_later(0, ADMIN_CONNECTION_ID, "nextRound")
        elif phase == Phase.LOBBY.value and self._game_started:
            if self._finished is not None:
                self._finished.set()

        if phase != Phase.LOBBY.value:
            self._game_started = True

    def _choose_options(self, state: Dict[str, Any]) -> None:
        round_ = state["rounds"][state["currentRound"] - 1]
        answer = next(
            (q["answer"] for q in state["questions"] if q["id"] == round_["questionId"]),
            None,
        )
        options = round_["shuffledOptions"]
        window = self.config.option_selection_ms / 2
        for bot, name in self.bots:
            wrong = [o for o in options if o != answer]
            if answer is not None and (not wrong or self._rng.random() < self.accuracy):
                choice = answer
            else:
                choice = self._rng.choice(wrong)
            logger.debug(f"[demo] {name} picks {choice!r}")
            self._send_later(self._rng.uniform(0, window), bot.id, "selectOption", choice)

    def _log_scores(self, state: Dict[str, Any]) -> None:
        scores = ", ".join(f"{p['name']}={p['points']}" for p in state["players"].values())
        logger.info(f"[demo] scores: {scores}")

    def _send_later(self, delay_ms: float, connection_id: str, action: str, *args: Any) -> None:
        room = self._room
        if room is None:
            return
        room.store.scheduler.call_later(
            delay_ms, lambda: room.handle_message(build_action(action, *args), connection_id)
        )


def estimate_duration_ms(config: GameConfig, questions: Sequence[Dict[str, Any]]) -> int:
    """Upper bound of a full game's length when nobody waits on nextRound."""
    fixed = (
        config.pre_question_delay_ms
        + config.after_question_ms
        + config.option_selection_ms
        + config.reveal_answer_ms
        + config.give_points_ms
        + config.next_round_delay_ms
    )
    reveal = sum(len(question_words(q)) * config.reveal_word_ms for q in questions)
    return fixed * len(questions) + reveal


async def run_demo(
    config: GameConfig,
    questions: Sequence[Dict[str, Any]],
    player_names: Sequence[str] = DEFAULT_BOT_NAMES,
    accuracy: float = 0.6,
    seed: Optional[int] = None,
) -> Dict[str, int]:
    """
    Play one full game with bots.

    Returns:
        Final standings, player name → points

    Raises:
        ValueError: If no question survives validation
        asyncio.TimeoutError: If the game does not return to the lobby in time
    """
    rng = random.Random(seed)
    finished = asyncio.Event()
    audience = DemoAudience(player_names, config, accuracy=accuracy, rng=rng)
    room = GameRoom("demo", broadcast=audience.on_update, config=config, rng=rng)
    audience.attach(room, finished)

    room.start()
    room.lifecycle.add_questions(list(questions))
    for bot, name in audience.bots:
        room.handle_connect(bot)
        room.handle_message(build_action("joinAsPlayer", bot.id, name), bot.id)
    room.handle_message(build_action("startGame"), ADMIN_CONNECTION_ID)
    if room.lifecycle.phase is Phase.LOBBY:
        raise ValueError("The demo needs at least one valid question")

    accepted = room.store.snapshot()["questions"]
    timeout_s = estimate_duration_ms(config, accepted) * 2 / 1000 + 5
    await asyncio.wait_for(finished.wait(), timeout=timeout_s)

    players = room.store.snapshot()["players"].values()
    standings = {p["name"]: p["points"] for p in sorted(players, key=lambda p: -p["points"])}
    logger.info(f"[demo] final standings: {standings}")
    return standings
