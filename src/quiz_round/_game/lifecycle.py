# Area: Game
"""
quiz_round._game.lifecycle — Quiz round lifecycle
==================================================

The concrete state machine that drives a quiz game on top of the
reactive store. Every phase timer is armed through the StateContext of
the phase's init hook, so leaving a phase (or re-entering it) cancels
whatever that phase scheduled.

Phase flow:
    lobby --startGame--> preQuestioning --2s--> questioning
    questioning --last word revealed--> afterQuestioning --3s--> showingOptions
    showingOptions --5s--> revealingAnswer --3s--> givingPoints --0.5s--> finishingRound
    finishingRound --nextRound--> transitioningNextRound --1s--> preQuestioning | lobby
    any phase --resetGame--> lobby
"""

from __future__ import annotations

import inspect
import random
from functools import partial
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..config import GameConfig
from ..errors import MalformedMessageError
from .._core.router import INIT, StateContext, StateRouter
from .._core.scheduler import Scheduler
from .._core.store import ReactiveStore, StoreDict
from .._shared.logging_config import room_logger
from .messages import build_update, parse_action, validate_question
from .players import drop_connection, upsert_player
from .rounds import award_points, build_rounds, current_round, find_question, question_words
from .state import DEFAULT_SETTINGS, Phase

# Actions that receive the sender's connection id as ``connection_id``.
# For changeProfile and selectOption the sender also decides the player;
# a player id in the message is ignored.
SENDER_SCOPED_ACTIONS = frozenset({"joinAsPlayer", "changeProfile", "selectOption"})

# Transport hooks; never accepted from the wire
TRANSPORT_ACTIONS = frozenset({"onConnect", "onClose", "onMessage"})


class RoundLifecycle:
    """
    Quiz game logic for one room.

    Owns the StateRouter; reads and writes the GameState held by ``store``.
    ``phase`` in the store always mirrors ``router.state``.

    Usage:
        store = ReactiveStore(initial_state("room-1"), on_change=broadcast)
        game = RoundLifecycle(store)
        game.start()                              # enters lobby
        game.router.dispatch("startGame")
    """

    def __init__(
        self,
        store: ReactiveStore,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.config = config or GameConfig()
        self.scheduler = scheduler or store.scheduler
        self._rng = rng or random.Random()
        self.log = room_logger("quiz_round.lifecycle", store.get("roomId") or "")
        self.router = StateRouter(
            self._build_states(),
            Phase.LOBBY.value,
            on_transition=self._sync_phase,
            scheduler=self.scheduler,
        )

    def _build_states(self) -> Dict[str, Dict[str, Any]]:
        common = {
            "onConnect": self.on_connect,
            "onClose": self.on_close,
            "onMessage": self.on_message,
            "joinAsPlayer": self.join_as_player,
            "changeProfile": self.change_profile,
            "resetGame": self.reset_game,
            "nextRound": self.next_round,
        }
        return {
            Phase.LOBBY.value: {
                "startGame": self.start_game,
                "addQuestions": self.add_questions,
                "removeQuestion": self.remove_question,
                "clearQuestions": self.clear_questions,
                "updateSettings": self.update_settings,
                **common,
            },
            Phase.PRE_QUESTIONING.value: {INIT: self._enter_pre_questioning, **common},
            Phase.QUESTIONING.value: {INIT: self._enter_questioning, **common},
            Phase.AFTER_QUESTIONING.value: {INIT: self._enter_after_questioning, **common},
            Phase.SHOWING_OPTIONS.value: {
                INIT: self._enter_showing_options,
                "selectOption": self.select_option,
                **common,
            },
            Phase.REVEALING_ANSWER.value: {INIT: self._enter_revealing_answer, **common},
            Phase.GIVING_POINTS.value: {INIT: self._enter_giving_points, **common},
            Phase.FINISHING_ROUND.value: dict(common),
            Phase.TRANSITIONING_NEXT_ROUND.value: {INIT: self._enter_transitioning_next_round, **common},
        }

    # ── Properties ──────────────────────────────────────────────

    @property
    def state(self) -> StoreDict:
        return self.store.root

    @property
    def phase(self) -> Phase:
        return Phase(self.router.state)

    def start(self) -> None:
        """Enter the lobby."""
        self.router.start()

    def _sync_phase(self, router: StateRouter) -> None:
        self.log.info(f"Phase: {self.state['phase']} → {router.state}")
        self.state["phase"] = router.state

    def _go(self, phase: Phase) -> None:
        self.router.go(phase.value)

    def _after(self, ctx: StateContext, ms: int, phase: Phase) -> None:
        ctx.timeout(ms, self.router.trigger(phase.value))

    # ── Transport hooks (every phase) ───────────────────────────

    def on_connect(self, connection: Any) -> None:
        """Send the full current state to the new connection only."""
        connection.send(build_update(self.store.snapshot()))

    def on_close(self, connection_id: str) -> None:
        drop_connection(self.state, connection_id)

    def on_message(self, raw: Any, connection_id: str) -> Any:
        """Parse an inbound action envelope and dispatch it by name."""
        try:
            envelope = parse_action(raw)
        except MalformedMessageError as e:
            self.log.warning(f"Dropped malformed message from {connection_id}: {e.validation_errors}")
            self.log.debug(e.format_error_log())
            return None

        action, args = envelope.data.action, envelope.data.args
        if action in TRANSPORT_ACTIONS:
            self.log.warning(f"Dropped transport action '{action}' sent by {connection_id}")
            return None

        handler = self.router.handler_for(action)
        if handler is None:
            self.log.debug(f"Action '{action}' not available in phase {self.router.state}")
            return None

        kwargs = {"connection_id": connection_id} if action in SENDER_SCOPED_ACTIONS else {}
        try:
            inspect.signature(handler).bind(*args, **kwargs)
        except TypeError as e:
            self.log.warning(f"Dropped '{action}' from {connection_id}: bad arguments ({e})")
            return None

        self.log.debug(f"Dispatch {action}{tuple(args)} from {connection_id}")
        return self.router.dispatch(action, *args, **kwargs)

    # ── Players (every phase) ───────────────────────────────────

    def join_as_player(
        self,
        player_id: Optional[str] = None,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
        connection_id: Optional[str] = None,
    ) -> None:
        """Create or update the player ``player_id`` and bind the connection to it."""
        player_id = player_id or connection_id
        if not isinstance(player_id, str) or not isinstance(name, str) or not name:
            self.log.warning(f"joinAsPlayer ignored: player_id={player_id!r} name={name!r}")
            return
        self._upsert(player_id, name, avatar, connection_id)

    def change_profile(
        self,
        player_id: Optional[str] = None,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
        connection_id: Optional[str] = None,
    ) -> None:
        """Update name and/or avatar, creating the player when unknown."""
        if not name and not avatar:
            return
        if connection_id is not None:
            player_id = self.state["connections"].get(connection_id) or connection_id
        if not isinstance(player_id, str):
            self.log.warning("changeProfile ignored: no player id")
            return
        if (name is not None and not isinstance(name, str)) or (avatar is not None and not isinstance(avatar, str)):
            self.log.warning(f"changeProfile ignored for {player_id}: name and avatar must be strings")
            return
        self._upsert(player_id, name, avatar, connection_id)

    def _upsert(self, player_id: str, name: Optional[str], avatar: Optional[str],
                connection_id: Optional[str]) -> None:
        if avatar is not None and not isinstance(avatar, str):
            avatar = None
        if connection_id is not None:
            connections = self.state["connections"]
            previous = connections.get(connection_id)
            if previous is not None and previous != player_id:
                # The connection switched identity; its old player may be orphaned
                drop_connection(self.state, connection_id)
            connections[connection_id] = player_id
        upsert_player(
            self.state["players"], player_id, name, avatar,
            now_ms=self.scheduler.now_ms(),
            max_name_length=self.config.max_name_length,
            default_avatar=self.config.default_avatar,
        )

    # ── Game control (every phase) ──────────────────────────────

    def reset_game(self) -> None:
        """Drop all rounds, zero every score and return to the lobby."""
        state = self.state
        state["rounds"] = []
        state["currentRound"] = 0
        for player in state["players"].values():
            player["points"] = 0
        self.log.info("Game reset")
        self._go(Phase.LOBBY)

    def next_round(self) -> None:
        self._go(Phase.TRANSITIONING_NEXT_ROUND)

    # ── Lobby ───────────────────────────────────────────────────

    def start_game(self) -> None:
        """Freeze the question bank into rounds and begin round 1."""
        questions = self.state["questions"].snapshot()
        if not questions:
            self.log.warning("startGame ignored: the question bank is empty")
            return
        state = self.state
        state["rounds"] = build_rounds(questions, self._rng)
        state["currentRound"] = 1
        self.log.info(f"Game started with {len(questions)} rounds")
        self._go(Phase.PRE_QUESTIONING)

    def add_questions(self, questions: List[Any]) -> int:
        """
        Validate and add questions to the bank; a known id is replaced.

        Returns:
            Number of questions accepted
        """
        if not isinstance(questions, list):
            self.log.warning(f"addQuestions ignored: expected a list, got {type(questions).__name__}")
            return 0
        bank = self.state["questions"]
        accepted = 0
        for item in questions:
            try:
                question = validate_question(item)
            except ValidationError as e:
                self.log.warning(f"Rejected question: {e.error_count()} validation error(s)")
                continue
            positions = [i for i, existing in enumerate(bank) if existing["id"] == question["id"]]
            if positions:
                bank[positions[0]] = question
            else:
                bank.append(question)
            accepted += 1
        return accepted

    def remove_question(self, question_id: str) -> None:
        bank = self.state["questions"]
        for index, question in enumerate(bank):
            if question["id"] == question_id:
                del bank[index]
                return
        self.log.debug(f"removeQuestion: no question {question_id!r}")

    def clear_questions(self) -> None:
        self.state["questions"] = []

    def update_settings(self, changes: Dict[str, Any]) -> None:
        """Merge known settings keys; anything else is ignored."""
        if not isinstance(changes, dict):
            self.log.warning("updateSettings ignored: expected an object")
            return
        settings = self.state["settings"]
        for key, value in changes.items():
            if key in DEFAULT_SETTINGS and isinstance(value, str) and value:
                settings[key] = value
            else:
                self.log.debug(f"updateSettings: ignored {key!r}")

    # ── Round phases ────────────────────────────────────────────

    def _enter_pre_questioning(self, ctx: StateContext) -> None:
        self._after(ctx, self.config.pre_question_delay_ms, Phase.QUESTIONING)

    def _enter_questioning(self, ctx: StateContext) -> None:
        round_ = current_round(self.state)
        if round_ is None:
            self.log.warning(f"questioning: no round {self.state['currentRound']}")
            return
        question = find_question(self.state, round_["questionId"])
        if question is None:
            self.log.warning(f"questioning: unknown question {round_['questionId']!r}")
            return

        words = question_words(question)
        if not words:
            self._after(ctx, 0, Phase.AFTER_QUESTIONING)
            return
        for index in range(len(words)):
            ctx.timeout(
                index * self.config.reveal_word_ms,
                partial(self._reveal_word, round_, index, len(words)),
            )

    def _reveal_word(self, round_: StoreDict, index: int, word_count: int) -> None:
        round_["revealedWordsIndex"] = max(round_["revealedWordsIndex"], index + 1)
        if round_["revealedWordsIndex"] >= word_count:
            self._go(Phase.AFTER_QUESTIONING)

    def _enter_after_questioning(self, ctx: StateContext) -> None:
        self._after(ctx, self.config.after_question_ms, Phase.SHOWING_OPTIONS)

    def _enter_showing_options(self, ctx: StateContext) -> None:
        self._after(ctx, self.config.option_selection_ms, Phase.REVEALING_ANSWER)

    def select_option(
        self,
        option: str,
        player_id: Optional[str] = None,
        connection_id: Optional[str] = None,
    ) -> None:
        """Record a player's choice for the current round (last choice wins)."""
        round_ = current_round(self.state)
        if round_ is None:
            self.log.warning(f"selectOption: no round {self.state['currentRound']}")
            return
        if connection_id is not None:
            sender = self.state["connections"].get(connection_id)
            if player_id is not None and player_id != sender:
                self.log.warning(f"selectOption from {connection_id}: ignoring player id {player_id!r}")
            player_id = sender
        if player_id is None or player_id not in self.state["players"]:
            self.log.warning(f"selectOption ignored: unknown player {player_id!r}")
            return
        if option not in round_["shuffledOptions"]:
            self.log.warning(f"selectOption ignored: {option!r} is not an option of this round")
            return
        round_["chosenOptions"][player_id] = option

    def _enter_revealing_answer(self, ctx: StateContext) -> None:
        self._after(ctx, self.config.reveal_answer_ms, Phase.GIVING_POINTS)

    def _enter_giving_points(self, ctx: StateContext) -> None:
        round_ = current_round(self.state)
        if round_ is None:
            self.log.warning(f"givingPoints: no round {self.state['currentRound']}")
            return
        question = find_question(self.state, round_["questionId"])
        if question is None:
            self.log.warning(f"givingPoints: unknown question {round_['questionId']!r}")
            return

        awarded = award_points(self.state, round_, question, self.config.points_per_correct)
        self.log.info(f"Round {self.state['currentRound']}: points awarded {awarded}")
        self._after(ctx, self.config.give_points_ms, Phase.FINISHING_ROUND)

    def _enter_transitioning_next_round(self, ctx: StateContext) -> None:
        ctx.timeout(self.config.next_round_delay_ms, self._advance_round)

    def _advance_round(self) -> None:
        state = self.state
        if state["currentRound"] < len(state["rounds"]):
            state["currentRound"] += 1
            self._go(Phase.PRE_QUESTIONING)
        else:
            self.log.info("Last round finished")
            self._go(Phase.LOBBY)
