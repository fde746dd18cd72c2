"""
quiz_round.types — TypedDict schemas for game state and wire messages
======================================================================

Documents the exact structure of the data held by the reactive store and
broadcast to every viewer. Keys are camelCase because the snapshot is
sent verbatim to the UI.

All types are exported from the main package:

    from quiz_round import GameState, Player, Round, Question
"""

from typing import Any, Dict, List, Literal, TypedDict


class Player(TypedDict):
    """One participant, created on first join."""
    id: str                 # stable id chosen by the client
    name: str               # at most 20 characters
    avatar: str             # e.g. "robot-1"
    connectedAt: int        # epoch milliseconds of creation
    points: int


class Question(TypedDict):
    """A question from the bank. ``answer`` equals one of ``options``."""
    id: str
    text: str
    category: str
    options: List[str]
    answer: str


class Round(TypedDict):
    """One question-and-answer cycle of a game.

    Fields
    ------
    questionId : str
        Id of the question this round asks.
    chosenOptions : Dict[str, str]
        playerId → option text picked during showingOptions.
    revealedWordsIndex : int
        Number of question words revealed so far; never decreases.
    shuffledOptions : List[str]
        The question's options in display order, fixed at game start.
    """
    questionId: str
    chosenOptions: Dict[str, str]
    revealedWordsIndex: int
    shuffledOptions: List[str]


class GameSettings(TypedDict):
    """Room-level presentation settings consumed by the speech collaborators."""
    language: str
    voiceId: str
    ttsProvider: str


class GameState(TypedDict):
    """Root of the reactive store, one per room."""
    roomId: str
    players: Dict[str, Player]
    rounds: List[Round]
    currentRound: int       # 1-based; 0 while no game is active
    questions: List[Question]
    phase: str              # mirrors the router's current state
    connections: Dict[str, str]   # connectionId → playerId
    settings: GameSettings


class ActionData(TypedDict):
    action: str
    args: List[Any]


class ActionMessage(TypedDict):
    """Inbound message from a viewer."""
    type: Literal["action"]
    data: ActionData


class UpdateMessage(TypedDict):
    """Outbound broadcast sent after every settled store change."""
    type: Literal["update"]
    data: GameState
