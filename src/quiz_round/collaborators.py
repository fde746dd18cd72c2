"""
quiz_round.collaborators — Interfaces of external collaborators
================================================================

The transport, question-bank storage, question generation and speech
transcription live outside this package. A GameRoom only needs objects
that satisfy these protocols.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from .types import Question


class Connection(Protocol):
    """One network endpoint of a room (a browser tab, a screen, ...)."""

    id: str

    def send(self, text: str) -> None:
        """Deliver a message to this endpoint only."""
        ...


class QuestionRepository(Protocol):
    """Durable storage for a room's question bank."""

    def load(self) -> List[Question]:
        ...

    def save(self, questions: Sequence[Question]) -> None:
        ...


class QuestionGenerator(Protocol):
    """Produces questions (and optionally narration audio) for categories."""

    def generate(self, categories: Sequence[str]) -> List[Question]:
        ...


class Transcriber(Protocol):
    """Speech-to-text for spoken answers."""

    def transcribe(self, audio: bytes) -> str:
        ...
