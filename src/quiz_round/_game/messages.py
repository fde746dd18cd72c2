# Area: Game
"""
quiz_round._game.messages — Wire message schemas
=================================================

Inbound:  {"type": "action", "data": {"action": str, "args": [...]}}
Outbound: {"type": "update", "data": <GameState snapshot>}

Questions entering the bank are validated here as well.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import MalformedMessageError


class ActionData(BaseModel):
    """Name and positional arguments of a dispatched action."""

    model_config = ConfigDict(extra="ignore")

    action: str = Field(min_length=1)
    args: List[Any] = Field(default_factory=list)


class ActionEnvelope(BaseModel):
    """Inbound action message."""

    type: Literal["action"]
    data: ActionData


class UpdateEnvelope(BaseModel):
    """Outbound state broadcast."""

    type: Literal["update"] = "update"
    data: Dict[str, Any]


class QuestionModel(BaseModel):
    """
    A question accepted into the bank.

    Extra keys produced by the question generator (audio URL, word
    timestamps, language) are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    category: str = ""
    options: List[str] = Field(min_length=1)
    answer: str

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "QuestionModel":
        if self.answer not in self.options:
            raise ValueError(f"answer {self.answer!r} is not one of the options")
        return self


def _error_lines(error: ValidationError) -> List[str]:
    lines = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        lines.append(f"{location}: {err.get('msg', 'invalid')}")
    return lines


def parse_action(raw: Union[str, bytes, bytearray, Dict[str, Any]]) -> ActionEnvelope:
    """
    Parse an inbound message.

    Raises:
        MalformedMessageError: If the payload is not JSON or not an action envelope
    """
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return ActionEnvelope.model_validate_json(raw)
        return ActionEnvelope.model_validate(raw)
    except ValidationError as e:
        raise MalformedMessageError(raw, _error_lines(e)) from e


def build_update(snapshot: Dict[str, Any]) -> str:
    """Serialize a state snapshot as an update broadcast."""
    return UpdateEnvelope(data=snapshot).model_dump_json()


def build_action(action: str, *args: Any) -> str:
    """Serialize an action message, as a client would send it."""
    return ActionEnvelope(type="action", data=ActionData(action=action, args=list(args))).model_dump_json()


def validate_question(data: Any) -> Dict[str, Any]:
    """
    Validate one question for the bank.

    Raises:
        pydantic.ValidationError: If the question is incomplete or its answer
            is not one of its options
    """
    return QuestionModel.model_validate(data).model_dump()
