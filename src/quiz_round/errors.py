"""
quiz_round.errors — Custom exception classes
=============================================

Defines the exception hierarchy for router usage errors and malformed
inbound messages. Each exception stores enough context for structured
logging.
"""

from __future__ import annotations
from typing import Any, Iterable, List, Optional
import json


class QuizRoundError(Exception):
    """Base exception for all quiz_round package errors."""
    pass


class RouterError(QuizRoundError):
    """Raised when the state router is used incorrectly."""
    pass


class UnknownStateError(RouterError, ValueError):
    """Raised when a transition targets a state the router does not declare."""

    def __init__(self, state: str, known_states: Iterable[str]):
        self.state = state
        self.known_states = sorted(known_states)
        super().__init__(
            f"Unknown state '{state}' (declared: {', '.join(self.known_states)})"
        )


class InactiveContextError(RouterError):
    """Raised when cleanup/timeout is registered outside a running init hook."""

    def __init__(self, state: Optional[str]):
        self.state = state
        super().__init__(
            "cleanup() and timeout() may only be called synchronously inside "
            f"a state's init hook (context for state '{state}' is closed)"
        )


class AsyncInitError(RouterError, TypeError):
    """Raised when a state's init hook is a coroutine."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(
            f"init hook of state '{state}' must be synchronous; "
            "cleanups cannot be registered after yielding control"
        )


class MalformedMessageError(QuizRoundError):
    """Raised when an inbound message fails to parse or validate."""

    def __init__(self, raw_payload: Any, validation_errors: List[str]):
        self.raw_payload = raw_payload
        self.validation_errors = validation_errors
        super().__init__(f"Malformed inbound message: {validation_errors}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="MALFORMED_MESSAGE",
            raw_payload=self.raw_payload,
            validation_errors=self.validation_errors,
        )


def _format_error_block(
    error_type: str,
    raw_payload: Any,
    validation_errors: Optional[List[str]],
) -> str:
    """Format a structured error block for the log file."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " INBOUND MESSAGE DROPPED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        "",
        " ── RAW PAYLOAD " + "─" * 48,
        _indent_payload(raw_payload),
    ]

    if validation_errors:
        lines.append("")
        lines.append(" ── VALIDATION ERRORS " + "─" * 42)
        for error in validation_errors:
            lines.append(f" • {error}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_payload(data: Any, indent: int = 2) -> str:
    """Format a payload for error logs; raw text is shown as-is."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    if isinstance(data, str):
        return " " + data
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
