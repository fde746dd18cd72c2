# Area: Shared
"""
quiz_round._shared.logging_config — Structured logging setup
============================================================

Configures dual logging: terminal (colored) + file (JSON).
Every module logs through a child of the ``quiz_round`` logger.

Records produced inside a room carry a ``room_id`` attribute (see
``room_logger``). The terminal shows it as a ``[ROOM]`` prefix and the
JSON file writes it as its own field, so one log file can hold many
rooms and still be filtered per room.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, MutableMapping, Optional, Tuple

PACKAGE_LOGGER = "quiz_round"


class RoomLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that stamps every record with the room it belongs to.

    Extra fields passed at the call site are kept; ``room_id`` is added
    unless the caller supplied one.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def room_logger(name: str, room_id: str) -> RoomLoggerAdapter:
    """Return the ``name`` logger bound to ``room_id``."""
    return RoomLoggerAdapter(logging.getLogger(name), {"room_id": room_id})


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output; prefixes the room id if any."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        room_id = getattr(record, "room_id", None)
        if room_id:
            record.msg = f"[{room_id}] {record.getMessage()}"
            record.args = None
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per line for the log file."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        room_id = getattr(record, "room_id", None)
        if room_id:
            log_data["room_id"] = room_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(
    log_file_path: Optional[str] = "quiz_round.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str or None
        Path to the JSON log file. ``None`` disables file logging.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    # Rooms log through the package handlers only
    pkg_logger.propagate = False
