# Area: Shared
"""
Shared utilities used by the core framework and the game layer.

This package contains:
- Logging configuration and the per-room logger adapter
"""

from .logging_config import (
    setup_logging,
    room_logger,
    RoomLoggerAdapter,
    TerminalFormatter,
    JSONFormatter,
)

__all__ = [
    "setup_logging",
    "room_logger",
    "RoomLoggerAdapter",
    "TerminalFormatter",
    "JSONFormatter",
]
