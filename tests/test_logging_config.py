# Area: Shared Tests
"""Tests for logging setup and formatters."""

import json
import logging

import pytest

from quiz_round._shared.logging_config import (
    JSONFormatter,
    RoomLoggerAdapter,
    TerminalFormatter,
    room_logger,
    setup_logging,
)


@pytest.fixture
def restore_logger():
    pkg_logger = logging.getLogger("quiz_round")
    level, propagate = pkg_logger.level, pkg_logger.propagate
    yield pkg_logger
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate


def make_record(level=logging.INFO, msg="hello", **extra):
    record = logging.LogRecord("quiz_round.room", level, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestFormatters:
    """Tests for the terminal and JSON formatters."""

    def test_terminal_colors_level(self):
        record = make_record(logging.WARNING)
        text = TerminalFormatter(fmt="%(levelname)s %(message)s").format(record)
        assert "\033[33m" in text
        assert "hello" in text

    def test_terminal_leaves_record_untouched(self):
        record = make_record(logging.ERROR)
        TerminalFormatter(fmt="%(levelname)s").format(record)
        assert record.levelname == "ERROR"

    def test_terminal_prefixes_room(self):
        record = make_record(msg="joined %s", room_id="ABCD")
        record.args = ("p1",)
        text = TerminalFormatter(fmt="%(message)s").format(record)
        assert text == "[ABCD] joined p1"
        assert record.msg == "joined %s"

    def test_terminal_without_room(self):
        text = TerminalFormatter(fmt="%(message)s").format(make_record())
        assert text == "hello"

    def test_json_fields(self):
        data = json.loads(JSONFormatter().format(make_record(room_id="ABCD")))
        assert data["level"] == "INFO"
        assert data["logger"] == "quiz_round.room"
        assert data["message"] == "hello"
        assert data["room_id"] == "ABCD"
        assert "timestamp" in data

    def test_json_without_room(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert "room_id" not in data


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_and_terminal_handlers(self, restore_logger, tmp_path):
        log_path = tmp_path / "logs" / "quiz.log"
        setup_logging(str(log_path), level=logging.DEBUG)
        assert len(restore_logger.handlers) == 2
        assert restore_logger.propagate is False

        logging.getLogger("quiz_round.lifecycle").info("Phase: lobby → preQuestioning")
        for handler in restore_logger.handlers:
            handler.flush()
        line = log_path.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["message"] == "Phase: lobby → preQuestioning"

    def test_terminal_only(self, restore_logger):
        setup_logging(None)
        assert len(restore_logger.handlers) == 1
        assert restore_logger.level == logging.INFO

    def test_repeated_setup_replaces_handlers(self, restore_logger):
        setup_logging(None)
        setup_logging(None)
        assert len(restore_logger.handlers) == 1


class TestRoomLogger:
    """Tests for room-bound loggers."""

    def test_records_carry_room_id(self, caplog):
        log = room_logger("quiz_round.room", "ABCD")
        assert isinstance(log, RoomLoggerAdapter)
        with caplog.at_level(logging.INFO, logger="quiz_round.room"):
            log.info("Loaded 3 questions from storage")
        assert caplog.records[-1].room_id == "ABCD"
        assert caplog.records[-1].getMessage() == "Loaded 3 questions from storage"

    def test_call_site_extra_is_kept(self, caplog):
        log = room_logger("quiz_round.room", "ABCD")
        with caplog.at_level(logging.INFO, logger="quiz_round.room"):
            log.info("Dispatch", extra={"action": "startGame"})
        record = caplog.records[-1]
        assert record.room_id == "ABCD"
        assert record.action == "startGame"

    def test_room_id_reaches_log_file(self, restore_logger, tmp_path, capsys):
        log_path = tmp_path / "quiz.log"
        setup_logging(str(log_path))
        room_logger("quiz_round.lifecycle", "WXYZ").info("Game reset")
        for handler in restore_logger.handlers:
            handler.flush()
        data = json.loads(log_path.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert data["room_id"] == "WXYZ"
        assert data["message"] == "Game reset"
        assert "[WXYZ] Game reset" in capsys.readouterr().out
