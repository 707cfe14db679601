"""Tests for structlog configuration and actor binding."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from milaan.config.logging import bind_actor, configure_logging


def _emit(message: str) -> None:
    structlog.get_logger("milaan.services.test").warning(message, problem_id="problem_1")


class TestConfigureLogging:
    def test_json_lines_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        _emit("problem.upvoted")
        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "problem.upvoted"
        assert record["problem_id"] == "problem_1"
        assert record["level"] == "warning"
        assert "timestamp" in record

    def test_stdlib_records_share_pipeline(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        logging.getLogger("milaan.infrastructure.storage").warning("Unreadable storage file")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "Unreadable storage file"
        assert record["logger"] == "milaan.infrastructure.storage"

    def test_quiet_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        structlog.get_logger("milaan.services.test").info("problem.created")
        assert capsys.readouterr().err == ""

    def test_verbose_enables_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("milaan.services.test").debug("problems.searched")
        assert "problems.searched" in capsys.readouterr().err

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestBindActor:
    def test_actor_in_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        bind_actor("user_2")
        _emit("comment.added")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["actor"] == "user_2"

    def test_clear_actor(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        bind_actor("user_2")
        bind_actor(None)
        _emit("comment.added")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "actor" not in record
