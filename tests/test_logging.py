"""Tests for structured logging configuration."""

import json
import logging

import pytest
import structlog

from taskboard.config import Settings
from taskboard.logging import (
    Loggers,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    clear_context()
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(Settings(_env_file=None, log_format="json", log_level="info"))

        get_logger("test").info("task_created", task_id=3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "task_created"
        assert record["task_id"] == 3
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filtering(self, capsys):
        configure_logging(Settings(_env_file=None, log_format="json", log_level="warning"))

        logger = get_logger("test")
        logger.info("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_console_output(self, capsys):
        configure_logging(Settings(_env_file=None, log_format="console"))
        get_logger("test").info("hello_console")
        assert "hello_console" in capsys.readouterr().err

    def test_defaults_without_settings(self):
        configure_logging()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestContext:
    def test_bound_context_is_merged(self, capsys):
        configure_logging(Settings(_env_file=None, log_format="json"))

        bind_context(request_id="abc123")
        get_logger().info("with_context")
        unbind_context("request_id")
        get_logger().info("without_context")

        lines = [json.loads(l) for l in capsys.readouterr().err.strip().splitlines()]
        assert lines[-2]["request_id"] == "abc123"
        assert "request_id" not in lines[-1]

    def test_clear_context(self):
        bind_context(a=1, b=2)
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestLoggers:
    @pytest.mark.parametrize("name", ["store", "persistence", "api", "server"])
    def test_component_loggers(self, name):
        logger = getattr(Loggers, name)()
        assert logger is not None
