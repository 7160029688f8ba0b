"""Tests for structured logging setup."""

import json

import pytest

from smartreply.logging import (
    add_app_context,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    truncate_utterances,
)


@pytest.fixture
def json_logs(capsys):
    """Configure JSON logging to the captured stdout and read it back."""
    configure_logging(log_level="DEBUG", log_format="json")

    def _read():
        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        return [json.loads(line) for line in lines]

    yield _read
    clear_context()
    configure_logging()


class TestProcessors:
    """Tests for custom processors."""

    def test_app_context(self):
        """Events are tagged with the application."""
        event = add_app_context(None, "info", {"event": "x"})
        assert event["app"] == "smartreply"

    def test_short_text_kept(self):
        """Short utterances are logged as-is."""
        event = truncate_utterances(None, "info", {"text": "hello"})
        assert event["text"] == "hello"

    def test_long_text_truncated(self):
        """Long utterances are cut at 120 characters."""
        event = truncate_utterances(None, "info", {"text": "a" * 500})
        assert event["text"] == "a" * 120 + "... [truncated]"

    def test_non_string_text_ignored(self):
        """Only string text fields are touched."""
        event = truncate_utterances(None, "info", {"text": 42})
        assert event["text"] == 42


class TestJsonLogging:
    """Tests for JSON output."""

    def test_event_fields(self, json_logs):
        """JSON events carry level, context and bound fields."""
        logger = get_logger("smartreply.test", component="tests")
        bind_context(session_key="s1")

        logger.info("turn_handled", text="x" * 200, intent="greeting")

        (event,) = json_logs()
        assert event["event"] == "turn_handled"
        assert event["level"] == "info"
        assert event["component"] == "tests"
        assert event["session_key"] == "s1"
        assert event["app"] == "smartreply"
        assert event["text"].endswith("... [truncated]")

    def test_level_filter(self, json_logs):
        """Events below the configured level are dropped."""
        configure_logging(log_level="WARNING", log_format="json")
        logger = get_logger("smartreply.test")

        logger.info("hidden")
        logger.warning("shown")

        assert [e["event"] for e in json_logs()] == ["shown"]
