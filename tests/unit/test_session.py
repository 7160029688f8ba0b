"""Tests for per-session response context."""

import pytest
from pydantic import ValidationError

from smartreply.session import (
    ResponseContext,
    Turn,
    UserPreferences,
    Verbosity,
    personalization_level,
)


class TestPersonalizationLevel:
    """Tests for personalization buckets."""

    @pytest.mark.parametrize(
        "count,level",
        [(0, "low"), (1, "low"), (2, "medium"), (4, "medium"), (5, "high"), (10, "high")],
    )
    def test_buckets(self, count, level):
        """0-1 low, 2-4 medium, 5+ high."""
        assert personalization_level(count) == level


class TestResponseContext:
    """Tests for ResponseContext."""

    def test_history_bounded(self):
        """Only the ten most recent turns are kept."""
        context = ResponseContext()
        for i in range(12):
            context.add_turn(Turn(text=f"t{i}", intent="unknown"), f"r{i}")

        assert [t.text for t in context.history] == [f"t{i}" for i in range(2, 12)]
        assert context.previous_responses == [f"r{i}" for i in range(7, 12)]

    def test_command_count(self):
        """Commands are summed across turns and capped at ten."""
        context = ResponseContext()
        context.add_turn(Turn(text="a", intent="unknown", commands=2), "r")
        context.add_turn(Turn(text="b", intent="unknown"), "r")
        assert context.command_count == 3

        for i in range(5):
            context.add_turn(Turn(text=f"t{i}", intent="unknown", commands=3), "r")
        assert context.command_count == 10


class TestUserPreferences:
    """Tests for UserPreferences."""

    def test_defaults(self):
        """Defaults are detailed, intermediate and friendly."""
        preferences = UserPreferences()
        assert preferences.verbosity == Verbosity.DETAILED
        assert preferences.technical_level.value == "intermediate"
        assert preferences.communication_style.value == "friendly"
        assert preferences.preferred_technologies == ["react", "typescript", "tailwind"]

    def test_assignment_validated(self):
        """Invalid assignments are rejected."""
        preferences = UserPreferences()
        with pytest.raises(ValidationError):
            preferences.verbosity = "loud"
