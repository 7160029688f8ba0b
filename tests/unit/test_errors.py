"""Tests for the error hierarchy."""

from smartreply.errors import (
    ConfigurationError,
    InputError,
    PersistenceError,
    SmartReplyError,
    TemplateMissingError,
)


class TestErrors:
    """Tests for SmartReply exceptions."""

    def test_base_to_dict(self):
        """Errors serialize their fields."""
        error = SmartReplyError("boom", code="X", details={"a": 1})
        data = error.to_dict()

        assert data["type"] == "SmartReplyError"
        assert data["message"] == "boom"
        assert data["code"] == "X"
        assert data["details"] == {"a": 1}
        assert data["recoverable"] is False
        assert data["stack_trace"]

    def test_input_error(self):
        """Input errors are validation failures."""
        error = InputError("bad text", details={"received_type": "int"})
        assert error.code == "VALIDATION_ERROR"
        assert error.recoverable is False
        assert isinstance(error, SmartReplyError)

    def test_persistence_error(self):
        """Persistence errors carry operation and key."""
        error = PersistenceError("disk full", operation="set", key="app:s1:short_term_memory")

        assert error.recoverable is True
        assert error.operation == "set"
        assert error.details == {"operation": "set", "key": "app:s1:short_term_memory"}

    def test_template_missing_is_configuration_error(self):
        """A missing fallback is a configuration problem."""
        error = TemplateMissingError("no fallback", source="/tmp/t.yaml")

        assert isinstance(error, ConfigurationError)
        assert error.code == "TEMPLATE_MISSING"
        assert error.details == {"source": "/tmp/t.yaml"}
        assert str(error) == "no fallback"
