"""Error hierarchy for SmartReply.

Provides:
- A base exception carrying a code, details and a recoverable flag
- Input validation errors raised at the library boundary
- Persistence errors raised by storage backends and absorbed by the memory store
- Configuration errors, including a missing fallback response template
"""

import sys
import traceback
from datetime import datetime
from typing import Any, Dict, Optional


class SmartReplyError(Exception):
    """Base exception for all SmartReply errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.recoverable = recoverable
        self.timestamp = datetime.utcnow()

        # Capture stack trace
        self.stack_trace = "".join(traceback.format_exception(*sys.exc_info()))
        if self.stack_trace.strip() == "":
            self.stack_trace = "".join(traceback.format_stack())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
            "stack_trace": self.stack_trace,
        }


class InputError(SmartReplyError):
    """Invalid call parameters at the library boundary."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details, recoverable=False)


class PersistenceError(SmartReplyError):
    """Storage read/write failure.

    Raised by storage backends. The memory store catches it, logs it and
    keeps operating on in-process state.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key
        super().__init__(message, code="PERSISTENCE_ERROR", details=details, recoverable=True)
        self.operation = operation
        self.key = key


class ConfigurationError(SmartReplyError):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, details=details, recoverable=False)


class TemplateMissingError(ConfigurationError):
    """The universal fallback response template is not configured.

    Treated as fatal at startup: without the fallback, rendering cannot
    guarantee a response for every intent.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        details = {"source": source} if source else {}
        super().__init__(message, code="TEMPLATE_MISSING", details=details)
