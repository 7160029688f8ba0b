"""SmartReply: rule-based conversational reply pipeline.

Classifies an utterance's intent, extracts entities and concepts, keeps
bounded per-session memory, and renders a personalized template response.
"""

__version__ = "0.1.0"

# Logging exports
from smartreply.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)

# Error exports
from smartreply.errors import (
    ConfigurationError,
    InputError,
    PersistenceError,
    SmartReplyError,
    TemplateMissingError,
)

# Config exports
from smartreply.config import Config, load_config

# Pipeline exports
from smartreply.memory import MemoryContext, MemoryStore
from smartreply.nlp import (
    CommandParser,
    Entity,
    EntityCategory,
    EntityExtractor,
    IntentClassifier,
    IntentMatch,
    IntentType,
    TextAnalyzer,
    normalize,
    split_sentences,
    tokenize,
)
from smartreply.orchestrator import Orchestrator, ResponseMetadata, SmartResponse
from smartreply.responses import ResponseEngine, TemplateLoader
from smartreply.session import UserPreferences

__all__ = [
    "__version__",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    # Errors
    "SmartReplyError",
    "InputError",
    "PersistenceError",
    "ConfigurationError",
    "TemplateMissingError",
    # Config
    "Config",
    "load_config",
    # Text understanding
    "normalize",
    "tokenize",
    "split_sentences",
    "IntentClassifier",
    "IntentMatch",
    "IntentType",
    "EntityExtractor",
    "Entity",
    "EntityCategory",
    "TextAnalyzer",
    "CommandParser",
    # Memory
    "MemoryStore",
    "MemoryContext",
    # Responses
    "ResponseEngine",
    "TemplateLoader",
    "UserPreferences",
    # Orchestration
    "Orchestrator",
    "SmartResponse",
    "ResponseMetadata",
]
