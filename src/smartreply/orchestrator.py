"""Request orchestration.

Runs one utterance through classification, extraction, analysis, memory
and template rendering, records the turn, and returns a SmartResponse.
"""

import random
import time
from collections.abc import Mapping
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from smartreply.config import Config
from smartreply.errors import InputError
from smartreply.logging import bind_context, get_logger, unbind_context
from smartreply.memory import MemoryContext, MemoryStore
from smartreply.metrics import get_metrics_collector
from smartreply.nlp import (
    Command,
    CommandParser,
    Entity,
    EntityCategory,
    EntityExtractor,
    IntentClassifier,
    IntentType,
    TextAnalysis,
    TextAnalyzer,
    clean_transcript,
    normalize,
)
from smartreply.persistence import create_backend
from smartreply.responses import ResponseEngine
from smartreply.session import ResponseContext, Turn, UserPreferences, personalization_level

logger = get_logger(__name__, component="orchestrator")

INTENT_MATCHED_THRESHOLD = 0.7

PARAMETER_DEFAULTS = {
    "componentType": "component",
    "features": "modern functionality",
    "style": "professional",
    "featureType": "requested",
    "visualization": "chart",
    "report": "report",
    "testFor": "your code",
}


class ResponseMetadata(BaseModel):
    """How a response was produced."""

    processing_time_ms: float = Field(ge=0.0)
    intent_matched: bool = Field(description="Confidence above 0.7")
    context_used: bool = Field(description="Recent memory existed before this turn")
    personalization_level: str = Field(description="low, medium or high")


class SmartResponse(BaseModel):
    """Complete reply to one utterance."""

    spoken_message: str
    display_message: str
    action_suggestions: List[str] = Field(default_factory=list)
    follow_up_questions: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    response_type: str = Field(description="success, error, clarification or suggestion")
    intent: IntentType
    entities: List[Entity] = Field(default_factory=list)
    memory: MemoryContext = Field(default_factory=MemoryContext)
    metadata: ResponseMetadata


def build_parameters(
    commands: Sequence[Command],
    entities: Sequence[Entity],
    analysis: TextAnalysis,
) -> Dict[str, Any]:
    """Collect template parameters for one utterance.

    Command parameters come first, entity values (keyed by category) are
    layered on top, then keywords, key phrases and defaults. Later
    commands and entities win on conflicts.
    """
    parameters: Dict[str, Any] = CommandParser.merged_parameters(commands)

    by_category: Dict[str, str] = {}
    for entity in entities:
        by_category[entity.category.value] = entity.value
    parameters.update(by_category)

    parameters["keywords"] = analysis.keywords
    parameters["keyPhrases"] = analysis.key_phrases

    if not parameters.get("componentType"):
        parameters["componentType"] = by_category.get(EntityCategory.COMPONENT.value)
    if not parameters.get("style"):
        parameters["style"] = parameters.get("color")
    for key, default in PARAMETER_DEFAULTS.items():
        if not parameters.get(key):
            parameters[key] = default
    parameters["topic"] = parameters.get("about") or parameters.get("question") or "the concept"
    return parameters


class Orchestrator:
    """Composes the pipeline into a single request/response cycle.

    Collaborators are injected so tests can substitute any of them;
    :meth:`from_config` builds the default wiring.

    Example:
        >>> orchestrator = Orchestrator()
        >>> response = orchestrator.handle("session-1", "create a dashboard with charts")
        >>> response.intent
        <IntentType.UI_CREATION: 'ui_creation'>
    """

    def __init__(
        self,
        classifier: Optional[IntentClassifier] = None,
        extractor: Optional[EntityExtractor] = None,
        analyzer: Optional[TextAnalyzer] = None,
        command_parser: Optional[CommandParser] = None,
        memory: Optional[MemoryStore] = None,
        engine: Optional[ResponseEngine] = None,
    ):
        self.classifier = classifier or IntentClassifier()
        self.extractor = extractor or EntityExtractor()
        self.analyzer = analyzer or TextAnalyzer()
        self.command_parser = command_parser or CommandParser()
        self.memory = memory or MemoryStore()
        self.engine = engine or ResponseEngine.from_path()

        self._contexts: Dict[str, ResponseContext] = {}
        self._contexts_lock = Lock()
        self._metrics = get_metrics_collector()

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "Orchestrator":
        """Build an orchestrator from configuration.

        Raises:
            TemplateMissingError: If the templates lack a fallback.
            ConfigurationError: If the storage backend is misconfigured.
        """
        config = config or Config()
        backend = create_backend(config.storage)
        rng = random.Random(config.extraction.seed)

        logger.info(
            "orchestrator_configured",
            environment=config.environment,
            backend=config.storage.backend,
        )
        return cls(
            extractor=EntityExtractor(
                expansion_probability=config.extraction.expansion_probability,
                rng=rng,
            ),
            memory=MemoryStore(
                config=config.memory,
                backend=backend,
                namespace=config.storage.namespace,
            ),
            engine=ResponseEngine.from_path(
                config.responses.templates_path,
                max_suggestions=config.responses.max_suggestions,
                max_follow_ups=config.responses.max_follow_ups,
            ),
        )

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def handle(
        self,
        session_key: str,
        raw_text: str,
        generation_result: Optional[Mapping] = None,
    ) -> SmartResponse:
        """Handle one utterance.

        Args:
            session_key: Session identifier.
            raw_text: Raw user utterance; may be empty.
            generation_result: Result reported by a code generator. Only
                its ``error`` flag and backend file list are read.

        Returns:
            The assembled response. Blank input yields the fallback
            response and is not recorded.

        Raises:
            InputError: If the arguments have the wrong type or the
                session key is empty.
        """
        self._validate(session_key, raw_text, generation_result)
        bind_context(session_key=session_key)
        try:
            with self._metrics.track_request_latency():
                return self._handle(session_key, raw_text, generation_result)
        finally:
            unbind_context("session_key")

    def _handle(
        self,
        session_key: str,
        raw_text: str,
        generation_result: Optional[Mapping],
    ) -> SmartResponse:
        started = time.perf_counter()

        normalized = normalize(raw_text)
        tokens = normalized.split()

        match = self.classifier.classify(normalized)
        entities = self.extractor.extract(tokens)
        analysis = self.analyzer.analyze(raw_text)
        commands = self.command_parser.parse(raw_text, match, entities)
        memory = self.memory.query(session_key)

        context = self._context(session_key)
        with self._contexts_lock:
            preferences = context.preferences.model_copy()

        parameters = build_parameters(commands, entities, analysis)
        rendered = self.engine.render(
            match.intent,
            clean_transcript(raw_text),
            parameters,
            preferences,
            entities=entities,
            analysis=analysis,
            generation_result=generation_result,
        )
        response_type = self.engine.response_type(match.intent, match.confidence, generation_result)

        if tokens:
            self.memory.record(session_key, raw_text, self.extractor.concepts(raw_text, entities))
            with self._contexts_lock:
                context.add_turn(
                    Turn(
                        text=raw_text,
                        intent=match.intent.value,
                        parameters=parameters,
                        commands=len(commands),
                    ),
                    rendered.spoken_message,
                )

        with self._contexts_lock:
            level = personalization_level(context.command_count)

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._metrics.increment_request_count(match.intent.value, response_type)
        logger.info(
            "turn_handled",
            text=raw_text,
            intent=match.intent.value,
            confidence=match.confidence,
            response_type=response_type,
            entities=len(entities),
            processing_time_ms=round(elapsed_ms, 3),
        )

        return SmartResponse(
            spoken_message=rendered.spoken_message,
            display_message=rendered.display_message,
            action_suggestions=rendered.suggestions,
            follow_up_questions=rendered.follow_ups,
            confidence=match.confidence,
            response_type=response_type,
            intent=match.intent,
            entities=entities,
            memory=memory,
            metadata=ResponseMetadata(
                processing_time_ms=elapsed_ms,
                intent_matched=match.confidence > INTENT_MATCHED_THRESHOLD,
                context_used=len(memory.short_term) > 0,
                personalization_level=level,
            ),
        )

    @staticmethod
    def _validate(session_key: Any, raw_text: Any, generation_result: Any) -> None:
        if not isinstance(raw_text, str):
            raise InputError(
                "text must be a string",
                details={"received_type": type(raw_text).__name__},
            )
        if not isinstance(session_key, str) or not session_key.strip():
            raise InputError("session_key must be a non-empty string")
        if generation_result is not None and not isinstance(generation_result, Mapping):
            raise InputError(
                "generation_result must be a mapping",
                details={"received_type": type(generation_result).__name__},
            )

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    def _context(self, session_key: str) -> ResponseContext:
        with self._contexts_lock:
            context = self._contexts.get(session_key)
            if context is None:
                context = self._contexts[session_key] = ResponseContext()
            return context

    def get_preferences(self, session_key: str) -> UserPreferences:
        """Copy of the session's preferences."""
        context = self._context(session_key)
        with self._contexts_lock:
            return context.preferences.model_copy(deep=True)

    def update_preferences(self, session_key: str, **changes: Any) -> UserPreferences:
        """Update preference fields for a session.

        Raises:
            InputError: If a field is unknown or a value is invalid.
        """
        unknown = set(changes) - set(UserPreferences.model_fields)
        if unknown:
            raise InputError(
                f"Unknown preference fields: {', '.join(sorted(unknown))}",
                details={"fields": sorted(unknown)},
            )

        context = self._context(session_key)
        with self._contexts_lock:
            merged = {**context.preferences.model_dump(), **changes}
            try:
                context.preferences = UserPreferences(**merged)
            except ValueError as e:
                raise InputError(f"Invalid preferences: {e}", details={"changes": changes}) from e
            updated = context.preferences.model_copy(deep=True)

        logger.info("preferences_updated", session_key=session_key, fields=sorted(changes))
        return updated

    def history_length(self, session_key: str) -> int:
        context = self._context(session_key)
        with self._contexts_lock:
            return len(context.history)

    def clear_session(self, session_key: str) -> None:
        """Drop the session's response context and memory."""
        with self._contexts_lock:
            self._contexts.pop(session_key, None)
        self.memory.clear(session_key)
        logger.info("session_cleared", session_key=session_key)
