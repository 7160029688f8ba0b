"""End-to-end conversations through the full pipeline."""

import random

import pytest

from smartreply.config import MemoryConfig
from smartreply.memory import MemoryStore
from smartreply.nlp import EntityExtractor, IntentType
from smartreply.orchestrator import Orchestrator
from smartreply.persistence import FileBackend, SQLiteBackend


def build(engine, backend, clock):
    return Orchestrator(
        extractor=EntityExtractor(expansion_probability=0.0, rng=random.Random(0)),
        memory=MemoryStore(config=MemoryConfig(), backend=backend, clock=clock),
        engine=engine,
    )


@pytest.fixture(params=["file", "sqlite"])
def durable_backend(request, tmp_path):
    if request.param == "file":
        return lambda: FileBackend(tmp_path / "memory")
    return lambda: SQLiteBackend(tmp_path / "memory.db")


class TestConversation:
    """Multi-turn conversations."""

    def test_refinement_patterns(self, engine, clock, durable_backend):
        """Follow-up edits are recognized as conversation patterns."""
        orchestrator = build(engine, durable_backend(), clock)

        for text in ("create a dashboard", "change the color to blue", "add a search feature"):
            orchestrator.handle("s1", text)
            clock.advance(30)
        response = orchestrator.handle("s1", "fix the login error")

        assert response.memory.patterns == ["iterative_refinement", "feature_expansion"]
        assert len(response.memory.short_term) == 3
        assert response.metadata.personalization_level == "medium"

    def test_memory_survives_restart(self, engine, clock, durable_backend):
        """A new process picks up persisted memory but not response history."""
        first = build(engine, durable_backend(), clock)
        first.handle("s1", "create a dashboard with charts")
        first.handle("s1", "add a login form")

        clock.advance(60)
        second = build(engine, durable_backend(), clock)
        response = second.handle("s1", "make it responsive")

        assert response.metadata.context_used is True
        assert response.memory.short_term == ["create a dashboard with charts", "add a login form"]
        assert response.metadata.personalization_level == "low"
        assert second.memory.stats("s1").short_term_count == 3

    def test_long_term_focus(self, engine, clock, backend):
        """Repeated concepts become frequent and form long-term patterns."""
        orchestrator = build(engine, backend, clock)

        for _ in range(5):
            orchestrator.handle("s1", "create a responsive mobile layout")
            clock.advance(10)
        response = orchestrator.handle("s1", "hello")

        assert "mobile_focus" in response.memory.patterns
        assert {"responsive", "mobile", "layout"} <= set(response.memory.long_term)

    def test_memory_decays(self, engine, clock, backend):
        """Old conversations fade from the context."""
        orchestrator = build(engine, backend, clock)
        for _ in range(3):
            orchestrator.handle("s1", "create a login form")

        clock.advance(73 * 3600)
        response = orchestrator.handle("s1", "hello")

        assert response.memory.short_term == []
        assert response.memory.long_term == []
        assert response.metadata.context_used is False

    def test_storage_outage(self, engine, clock, failing_backend):
        """Replies keep flowing when storage is down."""
        orchestrator = build(engine, failing_backend, clock)

        orchestrator.handle("s1", "create a dashboard with charts")
        response = orchestrator.handle("s1", "what is react")

        assert response.intent == IntentType.QUESTION
        assert response.memory.short_term == ["create a dashboard with charts"]
