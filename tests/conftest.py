"""Pytest configuration and fixtures for SmartReply tests."""

import os
import random
from typing import Any, List, Optional

import pytest
from prometheus_client import REGISTRY

from smartreply.config import MemoryConfig
from smartreply.errors import PersistenceError
from smartreply.memory import MemoryStore
from smartreply.nlp import EntityExtractor
from smartreply.orchestrator import Orchestrator
from smartreply.persistence import InMemoryBackend, KeyValueBackend
from smartreply.responses import ResponseEngine


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingBackend(KeyValueBackend):
    """Backend whose every operation fails."""

    name = "failing"

    def get(self, key: str) -> Optional[Any]:
        raise PersistenceError("storage offline", operation="get", key=key)

    def set(self, key: str, value: Any) -> None:
        raise PersistenceError("storage offline", operation="set", key=key)

    def delete(self, key: str) -> bool:
        raise PersistenceError("storage offline", operation="delete", key=key)

    def keys(self, prefix: str = "") -> List[str]:
        raise PersistenceError("storage offline", operation="keys")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def failing_backend() -> FailingBackend:
    return FailingBackend()


@pytest.fixture
def store(clock, backend) -> MemoryStore:
    """Memory store on a fake clock with default limits."""
    return MemoryStore(config=MemoryConfig(), backend=backend, clock=clock)


@pytest.fixture(scope="session")
def engine() -> ResponseEngine:
    """Engine over the packaged templates."""
    return ResponseEngine.from_path()


@pytest.fixture
def orchestrator(store, engine) -> Orchestrator:
    """Orchestrator with neighbour expansion disabled."""
    return Orchestrator(
        extractor=EntityExtractor(expansion_probability=0.0, rng=random.Random(0)),
        memory=store,
        engine=engine,
    )


@pytest.fixture
def metric_value():
    """Read a sample from the default prometheus registry (0.0 if absent)."""

    def _read(name: str, labels: Optional[dict] = None) -> float:
        value = REGISTRY.get_sample_value(name, labels or {})
        return value or 0.0

    return _read


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["SMARTREPLY_ENV"] = "test"
    config.addinivalue_line("markers", "unit: unit tests that don't require external services")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on path."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
