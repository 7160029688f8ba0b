"""Conversational memory store.

Keeps a bounded short-term queue of utterances and a decaying long-term
concept frequency map for every session, persisted best-effort through a
key-value backend.
"""

import time
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence

from smartreply.config import MemoryConfig
from smartreply.errors import PersistenceError
from smartreply.lexicon import CONVERSATION_PATTERNS, LONG_TERM_PATTERNS
from smartreply.logging import get_logger
from smartreply.memory.embedding import embed_text
from smartreply.memory.models import (
    ConceptStat,
    ConversationMemory,
    MemoryContext,
    MemoryStats,
    ShortTermEntry,
)
from smartreply.metrics import get_metrics_collector
from smartreply.persistence import InMemoryBackend, KeyValueBackend

logger = get_logger(__name__, component="memory_store")

SHORT_TERM_SUFFIX = "short_term_memory"
LONG_TERM_SUFFIX = "long_term_patterns"


class MemoryStore:
    """Per-session conversational memory.

    Every session is loaded lazily from the backend on first access and
    guarded by its own lock. ``record`` builds the next state and swaps it
    in, so readers never observe a partial update. Backend failures are
    logged and counted; the store keeps serving from process memory.

    Example:
        >>> store = MemoryStore()
        >>> store.record("s1", "create a login form", ["form", "login"])
        >>> store.query("s1").short_term
        ['create a login form']
    """

    def __init__(
        self,
        config: Optional[MemoryConfig] = None,
        backend: Optional[KeyValueBackend] = None,
        namespace: str = "smartreply",
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the store.

        Args:
            config: Memory limits and windows.
            backend: Persistence backend; defaults to in-process storage.
            namespace: Prefix of every persistence key.
            clock: Returns the current time in epoch seconds.
        """
        self.config = config or MemoryConfig()
        self.backend = backend or InMemoryBackend()
        self.namespace = namespace
        self.clock = clock

        self._sessions: Dict[str, ConversationMemory] = {}
        self._locks: Dict[str, Lock] = {}
        self._registry_lock = Lock()
        self._metrics = get_metrics_collector()

    # ------------------------------------------------------------------
    # Keys and locking
    # ------------------------------------------------------------------

    def short_term_key(self, session_key: str) -> str:
        return f"{self.namespace}:{session_key}:{SHORT_TERM_SUFFIX}"

    def long_term_key(self, session_key: str) -> str:
        return f"{self.namespace}:{session_key}:{LONG_TERM_SUFFIX}"

    def _lock_for(self, session_key: str) -> Lock:
        with self._registry_lock:
            lock = self._locks.get(session_key)
            if lock is None:
                lock = self._locks[session_key] = Lock()
            return lock

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def record(self, session_key: str, text: str, concepts: Sequence[str]) -> None:
        """Record one utterance and its concepts.

        Appends to short-term memory (evicting the oldest entry past
        capacity), counts each distinct concept once, and purges long-term
        concepts not seen within the decay window.

        Args:
            session_key: Session identifier.
            text: Raw utterance.
            concepts: Concepts extracted from the utterance.
        """
        now = self.clock()
        unique_concepts = list(dict.fromkeys(concepts))
        entry = ShortTermEntry(text=text, timestamp=now, vector=embed_text(text, unique_concepts))

        with self._lock_for(session_key):
            current = self._load(session_key)

            short_term = current.short_term + [entry]
            overflow = len(short_term) - self.config.max_short_term
            if overflow > 0:
                short_term = short_term[overflow:]

            long_term = dict(current.long_term)
            for concept in unique_concepts:
                previous = long_term.get(concept)
                count = previous.count + 1 if previous else 1
                long_term[concept] = ConceptStat(count=count, last_seen=now)

            long_term = {
                concept: stat
                for concept, stat in long_term.items()
                if now - stat.last_seen <= self.config.decay_seconds
            }

            updated = ConversationMemory(short_term=short_term, long_term=long_term)
            self._publish(session_key, updated)
            self._save(session_key, updated)

        self._metrics.increment_memory_operation("record")
        logger.debug(
            "memory_recorded",
            session_key=session_key,
            short_term=len(short_term),
            long_term=len(long_term),
        )

    def query(self, session_key: str) -> MemoryContext:
        """Return the memory context for a session.

        Returns:
            Recent utterance snippets, frequent concepts ordered by count
            then recency, and detected conversation patterns.
        """
        now = self.clock()
        with self._lock_for(session_key):
            memory = self._load(session_key)

        limit = self.config.snippet_chars
        recent = [
            entry.text[:limit]
            for entry in memory.short_term
            if now - entry.timestamp < self.config.recency_seconds
        ]

        frequent = [
            (concept, stat)
            for concept, stat in memory.long_term.items()
            if stat.count >= self.config.pattern_threshold
            and now - stat.last_seen <= self.config.decay_seconds
        ]
        frequent.sort(key=lambda item: (-item[1].count, -item[1].last_seen))
        long_term = [concept for concept, _ in frequent[: self.config.max_long_term]]

        self._metrics.increment_memory_operation("query")
        return MemoryContext(
            short_term=recent,
            long_term=long_term,
            patterns=self._detect_patterns(memory),
        )

    def clear(self, session_key: str) -> None:
        """Empty both stores for a session and delete its persisted state."""
        with self._lock_for(session_key):
            self._publish(session_key, ConversationMemory())
            for key in (self.short_term_key(session_key), self.long_term_key(session_key)):
                try:
                    self.backend.delete(key)
                except PersistenceError as e:
                    self._persistence_failed("delete", e)

        self._metrics.increment_memory_operation("clear")
        logger.info("memory_cleared", session_key=session_key)

    def stats(self, session_key: str) -> MemoryStats:
        """Summarize a session's memory size and its top five concepts."""
        with self._lock_for(session_key):
            memory = self._load(session_key)

        ranked = sorted(
            memory.long_term.items(),
            key=lambda item: (-item[1].count, -item[1].last_seen),
        )
        return MemoryStats(
            short_term_count=len(memory.short_term),
            long_term_count=len(memory.long_term),
            top_concepts=[concept for concept, _ in ranked[:5]],
        )

    def snapshot(self, session_key: str) -> ConversationMemory:
        """Copy of the session's raw memory state."""
        with self._lock_for(session_key):
            return self._load(session_key).model_copy(deep=True)

    def sessions(self) -> List[str]:
        """Session keys loaded in this process."""
        with self._registry_lock:
            return sorted(self._sessions)

    # ------------------------------------------------------------------
    # Pattern detection
    # ------------------------------------------------------------------

    def _detect_patterns(self, memory: ConversationMemory) -> List[str]:
        patterns: List[str] = []

        window = self.config.pattern_window
        if len(memory.short_term) >= window:
            recent = [entry.text.lower() for entry in memory.short_term[-window:]]
            for name, verbs in CONVERSATION_PATTERNS:
                if any(verb in text for text in recent for verb in verbs):
                    patterns.append(name)

        threshold = self.config.frequent_concept_threshold
        for name, required in LONG_TERM_PATTERNS:
            stats = [memory.long_term.get(concept) for concept in required]
            if all(stat is not None and stat.count >= threshold for stat in stats):
                patterns.append(name)

        return patterns

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self, session_key: str) -> ConversationMemory:
        """Return the cached session state, loading it on first access.

        Must be called with the session lock held.
        """
        memory = self._sessions.get(session_key)
        if memory is not None:
            return memory

        memory = ConversationMemory()
        try:
            short_term = self.backend.get(self.short_term_key(session_key)) or []
            long_term = self.backend.get(self.long_term_key(session_key)) or {}
            memory = ConversationMemory(
                short_term=[ShortTermEntry(**item) for item in short_term][-self.config.max_short_term :],
                long_term={concept: ConceptStat(**stat) for concept, stat in long_term.items()},
            )
            self._metrics.increment_memory_operation("load")
        except PersistenceError as e:
            self._persistence_failed("load", e)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(
                "memory_state_corrupt",
                session_key=session_key,
                error=str(e),
            )
            self._metrics.increment_persistence_error("load")

        self._publish(session_key, memory)
        return memory

    def _publish(self, session_key: str, memory: ConversationMemory) -> None:
        with self._registry_lock:
            self._sessions[session_key] = memory

    def _save(self, session_key: str, memory: ConversationMemory) -> None:
        try:
            self.backend.set(
                self.short_term_key(session_key),
                [entry.model_dump() for entry in memory.short_term],
            )
            self.backend.set(
                self.long_term_key(session_key),
                {concept: stat.model_dump() for concept, stat in memory.long_term.items()},
            )
        except PersistenceError as e:
            self._persistence_failed("save", e)

    def _persistence_failed(self, operation: str, error: PersistenceError) -> None:
        logger.warning(
            "memory_persist_failed",
            operation=operation,
            key=error.key,
            error=error.message,
        )
        self._metrics.increment_persistence_error(operation)
