"""Tests for the conversational memory store."""

import threading

import pytest

from smartreply.config import MemoryConfig
from smartreply.memory import MemoryStore
from smartreply.memory.embedding import DIMENSIONS

HOUR = 3600.0


class TestRecord:
    """Tests for MemoryStore.record()."""

    def test_appends_short_term(self, store):
        """Recorded text shows up in short-term memory."""
        store.record("s1", "create a login form", ["form", "login"])

        snapshot = store.snapshot("s1")
        assert [e.text for e in snapshot.short_term] == ["create a login form"]
        assert len(snapshot.short_term[0].vector) == DIMENSIONS

    def test_evicts_oldest(self, clock, backend):
        """Short-term memory is a bounded FIFO."""
        store = MemoryStore(config=MemoryConfig(max_short_term=3), backend=backend, clock=clock)
        for i in range(5):
            store.record("s1", f"message {i}", [])

        assert [e.text for e in store.snapshot("s1").short_term] == [
            "message 2",
            "message 3",
            "message 4",
        ]

    def test_default_limit_drops_first_of_51(self, store):
        """The fifty-first record pushes the first one out."""
        for i in range(51):
            store.record("s1", f"message {i}", [])

        texts = [e.text for e in store.snapshot("s1").short_term]
        assert len(texts) == 50
        assert texts[0] == "message 1"
        assert texts[-1] == "message 50"

    def test_identical_text_twice(self, store):
        """Repeating an utterance adds one entry and one count per concept."""
        store.record("s1", "create a login form", ["form", "login"])
        store.record("s1", "create a login form", ["form", "login"])

        snapshot = store.snapshot("s1")
        assert [e.text for e in snapshot.short_term] == ["create a login form"] * 2
        assert snapshot.long_term["form"].count == 2
        assert snapshot.long_term["login"].count == 2
        assert set(snapshot.long_term) == {"form", "login"}

    def test_counts_each_concept_once_per_record(self, store):
        """Repeated concepts in one utterance count once."""
        store.record("s1", "form form", ["form", "form"])
        store.record("s1", "another form", ["form"])

        assert store.snapshot("s1").long_term["form"].count == 2

    def test_updates_last_seen(self, store, clock):
        """Re-seeing a concept refreshes its timestamp."""
        store.record("s1", "a form", ["form"])
        clock.advance(60)
        store.record("s1", "a form", ["form"])

        assert store.snapshot("s1").long_term["form"].last_seen == clock.now

    def test_purges_decayed_concepts(self, store, clock):
        """Concepts unseen for longer than the decay window are dropped."""
        store.record("s1", "a form", ["form"])
        clock.advance(73 * HOUR)
        store.record("s1", "a chart", ["chart"])

        assert set(store.snapshot("s1").long_term) == {"chart"}

    def test_sessions_are_isolated(self, store):
        """One session never sees another's memory."""
        store.record("alice", "hello", ["greeting"])

        assert store.query("bob").short_term == []
        assert store.sessions() == ["alice", "bob"]


class TestQuery:
    """Tests for MemoryStore.query()."""

    def test_empty_session(self, store):
        """An unknown session has an empty context."""
        context = store.query("nobody")
        assert context.short_term == []
        assert context.long_term == []
        assert context.patterns == []

    def test_recency_window(self, store, clock):
        """Only utterances inside the recency window are returned."""
        store.record("s1", "old message", [])
        clock.advance(31 * 60)
        store.record("s1", "new message", [])

        assert store.query("s1").short_term == ["new message"]

    def test_snippets_truncated(self, store):
        """Snippets keep the first 100 characters."""
        store.record("s1", "x" * 250, [])
        assert store.query("s1").short_term == ["x" * 100]

    def test_long_term_threshold_and_order(self, store, clock):
        """Frequent concepts are ordered by count, then recency."""
        for _ in range(3):
            store.record("s1", "forms", ["form"])
        clock.advance(10)
        for _ in range(3):
            store.record("s1", "tables", ["table"])
        for _ in range(4):
            store.record("s1", "logins", ["login"])
        store.record("s1", "once", ["chart"])

        assert store.query("s1").long_term == ["login", "table", "form"]

    def test_long_term_limit(self, clock, backend):
        """At most max_long_term concepts are returned."""
        store = MemoryStore(
            config=MemoryConfig(max_long_term=1, pattern_threshold=1),
            backend=backend,
            clock=clock,
        )
        store.record("s1", "a", ["a", "b"])
        store.record("s1", "b", ["b"])

        assert store.query("s1").long_term == ["b"]


class TestPatterns:
    """Tests for conversation pattern detection."""

    def test_needs_full_window(self, store):
        """Fewer utterances than the window detect nothing."""
        store.record("s1", "change the color", [])
        store.record("s1", "change the font", [])

        assert store.query("s1").patterns == []

    def test_conversation_patterns(self, store):
        """Verbs in the last three utterances trigger patterns."""
        store.record("s1", "create a dashboard", [])
        store.record("s1", "Change the color to blue", [])
        store.record("s1", "also fix the error", [])

        assert store.query("s1").patterns == [
            "iterative_refinement",
            "feature_expansion",
            "problem_solving",
        ]

    def test_only_recent_window_counts(self, store):
        """Older utterances fall out of the window."""
        store.record("s1", "change the color", [])
        for text in ("create a page", "create a form", "create a table"):
            store.record("s1", text, [])

        assert store.query("s1").patterns == []

    def test_long_term_patterns(self, store):
        """Frequent concept pairs trigger long-term patterns."""
        for _ in range(5):
            store.record("s1", "mobile layout", ["responsive", "mobile", "database", "api"])

        patterns = store.query("s1").patterns
        assert "mobile_focus" in patterns
        assert "full_stack_development" in patterns

    def test_long_term_pattern_needs_both(self, store):
        """Every required concept must be frequent."""
        for _ in range(5):
            store.record("s1", "responsive", ["responsive"])

        assert "mobile_focus" not in store.query("s1").patterns


class TestClearAndStats:
    """Tests for clear() and stats()."""

    def test_clear(self, store, backend):
        """Clearing empties memory and deletes persisted keys."""
        store.record("s1", "hello", ["greeting"])
        store.clear("s1")

        assert store.stats("s1").short_term_count == 0
        assert backend.keys("smartreply:s1") == []

    def test_stats(self, store, clock):
        """Stats report sizes and the top five concepts."""
        for concept in ("a", "b", "c", "d", "e", "f"):
            store.record("s1", concept, [concept])
            clock.advance(1)
        store.record("s1", "a again", ["a"])

        stats = store.stats("s1")
        assert stats.short_term_count == 7
        assert stats.long_term_count == 6
        assert stats.top_concepts == ["a", "f", "e", "d", "c"]


class TestPersistence:
    """Tests for backend persistence."""

    def test_keys_are_namespaced(self, store, backend):
        """Both stores live under session-qualified keys."""
        store.record("s1", "hello", ["greeting"])

        assert backend.keys() == [
            "smartreply:s1:long_term_patterns",
            "smartreply:s1:short_term_memory",
        ]
        assert backend.get("smartreply:s1:long_term_patterns")["greeting"]["count"] == 1

    def test_reload_from_backend(self, store, backend, clock):
        """A new store over the same backend sees earlier state."""
        store.record("s1", "create a form", ["form"])

        reloaded = MemoryStore(backend=backend, clock=clock)
        assert reloaded.query("s1").short_term == ["create a form"]
        assert reloaded.snapshot("s1").long_term["form"].count == 1

    def test_failing_backend_is_absorbed(self, clock, failing_backend, metric_value):
        """Storage failures never reach the caller."""
        labels = {"operation": "save"}
        before = metric_value("smartreply_persistence_errors_total", labels)
        store = MemoryStore(backend=failing_backend, clock=clock)

        store.record("s1", "hello", ["greeting"])
        store.clear("s1")
        store.record("s1", "hello again", [])

        assert store.query("s1").short_term == ["hello again"]
        assert metric_value("smartreply_persistence_errors_total", labels) == before + 2

    @pytest.mark.parametrize(
        "short_term,long_term",
        [
            ("garbage", {}),
            ([], ["not", "a", "mapping"]),
            ([{"text": "missing timestamp"}], {}),
        ],
    )
    def test_corrupt_state_starts_empty(self, backend, clock, short_term, long_term):
        """Unreadable persisted state is replaced by empty memory."""
        backend.set("smartreply:s1:short_term_memory", short_term)
        backend.set("smartreply:s1:long_term_patterns", long_term)

        store = MemoryStore(backend=backend, clock=clock)
        assert store.stats("s1").short_term_count == 0


class TestConcurrency:
    """Tests for concurrent recording."""

    def test_parallel_records_are_not_lost(self, clock, backend):
        """Every record from every thread is kept."""
        store = MemoryStore(config=MemoryConfig(max_short_term=1000), backend=backend, clock=clock)

        def worker(n):
            for i in range(50):
                store.record("shared", f"thread {n} message {i}", [f"c{n}"])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = store.snapshot("shared")
        assert len(snapshot.short_term) == 200
        assert all(snapshot.long_term[f"c{n}"].count == 50 for n in range(4))

    def test_listing_sessions_while_new_ones_load(self, clock, backend):
        """Listing sessions never races first access to a new session."""
        store = MemoryStore(config=MemoryConfig(), backend=backend, clock=clock)
        errors = []

        def writer(n):
            for i in range(100):
                store.record(f"w{n}-{i}", "hello", [])

        def reader():
            try:
                for _ in range(200):
                    store.sessions()
            except RuntimeError as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads.append(threading.Thread(target=reader))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(store.sessions()) == 400
