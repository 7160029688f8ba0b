"""Tests for entity and concept extraction."""

import random

import pytest

from smartreply.nlp.extractor import ConceptGraph, EntityExtractor, categorize
from smartreply.nlp.models import Entity, EntityCategory


class TestConceptGraph:
    """Tests for ConceptGraph."""

    def test_relationships_are_symmetric(self):
        """Every edge should exist in both directions."""
        graph = ConceptGraph()
        assert "backend" in graph.neighbours("api")
        assert "api" in graph.neighbours("backend")

    def test_concept_in_several_groups(self):
        """A concept in two groups should relate to both."""
        graph = ConceptGraph()
        assert graph.neighbours("database") == [
            "api",
            "backend",
            "data",
            "logic",
            "query",
            "server",
            "storage",
            "table",
        ]

    def test_unknown_concept(self):
        """Unknown concepts have no neighbours."""
        graph = ConceptGraph()
        assert "banana" not in graph
        assert graph.neighbours("banana") == []

    def test_custom_groups(self):
        """Should build from injected groups."""
        graph = ConceptGraph([("a", "b"), ("b", "c")])
        assert graph.neighbours("b") == ["a", "c"]
        assert len(graph) == 3


class TestCategorize:
    """Tests for category tagging."""

    @pytest.mark.parametrize(
        "value,category",
        [
            ("react", EntityCategory.TECHNOLOGY),
            ("authentication", EntityCategory.TECHNOLOGY),
            ("dashboard", EntityCategory.COMPONENT),
            ("chart", EntityCategory.VISUALIZATION),
            ("spanish", EntityCategory.TRANSLATION),
            ("design", EntityCategory.VISION),
            ("summary", EntityCategory.REPORT),
            ("banana", EntityCategory.OTHER),
        ],
    )
    def test_first_matching_category_wins(self, value, category):
        """Should tag by substring containment in priority order."""
        assert categorize(value) == category


class TestEntityExtractor:
    """Tests for EntityExtractor.extract()."""

    def test_dashboard_with_charts(self):
        """Should find the component and the visualization with their spans."""
        extractor = EntityExtractor(expansion_probability=0.0)

        entities = extractor.extract(["create", "a", "dashboard", "with", "charts"])

        assert entities == [
            Entity(category=EntityCategory.COMPONENT, value="dashboard", start_offset=9, end_offset=18),
            Entity(category=EntityCategory.VISUALIZATION, value="chart", start_offset=24, end_offset=29),
        ]

    def test_full_expansion(self):
        """Probability 1.0 should emit every neighbour at the lower score."""
        extractor = EntityExtractor(expansion_probability=1.0)

        entities = extractor.extract(["create", "a", "dashboard", "with", "charts"])

        assert [(e.category.value, e.value, e.score) for e in entities] == [
            ("component", "dashboard", 0.8),
            ("visualization", "chart", 0.8),
            ("visualization", "visualization", 0.4),
            ("other", "analytics", 0.4),
            ("other", "data", 0.4),
        ]

    def test_neighbours_take_source_span(self):
        """Expanded neighbours carry the span of the triggering token."""
        extractor = EntityExtractor(expansion_probability=1.0)

        entities = {e.value: e for e in extractor.extract(["the", "login"])}

        assert entities["security"].start_offset == 4
        assert entities["security"].end_offset == 9

    def test_deduplicates_by_category_and_value(self):
        """Repeated tokens should yield a single entity with the first span."""
        extractor = EntityExtractor(expansion_probability=0.0)

        entities = extractor.extract(["api", "api"])

        assert entities == [
            Entity(category=EntityCategory.TECHNOLOGY, value="api", start_offset=0, end_offset=3)
        ]

    def test_ui_suffix_tokens_are_components(self):
        """Tokens ending in a UI element name are components."""
        extractor = EntityExtractor(expansion_probability=0.0)

        entities = extractor.extract(["sticky", "header"])

        assert [(e.category, e.value) for e in entities] == [(EntityCategory.COMPONENT, "header")]

    def test_empty(self):
        """No tokens, no entities."""
        assert EntityExtractor().extract([]) == []

    def test_seeded_expansion_is_reproducible(self):
        """Same seed, same output."""
        tokens = ["responsive", "dashboard", "with", "login", "form"]

        first = EntityExtractor(expansion_probability=0.5, rng=random.Random(42)).extract(tokens)
        second = EntityExtractor(expansion_probability=0.5, rng=random.Random(42)).extract(tokens)

        assert first == second

    def test_sorted_by_priority_then_value(self):
        """Output order should be category priority, then value."""
        extractor = EntityExtractor(expansion_probability=1.0, rng=random.Random(7))

        entities = extractor.extract(["react", "dashboard", "report", "form", "login"])
        keys = [(e.category.priority, e.value) for e in entities]

        assert keys == sorted(keys)


class TestConcepts:
    """Tests for EntityExtractor.concepts()."""

    def test_entity_values_and_tags(self):
        """Should merge entity values with regex concept tags."""
        extractor = EntityExtractor(expansion_probability=0.0)
        text = "Create a responsive login form"
        entities = extractor.extract(["create", "a", "responsive", "login", "form"])

        assert extractor.concepts(text, entities) == [
            "creation",
            "form",
            "login",
            "responsive",
            "responsive_design",
            "user_management",
        ]

    def test_no_entities(self):
        """Tags alone are returned when no entity was found."""
        extractor = EntityExtractor(expansion_probability=0.0)
        assert extractor.concepts("set up the backend", []) == ["backend_development"]
