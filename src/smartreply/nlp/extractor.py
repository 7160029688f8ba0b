"""Entity and concept extraction.

Matches tokens against the keyword lexicon and the concept graph, tags each
value with a category, and derives the concept list recorded into memory.
"""

import random
import re
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from smartreply.lexicon import (
    CATEGORY_KEYWORDS,
    CONCEPT_PATTERNS,
    CONCEPT_RELATIONSHIPS,
    ENTITY_KEYWORDS,
    UI_SUFFIX_PATTERN,
)
from smartreply.logging import get_logger
from smartreply.nlp.models import Entity, EntityCategory

logger = get_logger(__name__, component="extractor")

DIRECT_SCORE = 0.8
NEIGHBOUR_SCORE = 0.4


class ConceptGraph:
    """Undirected concept adjacency built from relationship groups.

    Every member of a group is related to every other member. Read-only
    after construction.
    """

    def __init__(self, groups: Iterable[Sequence[str]] = CONCEPT_RELATIONSHIPS):
        adjacency: Dict[str, set] = {}
        for group in groups:
            for concept in group:
                adjacency.setdefault(concept, set()).update(c for c in group if c != concept)
        self._adjacency: Dict[str, FrozenSet[str]] = {
            concept: frozenset(related) for concept, related in adjacency.items()
        }

    def __contains__(self, concept: object) -> bool:
        return concept in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def neighbours(self, concept: str) -> List[str]:
        """Related concepts in alphabetical order (empty if unknown)."""
        return sorted(self._adjacency.get(concept, frozenset()))


def categorize(value: str) -> EntityCategory:
    """First category (in priority order) with a keyword contained in value."""
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in value for keyword in keywords):
            return EntityCategory(category)
    return EntityCategory.OTHER


class EntityExtractor:
    """Extracts categorized entities from tokens.

    Graph neighbours of a matched concept are each emitted independently
    with probability ``expansion_probability``. Pass a seeded ``rng`` for
    reproducible output; 0.0 disables expansion and 1.0 always expands.
    """

    def __init__(
        self,
        graph: Optional[ConceptGraph] = None,
        expansion_probability: float = 0.3,
        rng: Optional[random.Random] = None,
        keywords: Sequence[str] = ENTITY_KEYWORDS,
    ):
        self.graph = graph or ConceptGraph()
        self.expansion_probability = expansion_probability
        self.rng = rng or random.Random()
        self._keywords = tuple(keywords)
        self._ui_suffix = re.compile(UI_SUFFIX_PATTERN)
        self._concept_patterns = [(re.compile(p), tag) for p, tag in CONCEPT_PATTERNS]

    def extract(self, tokens: Sequence[str]) -> List[Entity]:
        """Extract entities from normalized tokens.

        Offsets index into ``" ".join(tokens)``. Neighbour entities take
        the span of the token that triggered them.

        Returns:
            Entities unique by (category, value), sorted by category
            priority then value.
        """
        found: Dict[Tuple[EntityCategory, str], Entity] = {}

        def emit(value: str, start: int, end: int, score: float) -> None:
            entity = Entity(
                category=categorize(value),
                value=value,
                start_offset=start,
                end_offset=end,
                score=score,
            )
            key = (entity.category, entity.value)
            if key not in found or found[key].score < score:
                found[key] = entity

        offset = 0
        for token in tokens:
            start, end = offset, offset + len(token)
            offset = end + 1

            for keyword in self._keywords:
                position = token.find(keyword)
                if position >= 0:
                    emit(keyword, start + position, start + position + len(keyword), DIRECT_SCORE)

            if self._ui_suffix.search(token) and categorize(token) is EntityCategory.OTHER:
                found.setdefault(
                    (EntityCategory.COMPONENT, token),
                    Entity(
                        category=EntityCategory.COMPONENT,
                        value=token,
                        start_offset=start,
                        end_offset=end,
                        score=DIRECT_SCORE,
                    ),
                )

            if token in self.graph:
                emit(token, start, end, DIRECT_SCORE)
                for neighbour in self.graph.neighbours(token):
                    if self.rng.random() < self.expansion_probability:
                        emit(neighbour, start, end, NEIGHBOUR_SCORE)

        entities = sorted(found.values(), key=lambda e: (e.category.priority, e.value))
        logger.debug("entities_extracted", count=len(entities))
        return entities

    def concepts(self, text: str, entities: Sequence[Entity]) -> List[str]:
        """Concepts to record in memory: entity values plus regex concept tags."""
        lowered = text.lower()
        concepts = {entity.value for entity in entities}
        concepts.update(tag for pattern, tag in self._concept_patterns if pattern.search(lowered))
        return sorted(concepts)
