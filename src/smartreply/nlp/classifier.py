"""Rule-based intent classifier.

Scores normalized text against the intent pattern table. The group with
the most matching patterns wins; ties keep the earlier-declared group.
"""

import re
from typing import Dict, List, Mapping, Optional, Pattern, Sequence

from smartreply.lexicon import FALLBACK_INTENT, INTENT_GROUP_MAP, INTENT_PATTERNS, TECH_KEYWORDS
from smartreply.logging import get_logger
from smartreply.nlp.models import IntentMatch, IntentType

logger = get_logger(__name__, component="classifier")


class IntentClassifier:
    """Classifies normalized utterances into an IntentType.

    Confidence measures input richness (length and technology keyword
    density), not certainty of the chosen intent:

        confidence = round(0.6 * min(n / 10, 1) + 0.4 * min(d / n * 5, 1), 2)

    where ``n`` is the token count and ``d`` the number of tokens that
    contain a technology keyword.

    Example:
        >>> classifier = IntentClassifier()
        >>> classifier.classify("create a dashboard with charts").intent
        <IntentType.UI_CREATION: 'ui_creation'>
    """

    def __init__(
        self,
        patterns: Optional[Mapping[str, Sequence[str]]] = None,
        group_intents: Optional[Mapping[str, str]] = None,
        keywords: Sequence[str] = TECH_KEYWORDS,
    ):
        """Compile the pattern table.

        Args:
            patterns: Ordered mapping of group name to regex strings.
            group_intents: Group name to IntentType value.
            keywords: Technology keywords used for keyword density.
        """
        patterns = INTENT_PATTERNS if patterns is None else patterns
        group_intents = INTENT_GROUP_MAP if group_intents is None else group_intents

        self._groups: Dict[str, List[Pattern[str]]] = {
            group: [re.compile(p, re.IGNORECASE) for p in group_patterns]
            for group, group_patterns in patterns.items()
        }
        self._intents: Dict[str, IntentType] = {
            group: IntentType(group_intents.get(group, group)) for group in self._groups
        }
        self._keywords = tuple(keywords)

    def classify(self, normalized_text: str) -> IntentMatch:
        """Classify normalized text. Never raises."""
        best_group: Optional[str] = None
        best_score = 0
        best_pattern_id: Optional[str] = None

        for group, compiled in self._groups.items():
            score = 0
            first_hit: Optional[int] = None
            for index, pattern in enumerate(compiled):
                if pattern.search(normalized_text):
                    score += 1
                    if first_hit is None:
                        first_hit = index
            if score > best_score:
                best_group = group
                best_score = score
                best_pattern_id = f"{group}:{first_hit}"

        intent = self._intents[best_group] if best_group else IntentType(FALLBACK_INTENT)
        confidence = self.confidence(normalized_text.split())

        logger.debug(
            "intent_classified",
            intent=intent.value,
            score=best_score,
            confidence=confidence,
        )
        return IntentMatch(
            intent=intent,
            confidence=confidence,
            matched_pattern_id=best_pattern_id,
        )

    def confidence(self, tokens: Sequence[str]) -> float:
        n = len(tokens)
        if n == 0:
            return 0.0
        domain = sum(1 for t in tokens if any(k in t for k in self._keywords))
        length_score = min(n / 10, 1.0)
        density_score = min(domain / n * 5, 1.0)
        return round(0.6 * length_score + 0.4 * density_score, 2)
