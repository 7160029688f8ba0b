"""Auxiliary text analysis.

Sentiment, keywords, key phrases, complexity and readability. Used by the
response engine to personalize suggestions and follow-up questions.
"""

import re
from collections import Counter
from typing import List

from smartreply.lexicon import NEGATIVE_WORDS, POSITIVE_WORDS, TECH_KEYWORDS
from smartreply.nlp.models import Sentiment, TextAnalysis, TextStats
from smartreply.nlp.preprocess import normalize, split_sentences

MAX_KEYWORDS = 5
MAX_KEY_PHRASES = 10


class TextAnalyzer:
    """Computes a TextAnalysis for raw user text."""

    def analyze(self, text: str) -> TextAnalysis:
        """Analyze raw text.

        Args:
            text: Raw utterance, not normalized.

        Returns:
            TextAnalysis with sentiment, keywords, phrases and complexity.
        """
        words = normalize(text).split()
        score = self.complexity_score(text)
        return TextAnalysis(
            sentiment=self.sentiment(words),
            keywords=self.keywords(words),
            key_phrases=self.key_phrases(words),
            complexity=self.complexity_label(score),
            complexity_score=score,
            stats=self.stats(text),
        )

    def sentiment(self, words: List[str]) -> Sentiment:
        positive = sum(1 for w in words if w in POSITIVE_WORDS)
        negative = sum(1 for w in words if w in NEGATIVE_WORDS)
        score = positive - negative
        if score > 0:
            label = "positive"
        elif score < 0:
            label = "negative"
        else:
            label = "neutral"
        return Sentiment(label=label, score=score)

    def keywords(self, words: List[str]) -> List[str]:
        """Top words longer than three characters.

        Ranked by frequency times relevance, where technology keywords
        weigh double. Ties keep first-occurrence order.
        """
        frequency = Counter(w for w in words if len(w) > 3)
        ranked = sorted(
            frequency,
            key=lambda w: frequency[w] * (2 if w in TECH_KEYWORDS else 1),
            reverse=True,
        )
        return ranked[:MAX_KEYWORDS]

    def key_phrases(self, words: List[str]) -> List[str]:
        phrases: List[str] = []
        for first, second in zip(words, words[1:]):
            phrase = f"{first} {second}"
            if len(phrase) > 3 and phrase not in phrases:
                phrases.append(phrase)
            if len(phrases) >= MAX_KEY_PHRASES:
                break
        return phrases

    def complexity_score(self, text: str) -> float:
        """Blend of average word length and average sentence length, in [0, 1]."""
        words = text.split()
        sentences = split_sentences(text)
        if not words or not sentences:
            return 0.0
        avg_word_length = sum(len(w) for w in words) / len(words)
        avg_sentence_length = len(words) / len(sentences)
        return min((avg_word_length / 10 + avg_sentence_length / 20) / 2, 1.0)

    @staticmethod
    def complexity_label(score: float) -> str:
        if score < 0.3:
            return "simple"
        if score < 0.7:
            return "moderate"
        return "complex"

    def stats(self, text: str) -> TextStats:
        words = text.split()
        sentences = split_sentences(text)
        if not words:
            return TextStats(sentence_count=len(sentences))

        avg_sentence_length = len(words) / max(len(sentences), 1)
        avg_word_length = len(re.sub(r"\s", "", text)) / len(words)
        readability = 206.835 - 1.015 * avg_sentence_length - 84.6 * (avg_word_length / 5)

        return TextStats(
            word_count=len(words),
            sentence_count=len(sentences),
            avg_words_per_sentence=round(avg_sentence_length, 2),
            readability_score=round(max(0.0, min(100.0, readability)), 2),
        )
