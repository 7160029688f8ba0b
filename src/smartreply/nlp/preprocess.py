"""Text preprocessing.

Total functions over any string: normalization, tokenization and
sentence splitting. Empty input yields empty output.
"""

import re
from typing import List

from smartreply.lexicon import FILLER_WORDS_PATTERN

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_BREAK = re.compile(r"[.!?]+")
_FILLER = re.compile(FILLER_WORDS_PATTERN)


def normalize(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace.

    Idempotent: ``normalize(normalize(t)) == normalize(t)``.
    """
    lowered = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def tokenize(text: str) -> List[str]:
    """Split text into normalized tokens."""
    return normalize(text).split()


def split_sentences(text: str) -> List[str]:
    """Split raw text on runs of sentence terminators.

    Whitespace-only segments are dropped; kept segments are stripped.
    """
    return [segment.strip() for segment in _SENTENCE_BREAK.split(text) if segment.strip()]


def clean_transcript(text: str) -> str:
    """Lowercase and drop spoken fillers (uh, um, er) from a transcript."""
    cleaned = _FILLER.sub("", text.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()
