"""Deterministic hashing embedding.

Builds a 128-dimension vector from character codes, word hashes, concept
hashes and a few text statistics. Hashes use 32-bit signed integer
arithmetic with truncated remainder, so stored vectors stay compatible
with vectors produced by browser clients.
"""

import math
import re
from typing import List, Sequence

DIMENSIONS = 128

_CHAR_SLOTS = 32
_WORD_OFFSET = 32
_CONCEPT_OFFSET = 64
_STATS_OFFSET = 96
_MIXED_OFFSET = 100


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def word_hash(word: str) -> int:
    h = 0
    for char in word:
        h = _to_int32((h << 5) - h + ord(char))
    return h


def concept_hash(concept: str) -> int:
    h = 0
    for char in concept:
        h = _to_int32((h << 3) + ord(char))
    return h


def _scaled(h: int) -> float:
    # Remainder takes the sign of the dividend.
    return math.fmod(h, 1000) / 1000


def embed_text(text: str, concepts: Sequence[str] = ()) -> List[float]:
    """Embed text and its concepts into a unit-length vector.

    Args:
        text: Raw utterance.
        concepts: Concepts extracted from the utterance.

    Returns:
        128 floats, L2-normalized unless every component is zero.
    """
    vector = [0.0] * DIMENSIONS
    lowered = text.lower()
    # Empty leading and trailing fields count as words.
    words = re.split(r"\s+", lowered)

    for i, char in enumerate(lowered[:_CHAR_SLOTS]):
        vector[i] = ord(char) / 255

    for i, word in enumerate(words[:32]):
        vector[_WORD_OFFSET + i] = _scaled(word_hash(word))

    for i, concept in enumerate(list(concepts)[:32]):
        vector[_CONCEPT_OFFSET + i] = _scaled(concept_hash(concept))

    vector[_STATS_OFFSET] = len(text) / 1000
    vector[_STATS_OFFSET + 1] = len(words) / 100
    vector[_STATS_OFFSET + 2] = len(concepts) / 20
    vector[_STATS_OFFSET + 3] = len(re.findall(r"[.!?]", text)) / 10

    for i in range(_MIXED_OFFSET, DIMENSIONS):
        vector[i] = math.sin(i * 0.1) * vector[i % 32] + math.cos(i * 0.05) * vector[(i + 16) % 64]

    magnitude = math.sqrt(sum(v * v for v in vector))
    if magnitude > 0:
        vector = [v / magnitude for v in vector]
    return vector

