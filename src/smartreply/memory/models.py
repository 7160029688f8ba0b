"""Conversational memory data models.

Defines the per-session short-term queue, the long-term concept map and
the context returned to callers.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ShortTermEntry(BaseModel):
    """One recorded utterance."""

    text: str = Field(description="Raw utterance")
    timestamp: float = Field(description="Epoch seconds when recorded")
    vector: List[float] = Field(default_factory=list, description="Hashing embedding")


class ConceptStat(BaseModel):
    """Frequency and recency of a concept."""

    count: int = Field(default=1, ge=1)
    last_seen: float = Field(description="Epoch seconds of the latest occurrence")


class ConversationMemory(BaseModel):
    """Memory held for one session.

    ``short_term`` is FIFO-bounded by the store; ``long_term`` is purged of
    decayed concepts on every record.
    """

    short_term: List[ShortTermEntry] = Field(default_factory=list)
    long_term: Dict[str, ConceptStat] = Field(default_factory=dict)


class MemoryContext(BaseModel):
    """Memory view used while building a response."""

    short_term: List[str] = Field(default_factory=list, description="Recent utterance snippets")
    long_term: List[str] = Field(default_factory=list, description="Frequent concepts, most frequent first")
    patterns: List[str] = Field(default_factory=list, description="Detected conversation patterns")


class MemoryStats(BaseModel):
    """Size summary of a session's memory."""

    short_term_count: int = 0
    long_term_count: int = 0
    top_concepts: List[str] = Field(default_factory=list)
