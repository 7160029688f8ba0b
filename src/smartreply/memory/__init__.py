"""Conversational memory.

Short-term utterance queue and long-term concept frequencies per session,
persisted through a pluggable key-value backend.
"""

from smartreply.memory.embedding import DIMENSIONS, embed_text
from smartreply.memory.models import (
    ConceptStat,
    ConversationMemory,
    MemoryContext,
    MemoryStats,
    ShortTermEntry,
)
from smartreply.memory.store import MemoryStore

__all__ = [
    # Models
    "ConceptStat",
    "ConversationMemory",
    "MemoryContext",
    "MemoryStats",
    "ShortTermEntry",
    # Embedding
    "DIMENSIONS",
    "embed_text",
    # Store
    "MemoryStore",
]
