"""Per-session response context.

Holds user preferences and the recent turn history that drives
personalization. Owned by the orchestrator.
"""

import time
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

MAX_HISTORY = 10
MAX_PREVIOUS_RESPONSES = 5


class Verbosity(str, Enum):
    CONCISE = "concise"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class TechnicalLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CommunicationStyle(str, Enum):
    FORMAL = "formal"
    CASUAL = "casual"
    FRIENDLY = "friendly"


class UserPreferences(BaseModel):
    """How responses are shaped for a user."""

    model_config = ConfigDict(validate_assignment=True)

    verbosity: Verbosity = Field(default=Verbosity.DETAILED)
    technical_level: TechnicalLevel = Field(default=TechnicalLevel.INTERMEDIATE)
    preferred_technologies: List[str] = Field(
        default_factory=lambda: ["react", "typescript", "tailwind"]
    )
    communication_style: CommunicationStyle = Field(default=CommunicationStyle.FRIENDLY)


class Turn(BaseModel):
    """One handled utterance."""

    text: str
    intent: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    commands: int = Field(default=1, ge=0, description="Commands parsed from the text")
    timestamp: float = Field(default_factory=time.time)


class ResponseContext(BaseModel):
    """Response-side state for one session."""

    history: List[Turn] = Field(default_factory=list)
    previous_responses: List[str] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    started_at: float = Field(default_factory=time.time)

    def add_turn(self, turn: Turn, spoken_message: str) -> None:
        """Append a turn and its reply, keeping only the most recent ones."""
        self.history = (self.history + [turn])[-MAX_HISTORY:]
        self.previous_responses = (self.previous_responses + [spoken_message])[
            -MAX_PREVIOUS_RESPONSES:
        ]

    @property
    def command_count(self) -> int:
        """Commands issued in recent turns, capped at MAX_HISTORY."""
        return min(sum(turn.commands for turn in self.history), MAX_HISTORY)


def personalization_level(command_count: int) -> str:
    """Bucket a command count: 0-1 low, 2-4 medium, 5+ high."""
    if command_count < 2:
        return "low"
    if command_count < 5:
        return "medium"
    return "high"
