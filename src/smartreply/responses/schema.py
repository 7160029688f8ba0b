"""Pydantic models for response template definitions.

This module defines the schema for the response template YAML files.
"""

import re
from typing import Dict, List, Pattern

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from smartreply.nlp.models import IntentType


class TemplateDefinition(BaseModel):
    """One response template.

    ``pattern`` is searched case-insensitively in the utterance to decide
    whether the template applies.
    """

    model_config = {"extra": "forbid"}

    pattern: str = Field(default=".*", description="Regex selecting this template")
    spoken: str = Field(min_length=1, description="Spoken message template")
    display: str = Field(min_length=1, description="Display message template")
    suggestions: List[str] = Field(default_factory=list)
    follow_ups: List[str] = Field(default_factory=list)

    _compiled: Pattern[str] = PrivateAttr()

    @field_validator("pattern")
    @classmethod
    def _valid_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid template pattern {value!r}: {e}") from e
        return value

    def model_post_init(self, __context: object) -> None:
        self._compiled = re.compile(self.pattern, re.IGNORECASE)

    def matches(self, text: str) -> bool:
        return self._compiled.search(text) is not None


class TemplateSet(BaseModel):
    """All templates grouped by intent, plus the universal fallback."""

    model_config = {"extra": "forbid"}

    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+$")
    intents: Dict[IntentType, List[TemplateDefinition]] = Field(default_factory=dict)
    fallback: TemplateDefinition | None = Field(default=None)
