"""Data models for text understanding.

Defines intents, entity categories and the immutable results produced
per request by the classifier, extractor and analyzer.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class IntentType(str, Enum):
    """Purpose of a user utterance."""

    CODE_GENERATION = "code_generation"
    UI_CREATION = "ui_creation"
    BACKEND_SETUP = "backend_setup"
    DATABASE_OPERATION = "database_operation"
    STYLING_REQUEST = "styling_request"
    FEATURE_REQUEST = "feature_request"
    QUESTION = "question"
    GREETING = "greeting"
    UNKNOWN = "unknown"
    API_DESIGN = "api_design"
    CODE_REFACTOR = "code_refactor"
    TEST_GENERATION = "test_generation"
    APP_PLANNING = "app_planning"
    SQL_ANALYTICS = "sql_analytics"
    DATABASE_DESIGN = "database_design"
    DATA_VISUALIZATION = "data_visualization"
    TRANSLATION = "translation"
    VISION_ANALYSIS = "vision_analysis"
    VISION_DEEP_ANALYSIS = "vision_deep_analysis"
    VISION_CODE_GENERATION = "vision_code_generation"
    REPORT_GENERATION = "report_generation"
    DOCUMENT_SUMMARIZATION = "document_summarization"


class EntityCategory(str, Enum):
    """Entity categories, declared in priority order."""

    TECHNOLOGY = "technology"
    COMPONENT = "component"
    VISUALIZATION = "visualization"
    TRANSLATION = "translation"
    VISION = "vision"
    REPORT = "report"
    OTHER = "other"

    @property
    def priority(self) -> int:
        return list(EntityCategory).index(self)


class IntentMatch(BaseModel):
    """Classifier output for one utterance."""

    model_config = ConfigDict(frozen=True)

    intent: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    matched_pattern_id: Optional[str] = Field(
        default=None, description="'<group>:<index>' of the first matching pattern"
    )


class Entity(BaseModel):
    """A span of text tagged with a semantic category."""

    model_config = ConfigDict(frozen=True)

    category: EntityCategory
    value: str
    start_offset: int = Field(default=-1, description="Offset in normalized text, -1 if absent")
    end_offset: int = Field(default=-1)
    score: float = Field(default=0.8, ge=0.0, le=1.0)


class Sentiment(BaseModel):
    """Word-list sentiment."""

    label: str = Field(description="positive, negative or neutral")
    score: int = Field(description="positive hits minus negative hits")


class TextStats(BaseModel):
    """Surface statistics of the raw text."""

    word_count: int = 0
    sentence_count: int = 0
    avg_words_per_sentence: float = 0.0
    readability_score: float = 0.0


class TextAnalysis(BaseModel):
    """Auxiliary analysis used for personalization."""

    sentiment: Sentiment
    keywords: List[str] = Field(default_factory=list)
    key_phrases: List[str] = Field(default_factory=list)
    complexity: str = Field(default="simple", description="simple, moderate or complex")
    complexity_score: float = Field(default=0.0, ge=0.0, le=1.0)
    stats: TextStats = Field(default_factory=TextStats)


class Command(BaseModel):
    """A command recognized by a regex command pattern."""

    command: str = Field(description="Matched text")
    intent: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    parameters: Dict[str, Any] = Field(default_factory=dict)
