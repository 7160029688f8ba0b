"""Response template engine.

Selects a template by intent and utterance, fills in parameters, and
shapes the result with the user's verbosity, communication style and
technical level.
"""

import re
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from smartreply.errors import TemplateMissingError
from smartreply.logging import get_logger
from smartreply.nlp.models import Entity, EntityCategory, IntentType, TextAnalysis
from smartreply.responses.loader import TemplateLoader
from smartreply.responses.schema import TemplateDefinition, TemplateSet
from smartreply.session import CommunicationStyle, TechnicalLevel, UserPreferences, Verbosity

logger = get_logger(__name__, component="response_engine")

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

COMPLEX_CLAUSE = " I've broken down your complex request into manageable components."
BACKEND_FILES_CLAUSE = " I've also generated {count} backend files to support the functionality."

FORMAL_REPLACEMENTS = (("I've", "I have"), ("you're", "you are"), ("it's", "it is"))

LEVEL_SUGGESTIONS = {
    TechnicalLevel.ADVANCED: ["Add TypeScript interfaces", "Include unit tests"],
    TechnicalLevel.BEGINNER: ["Add code comments", "Include usage examples"],
}

COMPLEXITY_FOLLOW_UPS = {
    "simple": "Would you like to add more advanced features?",
    "complex": "Should I break this down into smaller components?",
}

CLARIFICATION_THRESHOLD = 0.5


class RenderedResponse(BaseModel):
    """Template output after interpolation and transforms."""

    spoken_message: str
    display_message: str
    suggestions: List[str] = Field(default_factory=list)
    follow_ups: List[str] = Field(default_factory=list)
    template_pattern: str = Field(default=".*", description="Pattern of the selected template")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, tuple)) and len(value) == 0)


def interpolate(template: str, parameters: Mapping[str, Any]) -> str:
    """Replace ``{key}`` placeholders with parameter values.

    Lists are joined with ", ". Missing, None or empty values leave the
    placeholder untouched.
    """

    def replace(match: "re.Match[str]") -> str:
        value = parameters.get(match.group(1))
        if _is_blank(value):
            return match.group(0)
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    return _PLACEHOLDER.sub(replace, template)


def backend_file_count(generation_result: Optional[Mapping[str, Any]]) -> int:
    if not generation_result:
        return 0
    files = generation_result.get("backend_files") or generation_result.get("backendFiles") or []
    return len(files)


def apply_verbosity(
    message: str,
    verbosity: Verbosity,
    complexity: str = "simple",
    backend_files: int = 0,
) -> str:
    if verbosity == Verbosity.CONCISE:
        return message.split(".")[0] + "."
    if verbosity == Verbosity.COMPREHENSIVE:
        if complexity == "complex":
            message += COMPLEX_CLAUSE
        if backend_files > 0:
            message += BACKEND_FILES_CLAUSE.format(count=backend_files)
    return message


def apply_style(message: str, style: CommunicationStyle) -> str:
    if style == CommunicationStyle.FORMAL:
        for contracted, expanded in FORMAL_REPLACEMENTS:
            message = message.replace(contracted, expanded)
    elif style == CommunicationStyle.CASUAL:
        for contracted, expanded in FORMAL_REPLACEMENTS:
            message = message.replace(expanded, contracted)
    return message


class ResponseEngine:
    """Renders responses from a validated TemplateSet.

    Example:
        >>> engine = ResponseEngine.from_path()
        >>> engine.render(IntentType.UNKNOWN, "", {}, UserPreferences()).display_message
        '✅ Request completed'
    """

    def __init__(
        self,
        templates: TemplateSet,
        max_suggestions: int = 3,
        max_follow_ups: int = 2,
    ):
        if templates.fallback is None:
            raise TemplateMissingError("No fallback response template configured")
        self.templates = templates
        self.max_suggestions = max_suggestions
        self.max_follow_ups = max_follow_ups

    @classmethod
    def from_path(
        cls,
        templates_path: Optional[Any] = None,
        max_suggestions: int = 3,
        max_follow_ups: int = 2,
    ) -> "ResponseEngine":
        """Build an engine from a template file or directory (packaged by default)."""
        return cls(TemplateLoader(templates_path).load(), max_suggestions, max_follow_ups)

    def select(self, intent: IntentType, matched_text: str) -> TemplateDefinition:
        """First template of the intent matching the text, else the fallback."""
        for template in self.templates.intents.get(intent, []):
            if template.matches(matched_text):
                return template
        return self.templates.fallback

    def render(
        self,
        intent: IntentType,
        matched_text: str,
        parameters: Mapping[str, Any],
        preferences: UserPreferences,
        *,
        entities: Sequence[Entity] = (),
        analysis: Optional[TextAnalysis] = None,
        generation_result: Optional[Mapping[str, Any]] = None,
    ) -> RenderedResponse:
        """Render the response for one utterance.

        Args:
            intent: Classified intent.
            matched_text: Text the template patterns are searched in.
            parameters: Placeholder values.
            preferences: User preferences shaping the output.
            entities: Extracted entities, used for technology suggestions.
            analysis: Text analysis, used for complexity-based additions.
            generation_result: Result reported by a code generator.

        Returns:
            Rendered messages, suggestions and follow-up questions.
        """
        template = self.select(intent, matched_text)
        complexity = analysis.complexity if analysis else "simple"

        spoken = interpolate(template.spoken, parameters)
        display = interpolate(template.display, parameters)

        spoken = apply_verbosity(
            spoken,
            preferences.verbosity,
            complexity=complexity,
            backend_files=backend_file_count(generation_result),
        )
        spoken = apply_style(spoken, preferences.communication_style)

        logger.debug("template_rendered", intent=intent.value, pattern=template.pattern)
        return RenderedResponse(
            spoken_message=spoken,
            display_message=display,
            suggestions=self._suggestions(template, entities, preferences),
            follow_ups=self._follow_ups(template, complexity),
            template_pattern=template.pattern,
        )

    def _suggestions(
        self,
        template: TemplateDefinition,
        entities: Sequence[Entity],
        preferences: UserPreferences,
    ) -> List[str]:
        suggestions = list(template.suggestions)
        technologies = [e.value for e in entities if e.category == EntityCategory.TECHNOLOGY]
        if technologies:
            suggestions.append(f"Optimize for {technologies[0]}")
        suggestions.extend(LEVEL_SUGGESTIONS.get(preferences.technical_level, []))
        return suggestions[: self.max_suggestions]

    def _follow_ups(self, template: TemplateDefinition, complexity: str) -> List[str]:
        follow_ups = list(template.follow_ups)
        if complexity in COMPLEXITY_FOLLOW_UPS:
            follow_ups.append(COMPLEXITY_FOLLOW_UPS[complexity])
        return follow_ups[: self.max_follow_ups]

    @staticmethod
    def response_type(
        intent: IntentType,
        confidence: float,
        generation_result: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """error, then clarification, then suggestion, then success."""
        if generation_result and generation_result.get("error"):
            return "error"
        if confidence < CLARIFICATION_THRESHOLD:
            return "clarification"
        if intent == IntentType.QUESTION:
            return "suggestion"
        return "success"
