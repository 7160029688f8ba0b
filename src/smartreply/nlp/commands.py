"""Command pattern parsing.

Pulls template parameters (componentType, features, style, ...) out of an
utterance with regex command patterns. When nothing matches, a single
command is derived from the classification and extracted entities.
"""

import re
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple

from smartreply.lexicon import COMMAND_PATTERNS
from smartreply.nlp.models import Command, Entity, IntentMatch, IntentType
from smartreply.nlp.preprocess import clean_transcript


class CommandParser:
    """Matches cleaned text against command patterns."""

    def __init__(self, patterns: Sequence[Tuple[str, str, Tuple[str, ...], Dict[str, Any], float]] = COMMAND_PATTERNS):
        self._patterns: List[Tuple[Pattern[str], IntentType, Tuple[str, ...], Dict[str, Any], float]] = [
            (re.compile(regex, re.IGNORECASE), IntentType(intent), names, constants, confidence)
            for regex, intent, names, constants, confidence in patterns
        ]

    def parse(
        self,
        text: str,
        match: Optional[IntentMatch] = None,
        entities: Sequence[Entity] = (),
    ) -> List[Command]:
        """Parse commands from raw text.

        Args:
            text: Raw utterance; fillers are removed before matching.
            match: Classification used for the fallback command.
            entities: Extracted entities used for the fallback command.

        Returns:
            Matched commands in pattern order, or one fallback command when
            ``match`` is given and no pattern matched.
        """
        cleaned = clean_transcript(text)
        commands: List[Command] = []

        for pattern, intent, names, constants, confidence in self._patterns:
            found = pattern.search(cleaned)
            if not found:
                continue
            parameters: Dict[str, Any] = dict(constants)
            for name, value in zip(names, found.groups()):
                if value:
                    parameters[name] = value.strip()
            commands.append(
                Command(
                    command=found.group(0),
                    intent=intent,
                    confidence=confidence,
                    parameters=parameters,
                )
            )

        if not commands and match is not None and cleaned:
            parameters = {}
            for entity in entities:
                parameters[entity.category.value] = entity.value
            commands.append(
                Command(
                    command=cleaned,
                    intent=match.intent,
                    confidence=match.confidence,
                    parameters=parameters,
                )
            )
        return commands

    @staticmethod
    def merged_parameters(commands: Sequence[Command]) -> Dict[str, Any]:
        """Merge command parameters; later commands win on conflicts."""
        merged: Dict[str, Any] = {}
        for command in commands:
            merged.update(command.parameters)
        return merged
