"""Text understanding: preprocessing, classification, extraction and analysis."""

from smartreply.nlp.analysis import TextAnalyzer
from smartreply.nlp.classifier import IntentClassifier
from smartreply.nlp.commands import CommandParser
from smartreply.nlp.extractor import ConceptGraph, EntityExtractor, categorize
from smartreply.nlp.models import (
    Command,
    Entity,
    EntityCategory,
    IntentMatch,
    IntentType,
    Sentiment,
    TextAnalysis,
    TextStats,
)
from smartreply.nlp.preprocess import clean_transcript, normalize, split_sentences, tokenize

__all__ = [
    "normalize",
    "tokenize",
    "split_sentences",
    "clean_transcript",
    "IntentClassifier",
    "EntityExtractor",
    "ConceptGraph",
    "categorize",
    "TextAnalyzer",
    "CommandParser",
    "IntentType",
    "IntentMatch",
    "EntityCategory",
    "Entity",
    "Sentiment",
    "TextStats",
    "TextAnalysis",
    "Command",
]
