"""Template-based response generation."""

from smartreply.responses.engine import (
    RenderedResponse,
    ResponseEngine,
    apply_style,
    apply_verbosity,
    interpolate,
)
from smartreply.responses.loader import DEFAULT_TEMPLATES_DIR, TemplateLoader
from smartreply.responses.schema import TemplateDefinition, TemplateSet

__all__ = [
    "ResponseEngine",
    "RenderedResponse",
    "interpolate",
    "apply_verbosity",
    "apply_style",
    "TemplateLoader",
    "TemplateDefinition",
    "TemplateSet",
    "DEFAULT_TEMPLATES_DIR",
]
