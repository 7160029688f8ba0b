"""Response template loader.

Loads template YAML files, validates them and checks that the universal
fallback is configured before anything is rendered.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from smartreply.errors import TemplateMissingError
from smartreply.logging import get_logger
from smartreply.responses.schema import TemplateSet

logger = get_logger(__name__, component="template_loader")

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateLoader:
    """Loads and caches a TemplateSet from a YAML file or directory.

    A directory is read in file-name order: intent lists are concatenated
    and a later ``fallback`` replaces an earlier one.
    """

    def __init__(self, templates_path: Optional[Path | str] = None):
        """Initialize template loader.

        Args:
            templates_path: YAML file or directory of YAML files.
                            Defaults to the packaged templates.
        """
        self.templates_path = Path(templates_path) if templates_path else DEFAULT_TEMPLATES_DIR
        self._cache: Optional[TemplateSet] = None

    def load(self) -> TemplateSet:
        """Load, validate and cache the templates.

        Raises:
            FileNotFoundError: If the path or directory content is missing.
            pydantic.ValidationError: If a template is invalid.
            TemplateMissingError: If no fallback template is defined.
        """
        if self._cache is not None:
            return self._cache

        files = self._files()
        merged: Dict[str, Any] = {"intents": {}}
        for path in files:
            data = self._read(path)
            if "version" in data:
                merged["version"] = data["version"]
            for intent, templates in (data.get("intents") or {}).items():
                merged["intents"].setdefault(intent, []).extend(templates or [])
            if data.get("fallback"):
                merged["fallback"] = data["fallback"]

        template_set = TemplateSet(**merged)
        if template_set.fallback is None:
            raise TemplateMissingError(
                "No fallback response template configured",
                source=str(self.templates_path),
            )

        logger.info(
            "templates_loaded",
            path=str(self.templates_path),
            intents=len(template_set.intents),
            templates=sum(len(t) for t in template_set.intents.values()),
        )
        self._cache = template_set
        return template_set

    def clear_cache(self) -> None:
        """Clear the template cache."""
        self._cache = None

    def _files(self) -> List[Path]:
        path = self.templates_path
        if not path.exists():
            raise FileNotFoundError(f"Templates not found: {path}")
        if path.is_file():
            return [path]
        files = sorted(path.glob("*.yaml")) + sorted(path.glob("*.yml"))
        if not files:
            raise FileNotFoundError(f"No template files in {path}")
        return files

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Template file must contain a mapping: {path}")
        return data
