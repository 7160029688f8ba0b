"""Configuration loader for SmartReply.

Loads YAML configuration files and validates them against Pydantic models.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE_NAME = "smartreply.yaml"


class SystemConfig(BaseModel):
    """Global system configuration."""

    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR)$")
    log_format: str = Field(default="console", pattern=r"^(json|console)$")
    log_file: Optional[str] = Field(default=None)


class MemoryConfig(BaseModel):
    """Conversational memory limits and windows."""

    max_short_term: int = Field(default=50, ge=1)
    max_long_term: int = Field(default=200, ge=1)
    memory_decay_hours: float = Field(default=72.0, gt=0)
    pattern_threshold: int = Field(default=3, ge=1)
    recency_window_minutes: float = Field(default=30.0, gt=0)
    snippet_chars: int = Field(default=100, ge=1)
    pattern_window: int = Field(default=3, ge=1)
    frequent_concept_threshold: int = Field(default=5, ge=1)

    @property
    def decay_seconds(self) -> float:
        return self.memory_decay_hours * 3600.0

    @property
    def recency_seconds(self) -> float:
        return self.recency_window_minutes * 60.0


class StorageConfig(BaseModel):
    """Persistence backend selection."""

    backend: str = Field(default="memory", pattern=r"^(memory|file|sqlite|redis)$")
    namespace: str = Field(default="smartreply", min_length=1)
    path: Optional[Path] = Field(
        default=None, description="Directory (file backend) or database file (sqlite)"
    )
    redis_url: Optional[str] = Field(default=None)


class ExtractionConfig(BaseModel):
    """Entity extraction settings."""

    expansion_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    seed: Optional[int] = Field(
        default=None, description="Seed for neighbour expansion; None draws from OS entropy"
    )


class ResponsesConfig(BaseModel):
    """Response template settings."""

    templates_path: Optional[Path] = Field(
        default=None, description="YAML file or directory; defaults to packaged templates"
    )
    max_suggestions: int = Field(default=3, ge=0)
    max_follow_ups: int = Field(default=2, ge=0)


class Config(BaseModel):
    """Complete SmartReply configuration."""

    version: str = Field(default="1.0")
    environment: str = Field(default="development")

    system: SystemConfig = Field(default_factory=SystemConfig)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    responses: ResponsesConfig = Field(default_factory=ResponsesConfig)


def load_config(config_path: Path | str) -> Config:
    """Load configuration from a YAML file or a directory.

    A directory must hold ``smartreply.yaml``; an optional
    ``environments/<environment>.yaml`` is deep-merged on top.

    Args:
        config_path: Path to a YAML file or configuration directory.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the path doesn't exist.
        pydantic.ValidationError: If configuration is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config path not found: {config_path}")

    if config_path.is_file():
        return Config(**_read_yaml(config_path))

    main_file = config_path / CONFIG_FILE_NAME
    data = _read_yaml(main_file) if main_file.exists() else {}

    env = data.get("environment", "development")
    env_file = config_path / "environments" / f"{env}.yaml"
    if env_file.exists():
        _deep_merge(data, _read_yaml(env_file))

    return Config(**data)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
