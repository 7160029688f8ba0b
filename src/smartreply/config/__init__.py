"""Configuration loading and validation."""

from smartreply.config.loader import (
    Config,
    ExtractionConfig,
    MemoryConfig,
    ResponsesConfig,
    StorageConfig,
    SystemConfig,
    load_config,
)

__all__ = [
    "load_config",
    "Config",
    "SystemConfig",
    "MemoryConfig",
    "StorageConfig",
    "ExtractionConfig",
    "ResponsesConfig",
]
