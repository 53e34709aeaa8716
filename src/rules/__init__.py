"""Configuration rules for shimgen."""

from rules.config import (
    ConfigError,
    ShimConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "ConfigError",
    "ShimConfig",
    "load_config",
    "resolve_output_dir",
]
