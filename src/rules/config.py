from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "shimgen.toml"

_PREFIX_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class ShimConfig(BaseModel):
    """Configuration for shim header generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".shim",
        description="Output directory for generated headers",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for model files to include (empty = all)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for model files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    header_suffix: str = Field(
        default=".shim.h",
        description="Suffix appended to the module name for header files",
    )
    function_prefix: str = Field(
        default="",
        description="Prefix prepended to every accessor and thunk name",
    )
    skip_completion_handlers: bool = Field(
        default=False,
        description="Skip methods taking completion/handler callbacks",
    )
    signature_comments: bool = Field(
        default=True,
        description="Echo the source signature above each member's declarations",
    )

    @field_validator("function_prefix")
    @classmethod
    def validate_function_prefix(cls, v: str) -> str:
        """Require a prefix made of identifier characters only.

        The prefix is glued verbatim onto synthesized names.
        """
        if v and not _PREFIX_PATTERN.fullmatch(v):
            msg = f"function_prefix must be a C identifier prefix, got {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("header_suffix")
    @classmethod
    def validate_header_suffix(cls, v: str) -> str:
        if not v.endswith(".h") or "/" in v or "\\" in v:
            msg = "header_suffix must end with '.h' and contain no path separators"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the root.

    The config output_dir must be a non-empty relative path that remains
    within the root after resolution. Absolute paths and paths that escape
    the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> ShimConfig:
    """Load configuration from shimgen.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ShimConfig()

    try:
        with config_path.open("rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ShimConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
