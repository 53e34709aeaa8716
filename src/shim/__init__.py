"""Shim header generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shim.generate import GenerationOptions, ShimUnit, build_unit, render_header

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import ShimConfig


def generate_all_headers(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: ShimConfig | None = None,
) -> dict[str, object]:
    """Generate headers via lazy import to avoid package import cycles."""
    from shim.write import generate_all_headers as _generate_all_headers

    return _generate_all_headers(root=root, out_dir=out_dir, config=config)


__all__ = [
    "GenerationOptions",
    "ShimUnit",
    "build_unit",
    "generate_all_headers",
    "render_header",
]
