from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson

from contract.artifacts import MANIFEST_JSON, HeaderRecord, ShimManifest
from model.load import ModelLoadError, load_symbol_model
from rules.config import load_config, resolve_output_dir
from scan.files import find_model_files
from shim.generate import GenerationOptions, build_unit
from utils import header_filename

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import ShimConfig

logger = logging.getLogger(__name__)


def _output_dir_name(out_dir: Path, root: Path) -> str:
    """Top-level directory name of out_dir inside root, or '' when outside."""
    try:
        rel = out_dir.resolve().relative_to(root.resolve())
    except ValueError:
        return ""
    return rel.parts[0] if rel.parts else ""


def _write_json(path: Path, obj: ShimManifest) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(obj.model_dump(), option=opts) + b"\n")


def generate_all_headers(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: ShimConfig | None = None,
) -> dict[str, object]:
    """Generate one shim header per model document found under ``root``.

    Every header is rendered in memory before anything is written, so a
    failing model leaves the output directory untouched.

    Args:
        root: Directory searched for ``*.symbols.json`` documents
        out_dir: Optional output directory for generated headers
        config: Optional configuration; loaded from ``root`` when omitted

    Returns:
        Dictionary with counts and list of generated artifact paths.

    Raises:
        ShimError: When a model cannot be turned into a header.
        ModelLoadError: When a document is invalid or two share a module name.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    options = GenerationOptions.from_config(config)

    rendered: dict[str, str] = {}
    records: list[HeaderRecord] = []
    for model_path in find_model_files(
        root,
        output_dir=_output_dir_name(out_dir, root),
        include_patterns=config.include or None,
        exclude_patterns=config.exclude or None,
        nested_gitignore=config.nested_gitignore,
    ):
        source = model_path.relative_to(root).as_posix()
        model = load_symbol_model(model_path)
        header = header_filename(model.module, config.header_suffix)
        if header in rendered:
            msg = f"{source}: module {model.module!r} already generated {header}"
            raise ModelLoadError(msg)

        unit = build_unit(model, options)
        rendered[header] = unit.render()
        records.append(
            HeaderRecord(
                module=model.module,
                header=header,
                source=source,
                type_count=len(unit.types),
                function_count=unit.function_count,
            )
        )
        logger.info("rendered %s from %s", header, source)

    out_dir.mkdir(parents=True, exist_ok=True)
    for header, text in rendered.items():
        (out_dir / header).write_bytes(text.encode("utf-8"))
    _write_json(out_dir / MANIFEST_JSON, ShimManifest(headers=records))

    return {
        "header_count": len(records),
        "type_count": sum(r.type_count for r in records),
        "function_count": sum(r.function_count for r in records),
        "artifacts": [str(out_dir / name) for name in [*rendered, MANIFEST_JSON]],
    }
