"""Discovery of symbol model documents under a root directory."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from model.load import MODEL_SUFFIX

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


def _relative_model_path(path: Path, root: Path) -> str | None:
    """Relative POSIX path of a regular model file that stays inside root."""
    if not path.is_file() or path.is_symlink():
        return None
    try:
        path.resolve().relative_to(root.resolve())
        return path.relative_to(root).as_posix()
    except (OSError, ValueError):
        return None


def _is_selected(
    rel_path: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if include_patterns and not any(fnmatch(rel_path, p) for p in include_patterns):
        return False
    return not (exclude_patterns and any(fnmatch(rel_path, p) for p in exclude_patterns))


def _gitignore_matcher(
    root: Path, *, nested_gitignore: bool
) -> Callable[[str], bool] | None:
    if nested_gitignore:
        candidates = {root / ".gitignore", *root.rglob(".gitignore")}
    else:
        candidates = {root / ".gitignore"}
    gitignores = sorted(
        (path for path in candidates if path.is_file()),
        key=lambda p: p.relative_to(root).as_posix(),
    )
    if not gitignores:
        return None

    matchers = [
        cast("Callable[[str], bool]", parse_gitignore(path)) for path in gitignores
    ]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # gitignore_parser raises for paths outside a nested file's base
                continue
        return False

    return matches


def find_model_files(
    directory: Path,
    *,
    output_dir: str = ".shim",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find all ``*.symbols.json`` documents in a directory.

    Args:
        directory: Directory to search
        output_dir: Top-level directory name to skip (default ".shim")
        include_patterns: Optional fnmatch patterns; when given, files must
            match at least one
        exclude_patterns: Optional fnmatch patterns; matching files are skipped
        nested_gitignore: Compose every .gitignore under the directory instead
            of only the root one

    Yields:
        Model file paths sorted by relative path.
    """
    ignored = _gitignore_matcher(directory, nested_gitignore=nested_gitignore)

    found: list[tuple[str, Path]] = []
    for path in directory.rglob(f"*{MODEL_SUFFIX}"):
        rel_path = _relative_model_path(path, directory)
        if rel_path is None:
            continue
        if output_dir and rel_path.split("/", 1)[0] == output_dir:
            continue
        if ignored is not None and ignored(str(path)):
            continue
        if _is_selected(rel_path, include_patterns, exclude_patterns):
            found.append((rel_path, path))

    found.sort(key=lambda item: item[0])
    for _, path in found:
        yield path


__all__ = ["find_model_files"]
