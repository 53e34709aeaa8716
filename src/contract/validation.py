"""Validation of generated shim headers against their contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.artifacts import MANIFEST_JSON, MANIFEST_SCHEMA_VERSION, ShimManifest
from parse.c_declarations import extract_declarations
from utils import include_guard

if TYPE_CHECKING:
    from pathlib import Path

    from contract.artifacts import HeaderRecord

# Type names a header may use without declaring them itself.
BUILTIN_TYPES = frozenset(
    {
        "bool",
        "int8_t",
        "int16_t",
        "int32_t",
        "int64_t",
        "uint8_t",
        "uint16_t",
        "uint32_t",
        "uint64_t",
        "intptr_t",
        "uintptr_t",
    }
)


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def check_header_text(
    text: str,
    *,
    module: str,
    path: Path,
    record: HeaderRecord | None = None,
) -> list[ValidationMessage]:
    """Check one header's guard, syntax and declaration invariants.

    Every top-level identifier must be unique, every type must be declared
    exactly once and before its first use. When a manifest ``record`` is
    given, its declaration counts must match the header.
    """
    artifact = module
    errors: list[ValidationMessage] = []

    def report(message: str, line: int | None = None) -> None:
        errors.append(ValidationMessage(artifact, path, message, line=line))

    guard = include_guard(module)
    lines = text.splitlines()
    if lines[:2] != [f"#ifndef {guard}", f"#define {guard}"]:
        report(f"Missing include guard '{guard}'.", 1)
    if not lines or lines[-1] != f"#endif // {guard}":
        report(f"Missing closing '#endif // {guard}'.", len(lines) or None)
    if 'extern "C" {' not in lines:
        report("Missing extern \"C\" linkage block.")

    parsed = extract_declarations(text)
    if not parsed.ok:
        report("Header does not parse as C.", parsed.error_line)
        return errors

    first_seen: dict[str, int] = {}
    declared_types: set[str] = set()
    for decl in parsed.declarations:
        for used in decl.uses:
            if used not in declared_types and used not in BUILTIN_TYPES:
                report(f"Type '{used}' is used before its declaration.", decl.line)
        if decl.name in first_seen:
            report(
                f"Identifier '{decl.name}' is declared more than once "
                f"(first at line {first_seen[decl.name]}).",
                decl.line,
            )
        else:
            first_seen[decl.name] = decl.line
        if decl.kind == "type":
            declared_types.add(decl.name)

    if record is not None:
        type_count = len(parsed.of_kind("type"))
        function_count = len(parsed.of_kind("function"))
        if type_count != record.type_count:
            report(
                f"Manifest lists {record.type_count} types, header declares "
                f"{type_count}."
            )
        if function_count != record.function_count:
            report(
                f"Manifest lists {record.function_count} functions, header "
                f"declares {function_count}."
            )

    return errors


def validate_headers(artifacts_dir: Path) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    manifest = _load_manifest(artifacts_dir / MANIFEST_JSON, result)
    if manifest is None:
        return result

    for record in manifest.headers:
        path = artifacts_dir / record.header
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            result.errors.append(
                ValidationMessage(
                    artifact=record.module,
                    path=path,
                    message="Header listed in the manifest is missing.",
                )
            )
            continue
        except (OSError, UnicodeDecodeError) as exc:
            result.errors.append(
                ValidationMessage(
                    artifact=record.module,
                    path=path,
                    message=f"Failed to read file: {exc}.",
                )
            )
            continue

        result.errors.extend(
            check_header_text(text, module=record.module, path=path, record=record)
        )

    return result


def _load_manifest(path: Path, result: ValidationResult) -> ShimManifest | None:
    if not path.exists():
        result.errors.append(
            ValidationMessage(
                artifact="manifest",
                path=path,
                message="Required artifact file is missing.",
            )
        )
        return None

    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact="manifest",
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return None

    try:
        manifest = ShimManifest.model_validate(raw)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact="manifest",
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )
        return None

    if manifest.schema_version != MANIFEST_SCHEMA_VERSION:
        result.errors.append(
            ValidationMessage(
                artifact="manifest",
                path=path,
                message=(
                    "Schema version mismatch: "
                    f"expected {MANIFEST_SCHEMA_VERSION}, "
                    f"got {manifest.schema_version}."
                ),
            )
        )
        return None

    return manifest


__all__ = [
    "BUILTIN_TYPES",
    "ValidationMessage",
    "ValidationResult",
    "check_header_text",
    "validate_headers",
]
