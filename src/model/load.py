"""Loading model documents supplied by the input collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from model.registry import SymbolModel
from model.symbols import ModelDocument

if TYPE_CHECKING:
    from pathlib import Path

MODEL_SUFFIX = ".symbols.json"


class ModelLoadError(Exception):
    """Raised when a model document cannot be read or does not validate."""


def load_model_document(path: Path) -> ModelDocument:
    """Read and validate a ``*.symbols.json`` document."""
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ModelLoadError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise ModelLoadError(msg) from exc

    try:
        return ModelDocument.model_validate(raw)
    except ValidationError as exc:
        msg = f"Invalid model in {path}: {exc}"
        raise ModelLoadError(msg) from exc


def load_symbol_model(path: Path) -> SymbolModel:
    """Load a document and build its resolved registry."""
    return SymbolModel.from_document(load_model_document(path))


__all__ = ["MODEL_SUFFIX", "ModelLoadError", "load_model_document", "load_symbol_model"]
