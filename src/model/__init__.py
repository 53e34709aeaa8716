"""Symbol model namespace."""

from model.registry import SymbolModel
from model.symbols import (
    EnumCase,
    MethodMember,
    ModelDocument,
    Parameter,
    PropertyMember,
    SymbolRecord,
    TypeReference,
)

__all__ = [
    "EnumCase",
    "MethodMember",
    "ModelDocument",
    "Parameter",
    "PropertyMember",
    "SymbolModel",
    "SymbolRecord",
    "TypeReference",
]
