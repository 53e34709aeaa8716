"""Type representation resolution.

Every type reference reachable from a member resolves to exactly one C-visible
shape. Reference semantics (classes, protocols) erase to a pointer-sized
handle; value types become a one-field box whose capsule is owned by the
runtime bridge; enums become C enums; primitives pass through.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from errors import UnrepresentableType

if TYPE_CHECKING:
    from model.registry import SymbolModel
    from model.symbols import SymbolRecord, TypeReference
    from shim.naming import IdentifierSynthesizer


class RepresentationKind(str, Enum):
    OPAQUE_POINTER = "opaque_pointer"
    OPAQUE_BOX = "opaque_box"
    ENUMERATION = "enumeration"
    PRIMITIVE = "primitive"


PRIMITIVE_C_TYPES: dict[str, str] = {
    "int8": "int8_t",
    "int16": "int16_t",
    "int32": "int32_t",
    "int64": "int64_t",
    "uint8": "uint8_t",
    "uint16": "uint16_t",
    "uint32": "uint32_t",
    "uint64": "uint64_t",
    "int": "intptr_t",
    "uint": "uintptr_t",
    "float32": "float",
    "float64": "double",
    "bool": "bool",
    "void": "void",
}

_SYMBOL_KINDS: dict[str, RepresentationKind] = {
    "class": RepresentationKind.OPAQUE_POINTER,
    "protocol": RepresentationKind.OPAQUE_POINTER,
    "struct": RepresentationKind.OPAQUE_BOX,
    "enum": RepresentationKind.ENUMERATION,
}


@dataclass(frozen=True)
class Representation:
    """Resolved C shape of a type reference."""

    kind: RepresentationKind
    c_type: str
    symbol: SymbolRecord | None = None

    @property
    def is_void(self) -> bool:
        return self.kind is RepresentationKind.PRIMITIVE and self.c_type == "void"


class TypeResolver:
    """Maps type references onto their C representation for one model."""

    def __init__(self, model: SymbolModel, names: IdentifierSynthesizer) -> None:
        self.model = model
        self.names = names

    def resolve_symbol(self, symbol: SymbolRecord) -> Representation:
        kind = _SYMBOL_KINDS.get(symbol.kind)
        if kind is None:
            msg = f"symbol kind {symbol.kind!r} has no C representation"
            raise UnrepresentableType(msg, symbol=self.model.display_name(symbol))
        return Representation(kind, self.names.type_name(symbol), symbol)

    def resolve(
        self,
        ref: TypeReference,
        *,
        owner: SymbolRecord,
        member: str | None = None,
        allow_void: bool = False,
    ) -> Representation:
        """Resolve ``ref`` as used by ``member`` of ``owner``.

        ``allow_void`` is only set for return positions.
        """
        if ref.symbol is not None:
            return self.resolve_symbol(self.model.lookup(ref.symbol))

        c_type = PRIMITIVE_C_TYPES.get(ref.primitive or "")
        where = self.model.display_name(owner)
        if c_type is None:
            msg = f"unknown primitive type {ref.primitive!r}"
            raise UnrepresentableType(msg, symbol=where, member=member)
        if c_type == "void" and not allow_void:
            msg = "void is only representable as a return type"
            raise UnrepresentableType(msg, symbol=where, member=member)
        return Representation(RepresentationKind.PRIMITIVE, c_type)


__all__ = [
    "PRIMITIVE_C_TYPES",
    "Representation",
    "RepresentationKind",
    "TypeResolver",
]
