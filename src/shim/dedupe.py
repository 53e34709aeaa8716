"""Single emission of type declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shim.representation import RepresentationKind

if TYPE_CHECKING:
    from model.registry import SymbolModel
    from shim.naming import IdentifierSynthesizer
    from shim.representation import Representation


@dataclass(frozen=True)
class TypeDeclaration:
    identity: str
    c_name: str
    kind: RepresentationKind
    source_name: str
    source_kind: str
    cases: tuple[tuple[str, int], ...] = ()


class TypeDeduplicator:
    """Records type declarations in first-use order, each identity once."""

    def __init__(self, model: SymbolModel, names: IdentifierSynthesizer) -> None:
        self.model = model
        self.names = names
        self._emitted: set[str] = set()
        self._declarations: list[TypeDeclaration] = []

    @property
    def declarations(self) -> tuple[TypeDeclaration, ...]:
        return tuple(self._declarations)

    def is_emitted(self, identity: str) -> bool:
        return identity in self._emitted

    def request(self, representation: Representation) -> TypeDeclaration | None:
        """Emit the declaration behind ``representation`` unless already done.

        Primitives need no declaration and always return None, as do repeated
        requests for an emitted identity.
        """
        symbol = representation.symbol
        if symbol is None or self.is_emitted(symbol.identity):
            return None

        cases: tuple[tuple[str, int], ...] = ()
        if representation.kind is RepresentationKind.ENUMERATION:
            if symbol.cases:
                cases = tuple(
                    (self.names.enum_case_name(symbol, index, case), case.value)
                    for index, case in enumerate(symbol.cases)
                )
            else:
                cases = ((self.names.placeholder_case_name(symbol), 0),)

        declaration = TypeDeclaration(
            identity=symbol.identity,
            c_name=representation.c_type,
            kind=representation.kind,
            source_name=self.model.display_name(symbol),
            source_kind=symbol.kind,
            cases=cases,
        )
        self._emitted.add(symbol.identity)
        self._declarations.append(declaration)
        return declaration


__all__ = ["TypeDeclaration", "TypeDeduplicator"]
