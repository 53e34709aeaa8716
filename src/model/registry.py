"""Read-only symbol registry keyed by mangled identity."""

from __future__ import annotations

from typing import TYPE_CHECKING

from errors import IdentifierCollision, UnresolvedReference
from model.symbols import ModelDocument, PropertyMember

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from model.symbols import Member, SymbolRecord, TypeReference


def member_identity(owner: SymbolRecord, member: Member) -> str:
    """Return the member's identity, deriving one when the model omits it."""
    if member.identity is not None:
        return member.identity
    if isinstance(member, PropertyMember):
        return f"{owner.identity}::{member.name}"
    params = ",".join(
        f"{param.label or '_'}:{param.type.spelling()}" for param in member.parameters
    )
    return f"{owner.identity}::{member.name}({params})"


def referenced_types(member: Member) -> list[TypeReference]:
    """Type references of a member in first-use order."""
    if isinstance(member, PropertyMember):
        return [member.type]
    refs = [param.type for param in member.parameters]
    if member.returns is not None:
        refs.append(member.returns)
    return refs


class SymbolModel:
    """Immutable registry of symbols with all cross references resolved.

    Enumeration order is the insertion order supplied by the collaborator;
    nothing here reorders symbols or members.
    """

    def __init__(self, module: str, symbols: Iterable[SymbolRecord]) -> None:
        self.module = module
        self._symbols: dict[str, SymbolRecord] = {}
        for symbol in symbols:
            if symbol.identity in self._symbols:
                msg = f"duplicate symbol identity {symbol.identity!r}"
                raise IdentifierCollision(msg, symbol=symbol.name)
            self._symbols[symbol.identity] = symbol
        self._qualified: dict[str, tuple[str, ...]] = {}
        self._resolve()

    @classmethod
    def from_document(cls, document: ModelDocument) -> SymbolModel:
        return cls(document.module, document.symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, identity: object) -> bool:
        return identity in self._symbols

    def lookup(self, identity: str) -> SymbolRecord:
        try:
            return self._symbols[identity]
        except KeyError:
            msg = f"no symbol with identity {identity!r}"
            raise UnresolvedReference(msg) from None

    def symbols(self) -> Iterator[SymbolRecord]:
        yield from self._symbols.values()

    def members(self, symbol: SymbolRecord) -> Iterator[Member]:
        yield from symbol.members

    def qualified_name(self, symbol: SymbolRecord) -> tuple[str, ...]:
        """Qualified name components, outermost first."""
        return self._qualified[symbol.identity]

    def display_name(self, symbol: SymbolRecord) -> str:
        return ".".join(self.qualified_name(symbol))

    def _resolve(self) -> None:
        for symbol in self._symbols.values():
            self._qualified[symbol.identity] = self._qualify(symbol, ())

        seen_members: set[str] = set()
        for symbol in self._symbols.values():
            owner_name = self.display_name(symbol)
            for member in symbol.members:
                identity = member_identity(symbol, member)
                if identity in seen_members:
                    msg = f"duplicate member identity {identity!r}"
                    raise IdentifierCollision(
                        msg, symbol=owner_name, member=member.name
                    )
                seen_members.add(identity)
                for ref in referenced_types(member):
                    if ref.symbol is not None and ref.symbol not in self._symbols:
                        msg = f"type reference {ref.symbol!r} is not in the model"
                        raise UnresolvedReference(
                            msg, symbol=owner_name, member=member.name
                        )

    def _qualify(
        self, symbol: SymbolRecord, visiting: tuple[str, ...]
    ) -> tuple[str, ...]:
        if symbol.parent is None:
            return (symbol.name,)
        if symbol.identity in visiting:
            msg = f"nesting cycle through {symbol.identity!r}"
            raise UnresolvedReference(msg, symbol=symbol.name)
        parent = self._symbols.get(symbol.parent)
        if parent is None:
            msg = f"parent {symbol.parent!r} is not in the model"
            raise UnresolvedReference(msg, symbol=symbol.name)
        return (*self._qualify(parent, (*visiting, symbol.identity)), symbol.name)


__all__ = ["SymbolModel", "member_identity", "referenced_types"]
