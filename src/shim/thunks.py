"""Accessor and method thunk declarations.

Properties become a getter (plus a setter when writable); methods become one
flat function. Every declaration takes the owner's handle first as ``self``.
Argument labels survive only in the signature comment. No bodies are ever
produced; those belong to the runtime bridge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from model.symbols import MethodMember, PropertyMember
from shim.naming import GETTER_SUFFIX, SETTER_SUFFIX, parameter_identifier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from model.registry import SymbolModel
    from model.symbols import Member, SymbolRecord, TypeReference
    from shim.naming import IdentifierSynthesizer
    from shim.representation import Representation, TypeResolver

SELF_PARAMETER = "self"
VALUE_PARAMETER = "value"
_RESERVED_PARAMETERS = frozenset({SELF_PARAMETER, VALUE_PARAMETER})
_COMPLETION_MARKERS = ("completion", "handler")


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    return_type: str
    parameters: tuple[tuple[str, str], ...]

    def render(self) -> str:
        params = ", ".join(f"{c_type} {name}" for c_type, name in self.parameters)
        return f"{self.return_type} {self.name}({params or 'void'});"


@dataclass(frozen=True)
class MemberDeclarations:
    """Everything one member contributes to the header."""

    comment: str | None
    functions: tuple[FunctionDeclaration, ...]
    uses: tuple[Representation, ...]


def is_completion_handler(member: Member) -> bool:
    """True for methods taking a completion/handler callback parameter."""
    if not isinstance(member, MethodMember):
        return False
    return any(
        marker in param.name.lower()
        for param in member.parameters
        for marker in _COMPLETION_MARKERS
    )


def _unique_parameter_names(names: Sequence[str]) -> list[str]:
    used = set(_RESERVED_PARAMETERS)
    result: list[str] = []
    for raw in names:
        base = parameter_identifier(raw)
        if base in _RESERVED_PARAMETERS:
            base = f"{base}_"
        candidate = base
        counter = 2
        while candidate in used:
            candidate = f"{base}_{counter}"
            counter += 1
        used.add(candidate)
        result.append(candidate)
    return result


class ThunkBuilder:
    """Builds the declarations of every member of a symbol."""

    def __init__(
        self,
        model: SymbolModel,
        names: IdentifierSynthesizer,
        resolver: TypeResolver,
        *,
        signature_comments: bool = True,
    ) -> None:
        self.model = model
        self.names = names
        self.resolver = resolver
        self.signature_comments = signature_comments

    def build(
        self, symbol: SymbolRecord, members: Sequence[Member]
    ) -> list[MemberDeclarations]:
        owner = self.resolver.resolve_symbol(symbol)
        base_names = self.names.member_base_names(symbol, members)
        result: list[MemberDeclarations] = []
        for member, base in zip(members, base_names):
            if isinstance(member, PropertyMember):
                result.append(self._property(symbol, owner, member, base))
            else:
                result.append(self._method(symbol, owner, member, base))
        return result

    def _property(
        self,
        symbol: SymbolRecord,
        owner: Representation,
        member: PropertyMember,
        base: str,
    ) -> MemberDeclarations:
        value = self.resolver.resolve(member.type, owner=symbol, member=member.name)
        getter_name = self.names.claim_function(
            symbol, member, f"{base}{GETTER_SUFFIX}", "get"
        )
        functions = [
            FunctionDeclaration(
                name=getter_name,
                return_type=value.c_type,
                parameters=((owner.c_type, SELF_PARAMETER),),
            )
        ]
        if member.writable:
            setter_name = self.names.claim_function(
                symbol, member, f"{base}{SETTER_SUFFIX}", "set"
            )
            functions.append(
                FunctionDeclaration(
                    name=setter_name,
                    return_type="void",
                    parameters=(
                        (owner.c_type, SELF_PARAMETER),
                        (value.c_type, VALUE_PARAMETER),
                    ),
                )
            )

        access = "{ get set }" if member.writable else "{ get }"
        comment = (
            f"property {self.model.display_name(symbol)}.{member.name}: "
            f"{self._spell(member.type)} {access}"
        )
        return MemberDeclarations(
            comment=comment if self.signature_comments else None,
            functions=tuple(functions),
            uses=(owner, value),
        )

    def _method(
        self,
        symbol: SymbolRecord,
        owner: Representation,
        member: MethodMember,
        base: str,
    ) -> MemberDeclarations:
        params = [
            self.resolver.resolve(param.type, owner=symbol, member=member.name)
            for param in member.parameters
        ]
        if member.returns is None:
            returns = None
            return_type = "void"
        else:
            returns = self.resolver.resolve(
                member.returns, owner=symbol, member=member.name, allow_void=True
            )
            return_type = returns.c_type

        param_names = _unique_parameter_names([p.name for p in member.parameters])
        name = self.names.claim_function(symbol, member, base, "call")
        declaration = FunctionDeclaration(
            name=name,
            return_type=return_type,
            parameters=(
                (owner.c_type, SELF_PARAMETER),
                *((rep.c_type, pname) for rep, pname in zip(params, param_names)),
            ),
        )

        signature = ", ".join(
            f"{param.label + ' ' if param.label else ''}{param.name}: "
            f"{self._spell(param.type)}"
            for param in member.parameters
        )
        comment = f"method {self.model.display_name(symbol)}.{member.name}({signature})"
        if member.returns is not None:
            comment += f" -> {self._spell(member.returns)}"

        uses = (owner, *params, *((returns,) if returns is not None else ()))
        return MemberDeclarations(
            comment=comment if self.signature_comments else None,
            functions=(declaration,),
            uses=uses,
        )

    def _spell(self, ref: TypeReference) -> str:
        if ref.symbol is not None:
            return self.model.display_name(self.model.lookup(ref.symbol))
        return ref.primitive or ""


__all__ = [
    "FunctionDeclaration",
    "MemberDeclarations",
    "ThunkBuilder",
    "is_completion_handler",
]
