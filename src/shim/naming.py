"""Identifier synthesis for emitted C declarations.

Names are a pure function of the symbol model: every run recomputes them from
scratch, so the same model always yields the same identifiers.

Scheme:

- type names join the escaped qualified-name components with ``_``
  (``Outer.Inner`` -> ``Outer_Inner``); when several symbols share a qualified
  name, the first in model order keeps it and the k-th gets ``_<k>``;
- functions are ``<prefix><scheme>_<owner>_<member>`` where ``scheme`` is
  ``py`` for properties and ``im`` for methods; accessors add ``_get``/``_set``;
- a method taking ``n > 0`` parameters ends in ``_<n>``, so an overload's name
  depends on its own signature and never on its siblings;
- inside a component ``_`` is doubled, so the single ``_`` delimiter and the
  numeric suffixes can never be produced by a source name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from errors import IdentifierCollision
from model.registry import member_identity
from model.symbols import MethodMember, PropertyMember

if TYPE_CHECKING:
    from collections.abc import Sequence

    from model.registry import SymbolModel
    from model.symbols import EnumCase, Member, SymbolRecord

PROPERTY_SCHEME = "py"
METHOD_SCHEME = "im"
GETTER_SUFFIX = "_get"
SETTER_SUFFIX = "_set"

C_RESERVED = frozenset(
    {
        # C
        "auto", "break", "case", "char", "const", "continue", "default", "do",
        "double", "else", "enum", "extern", "float", "for", "goto", "if",
        "inline", "int", "long", "register", "restrict", "return", "short",
        "signed", "sizeof", "static", "struct", "switch", "typedef", "union",
        "unsigned", "void", "volatile", "while", "_Bool", "_Complex",
        "_Imaginary", "_Alignas", "_Alignof", "_Atomic", "_Generic",
        "_Noreturn", "_Static_assert", "_Thread_local",
        # C++
        "alignas", "alignof", "and", "asm", "bool", "catch", "class",
        "constexpr", "const_cast", "decltype", "delete", "dynamic_cast",
        "explicit", "export", "false", "friend", "mutable", "namespace", "new",
        "noexcept", "not", "nullptr", "operator", "or", "private", "protected",
        "public", "reinterpret_cast", "static_assert", "static_cast", "template",
        "this", "thread_local", "throw", "true", "try", "typeid", "typename",
        "using", "virtual", "wchar_t", "xor",
        # <stdint.h> / <stdbool.h> / <stddef.h>
        "int8_t", "int16_t", "int32_t", "int64_t", "uint8_t", "uint16_t",
        "uint32_t", "uint64_t", "intptr_t", "uintptr_t", "size_t", "NULL",
    }
)

_ESCAPE = re.compile(r"[^A-Za-z0-9_]")


def escape_component(text: str) -> str:
    """Escape one source name component into identifier characters."""
    escaped = text.replace("_", "__")
    escaped = _ESCAPE.sub(lambda m: f"_u{ord(m.group(0)):04X}", escaped)
    if escaped[:1].isdigit():
        escaped = f"_{escaped}"
    return escaped


def avoid_reserved(name: str) -> str:
    return f"{name}_" if name in C_RESERVED else name


def type_identifier(components: Sequence[str]) -> str:
    return avoid_reserved("_".join(escape_component(part) for part in components))


def parameter_identifier(name: str) -> str:
    return avoid_reserved(escape_component(name))


def parameter_type_encoding(member: Member) -> str:
    """Lexicographic encoding of a member's parameter types."""
    if isinstance(member, PropertyMember):
        return ""
    return ",".join(param.type.spelling() for param in member.parameters)


class IdentifierTable:
    """Names claimed so far in one generation run, keyed to their claimant."""

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def claim(
        self,
        name: str,
        identity: str,
        *,
        symbol: str,
        member: str | None = None,
    ) -> str:
        owner = self._owners.setdefault(name, identity)
        if owner != identity:
            msg = (
                f"identifier {name!r} is required by both {owner!r} "
                f"and {identity!r}"
            )
            raise IdentifierCollision(msg, symbol=symbol, member=member)
        return name


class IdentifierSynthesizer:
    """Produces unique, deterministic identifiers for one model."""

    def __init__(self, model: SymbolModel, *, function_prefix: str = "") -> None:
        self.model = model
        self.function_prefix = function_prefix
        self.table = IdentifierTable()
        self._type_names = self._disambiguate_type_names()

    def _disambiguate_type_names(self) -> dict[str, str]:
        names: dict[str, str] = {}
        seen: dict[str, int] = {}
        for symbol in self.model.symbols():
            base = type_identifier(self.model.qualified_name(symbol))
            ordinal = seen.get(base, 0) + 1
            seen[base] = ordinal
            names[symbol.identity] = base if ordinal == 1 else f"{base}_{ordinal}"
        return names

    def type_name(self, symbol: SymbolRecord) -> str:
        return self.table.claim(
            self._type_names[symbol.identity],
            symbol.identity,
            symbol=self.model.display_name(symbol),
        )

    def enum_case_name(self, symbol: SymbolRecord, index: int, case: EnumCase) -> str:
        name = f"{self.type_name(symbol)}_{escape_component(case.name)}"
        return self.table.claim(
            name,
            f"{symbol.identity}#case{index}",
            symbol=self.model.display_name(symbol),
            member=case.name,
        )

    def placeholder_case_name(self, symbol: SymbolRecord) -> str:
        name = f"{self.type_name(symbol)}_Unknown"
        return self.table.claim(
            name,
            f"{symbol.identity}#unknown",
            symbol=self.model.display_name(symbol),
        )

    def member_base_names(
        self, symbol: SymbolRecord, members: Sequence[Member]
    ) -> list[str]:
        """Disambiguated base identifiers for ``members``, in the same order.

        Overloads of different arity already differ by their ``_<n>`` suffix.
        Members that still share a base name are ordered by declaration
        position, then by their parameter type encoding; the first keeps the
        base name and the k-th gets ``_<k>`` after its stem. For methods the
        stem always spells out the arity (``_0_2``), so a tie suffix cannot
        land on another overload's name.
        """
        bases = [self._raw_base_name(symbol, member) for member in members]
        groups: dict[str, list[int]] = {}
        for index, base in enumerate(bases):
            groups.setdefault(base, []).append(index)

        names = list(bases)
        for indices in groups.values():
            if len(indices) < 2:
                continue
            ordered = sorted(
                indices,
                key=lambda i: (i, parameter_type_encoding(members[i])),
            )
            for ordinal, index in enumerate(ordered[1:], start=2):
                member = members[index]
                stem = bases[index]
                if isinstance(member, MethodMember) and not member.parameters:
                    stem = f"{stem}_0"
                names[index] = f"{stem}_{ordinal}"
        return names

    def claim_function(
        self, symbol: SymbolRecord, member: Member, name: str, role: str
    ) -> str:
        return self.table.claim(
            name,
            f"{member_identity(symbol, member)}#{role}",
            symbol=self.model.display_name(symbol),
            member=member.name,
        )

    def _raw_base_name(self, symbol: SymbolRecord, member: Member) -> str:
        scheme = METHOD_SCHEME if isinstance(member, MethodMember) else PROPERTY_SCHEME
        owner = self.type_name(symbol)
        member_part = escape_component(member.name)
        base = f"{self.function_prefix}{scheme}_{owner}_{member_part}"
        if isinstance(member, MethodMember) and member.parameters:
            base = f"{base}_{len(member.parameters)}"
        return base


__all__ = [
    "C_RESERVED",
    "GETTER_SUFFIX",
    "IdentifierSynthesizer",
    "IdentifierTable",
    "SETTER_SUFFIX",
    "avoid_reserved",
    "escape_component",
    "parameter_identifier",
    "parameter_type_encoding",
    "type_identifier",
]
