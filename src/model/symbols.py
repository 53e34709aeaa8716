"""Symbol models for exported runtime APIs.

This module contains the records of the symbol model: symbols (classes,
structs, enums, protocols), their members (properties, methods) and the type
references that connect them.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

SymbolKind = Literal["class", "struct", "enum", "protocol"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TypeReference(_Record):
    """Non-owning reference to a symbol identity or a primitive.

    ``primitive`` is kept as a plain string so that unknown primitives reach
    the representation resolver and fail there instead of at load time.
    """

    symbol: str | None = Field(default=None, description="Identity of a symbol")
    primitive: str | None = Field(default=None, description="Primitive type name")

    @model_validator(mode="after")
    def _exactly_one_target(self) -> TypeReference:
        if (self.symbol is None) == (self.primitive is None):
            msg = "type reference needs exactly one of 'symbol' or 'primitive'"
            raise ValueError(msg)
        return self

    def spelling(self) -> str:
        """Spelling used in signature comments and ordering keys."""
        if self.primitive is not None:
            return self.primitive
        return f"@{self.symbol}"


class Parameter(_Record):
    name: str = Field(min_length=1)
    label: str | None = Field(
        default=None, description="Argument label; documentation only"
    )
    type: TypeReference


class PropertyMember(_Record):
    kind: Literal["property"] = "property"
    name: str = Field(min_length=1)
    identity: str | None = None
    type: TypeReference
    writable: bool = Field(default=False, description="Read-write when true")


class MethodMember(_Record):
    kind: Literal["method"] = "method"
    name: str = Field(min_length=1)
    identity: str | None = None
    parameters: tuple[Parameter, ...] = ()
    returns: TypeReference | None = Field(
        default=None, description="Return type; None means no value"
    )


Member = Annotated[Union[PropertyMember, MethodMember], Field(discriminator="kind")]


class EnumCase(_Record):
    name: str = Field(min_length=1)
    value: int


class SymbolRecord(_Record):
    """A named type-level entity exported by the runtime."""

    identity: str = Field(min_length=1, description="Stable mangled identity")
    name: str = Field(min_length=1)
    kind: SymbolKind
    parent: str | None = Field(
        default=None, description="Identity of the enclosing symbol, if nested"
    )
    cases: tuple[EnumCase, ...] | None = Field(
        default=None, description="Known enum cases; None when not modelled"
    )
    members: tuple[Member, ...] = ()

    @model_validator(mode="after")
    def _cases_only_on_enums(self) -> SymbolRecord:
        if self.cases and self.kind != "enum":
            msg = f"only enums may declare cases (symbol {self.name!r})"
            raise ValueError(msg)
        return self


class ModelDocument(_Record):
    """Top-level document supplied by the input collaborator."""

    module: str = Field(min_length=1, description="Module name keying the header")
    symbols: tuple[SymbolRecord, ...] = ()


__all__ = [
    "EnumCase",
    "Member",
    "MethodMember",
    "ModelDocument",
    "Parameter",
    "PropertyMember",
    "SymbolKind",
    "SymbolRecord",
    "TypeReference",
]
