"""Fatal generation errors.

Every error identifies the offending symbol (and member, when there is one).
None of them is recoverable within a run: generation either produces a whole
header or nothing.
"""

from __future__ import annotations


class ShimError(Exception):
    """Base class for errors that abort header generation."""

    kind = "shim_error"

    def __init__(
        self,
        message: str,
        *,
        symbol: str | None = None,
        member: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.symbol = symbol
        self.member = member

    def location(self) -> str:
        if self.symbol is None:
            return "<model>"
        if self.member is None:
            return self.symbol
        return f"{self.symbol}.{self.member}"

    def to_dict(self) -> dict[str, object]:
        return {
            "error": self.kind,
            "symbol": self.symbol,
            "member": self.member,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.location()}: {self.message}"


class UnresolvedReference(ShimError):
    """A type reference names an identity absent from the symbol model."""

    kind = "unresolved_reference"


class UnrepresentableType(ShimError):
    """A type reference cannot be mapped to any C representation."""

    kind = "unrepresentable_type"


class IdentifierCollision(ShimError):
    """Two distinct identities require the same identifier."""

    kind = "identifier_collision"


__all__ = [
    "IdentifierCollision",
    "ShimError",
    "UnrepresentableType",
    "UnresolvedReference",
]
