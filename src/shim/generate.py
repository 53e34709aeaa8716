"""Single-model header generation.

Composes the stages in one direction: the symbol model feeds the identifier
synthesizer and type resolver, the thunk builder, the deduplicator and
finally the header assembler. All state lives inside one call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shim.dedupe import TypeDeduplicator
from shim.header import assemble_header
from shim.naming import IdentifierSynthesizer
from shim.representation import TypeResolver
from shim.thunks import MemberDeclarations, ThunkBuilder, is_completion_handler

if TYPE_CHECKING:
    from model.registry import SymbolModel
    from rules.config import ShimConfig
    from shim.dedupe import TypeDeclaration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOptions:
    function_prefix: str = ""
    skip_completion_handlers: bool = False
    signature_comments: bool = True

    @classmethod
    def from_config(cls, config: ShimConfig) -> GenerationOptions:
        return cls(
            function_prefix=config.function_prefix,
            skip_completion_handlers=config.skip_completion_handlers,
            signature_comments=config.signature_comments,
        )


@dataclass(frozen=True)
class ShimUnit:
    """The declarations of one header, in emission order."""

    module: str
    types: tuple[TypeDeclaration, ...]
    members: tuple[MemberDeclarations, ...]

    @property
    def function_count(self) -> int:
        return sum(len(member.functions) for member in self.members)

    def render(self) -> str:
        return assemble_header(self.module, self.types, self.members)


def build_unit(model: SymbolModel, options: GenerationOptions | None = None) -> ShimUnit:
    """Run naming, resolution, thunk building and deduplication for a model."""
    if options is None:
        options = GenerationOptions()

    names = IdentifierSynthesizer(model, function_prefix=options.function_prefix)
    resolver = TypeResolver(model, names)
    builder = ThunkBuilder(
        model, names, resolver, signature_comments=options.signature_comments
    )
    dedupe = TypeDeduplicator(model, names)

    members: list[MemberDeclarations] = []
    for symbol in model.symbols():
        dedupe.request(resolver.resolve_symbol(symbol))

        selected = list(model.members(symbol))
        if options.skip_completion_handlers:
            kept = [m for m in selected if not is_completion_handler(m)]
            if len(kept) != len(selected):
                logger.debug(
                    "skipping %d completion handler(s) on %s",
                    len(selected) - len(kept),
                    model.display_name(symbol),
                )
            selected = kept

        for declarations in builder.build(symbol, selected):
            for representation in declarations.uses:
                dedupe.request(representation)
            members.append(declarations)

    unit = ShimUnit(
        module=model.module,
        types=dedupe.declarations,
        members=tuple(members),
    )
    logger.debug(
        "built %s: %d types, %d functions",
        model.module,
        len(unit.types),
        unit.function_count,
    )
    return unit


def render_header(model: SymbolModel, options: GenerationOptions | None = None) -> str:
    """Render the complete C header for ``model``."""
    return build_unit(model, options).render()


__all__ = ["GenerationOptions", "ShimUnit", "build_unit", "render_header"]
