"""Header assembly: guard, includes, linkage block and declarations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shim.representation import RepresentationKind
from utils import include_guard

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shim.dedupe import TypeDeclaration
    from shim.thunks import MemberDeclarations

INCLUDES = ("<stdbool.h>", "<stdint.h>")
TYPES_BANNER = "// Type definitions"
FUNCTIONS_BANNER = "// Accessors and thunks"
INDENT = "    "


def _article(word: str) -> str:
    return "an" if word[:1] in "aeiou" else "a"


def render_type(declaration: TypeDeclaration) -> list[str]:
    kind = declaration.source_kind
    lines = [f"// {declaration.source_name} is {_article(kind)} {kind}"]
    if declaration.kind is RepresentationKind.OPAQUE_POINTER:
        lines.append(f"typedef void* {declaration.c_name};")
    elif declaration.kind is RepresentationKind.OPAQUE_BOX:
        lines.append("typedef struct {")
        lines.append(f"{INDENT}void* _internal;")
        lines.append(f"}} {declaration.c_name};")
    elif declaration.kind is RepresentationKind.ENUMERATION:
        lines.append("typedef enum {")
        lines.extend(f"{INDENT}{name} = {value}," for name, value in declaration.cases)
        lines.append(f"}} {declaration.c_name};")
    else:
        msg = f"primitive types have no declaration: {declaration.c_name}"
        raise ValueError(msg)
    return lines


def render_member(member: MemberDeclarations) -> list[str]:
    lines = [f"// {member.comment}"] if member.comment else []
    lines.extend(function.render() for function in member.functions)
    return lines


def _blocks(blocks: Sequence[list[str]]) -> list[str]:
    lines: list[str] = []
    for block in blocks:
        lines.extend(block)
        lines.append("")
    return lines


def assemble_header(
    module: str,
    types: Sequence[TypeDeclaration],
    members: Sequence[MemberDeclarations],
) -> str:
    """Render the complete header text.

    Types come in first-use order and members in model order; the result ends
    with exactly one newline.
    """
    guard = include_guard(module)
    lines = [f"#ifndef {guard}", f"#define {guard}", ""]
    lines.extend(f"#include {include}" for include in INCLUDES)
    lines.extend(["", "#ifdef __cplusplus", 'extern "C" {', "#endif", ""])

    if types:
        lines.append(TYPES_BANNER)
        lines.extend(_blocks([render_type(declaration) for declaration in types]))

    if members:
        lines.append(FUNCTIONS_BANNER)
        lines.extend(_blocks([render_member(member) for member in members]))

    lines.extend(["#ifdef __cplusplus", "}", "#endif", "", f"#endif // {guard}"])
    return "\n".join(lines) + "\n"


__all__ = ["INCLUDES", "assemble_header", "render_member", "render_type"]
