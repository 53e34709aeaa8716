"""Tree-sitter based declaration extraction for generated C headers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from tree_sitter import Language, Node, Parser
from tree_sitter_c import language as get_c_language

if TYPE_CHECKING:
    from collections.abc import Iterator

DeclarationKind = Literal["type", "enum_constant", "function", "variable"]

_PARSER: Parser | None = None

# Lines that only make sense to a preprocessor or a C++ compiler. They are
# blanked (not removed) so node positions still match the original lines.
_LINKAGE_LINES = frozenset({'extern "C" {', "}"})

_WRAPPING_DECLARATORS = frozenset(
    {
        "pointer_declarator",
        "array_declarator",
        "function_declarator",
        "parenthesized_declarator",
    }
)


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the C language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_c_language())
        _PARSER = Parser(lang)

    return _PARSER


@dataclass(frozen=True)
class CDeclaration:
    """A top-level name introduced by a header."""

    kind: DeclarationKind
    name: str
    line: int
    uses: tuple[str, ...] = ()


@dataclass
class ParsedHeader:
    declarations: list[CDeclaration] = field(default_factory=list)
    error_line: int | None = None

    @property
    def ok(self) -> bool:
        return self.error_line is None

    def of_kind(self, kind: DeclarationKind) -> list[CDeclaration]:
        return [d for d in self.declarations if d.kind == kind]


def _mask_directives(text: str) -> bytes:
    lines = []
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith("#") or stripped in _LINKAGE_LINES:
            lines.append("")
        else:
            lines.append(line)
    return "\n".join(lines).encode("utf-8")


def _text(node: Node | None) -> str | None:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf8")


def _innermost(node: Node) -> Node:
    """Follow nested declarators down to the declared name."""
    while node.type in _WRAPPING_DECLARATORS:
        inner = node.child_by_field_name("declarator")
        if inner is None:
            named = [child for child in node.children if child.is_named]
            if not named:
                break
            inner = named[0]
        node = inner
    return node


def _function_declarator(node: Node) -> Node | None:
    while node.type in _WRAPPING_DECLARATORS:
        if node.type == "function_declarator":
            return node
        inner = node.child_by_field_name("declarator")
        if inner is None:
            return None
        node = inner
    return None


def _type_use(node: Node | None) -> list[str]:
    if node is not None and node.type == "type_identifier":
        name = _text(node)
        return [name] if name else []
    return []


def _first_error_line(node: Node) -> int | None:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        line = _first_error_line(child)
        if line is not None:
            return line
    return None


def _type_definition(node: Node) -> Iterator[CDeclaration]:
    type_node = node.child_by_field_name("type")
    if type_node is not None and type_node.type == "enum_specifier":
        body = type_node.child_by_field_name("body")
        for child in body.children if body is not None else []:
            if child.type != "enumerator":
                continue
            name = _text(child.child_by_field_name("name"))
            if name:
                yield CDeclaration("enum_constant", name, child.start_point[0] + 1)

    for declarator in node.children_by_field_name("declarator"):
        name = _text(_innermost(declarator))
        if name:
            yield CDeclaration(
                "type",
                name,
                node.start_point[0] + 1,
                tuple(_type_use(type_node)),
            )


def _declaration(node: Node) -> Iterator[CDeclaration]:
    return_uses = _type_use(node.child_by_field_name("type"))
    for declarator in node.children_by_field_name("declarator"):
        name = _text(_innermost(declarator))
        if not name:
            continue
        function = _function_declarator(declarator)
        if function is None:
            yield CDeclaration(
                "variable", name, node.start_point[0] + 1, tuple(return_uses)
            )
            continue

        uses = list(return_uses)
        params = function.child_by_field_name("parameters")
        for param in params.children if params is not None else []:
            if param.type == "parameter_declaration":
                uses.extend(_type_use(param.child_by_field_name("type")))
        yield CDeclaration("function", name, node.start_point[0] + 1, tuple(uses))


def extract_declarations(text: str) -> ParsedHeader:
    """Parse header text and list its top-level declarations in order.

    Preprocessor lines and the ``extern "C"`` wrapper are masked before
    parsing; everything else must be plain C.
    """
    tree = _get_parser().parse(_mask_directives(text))
    root_node = tree.root_node

    result = ParsedHeader()
    if root_node.has_error:
        result.error_line = _first_error_line(root_node) or 1

    for child in root_node.children:
        if child.type == "type_definition":
            result.declarations.extend(_type_definition(child))
        elif child.type == "declaration":
            result.declarations.extend(_declaration(child))

    return result


__all__ = ["CDeclaration", "ParsedHeader", "extract_declarations"]
