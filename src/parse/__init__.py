"""Parsing utilities for generated headers."""

from parse.c_declarations import CDeclaration, ParsedHeader, extract_declarations

__all__ = ["CDeclaration", "ParsedHeader", "extract_declarations"]
