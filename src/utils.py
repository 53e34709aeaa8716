"""Shared utilities for shimgen."""

from __future__ import annotations

import re

_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9]+")


def include_guard(module: str) -> str:
    """Build the include guard macro for a module's header.

    Examples:
        >>> include_guard("Virtualization")
        'VIRTUALIZATION_SHIM_H'
        >>> include_guard("vm-core.api")
        'VM_CORE_API_SHIM_H'
    """
    stem = _NON_IDENTIFIER.sub("_", module).strip("_").upper() or "MODULE"
    if stem[0].isdigit():
        stem = f"M{stem}"
    return f"{stem}_SHIM_H"


def header_filename(module: str, suffix: str) -> str:
    """Return the on-disk header name for ``module``.

    Examples:
        >>> header_filename("Hypervisor", ".shim.h")
        'Hypervisor.shim.h'
    """
    safe = _NON_IDENTIFIER.sub("_", module).strip("_") or "module"
    return f"{safe}{suffix}"
