"""On-disk contract for generated shim artifacts.

An output directory holds one header per module plus a manifest describing
them. The manifest carries only relative paths so it is identical across
checkouts.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Manifest schema version (manifest-v1).
MANIFEST_SCHEMA_VERSION = 1

MANIFEST_JSON = "shim_manifest.json"


class HeaderRecord(BaseModel):
    """One generated header as listed in the manifest."""

    module: str
    header: str = Field(description="Header filename inside the output dir")
    source: str = Field(description="Model document path relative to the root")
    type_count: int = Field(ge=0)
    function_count: int = Field(ge=0)


class ShimManifest(BaseModel):
    schema_version: int = Field(default=MANIFEST_SCHEMA_VERSION)
    headers: list[HeaderRecord] = Field(default_factory=list)


__all__ = [
    "HeaderRecord",
    "MANIFEST_JSON",
    "MANIFEST_SCHEMA_VERSION",
    "ShimManifest",
]
