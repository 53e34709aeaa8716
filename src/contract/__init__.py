"""Stable artifact contract surface for shimgen output."""

from contract.artifacts import (
    MANIFEST_JSON,
    MANIFEST_SCHEMA_VERSION,
    HeaderRecord,
    ShimManifest,
)


def __getattr__(name: str) -> object:
    if name in {
        "ValidationMessage",
        "ValidationResult",
        "check_header_text",
        "validate_headers",
    }:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            check_header_text,
            validate_headers,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "check_header_text": check_header_text,
            "validate_headers": validate_headers,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "MANIFEST_JSON",
    "MANIFEST_SCHEMA_VERSION",
    "HeaderRecord",
    "ShimManifest",
    "ValidationMessage",
    "ValidationResult",
    "check_header_text",
    "validate_headers",
]
