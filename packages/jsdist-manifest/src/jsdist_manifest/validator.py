# SPDX-License-Identifier: MIT
"""Structural validation of source package.json manifests.

Validation only checks the shape of the fields the build reads. Malformed
fields never stop entry extraction (they simply contribute nothing), so the
build pipeline reports validation problems as warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft202012Validator, ValidationError

from .schema import MANIFEST_SCHEMA


class ManifestError(Exception):
    """Base exception for manifest-related errors."""

    pass


class ManifestValidationError(ManifestError):
    """Raised when manifest validation fails.

    Attributes:
        errors: List of validation errors with field paths and messages
    """

    def __init__(self, errors: list[ValidationErrorDetail]):
        self.errors = errors
        message = f"Manifest validation failed with {len(errors)} error(s)"
        if errors:
            message += f": {errors[0].field}: {errors[0].message}"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Details about a single validation error.

    Attributes:
        field: JSON path to the invalid field (e.g., "files[0]" or "bin.my-cli")
        message: Human-readable error message
        value: The invalid value that caused the error (if available)
    """

    field: str
    message: str
    value: Any = None


@dataclass
class ValidationResult:
    """Result of manifest validation."""

    valid: bool
    errors: list[ValidationErrorDetail] = field(default_factory=list)


def _json_path_from_error(error: ValidationError) -> str:
    """Convert a jsonschema error path to a readable field path."""
    if not error.absolute_path:
        return "<root>"
    parts = []
    for part in error.absolute_path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        elif parts:
            parts.append(f".{part}")
        else:
            parts.append(str(part))
    return "".join(parts)


def _format_error_message(error: ValidationError) -> str:
    """Format a jsonschema error into a human-readable message."""
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, list):
            expected = " or ".join(expected)
        return f"Expected {expected}, got {type(error.instance).__name__}"

    if error.validator == "enum":
        allowed = ", ".join(repr(v) for v in error.validator_value)
        return f"Value must be one of: {allowed}"

    if error.validator == "minLength":
        return f"String must be at least {error.validator_value} character(s)"

    if error.validator == "anyOf":
        return "Expected a path string or a map of command names to path strings"

    return error.message


def validate_manifest(manifest: Any) -> ValidationResult:
    """Validate a package.json manifest against the manifest schema.

    Args:
        manifest: Parsed package.json

    Returns:
        ValidationResult with validation status and errors

    Example:
        >>> validate_manifest({"name": "pkg", "files": ["dist"]}).valid
        True
    """
    if not isinstance(manifest, dict):
        return ValidationResult(
            valid=False,
            errors=[
                ValidationErrorDetail(
                    field="<root>",
                    message=f"Manifest must be an object, got {type(manifest).__name__}",
                    value=manifest,
                )
            ],
        )

    validator = Draft202012Validator(MANIFEST_SCHEMA)
    errors = [
        ValidationErrorDetail(
            field=_json_path_from_error(error),
            message=_format_error_message(error),
            value=error.instance if error.absolute_path else None,
        )
        for error in validator.iter_errors(manifest)
    ]
    return ValidationResult(valid=not errors, errors=errors)


def validate_manifest_strict(manifest: Any) -> dict:
    """Validate a manifest and raise if it is invalid.

    Raises:
        ManifestValidationError: If the manifest is invalid
    """
    result = validate_manifest(manifest)
    if not result.valid:
        raise ManifestValidationError(result.errors)
    return manifest
