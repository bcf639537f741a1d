"""Validation utilities for configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .registry import ConfigTree, ItemDescriptor, flatten, matches_type


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str


def validate(value: Any, item: ItemDescriptor) -> List[ValidationError]:
    """Check a candidate value against one item descriptor."""
    if value is None:
        return [ValidationError(item.path, f"Expected {item.type_name}, got nothing.")]

    if not matches_type(value, item.type):
        return [
            ValidationError(
                item.path,
                f"Expected {item.type_name}, got {type(value).__name__}.",
            )
        ]

    errors: List[ValidationError] = []
    if item.choices is not None and value not in item.choices:
        errors.append(
            ValidationError(
                item.path,
                f"Value must be one of: {', '.join(map(str, item.choices))}.",
            )
        )
    if item.range is not None:
        try:
            inside = value in item.range
        except TypeError:
            inside = False
        if not inside:
            errors.append(ValidationError(item.path, f"Value must be within {item.range}."))
    if item.validator is not None and not errors:
        try:
            accepted = bool(item.validator(value))
        except Exception as exc:
            errors.append(ValidationError(item.path, f"Validator failed: {exc}"))
        else:
            if not accepted:
                errors.append(ValidationError(item.path, f"Value {value!r} was rejected."))
    return errors


def validate_config(tree: ConfigTree, values: Dict[str, Any]) -> Dict[str, List[ValidationError]]:
    """Validate a nested value dict and return errors keyed by dotpath."""
    registry = flatten(tree)
    flattened = flatten(values)
    errors: Dict[str, List[ValidationError]] = {}
    for key, value in flattened.items():
        item = registry.get(key)
        if not isinstance(item, ItemDescriptor):
            continue
        field_errors = validate(value, item)
        if field_errors:
            errors[key] = field_errors
    return errors


def missing_keys(tree: ConfigTree, values: Dict[str, Any]) -> List[str]:
    """Return dotpaths of declared leaves that have no value."""
    flattened = flatten(values)
    return [key for key in flatten(tree) if key not in flattened]
