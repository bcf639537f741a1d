"""Value coercion utilities for elicited answers and loaded documents."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict

from .registry import ConfigTree, ItemDescriptor

# Scalars PyYAML's safe dumper writes and reads back unchanged.
_YAML_NATIVE = (str, int, float, bool, _dt.date, _dt.datetime, type(None))


def _coerce_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "y", "on"}:
            return True
        if lowered in {"0", "false", "no", "n", "off"}:
            return False
    return value


def _coerce_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _coerce_float(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


def _coerce_str(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _coerce_opaque(value: Any, target: type) -> Any:
    if isinstance(value, target):
        return value
    if isinstance(value, str) and target in (_dt.date, _dt.datetime, _dt.time):
        try:
            return target.fromisoformat(value.strip())
        except ValueError:
            return value
    try:
        return target(value)
    except Exception:
        # validate() rejects the raw value and the caller asks again
        return value


def coerce(raw: Any, item: ItemDescriptor) -> Any:
    """Coerce raw value to the item's type where possible."""
    if raw is None:
        return None
    target = item.type
    if target is bool:
        return _coerce_bool(raw)
    if target is int:
        return _coerce_int(raw)
    if target is float:
        return _coerce_float(raw)
    if target is str:
        return _coerce_str(raw)
    return _coerce_opaque(raw, target)


def to_document_value(value: Any) -> Any:
    """Convert a resolved value into something yaml.safe_dump can write."""
    if isinstance(value, dict):
        return {str(key): to_document_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_document_value(item) for item in value]
    if isinstance(value, _YAML_NATIVE):
        return value
    return str(value)


def restore_values(tree: ConfigTree, values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Coerce stored leaves back to their declared types after a load.

    Keys without a declaration are kept as stored. Values already of the
    declared type are untouched, so YAML-native scalars pass through.
    """
    restored: Dict[str, Any] = {}
    for key, value in values.items():
        declared = tree.get(key)
        if isinstance(declared, dict) and isinstance(value, dict):
            restored[key] = restore_values(declared, value)
        elif isinstance(declared, ItemDescriptor) and declared.type is not str:
            restored[key] = coerce(value, declared)
        else:
            restored[key] = value
    return restored
