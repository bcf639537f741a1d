"""Config document persistence utilities."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from lazyconf.core.utils.logger import log_file_operation

from .coercion import to_document_value

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when a config document cannot be read, parsed or written."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.context = context or {}


@contextmanager
def config_write_lock(path: Path):
    """Lock abstraction (no-op; one writer process per document is assumed)."""
    yield


@contextmanager
def config_read_lock(path: Path):
    """Read lock abstraction (no-op by default)."""
    yield


def load_document(path: Path) -> Optional[Dict[str, Any]]:
    """
    Load a config document.

    Returns:
        The stored value tree, ``{}`` for an empty file, or ``None`` when the
        document does not exist.

    Raises:
        PersistenceError: If the file cannot be read, is not valid YAML or
            does not contain a mapping at the top level.
    """
    if not path.exists():
        logger.debug("No config document at %s", path)
        return None
    try:
        with config_read_lock(path):
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise PersistenceError(f"Error parsing YAML: {path}: {err}", path=path) from err
    except (OSError, UnicodeError) as err:
        raise PersistenceError(f"Error reading config: {path}: {err}", path=path) from err
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise PersistenceError(
            f"Top-level YAML must be a mapping, got {type(payload).__name__}: {path}",
            path=path,
        )
    log_file_operation("read", str(path), True)
    return payload


def save_document(path: Path, values: Dict[str, Any]) -> None:
    """Write the whole value tree to ``path`` via a temp file and rename."""
    content = yaml.safe_dump(
        to_document_value(values), default_flow_style=False, sort_keys=False
    )
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with config_write_lock(path):
            temp_path.write_text(content, encoding="utf-8")
            temp_path.replace(path)
    except OSError as err:
        log_file_operation("write", str(path), False, str(err))
        if temp_path.exists():
            temp_path.unlink()
        raise PersistenceError(f"Error writing config: {path}: {err}", path=path) from err
    log_file_operation("write", str(path), True)


def delete_document(path: Path) -> bool:
    """Remove the document; returns False when there was nothing to remove."""
    if not path.exists():
        return False
    try:
        path.unlink()
    except OSError as err:
        raise PersistenceError(f"Error deleting config: {path}: {err}", path=path) from err
    log_file_operation("delete", str(path), True)
    return True
