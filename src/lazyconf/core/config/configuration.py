"""
Per-owner configuration objects and the registry that scopes them.

A Configuration moves through three states::

    NOT_LOADED --load(), document found-------------------> LOADED
    NOT_LOADED --load(), document absent--> ELICITING --> LOADED

LOADED is terminal for the life of the object; declaring more schema later
only extends the tree. A cancelled or failed elicitation returns to
NOT_LOADED and writes nothing.

Reads (``get``) and writes (``set``) both trigger the lazy load-or-elicit
when ``read_immediately`` is on. With ``read_immediately`` off the caller
loads explicitly: ``get`` then reads whatever is in memory, and ``set`` on a
configuration that was never loaded raises ConfigurationError instead of
overwriting a document it has not seen.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Mapping, Optional

from rich import print as rich_print

from lazyconf.core.utils.logger import (
    log_configuration_change,
    log_debug,
    log_info,
    log_warning,
)
from lazyconf.core.utils.paths import (
    DEFAULT_CONFIGURATION_ROOT,
    config_file_path,
    get_config_dir,
    get_data_dir,
    get_log_dir,
    owner_basename,
    owner_identity,
)

from .coercion import restore_values
from .elicitation import elicit
from .persistence import load_document, save_document
from .registry import ConfigTree, compile_tree, iter_items, merge_trees
from .validation import ValidationError, missing_keys, validate_config

if TYPE_CHECKING:
    from lazyconf.cli.prompts import Prompter

_MISSING = object()


class ConfigurationError(Exception):
    """Raised for invalid use of a Configuration (unknown option, set before load)."""

    def __init__(self, message: str, owner: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.owner = owner


class ConfigState(Enum):
    NOT_LOADED = "not_loaded"
    ELICITING = "eliciting"
    LOADED = "loaded"


@dataclass
class ConfigOptions:
    """Behavior switches of a Configuration."""

    read_immediately: bool = True
    write_immediately: bool = True
    configuration_root: str = DEFAULT_CONFIGURATION_ROOT
    assume_default: bool = False
    # Leading identity segment dropped from the basename; defaults to configuration_root
    namespace: Optional[str] = None


OPTION_NAMES = frozenset(option.name for option in fields(ConfigOptions))


def _check_option_names(names: Iterable[str], owner: Optional[str] = None) -> None:
    unknown = sorted(set(names) - OPTION_NAMES)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration option(s): {', '.join(unknown)}", owner=owner
        )


def _lookup(values: Dict[str, Any], key: str) -> Any:
    if key in values:
        return values[key]
    if "." not in key:
        return _MISSING
    cursor: Any = values
    for part in key.split("."):
        if not isinstance(cursor, dict) or part not in cursor:
            return _MISSING
        cursor = cursor[part]
    return cursor


def _assign(values: Dict[str, Any], key: str, value: Any) -> None:
    if key in values or "." not in key:
        values[key] = value
        return
    parts = key.split(".")
    cursor = values
    for part in parts[:-1]:
        if not isinstance(cursor.get(part), dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


class Configuration:
    """Declared schema and resolved values for one owner."""

    def __init__(
        self,
        owner: Any,
        options: Optional[ConfigOptions] = None,
        prompter: Optional["Prompter"] = None,
    ):
        self.owner = owner_identity(owner)
        self.options = options or ConfigOptions()
        self.tree: ConfigTree = {}
        self.state = ConfigState.NOT_LOADED
        self._values: Dict[str, Any] = {}
        self._prompter = prompter

    # ------------------------------------------------------------------
    # Identity and locations
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self.state is ConfigState.LOADED

    @property
    def basename(self) -> str:
        namespace = self.options.namespace or self.options.configuration_root
        return owner_basename(self.owner, namespace)

    @property
    def config_file_path(self) -> Path:
        return config_file_path(self.basename, self.options.configuration_root)

    def config_dir(self) -> Path:
        return get_config_dir(self.options.configuration_root)

    def data_dir(self, create: bool = False) -> Path:
        path = get_data_dir(self.options.configuration_root) / self.basename
        if create:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def log_dir(self, create: bool = False) -> Path:
        path = get_log_dir(self.options.configuration_root) / self.basename
        if create:
            path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def prompter(self) -> "Prompter":
        if self._prompter is None:
            from lazyconf.cli.prompts import QuestionaryPrompter

            self._prompter = QuestionaryPrompter()
        return self._prompter

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def set_options(self, **options: Any) -> None:
        _check_option_names(list(options), owner=self.owner)
        for name, value in options.items():
            setattr(self.options, name, value)

    def declare(self, schema: Mapping[Any, Any]) -> ConfigTree:
        """Compile ``schema`` and merge it into the tree (newest wins)."""
        return self._merge(compile_tree(schema, self.owner))

    def _merge(self, compiled: ConfigTree) -> ConfigTree:
        self.tree = merge_trees(self.tree, compiled)
        log_debug(
            "CONFIG",
            f"Declared {sum(1 for _ in iter_items(compiled))} item(s) for {self.owner}",
        )
        return self.tree

    def configure(
        self, schema: Optional[Mapping[Any, Any]] = None, **options: Any
    ) -> "Configuration":
        """
        Apply options, declare ``schema`` and load when read_immediately is on.

        The schema is compiled before anything changes, so a SchemaError
        leaves both the options and the tree untouched.
        """
        compiled = compile_tree(schema, self.owner) if schema is not None else None
        self.set_options(**options)
        if compiled is not None:
            self._merge(compiled)
        if self.options.read_immediately and not self.loaded:
            self.load()
        return self

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def load(self) -> Dict[str, Any]:
        """
        Load the persisted document, or elicit values when there is none.

        Loading is done once; later calls return the values in memory.

        Raises:
            PersistenceError: If the document exists but cannot be read.
            ElicitationCancelled: If the operator cancels elicitation.
        """
        if self.loaded:
            return self.to_dict()
        if self.state is ConfigState.ELICITING:
            raise ConfigurationError(
                f"{self.owner} is already being elicited", owner=self.owner
            )

        path = self.config_file_path
        document = load_document(path)
        if document is None:
            log_info("CONFIG", f"No stored configuration for {self.owner}", str(path))
            return self.elicit()

        self._values = restore_values(self.tree, document)
        self.state = ConfigState.LOADED
        self._report_problems()
        return self.to_dict()

    def elicit(self) -> Dict[str, Any]:
        """Collect every declared value, persist it once and mark loaded."""
        if self.state is ConfigState.ELICITING:
            raise ConfigurationError(
                f"{self.owner} is already being elicited", owner=self.owner
            )
        interactive = not self.options.assume_default
        self.state = ConfigState.ELICITING
        completed = False
        try:
            if interactive:
                rich_print(
                    f"[bold cyan]Configuration missing for {self.owner}. "
                    "Creating new one...[/bold cyan]"
                )
                values = elicit(self.tree, self.prompter)
            else:
                values = elicit(self.tree, None, assume_default=True)
            save_document(self.config_file_path, values)
            self._values = values
            completed = True
        finally:
            self.state = ConfigState.LOADED if completed else ConfigState.NOT_LOADED
        if interactive:
            rich_print("[green]...done.[/green]")
        log_info("CONFIG", f"Stored new configuration for {self.owner}", str(self.config_file_path))
        return self.to_dict()

    def save(self) -> None:
        save_document(self.config_file_path, self._values)

    def _ensure_loaded(self) -> None:
        if not self.loaded and self.options.read_immediately:
            self.load()

    def _report_problems(self) -> None:
        for path, errors in self.validate().items():
            for error in errors:
                log_warning("CONFIG", f"Stored value for '{path}' is invalid", error.message)
        for path in missing_keys(self.tree, self._values):
            log_warning("CONFIG", f"No stored value for '{path}'", self.owner)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value (or nested mapping) for ``key``; dotted keys walk the tree."""
        self._ensure_loaded()
        if not self.loaded:
            log_debug("CONFIG", f"Reading '{key}' from unloaded {self.owner}")
        value = _lookup(self._values, str(key))
        if value is _MISSING:
            return default
        return copy.deepcopy(value) if isinstance(value, dict) else value

    def set(self, key: Any, value: Any) -> None:
        """Write a value and persist it when write_immediately is on."""
        key = str(key)
        self._ensure_loaded()
        if not self.loaded:
            raise ConfigurationError(
                f"Cannot set '{key}' before {self.owner} is loaded; call load() first",
                owner=self.owner,
            )
        old_value = _lookup(self._values, key)
        _assign(self._values, key, value)
        log_configuration_change(
            f"{self.basename}.{key}", None if old_value is _MISSING else old_value, value
        )
        if self.options.write_immediately:
            self.save()

    def __getitem__(self, key: Any) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Any, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: Any) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def validate(self) -> Dict[str, List[ValidationError]]:
        return validate_config(self.tree, self._values)

    def missing_keys(self) -> List[str]:
        return missing_keys(self.tree, self._values)

    def __repr__(self) -> str:
        return f"<Configuration for {self.owner} ({self.state.value}): {self._values!r}>"


class ConfigurationRegistry:
    """
    Maps owner identities to their Configuration.

    The registry is an ordinary object: create one per application (or per
    test) and keep it as long as the configurations should live.

    Example:
        >>> registry = ConfigurationRegistry(configuration_root="acme")
        >>> config = registry.declare("acme.scanner", {"port": [range(1, 65536)]})
        >>> config is registry.get("acme.scanner")
        True
    """

    def __init__(self, prompter: Optional["Prompter"] = None, **default_options: Any):
        _check_option_names(list(default_options))
        self._prompter = prompter
        self._default_options = default_options
        self._configs: Dict[str, Configuration] = {}

    def get(self, owner: Any) -> Configuration:
        identity = owner_identity(owner)
        config = self._configs.get(identity)
        if config is None:
            config = Configuration(
                identity,
                options=ConfigOptions(**self._default_options),
                prompter=self._prompter,
            )
            self._configs[identity] = config
        return config

    def declare(self, owner: Any, schema: Mapping[Any, Any]) -> Configuration:
        config = self.get(owner)
        config.declare(schema)
        return config

    def configure(
        self, owner: Any, schema: Optional[Mapping[Any, Any]] = None, **options: Any
    ) -> Configuration:
        return self.get(owner).configure(schema, **options)

    def remove(self, owner: Any) -> Optional[Configuration]:
        return self._configs.pop(owner_identity(owner), None)

    def clear(self) -> None:
        self._configs.clear()

    def __contains__(self, owner: Any) -> bool:
        return owner_identity(owner) in self._configs

    def __len__(self) -> int:
        return len(self._configs)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._configs))
