"""Schema compilation, storage and elicitation for per-owner configuration."""

from .registry import (
    Bound,
    ConfigTree,
    ItemDescriptor,
    SchemaError,
    compile_item,
    compile_tree,
    flatten,
    iter_items,
    merge_trees,
    unflatten,
)
from .coercion import coerce, restore_values
from .validation import ValidationError, missing_keys, validate, validate_config
from .persistence import (
    PersistenceError,
    delete_document,
    load_document,
    save_document,
)
from .elicitation import ElicitationCancelled, elicit, elicit_item
from .configuration import (
    ConfigOptions,
    ConfigState,
    Configuration,
    ConfigurationError,
    ConfigurationRegistry,
)

__all__ = [
    "Bound",
    "ConfigOptions",
    "ConfigState",
    "ConfigTree",
    "Configuration",
    "ConfigurationError",
    "ConfigurationRegistry",
    "ElicitationCancelled",
    "ItemDescriptor",
    "PersistenceError",
    "SchemaError",
    "ValidationError",
    "coerce",
    "compile_item",
    "compile_tree",
    "delete_document",
    "elicit",
    "elicit_item",
    "flatten",
    "iter_items",
    "load_document",
    "merge_trees",
    "missing_keys",
    "restore_values",
    "save_document",
    "unflatten",
    "validate",
    "validate_config",
]
