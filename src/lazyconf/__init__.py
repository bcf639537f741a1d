"""
lazyconf - Declarative first-run configuration for CLIs and daemons

A component declares a nested set of named options (type, default, choices,
range, validator). On first use the values are loaded from a YAML document
in the user's home directory, or asked interactively when that document does
not exist yet, and then persisted.

Key Features:
- Compact positional declarations with type inference
- Incremental schema registration per owner (deep merge, newest wins)
- Lazy load-or-elicit on first read or write
- Write-through persistence with whole-document rewrites
- Interactive prompts via questionary, or silent defaults

Package Structure:
- core/config/: schema compiler, coercion, validation, storage, elicitation
- core/utils/: logging and storage path resolution
- cli/: prompt capability, display helpers and the ``lazyconf`` command

Example:
    from lazyconf import ConfigurationRegistry

    registry = ConfigurationRegistry(configuration_root="acme")
    config = registry.configure(
        "acme.scanner",
        {
            "port": [range(1, 65536), "Port to listen on"],
            "color": [["red", "green", "blue"], "Pick a color"],
            "verbose": [False, "Verbose output?"],
        },
    )
    print(config.get("port"))
"""

__version__ = "0.3.0"

from lazyconf.core.config import (
    Bound,
    ConfigOptions,
    Configuration,
    ConfigurationError,
    ConfigurationRegistry,
    ElicitationCancelled,
    PersistenceError,
    SchemaError,
)

__all__ = [
    "__version__",
    "Bound",
    "ConfigOptions",
    "Configuration",
    "ConfigurationError",
    "ConfigurationRegistry",
    "ElicitationCancelled",
    "PersistenceError",
    "SchemaError",
]
