"""
Schema compilation for lazyconf.

An owner declares its options as a (possibly nested) mapping. Every leaf is
a short positional list whose meaning depends on the shape of its elements::

    {
        "port": [range(1, 65536), "Port to listen on"],
        "color": [["red", "green", "blue"], "Pick a color"],
        "enabled": [True, "Enable the worker?"],
        "retries": [int, "How many retries?", 3, lambda n: n < 10],
        "name": "worker",          # bare value: default with inferred type
        "db": {"host": [str, "Database host", "localhost"]},
    }

Classification of the first element (first rule that matches wins):

1. ``list``/``tuple``   -> choices; type is the runtime type of choices[0]
2. ``Bound``/``range``  -> range; an integer lower bound always means ``int``
3. ``bool`` literal     -> type ``bool`` with that literal as default
4. a class              -> explicit type tag, no default
5. anything else        -> the default; type is its runtime type

The second element is the question when it is a ``str``; otherwise it is
classified with the remaining extras. Each extra fills the first empty slot
of its category (non-class callable -> validator, ``list``/``tuple`` ->
choices, ``Bound``/``range`` -> range, anything else -> default); later
extras of an already-filled category are ignored.

A range without an explicit validator gets a synthesized one. A missing
question is synthesized as ``"<owner> requests a <type>"`` and a range is
always appended to the question text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from lazyconf.core.utils.logger import log_debug

ConfigTree = Dict[str, Any]
Validator = Callable[[Any], Any]

TYPE_NAMES: Dict[type, str] = {
    int: "integer",
    str: "text",
    bool: "boolean",
    float: "number",
}


class SchemaError(Exception):
    """Raised when a declaration cannot be compiled into an item descriptor."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the schema error.

        Args:
            message: Error message
            key: Dotted path of the offending declaration (if known)
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.key = key
        self.context = context or {}


@dataclass(frozen=True)
class Bound:
    """Numeric bound; ``low`` is always inclusive, ``high`` per ``inclusive``."""

    low: Any
    high: Any
    inclusive: bool = True

    def __post_init__(self) -> None:
        if self.high < self.low:
            raise SchemaError(f"Invalid bound: {self.high!r} is below {self.low!r}")

    @classmethod
    def from_range(cls, value: range) -> "Bound":
        if value.step != 1:
            raise SchemaError(f"Only ranges with step 1 are supported, got {value!r}")
        return cls(value.start, value.stop, inclusive=False)

    @property
    def is_empty(self) -> bool:
        return not self.inclusive and self.high == self.low

    def __contains__(self, value: Any) -> bool:
        if value < self.low:
            return False
        return value <= self.high if self.inclusive else value < self.high

    def __str__(self) -> str:
        closing = "]" if self.inclusive else ")"
        return f"[{self.low}, {self.high}{closing}"


@dataclass(frozen=True)
class ItemDescriptor:
    """Normalized description of one declared option."""

    key: str
    path: str
    type: type
    question: str
    default: Any = None
    choices: Optional[Tuple[Any, ...]] = None
    range: Optional[Bound] = None
    validator: Optional[Validator] = field(default=None, compare=False)

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def type_name(self) -> str:
        return type_name(self.type)


def type_name(type_: type) -> str:
    return TYPE_NAMES.get(type_, type_.__name__)


def matches_type(value: Any, expected: type) -> bool:
    """Check a value against a declared type (``bool`` is never an ``int``)."""
    if expected is bool:
        return isinstance(value, bool)
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if expected is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, expected)


def _identity(value: Any) -> Any:
    return value


def range_validator(bound: Bound, value_type: Optional[type] = None) -> Validator:
    """Build a validator accepting candidates that convert into ``bound``."""
    if value_type is float or isinstance(bound.low, float):
        convert: Callable[[Any], Any] = float
    elif isinstance(bound.low, int) and not isinstance(bound.low, bool):
        convert = int
    else:
        convert = _identity

    def validator(candidate: Any) -> bool:
        if isinstance(candidate, bool):
            return False
        try:
            return convert(candidate) in bound
        except (TypeError, ValueError):
            return False

    validator.__qualname__ = f"range_validator({bound})"
    return validator


def _is_choices(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_bound(value: Any) -> bool:
    return isinstance(value, (Bound, range))


def _as_bound(value: Any) -> Bound:
    return value if isinstance(value, Bound) else Bound.from_range(value)


def _as_choices(value: Any, path: str) -> Tuple[Any, ...]:
    choices = tuple(value)
    if not choices:
        raise SchemaError(f"Empty choice list for '{path}'", key=path)
    return choices


def _classify_extra(value: Any, path: str) -> str:
    if isinstance(value, type):
        raise SchemaError(
            f"Unrecognized declaration for '{path}': type {value.__name__} "
            "is only allowed as the first element",
            key=path,
        )
    if callable(value):
        return "validator"
    if _is_choices(value):
        return "choices"
    if _is_bound(value):
        return "range"
    return "default"


def compile_item(
    declaration: Any, key: Any, owner_name: str, path: Optional[str] = None
) -> ItemDescriptor:
    """
    Compile one leaf declaration into an ItemDescriptor.

    Args:
        declaration: ``[first, question?, extra...]`` or a bare value
        key: Key of the leaf inside its parent mapping
        owner_name: Owner identity used in synthesized questions
        path: Dotted path of the leaf (defaults to ``key``)

    Raises:
        SchemaError: If the declaration shape is not recognized or the
            default, choices or range do not fit the resolved type.
    """
    key = str(key)
    path = path or key
    parts = list(declaration) if isinstance(declaration, list) else [declaration]
    if not parts:
        raise SchemaError(f"Empty declaration for '{path}'", key=path)

    first, rest = parts[0], parts[1:]
    slots: Dict[str, Any] = {
        "type": None,
        "default": None,
        "choices": None,
        "range": None,
        "validator": None,
    }

    if _is_choices(first):
        slots["choices"] = _as_choices(first, path)
        slots["type"] = type(slots["choices"][0])
    elif _is_bound(first):
        bound = _as_bound(first)
        slots["range"] = bound
        if isinstance(bound.low, int) and not isinstance(bound.low, bool):
            slots["type"] = int
        else:
            slots["type"] = type(bound.low)
    elif isinstance(first, bool):
        slots["type"] = bool
        slots["default"] = first
    elif isinstance(first, type):
        slots["type"] = first
    elif first is None or callable(first):
        raise SchemaError(
            f"Unrecognized declaration for '{path}': cannot infer a type from {first!r}",
            key=path,
        )
    else:
        slots["default"] = first
        slots["type"] = type(first)

    question: Optional[str] = None
    if rest and isinstance(rest[0], str):
        question, rest = rest[0], rest[1:]

    for extra in rest:
        category = _classify_extra(extra, path)
        if slots[category] is not None:
            log_debug("SCHEMA", f"Ignoring extra {category} for '{path}'", repr(extra))
            continue
        if category == "choices":
            slots["choices"] = _as_choices(extra, path)
        elif category == "range":
            slots["range"] = _as_bound(extra)
        else:
            slots[category] = extra

    type_, default = slots["type"], slots["default"]
    bound, choices, validator = slots["range"], slots["choices"], slots["validator"]

    if choices is not None:
        stray = [choice for choice in choices if not matches_type(choice, type_)]
        if stray:
            raise SchemaError(
                f"Choices {stray!r} for '{path}' are not a {type_name(type_)}",
                key=path,
                context={"choices": list(choices), "type": type_name(type_)},
            )
    if bound is not None:
        if not (matches_type(bound.low, type_) and matches_type(bound.high, type_)):
            raise SchemaError(
                f"Range {bound} for '{path}' does not fit type {type_name(type_)}",
                key=path,
            )
        if bound.is_empty:
            raise SchemaError(f"Range {bound} for '{path}' is empty", key=path)

    if bound is not None and validator is None:
        validator = range_validator(bound, type_)

    if question is None:
        question = f"{owner_name} requests a {type_name(type_)}"
    if bound is not None:
        question = f"{question} {bound}"

    if default is not None:
        if not matches_type(default, type_):
            raise SchemaError(
                f"Default {default!r} for '{path}' is not a {type_name(type_)}",
                key=path,
                context={"default": default, "type": type_name(type_)},
            )
        if choices is not None and default not in choices:
            raise SchemaError(
                f"Default {default!r} for '{path}' is not one of {list(choices)!r}",
                key=path,
            )
        if bound is not None and default not in bound:
            raise SchemaError(
                f"Default {default!r} for '{path}' is outside {bound}", key=path
            )

    return ItemDescriptor(
        key=key,
        path=path,
        type=type_,
        question=question,
        default=default,
        choices=choices,
        range=bound,
        validator=validator,
    )


def compile_tree(schema: Mapping[Any, Any], owner_name: str, prefix: str = "") -> ConfigTree:
    """Compile a declaration mapping into a configuration tree (recursive)."""
    if not isinstance(schema, Mapping):
        raise SchemaError(
            f"Schema for '{prefix or owner_name}' must be a mapping, "
            f"got {type(schema).__name__}",
            key=prefix or None,
        )
    tree: ConfigTree = {}
    for raw_key, declaration in schema.items():
        key = str(raw_key)
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(declaration, Mapping):
            tree[key] = compile_tree(declaration, owner_name, path)
        else:
            tree[key] = compile_item(declaration, key, owner_name, path)
    return tree


def merge_trees(base: ConfigTree, overlay: ConfigTree) -> ConfigTree:
    """
    Deep-merge two trees with "overlay wins".

    Subtree + subtree merges key by key; anything else is replaced by the
    overlay. Inputs are not mutated.
    """
    result: ConfigTree = dict(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_trees(result[key], value)
        else:
            result[key] = value
    return result


def iter_items(tree: ConfigTree) -> Iterator[ItemDescriptor]:
    """Yield every leaf descriptor depth-first in declaration order."""
    for value in tree.values():
        if isinstance(value, dict):
            yield from iter_items(value)
        else:
            yield value


def flatten(nested: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested dict to dotpath map."""
    items: Dict[str, Any] = {}
    for key, value in nested.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            items.update(flatten(value, full_key))
        else:
            items[full_key] = value
    return items


def unflatten(dotmap: Dict[str, Any]) -> Dict[str, Any]:
    """Convert dotpath map to nested dict."""
    nested: Dict[str, Any] = {}
    for key, value in dotmap.items():
        parts = key.split(".")
        cursor = nested
        for part in parts[:-1]:
            if part not in cursor or not isinstance(cursor[part], dict):
                cursor[part] = {}
            cursor = cursor[part]
        cursor[parts[-1]] = value
    return nested
