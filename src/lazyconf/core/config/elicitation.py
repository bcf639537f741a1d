"""
Elicitation engine: build a resolved value tree by asking the operator.

The walk is strictly sequential and depth-first in declaration order. Each
leaf is asked through the Prompter capability:

- items with choices get a selection list (order preserved);
- boolean items get a yes/no question;
- everything else gets a free-form question whose answer is coerced to the
  declared type.

A rejected answer (wrong type, outside choices/range, or refused by the
validator) is reported and asked again. A cancelled prompt aborts the whole
walk with ElicitationCancelled.

With ``assume_default`` nothing is asked: leaves with a default take it and
leaves without one are left out of the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from rich import print as rich_print

from lazyconf.core.utils.logger import log_debug, log_warning

from .coercion import coerce
from .registry import ConfigTree, ItemDescriptor
from .validation import ValidationError, validate

if TYPE_CHECKING:
    from lazyconf.cli.prompts import Prompter


class ElicitationCancelled(Exception):
    """Raised when the operator cancels a prompt during elicitation."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.key = key


def answer_check(item: ItemDescriptor) -> Callable[[str], Union[bool, str]]:
    """Inline check for free-form prompts: True or the first error message."""

    def check(text: str) -> Union[bool, str]:
        if not text.strip() and item.has_default:
            return True
        errors = validate(coerce(text, item), item)
        return True if not errors else errors[0].message

    return check


def _reject(item: ItemDescriptor, answer: Any, errors: List[ValidationError]) -> None:
    message = errors[0].message
    rich_print(f"[red]{message} Please try again.[/red]")
    log_warning("ELICIT", f"Rejected answer {answer!r} for '{item.path}'", message)


def _cancelled(item: ItemDescriptor) -> ElicitationCancelled:
    return ElicitationCancelled(f"Elicitation cancelled at '{item.path}'", key=item.path)


def _ask_choice(item: ItemDescriptor, prompter: "Prompter") -> Any:
    while True:
        answer = prompter.ask_choice(
            item.question, list(item.choices or ()), item.default, item.validator
        )
        if answer is None:
            raise _cancelled(item)
        errors = validate(answer, item)
        if not errors:
            return answer
        _reject(item, answer, errors)


def _ask_yes_no(item: ItemDescriptor, prompter: "Prompter") -> bool:
    while True:
        answer = prompter.ask_yes_no(item.question, item.default)
        if answer is None:
            raise _cancelled(item)
        errors = validate(answer, item)
        if not errors:
            return answer
        _reject(item, answer, errors)


def _ask_typed(item: ItemDescriptor, prompter: "Prompter") -> Any:
    check = answer_check(item)
    while True:
        raw = prompter.ask_typed(item.question, item.type, item.default, check)
        if raw is None:
            raise _cancelled(item)
        if isinstance(raw, str) and not raw.strip() and item.has_default:
            value = item.default
        else:
            value = coerce(raw, item)
        errors = validate(value, item)
        if not errors:
            return value
        _reject(item, raw, errors)


def elicit_item(item: ItemDescriptor, prompter: "Prompter") -> Any:
    """Ask for a single leaf until an acceptable answer is given."""
    log_debug("ELICIT", f"Asking for '{item.path}' ({item.type_name})")
    if item.choices is not None:
        return _ask_choice(item, prompter)
    if item.type is bool:
        return _ask_yes_no(item, prompter)
    return _ask_typed(item, prompter)


def elicit(
    tree: ConfigTree,
    prompter: Optional["Prompter"],
    assume_default: bool = False,
) -> Dict[str, Any]:
    """
    Walk a configuration tree and return the resolved value tree.

    Args:
        tree: Compiled configuration tree
        prompter: Prompt capability (unused when ``assume_default`` is set)
        assume_default: Take defaults silently and never prompt

    Raises:
        ElicitationCancelled: If the operator cancels any prompt.
    """
    resolved: Dict[str, Any] = {}
    for key, node in tree.items():
        if isinstance(node, dict):
            resolved[key] = elicit(node, prompter, assume_default)
        elif assume_default:
            if node.has_default:
                resolved[key] = node.default
            else:
                log_debug("ELICIT", f"No default for '{node.path}'; leaving it unset")
        else:
            if prompter is None:
                raise ValueError("A prompter is required unless assume_default is set")
            resolved[key] = elicit_item(node, prompter)
    return resolved
