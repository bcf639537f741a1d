"""
Interactive prompt capability used during elicitation.

The elicitation engine only depends on the Prompter protocol; the default
implementation renders prompts with questionary. Every method returns None
when the operator cancels (Ctrl+C / Esc), and the caller decides what that
means.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Sequence, Union

import questionary

AnswerCheck = Callable[[str], Union[bool, str]]


class Prompter(Protocol):
    """Capability to ask the operator a question."""

    def ask_typed(
        self,
        question: str,
        type_: type,
        default: Any = None,
        validator: Optional[AnswerCheck] = None,
    ) -> Optional[Any]:
        """Ask a free-form question; ``validator`` sees the raw text."""
        ...

    def ask_choice(
        self,
        question: str,
        choices: Sequence[Any],
        default: Any = None,
        validator: Optional[Callable[[Any], Any]] = None,
    ) -> Optional[Any]:
        """Offer ``choices`` verbatim and return the selected value."""
        ...

    def ask_yes_no(self, question: str, default: Optional[bool] = None) -> Optional[bool]:
        """Ask a yes/no question."""
        ...


class QuestionaryPrompter:
    """Prompter backed by questionary."""

    def ask_typed(
        self,
        question: str,
        type_: type,
        default: Any = None,
        validator: Optional[AnswerCheck] = None,
    ) -> Optional[Any]:
        default_text = "" if default is None else str(default)
        kwargs: dict[str, Any] = {"default": default_text}
        if validator is not None:
            kwargs["validate"] = validator
        try:
            if isinstance(type_, type) and issubclass(type_, Path):
                return questionary.path(question, **kwargs).ask()
            return questionary.text(question, **kwargs).ask()
        except KeyboardInterrupt:
            return None

    def ask_choice(
        self,
        question: str,
        choices: Sequence[Any],
        default: Any = None,
        validator: Optional[Callable[[Any], Any]] = None,
    ) -> Optional[Any]:
        # questionary.select has no validate hook; the engine re-asks instead
        selection_choices = [
            questionary.Choice(title=str(choice), value=choice) for choice in choices
        ]
        default_value = default if default in choices else None
        try:
            return questionary.select(
                question, choices=selection_choices, default=default_value
            ).ask()
        except KeyboardInterrupt:
            return None

    def ask_yes_no(self, question: str, default: Optional[bool] = None) -> Optional[bool]:
        try:
            return questionary.confirm(
                question, default=True if default is None else bool(default)
            ).ask()
        except KeyboardInterrupt:
            return None
