"""
Shared pytest fixtures and configuration for lazyconf tests.

Every test runs against an isolated LAZYCONF_HOME below tmp_path, so no test
touches the real home directory. Interactive prompts are replaced by
ScriptedPrompter, which replays canned answers and records each question.
"""

import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pytest

# Put `src/` first so `import lazyconf` uses workspace code.
_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT / "src"))

from lazyconf.core.config.configuration import ConfigurationRegistry  # noqa: E402
from lazyconf.core.utils.logger import reset_logging  # noqa: E402


class ScriptedPrompter:
    """Prompter fake that answers from a script and records every question."""

    def __init__(self, answers: Sequence[Any] = ()):
        self.answers: List[Any] = list(answers)
        self.calls: List[Tuple[str, str, dict]] = []

    def _next(self, kind: str, question: str, **details: Any) -> Any:
        self.calls.append((kind, question, details))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {question!r}")
        return self.answers.pop(0)

    def ask_typed(
        self,
        question: str,
        type_: type,
        default: Any = None,
        validator: Optional[Callable[[str], Any]] = None,
    ) -> Any:
        return self._next("typed", question, type=type_, default=default, validator=validator)

    def ask_choice(
        self,
        question: str,
        choices: Sequence[Any],
        default: Any = None,
        validator: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        return self._next("choice", question, choices=list(choices), default=default)

    def ask_yes_no(self, question: str, default: Optional[bool] = None) -> Any:
        return self._next("yes_no", question, default=default)

    @property
    def questions(self) -> List[str]:
        return [question for _, question, _ in self.calls]


# ============================================================================
# Environment isolation
# ============================================================================


@pytest.fixture(autouse=True)
def lazyconf_home(tmp_path, monkeypatch) -> Path:
    """Point LAZYCONF_HOME at a temporary directory for every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("LAZYCONF_HOME", str(home))
    return home.resolve()


@pytest.fixture(autouse=True)
def clean_logging():
    """Reset the lazyconf logger between tests."""
    reset_logging()
    yield
    reset_logging()


# ============================================================================
# Prompting and registries
# ============================================================================


@pytest.fixture
def make_prompter() -> Callable[..., ScriptedPrompter]:
    def _make(*answers: Any) -> ScriptedPrompter:
        return ScriptedPrompter(answers)

    return _make


@pytest.fixture
def prompter() -> ScriptedPrompter:
    """Prompter with an empty script; any prompt fails the test."""
    return ScriptedPrompter()


@pytest.fixture
def registry(prompter) -> ConfigurationRegistry:
    return ConfigurationRegistry(prompter=prompter, configuration_root="acme")


@pytest.fixture
def write_document(lazyconf_home) -> Callable[[str, str, str], Path]:
    """Write a raw YAML document where an owner's configuration is stored."""

    def _write(basename: str, content: str, root: str = "acme") -> Path:
        path = lazyconf_home / f".{root}" / "config" / f"{basename}.yml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
