"""Tests for the questionary-backed prompter."""

from pathlib import Path
from unittest.mock import patch

from lazyconf.cli.prompts import QuestionaryPrompter


def test_ask_typed_uses_text_with_default_and_validator():
    check = lambda text: True  # noqa: E731
    with patch("lazyconf.cli.prompts.questionary") as mock_q:
        mock_q.text.return_value.ask.return_value = "8080"

        answer = QuestionaryPrompter().ask_typed("port", int, 80, check)

        assert answer == "8080"
        args, kwargs = mock_q.text.call_args
        assert args == ("port",)
        assert kwargs == {"default": "80", "validate": check}


def test_ask_typed_uses_path_prompt_for_paths():
    with patch("lazyconf.cli.prompts.questionary") as mock_q:
        mock_q.path.return_value.ask.return_value = "/srv/acme"

        assert QuestionaryPrompter().ask_typed("workdir", Path) == "/srv/acme"
        mock_q.path.assert_called_once_with("workdir", default="")
        mock_q.text.assert_not_called()


def test_ask_choice_offers_values_verbatim():
    with patch("lazyconf.cli.prompts.questionary") as mock_q:
        mock_q.select.return_value.ask.return_value = 42

        answer = QuestionaryPrompter().ask_choice("pick", [21, 23, 42], default=99)

        assert answer == 42
        _, kwargs = mock_q.select.call_args
        assert kwargs["default"] is None
        assert mock_q.Choice.call_count == 3
        mock_q.Choice.assert_any_call(title="23", value=23)


def test_ask_yes_no_defaults_to_yes():
    with patch("lazyconf.cli.prompts.questionary") as mock_q:
        mock_q.confirm.return_value.ask.return_value = False

        assert QuestionaryPrompter().ask_yes_no("enable?") is False
        mock_q.confirm.assert_called_once_with("enable?", default=True)


def test_keyboard_interrupt_is_a_cancel():
    with patch("lazyconf.cli.prompts.questionary") as mock_q:
        mock_q.text.return_value.ask.side_effect = KeyboardInterrupt
        mock_q.confirm.return_value.ask.side_effect = KeyboardInterrupt

        prompter = QuestionaryPrompter()
        assert prompter.ask_typed("host", str) is None
        assert prompter.ask_yes_no("tls?", False) is None
