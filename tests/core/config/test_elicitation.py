"""
Tests for the elicitation engine.

The engine is driven through ScriptedPrompter, so each test reads as the
operator's answers followed by the resolved value tree they produce.
"""

from decimal import Decimal

import pytest

from lazyconf.core.config.elicitation import (
    ElicitationCancelled,
    answer_check,
    elicit,
    elicit_item,
)
from lazyconf.core.config.registry import Bound, compile_item, compile_tree

OWNER = "acme.scanner"


class TestTypedQuestions:
    """Free-form questions are coerced and validated."""

    def test_out_of_range_answer_is_asked_again(self, make_prompter):
        item = compile_item([Bound(1, 65535), "port number"], "port", OWNER)
        prompter = make_prompter("70000", "8080")

        value = elicit_item(item, prompter)

        assert value == 8080
        assert isinstance(value, int)
        assert prompter.questions == ["port number [1, 65535]"] * 2

    def test_unparseable_answer_is_asked_again(self, make_prompter):
        item = compile_item([int, "retries"], "retries", OWNER)
        prompter = make_prompter("three", "3")
        assert elicit_item(item, prompter) == 3

    def test_unconvertible_opaque_answer_is_asked_again(self, make_prompter):
        item = compile_item([Decimal, "amount"], "amount", OWNER)
        prompter = make_prompter("abc", "1.5")

        assert elicit_item(item, prompter) == Decimal("1.5")
        assert len(prompter.calls) == 2
        assert answer_check(item)("abc") == "Expected Decimal, got str."

    def test_validator_rejection_is_asked_again(self, make_prompter):
        item = compile_item([int, "even", lambda v: v % 2 == 0], "n", OWNER)
        prompter = make_prompter("3", "4")
        assert elicit_item(item, prompter) == 4
        assert len(prompter.calls) == 2

    def test_default_is_offered(self, make_prompter):
        item = compile_item([int, "a number with default", 42], "n", OWNER)
        prompter = make_prompter("42")
        assert elicit_item(item, prompter) == 42
        assert prompter.calls[0][2]["default"] == 42

    def test_empty_answer_takes_default(self, make_prompter):
        item = compile_item([str, "name a file", "~/.bashrc"], "file", OWNER)
        assert elicit_item(item, make_prompter("")) == "~/.bashrc"

    def test_inline_check_reports_first_error(self):
        check = answer_check(compile_item([Bound(1, 10), "n"], "n", OWNER))
        assert check("5") is True
        assert check("11") == "Value must be within [1, 10]."


class TestChoiceQuestions:
    """Choice lists are offered verbatim."""

    def test_only_members_are_accepted(self, make_prompter):
        item = compile_item([["red", "green", "blue"], "pick one"], "color", OWNER)
        prompter = make_prompter("purple", "green")

        assert elicit_item(item, prompter) == "green"
        kind, question, details = prompter.calls[0]
        assert kind == "choice"
        assert question == "pick one"
        assert details["choices"] == ["red", "green", "blue"]
        assert item.type is str

    def test_validator_applies_to_choice(self, make_prompter):
        item = compile_item([[21, 23, 42], "pick", lambda v: v > 21], "n", OWNER)
        assert elicit_item(item, make_prompter(21, 42)) == 42


class TestYesNoQuestions:
    """Booleans are asked as yes/no."""

    def test_default_true_prefills_yes(self, make_prompter):
        item = compile_item([True, "enable?"], "enabled", OWNER)
        prompter = make_prompter(True)

        assert elicit_item(item, prompter) is True
        kind, question, details = prompter.calls[0]
        assert kind == "yes_no"
        assert question == "enable?"
        assert details["default"] is True

    def test_answer_no(self, make_prompter):
        item = compile_item([bool, "delete it?"], "delete", OWNER)
        assert elicit_item(item, make_prompter(False)) is False


class TestWalk:
    """The tree is walked depth-first in declaration order."""

    def test_nested_tree(self, make_prompter):
        tree = compile_tree(
            {
                "port": [Bound(1, 65535), "port"],
                "db": {"host": [str, "host"], "tls": [True, "tls?"]},
                "color": [["red", "blue"], "color"],
            },
            OWNER,
        )
        prompter = make_prompter("8080", "db1", False, "blue")

        resolved = elicit(tree, prompter)

        assert resolved == {
            "port": 8080,
            "db": {"host": "db1", "tls": False},
            "color": "blue",
        }
        assert prompter.questions == ["port [1, 65535]", "host", "tls?", "color"]

    def test_cancel_raises(self, make_prompter):
        tree = compile_tree({"host": [str, "host"], "port": [int, "port"]}, OWNER)
        with pytest.raises(ElicitationCancelled) as exc_info:
            elicit(tree, make_prompter("db1", None))
        assert exc_info.value.key == "port"

    def test_assume_default_never_prompts(self, prompter):
        tree = compile_tree(
            {"port": [int, "port", 8080], "host": [str, "host"], "db": {"user": [str]}},
            OWNER,
        )
        resolved = elicit(tree, prompter, assume_default=True)
        assert resolved == {"port": 8080, "db": {}}
        assert prompter.calls == []

    def test_prompter_required_when_interactive(self):
        tree = compile_tree({"host": [str]}, OWNER)
        with pytest.raises(ValueError):
            elicit(tree, None)
