"""
Tests for the lazyconf command-line interface.

Commands run through typer's CliRunner against documents written below the
isolated LAZYCONF_HOME.
"""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lazyconf.cli.display import format_value
from lazyconf.cli.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_USER_CANCEL,
    CliExit,
)
from lazyconf.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestPath:
    def test_prints_document_path(self, runner, lazyconf_home):
        result = runner.invoke(app, ["path", "acme.scanner.Worker", "--root", "acme"])
        assert result.exit_code == 0
        assert "scanner_worker.yml" in result.stdout
        assert not (lazyconf_home / ".acme").exists()


class TestShow:
    def test_shows_stored_values(self, runner, write_document):
        write_document("scanner", "host: db1\ndb:\n  tls: true\n")
        result = runner.invoke(app, ["show", "acme.scanner", "-r", "acme"])
        assert result.exit_code == 0
        assert "host: db1" in result.stdout
        assert "tls: yes" in result.stdout

    def test_missing_document(self, runner):
        result = runner.invoke(app, ["show", "acme.scanner", "-r", "acme"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "No stored configuration" in result.stdout

    def test_malformed_document(self, runner, write_document):
        write_document("scanner", "- just\n- a list\n")
        result = runner.invoke(app, ["show", "acme.scanner", "-r", "acme"])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_undecodable_document(self, runner, write_document):
        path = write_document("scanner", "")
        path.write_bytes(b"host: \xff\xfe\n")
        result = runner.invoke(app, ["show", "acme.scanner", "-r", "acme"])
        assert result.exit_code == EXIT_CONFIG_ERROR


class TestReset:
    def test_reset_with_yes(self, runner, write_document):
        path = write_document("scanner", "host: db1\n")
        result = runner.invoke(app, ["reset", "acme.scanner", "-r", "acme", "--yes"])
        assert result.exit_code == 0
        assert not path.exists()

    def test_reset_declined(self, runner, write_document):
        path = write_document("scanner", "host: db1\n")
        with patch("lazyconf.cli.main.questionary") as mock_q:
            mock_q.confirm.return_value.ask.return_value = False
            result = runner.invoke(app, ["reset", "acme.scanner", "-r", "acme"])
        assert result.exit_code == EXIT_USER_CANCEL
        assert "Reset cancelled" in result.stdout
        assert path.exists()

    def test_nothing_to_reset(self, runner):
        result = runner.invoke(app, ["reset", "acme.scanner", "-r", "acme", "-y"])
        assert result.exit_code == 0
        assert "Nothing to reset" in result.stdout


def test_format_value():
    assert format_value(True) == "yes"
    assert format_value(None) == "—"
    assert format_value(1.23456789) == "1.23457"
    assert format_value("x" * 80).endswith("…")


def test_cli_exit_codes():
    assert CliExit.error().exit_code == EXIT_ERROR
    assert CliExit.config_error().exit_code == EXIT_CONFIG_ERROR
    cancel = CliExit.user_cancel()
    assert cancel.exit_code == EXIT_USER_CANCEL
    assert cancel.message == "Reset cancelled; document kept"
