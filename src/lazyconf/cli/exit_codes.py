"""
Exit codes of the ``lazyconf`` command.

Scripts wrapping the command can tell a missing or malformed document
(EXIT_CONFIG_ERROR) apart from a failed delete (EXIT_ERROR) and from the
operator declining a reset (EXIT_USER_CANCEL).
"""

from typing import Optional

import typer
from rich import print

EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_USER_CANCEL = 130  # Standard for SIGINT (Ctrl+C)


class CliExit(typer.Exit):
    """
    typer.Exit that prints an optional rich-markup message first.

    Usage:
        raise CliExit.config_error("[yellow]No stored configuration[/yellow]")
        raise CliExit.user_cancel()
    """

    def __init__(self, code: int, message: Optional[str] = None):
        self.message = message
        super().__init__(code)
        if message:
            print(message)

    @classmethod
    def error(cls, message: Optional[str] = None) -> "CliExit":
        """Document could not be removed."""
        return cls(EXIT_ERROR, message)

    @classmethod
    def config_error(cls, message: Optional[str] = None) -> "CliExit":
        """Document is missing or cannot be read."""
        return cls(EXIT_CONFIG_ERROR, message)

    @classmethod
    def user_cancel(cls, message: Optional[str] = None) -> "CliExit":
        return cls(EXIT_USER_CANCEL, message or "Reset cancelled; document kept")
