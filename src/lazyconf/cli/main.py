"""
Typer-based CLI for inspecting stored lazyconf documents.

The library has no entry point of its own; this command lets an operator
find, view or reset the document an owner stores, without needing the
owner's code:

    $ lazyconf path acme.scanner --root acme
    $ lazyconf show acme.scanner --root acme
    $ lazyconf reset acme.scanner --root acme --yes

Resetting removes the document, so the owner elicits its values again on
next start.
"""

import sys

import questionary
import typer
from rich import print

from lazyconf.cli.display import show_values
from lazyconf.cli.exit_codes import EXIT_USER_CANCEL, CliExit
from lazyconf.core.config.configuration import Configuration, ConfigOptions
from lazyconf.core.config.persistence import PersistenceError, delete_document, load_document
from lazyconf.core.utils.logger import log_error, setup_logging
from lazyconf.core.utils.paths import DEFAULT_CONFIGURATION_ROOT

app = typer.Typer(
    name="lazyconf",
    help="lazyconf - inspect and reset stored first-run configuration",
    add_completion=False,
    rich_markup_mode="rich",
)

ROOT_OPTION_HELP = "Configuration root (storage namespace) the owner uses"


def _configuration_for(owner: str, root: str) -> Configuration:
    return Configuration(owner, options=ConfigOptions(configuration_root=root))


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """lazyconf command-line interface."""
    setup_logging(level=log_level)


@app.command()
def path(
    owner: str = typer.Argument(..., help="Owner identity, e.g. acme.scanner.Worker"),
    root: str = typer.Option(DEFAULT_CONFIGURATION_ROOT, "--root", "-r", help=ROOT_OPTION_HELP),
) -> None:
    """Print the document path for an owner."""
    typer.echo(str(_configuration_for(owner, root).config_file_path))


@app.command()
def show(
    owner: str = typer.Argument(..., help="Owner identity, e.g. acme.scanner.Worker"),
    root: str = typer.Option(DEFAULT_CONFIGURATION_ROOT, "--root", "-r", help=ROOT_OPTION_HELP),
) -> None:
    """Show the stored values of an owner."""
    config = _configuration_for(owner, root)
    document_path = config.config_file_path
    try:
        values = load_document(document_path)
    except PersistenceError as e:
        log_error("CLI", f"Failed to read {document_path}", exception=e)
        raise CliExit.config_error(f"[red]{e.message}[/red]")
    if values is None:
        raise CliExit.config_error(
            f"[yellow]No stored configuration for {owner} at {document_path}[/yellow]"
        )
    show_values(f"{owner} ({document_path})", values)


@app.command()
def reset(
    owner: str = typer.Argument(..., help="Owner identity, e.g. acme.scanner.Worker"),
    root: str = typer.Option(DEFAULT_CONFIGURATION_ROOT, "--root", "-r", help=ROOT_OPTION_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete the stored document so the owner asks again on next start."""
    document_path = _configuration_for(owner, root).config_file_path
    if not document_path.exists():
        print(f"[yellow]Nothing to reset: {document_path} does not exist[/yellow]")
        return
    if not yes:
        confirmed = questionary.confirm(f"Delete {document_path}?", default=False).ask()
        if not confirmed:
            raise CliExit.user_cancel()
    try:
        delete_document(document_path)
    except PersistenceError as e:
        log_error("CLI", f"Failed to delete {document_path}", exception=e)
        raise CliExit.error(f"[red]{e.message}[/red]")
    print(f"[green]Removed {document_path}[/green]")


def run() -> None:
    """Console script entry point."""
    try:
        app()
    except KeyboardInterrupt:
        print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(EXIT_USER_CANCEL)


if __name__ == "__main__":
    run()
