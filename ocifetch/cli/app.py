"""Main Typer application: imports and registers all CLI commands.

Entry point: ``ocifetch`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from ocifetch.cli.commands.cache_cmd import cache_cmd
from ocifetch.cli.commands.filename import filename_cmd
from ocifetch.cli.commands.pull import pull_cmd
from ocifetch.cli.commands.resolve import resolve_cmd
from ocifetch.config import config

app = typer.Typer(
    name="ocifetch",
    help="ocifetch: resolve OCI artifact references and retrieve them as archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="pull", help="Retrieve an artifact and write it as an archive.")(pull_cmd)
app.command(name="resolve", help="Print the reference a locator resolves to.")(resolve_cmd)
app.command(name="filename", help="Print the archive filename for a locator and version.")(filename_cmd)
app.command(name="cache", help="List references in the local content cache.")(cache_cmd)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output."
    ),
) -> None:
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose or config.debug else config.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
