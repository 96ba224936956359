"""``ocifetch filename HREF VERSION``: print the archive filename."""

from __future__ import annotations

import typer
from rich.console import Console

from ocifetch.config import config
from ocifetch.core.naming import artifact_filename

console = Console()


def filename_cmd(
    href: str = typer.Argument(..., help="Artifact locator."),
    version: str = typer.Argument(..., help="Version to stamp into the name."),
) -> None:
    """Print the filename for HREF at VERSION (any tag in HREF is dropped)."""
    console.print(
        artifact_filename(href, version, config.archive_extension),
        highlight=False,
    )
