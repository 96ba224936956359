"""``ocifetch resolve HREF``: print the reference a locator resolves to."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from ocifetch.core.errors import FetchError
from ocifetch.core.resolver import resolve_reference

console = Console()


def resolve_cmd(
    href: str = typer.Argument(..., help="Artifact locator."),
    version: str = typer.Option(
        "",
        "--version",
        help="Version to use when the locator carries no tag.",
    ),
) -> None:
    """Print the canonical reference for HREF."""
    try:
        reference = resolve_reference(href, version)
    except FetchError as exc:
        console.print(f"[bold red]Cannot resolve:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    console.print(reference.canonical(), highlight=False)
