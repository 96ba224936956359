"""``ocifetch cache``: list references held in the local content cache."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ocifetch.config import config
from ocifetch.core.content_cache import ArtifactIntegrityError, ContentCache

console = Console()


def cache_cmd(
    cache_dir: str = typer.Option(
        str(config.cache_path),
        "--cache",
        "-c",
        help="Path to the local content cache.",
    ),
    verify: bool = typer.Option(
        False,
        "--verify",
        help="Re-hash every cached blob.",
    ),
) -> None:
    """List cached references and their content addresses."""
    cache = ContentCache(Path(cache_dir))
    try:
        records = cache.records()
    except ArtifactIntegrityError as exc:
        console.print(f"[bold red]Cannot read cache:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if not records:
        console.print("[dim]Cache is empty.[/dim]")
        return

    table = Table(title="Cached References")
    table.add_column("Reference", style="cyan")
    table.add_column("Content Address", style="green")
    table.add_column("Size", justify="right")
    if verify:
        table.add_column("Intact", justify="center")

    broken = 0
    for record in records:
        row = [record.reference, record.content_address, str(record.size_bytes)]
        if verify:
            intact = cache.verify(record.content_address)
            broken += not intact
            row.append("[green]Yes[/green]" if intact else "[red]No[/red]")
        table.add_row(*row)

    console.print(table)
    if broken:
        raise typer.Exit(code=1)
