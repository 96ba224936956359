"""``ocifetch pull HREF``: retrieve an artifact and write it to disk.

Resolves the locator, pulls and loads it through the directory registry
client, encodes it and writes ``<name>-<version>.tgz`` into the
destination directory.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ocifetch.config import config
from ocifetch.core.archive import TarGzArchiveCodec
from ocifetch.core.content_cache import ContentCache
from ocifetch.core.errors import FetchError
from ocifetch.core.hasher import sha256_hex
from ocifetch.core.providers import Providers, registry_provider
from ocifetch.core.registry_client import DirectoryRegistryClient

console = Console()


def pull_cmd(
    href: str = typer.Argument(
        ...,
        help="Artifact locator, e.g. oci://localhost:5000/charts/app:1.0.0",
    ),
    version: str = typer.Option(
        "",
        "--version",
        help="Version to pull when the locator carries no tag.",
    ),
    dest: str = typer.Option(
        ".",
        "--dest",
        "-d",
        help="Directory to write the archive into.",
    ),
    registry_root: str = typer.Option(
        str(config.registry_root),
        "--registry",
        "-r",
        help="Root of the directory registry.",
    ),
    cache_dir: str = typer.Option(
        str(config.cache_path),
        "--cache",
        "-c",
        help="Path to the local content cache.",
    ),
) -> None:
    """Retrieve an artifact and write it as an archive.

    A tag pinned in the locator always wins over --version.  The output
    file is named after the requested --version when one is given, and
    after the resolved tag otherwise.
    """
    codec = TarGzArchiveCodec()
    client = DirectoryRegistryClient(
        Path(registry_root),
        ContentCache(Path(cache_dir)),
        codec,
        extension=config.archive_extension,
    )
    providers = Providers(
        [registry_provider(client, codec, extension=config.archive_extension)],
        default_scheme=config.default_scheme,
    )

    try:
        getter = providers.for_url(href)
        buf, reference = getter.get(href, version)
    except FetchError as exc:
        console.print(f"[bold red]Pull failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    data = buf.getvalue()
    filename = getter.filename(href, version or reference.tag)
    if Path(filename).name != filename or filename in (".", ".."):
        console.print(
            f"[bold red]Pull failed:[/bold red] cannot write {escape(filename)!r}: "
            "the version must not contain a path separator"
        )
        raise typer.Exit(code=1)
    out_dir = Path(dest)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / filename
    out_path.write_bytes(data)

    console.print(
        Panel(
            "\n".join([
                "[bold green]Pulled![/bold green]",
                "",
                f"[bold]Reference:[/bold] {reference}",
                f"[bold]File:[/bold]      {out_path}",
                f"[bold]Size:[/bold]      {len(data)} bytes",
                f"[bold]SHA-256:[/bold]   {sha256_hex(data)}",
            ]),
            title="[bold]ocifetch[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
