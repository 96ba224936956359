"""ocifetch CLI: Typer-based command-line interface.

Provides the ``ocifetch`` command with subcommands for pulling artifacts,
resolving references, deriving filenames and listing the local cache.

All output uses Rich for formatted terminal display.
"""
