"""Output filename derivation for retrieved artifacts.

The name is built from the last path segment of the locator with any tag
stripped, plus the version the caller asks for.  No resolution happens
here: a locator pinned to ``:latest`` and a requested ``0.1.0`` yields
``chart-0.1.0.tgz`` even though the pull would use ``latest``.
"""

from __future__ import annotations

import posixpath
from urllib.parse import SplitResult, urlsplit

from ocifetch.core.resolver import split_scheme

DEFAULT_EXTENSION = "tgz"


def _locator_path(locator: str | SplitResult) -> str:
    if isinstance(locator, SplitResult):
        return locator.path
    _, rest = split_scheme(locator)
    try:
        return urlsplit(f"//{rest}").path
    except ValueError:
        # unparseable host: use the raw text after it
        return rest.partition("/")[2]


def artifact_filename(
    locator: str | SplitResult,
    version: str,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    """Return ``<base>-<version>.<extension>`` for ``locator``.

    >>> artifact_filename("oci://host/repo/chart:latest", "0.1.0")
    'chart-0.1.0.tgz'
    """
    base = posixpath.basename(_locator_path(locator).rstrip("/")) or "."
    name = base.split(":", 1)[0]
    return f"{name}-{version}.{extension}"
