"""Reference resolution: turn a locator plus an optional version into a Reference.

Precedence, decided in one place (``choose_tag``):

1. A tag already present in the locator wins; the explicit version is ignored.
2. Otherwise a non-empty explicit version becomes the tag.
3. Otherwise resolution fails with ``MissingVersion``.  There is no implicit
   ``latest``.

Locators may carry the ``oci://`` scheme or be bare (``host/repo/chart``);
hosts may carry a port (``localhost:5000/charts/app:1.0.0``).
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from ocifetch.core.errors import MalformedLocator, MalformedReference, MissingVersion
from ocifetch.models.reference import ParsedLocator, Reference

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("", "oci")

# OCI distribution reference grammar (docker/distribution/reference).
_HOST_RE = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::[0-9]+)?")
_PATH_COMPONENT_RE = re.compile(r"[a-z0-9]+(?:(?:[._]|__|[-]*)[a-z0-9]+)*")
_TAG_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}")
MAX_NAME_LENGTH = 255


def split_scheme(locator: str) -> tuple[str, str]:
    """Split ``scheme://rest`` into ``(scheme, rest)``; bare locators get ``""``."""
    scheme, sep, rest = locator.partition("://")
    if not sep:
        return "", locator
    return scheme.lower(), rest


def parse_locator(locator: str) -> ParsedLocator:
    """Parse a locator into host, repository path and optional existing tag.

    Raises
    ------
    MalformedLocator
        If the locator is empty, uses an unsupported scheme, carries a
        query, fragment or credentials, or lacks a host or a path.
    """
    if not locator:
        raise MalformedLocator("empty locator")
    # urlsplit silently drops tabs and newlines
    if any(ch.isspace() or not ch.isprintable() for ch in locator):
        raise MalformedLocator(f"locator {locator!r} contains whitespace or control characters")

    scheme, rest = split_scheme(locator)
    if scheme not in SUPPORTED_SCHEMES:
        raise MalformedLocator(f"unsupported scheme {scheme!r} in {locator!r}")

    try:
        parts = urlsplit(f"//{rest}")
        _ = parts.port  # raises ValueError on a bad port
    except ValueError as exc:
        raise MalformedLocator(f"cannot parse locator {locator!r}: {exc}") from exc

    if parts.query or parts.fragment:
        raise MalformedLocator(f"locator {locator!r} must not carry a query or fragment")
    if "@" in parts.netloc:
        raise MalformedLocator(f"locator {locator!r} must not embed credentials")
    if not parts.netloc:
        raise MalformedLocator(f"locator {locator!r} has no host")

    path = parts.path.removeprefix("/")
    if not path:
        raise MalformedLocator(f"locator {locator!r} has no repository path")

    head, slash, last = path.rpartition("/")
    existing_tag: str | None = None
    if ":" in last:
        last, _, existing_tag = last.partition(":")
        path = f"{head}{slash}{last}"

    return ParsedLocator(
        scheme=scheme,
        host=parts.netloc,
        path=path,
        existing_tag=existing_tag,
    )


def choose_tag(existing_tag: str | None, explicit_version: str) -> str:
    """Pick the tag for a reference.

    >>> choose_tag("1.2.3", "9.9.9")
    '1.2.3'
    >>> choose_tag(None, "0.1.0")
    '0.1.0'
    """
    if existing_tag is not None:
        return existing_tag
    if explicit_version:
        return explicit_version
    raise MissingVersion(
        "no version given: pass a version or pin a tag in the URL (repo:tag)"
    )


def build_reference(host: str, repository: str, tag: str) -> Reference:
    """Validate the parts of a reference and assemble it.

    Raises
    ------
    MalformedReference
        If any part violates the registry reference grammar.
    """
    if not _HOST_RE.fullmatch(host):
        raise MalformedReference(f"invalid registry host {host!r}")
    for component in repository.split("/"):
        if not _PATH_COMPONENT_RE.fullmatch(component):
            raise MalformedReference(
                f"invalid repository path component {component!r} in {repository!r}"
            )
    if len(host) + 1 + len(repository) > MAX_NAME_LENGTH:
        raise MalformedReference(
            f"repository name exceeds {MAX_NAME_LENGTH} characters"
        )
    if not _TAG_RE.fullmatch(tag):
        raise MalformedReference(f"invalid tag {tag!r}")
    return Reference(host=host, repository=repository, tag=tag)


def resolve_reference(locator: str, explicit_version: str = "") -> Reference:
    """Resolve ``locator`` and ``explicit_version`` into exactly one Reference."""
    parsed = parse_locator(locator)
    tag = choose_tag(parsed.existing_tag, explicit_version)
    if parsed.has_tag and explicit_version and explicit_version != tag:
        logger.debug(
            "Locator %s pins tag %s; ignoring explicit version %s",
            locator, tag, explicit_version,
        )
    return build_reference(parsed.host, parsed.path, tag)
