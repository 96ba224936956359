"""Reference resolution, retrieval pipeline and default collaborators."""

from ocifetch.core.errors import (
    EncodeFailed,
    FetchError,
    LoadFailed,
    MalformedLocator,
    MalformedReference,
    MissingVersion,
    PullFailed,
    SchemeNotSupported,
)
from ocifetch.core.getter import RegistryGetter
from ocifetch.core.naming import artifact_filename
from ocifetch.core.ports import ArchiveCodec, Getter, RegistryClient
from ocifetch.core.resolver import choose_tag, parse_locator, resolve_reference

__all__ = [
    "RegistryGetter",
    "resolve_reference",
    "parse_locator",
    "choose_tag",
    "artifact_filename",
    "ArchiveCodec",
    "Getter",
    "RegistryClient",
    "FetchError",
    "MalformedLocator",
    "MalformedReference",
    "MissingVersion",
    "SchemeNotSupported",
    "PullFailed",
    "LoadFailed",
    "EncodeFailed",
]
