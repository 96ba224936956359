"""Capability interfaces for the collaborators of the retrieval pipeline.

The pipeline only ever talks to these Protocols.  Any object with matching
methods satisfies them, so tests plug in in-memory fakes and production
plugs in a real registry client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    import io
    from urllib.parse import SplitResult

    from ocifetch.models.artifacts import Artifact
    from ocifetch.models.reference import Reference


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for registry clients.

    Authentication, transport, retries and local caching all live behind
    this interface.
    """

    def pull(self, reference: Reference) -> None:
        """Fetch ``reference`` so that a following ``load`` can read it."""
        ...

    def load(self, reference: Reference) -> Artifact:
        """Return the artifact previously pulled for ``reference``."""
        ...


@runtime_checkable
class ArchiveCodec(Protocol):
    """Protocol for archive encoders."""

    def encode(self, artifact: Artifact, out: BinaryIO) -> None:
        """Serialize ``artifact`` into ``out``."""
        ...


@runtime_checkable
class Getter(Protocol):
    """Protocol for scheme-specific getters handed out by providers."""

    def get(self, href: str, version: str = "") -> tuple[io.BytesIO, Reference]:
        ...

    def filename(self, locator: str | SplitResult, version: str) -> str:
        ...
