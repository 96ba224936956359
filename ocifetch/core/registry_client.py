"""Directory-backed registry client.

Treats a local directory tree as the remote registry::

    {registry_root}/{host}/{repository}/{tag}.tgz

``pull`` copies the archive into the content cache and indexes it under the
canonical reference; ``load`` decodes the cached blob.  Satisfies the
``RegistryClient`` protocol.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from ocifetch.core.archive import TarGzArchiveCodec
from ocifetch.core.content_cache import ContentCache
from ocifetch.models.artifacts import Artifact
from ocifetch.models.reference import Reference

logger = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """Raised when the registry cannot serve a request."""


class ArtifactNotFoundError(RegistryError):
    """Raised when the registry holds no artifact for a reference."""


class DirectoryRegistryClient:
    """Registry client reading archives from a directory tree.

    Parameters
    ----------
    registry_root:
        Root of the directory registry.
    cache:
        Content cache that receives pulled archives.
    codec:
        Codec used to decode cached archives (and encode published ones).
    extension:
        File extension of archives in the registry tree.
    """

    def __init__(
        self,
        registry_root: Path,
        cache: ContentCache,
        codec: TarGzArchiveCodec | None = None,
        *,
        extension: str = "tgz",
    ) -> None:
        self._root = Path(registry_root)
        self._cache = cache
        self._codec = codec or TarGzArchiveCodec()
        self._extension = extension

    def archive_path(self, reference: Reference) -> Path:
        """Location of ``reference`` inside the registry tree."""
        return (
            self._root
            / reference.host
            / reference.repository
            / f"{reference.tag}.{self._extension}"
        )

    def pull(self, reference: Reference) -> None:
        """Copy the archive for ``reference`` into the content cache.

        Raises
        ------
        ArtifactNotFoundError
            If the registry holds no archive for ``reference``.
        """
        source = self.archive_path(reference)
        if not source.is_file():
            raise ArtifactNotFoundError(f"{reference} not found in registry")
        data = source.read_bytes()
        address = self._cache.store(data)
        self._cache.tag(reference, address, size_bytes=len(data))

    def load(self, reference: Reference) -> Artifact:
        """Decode the cached archive for ``reference``.

        Raises
        ------
        RegistryError
            If ``reference`` was never pulled.
        """
        record = self._cache.lookup(reference)
        if record is None:
            raise RegistryError(f"{reference} has not been pulled")
        artifact = self._codec.decode(self._cache.retrieve(record.content_address))
        logger.debug("Loaded %s from %s", reference, record.content_address)
        return artifact

    def publish(self, reference: Reference, artifact: Artifact) -> Path:
        """Encode ``artifact`` into the registry tree under ``reference``."""
        buf = io.BytesIO()
        self._codec.encode(artifact, buf)
        dest = self.archive_path(reference)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(buf.getvalue())
        logger.info("Published %s to %s", reference, dest)
        return dest
