"""Registry getter: resolve, pull, load and encode an artifact into a buffer.

The getter keeps no state between calls.  Calling ``get`` twice with the
same arguments re-runs the whole chain; any caching belongs to the
registry client.
"""

from __future__ import annotations

import io
import logging
from urllib.parse import SplitResult

from ocifetch.core.errors import EncodeFailed, FetchError, LoadFailed, PullFailed
from ocifetch.core.naming import DEFAULT_EXTENSION, artifact_filename
from ocifetch.core.ports import ArchiveCodec, RegistryClient
from ocifetch.core.resolver import resolve_reference
from ocifetch.models.reference import Reference

logger = logging.getLogger(__name__)


class RegistryGetter:
    """Getter for ``oci://`` locators backed by a registry client.

    Parameters
    ----------
    client:
        Any ``RegistryClient`` (pull + load).
    codec:
        Any ``ArchiveCodec`` used to serialize the loaded artifact.
    extension:
        File extension used by ``filename``.
    """

    def __init__(
        self,
        client: RegistryClient,
        codec: ArchiveCodec,
        *,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        self._client = client
        self._codec = codec
        self._extension = extension

    def get(self, href: str, version: str = "") -> tuple[io.BytesIO, Reference]:
        """Retrieve ``href`` and return the encoded artifact and its reference.

        Raises
        ------
        MalformedLocator, MalformedReference, MissingVersion
            If ``href`` and ``version`` do not resolve to one reference.
        PullFailed, LoadFailed, EncodeFailed
            If the matching collaborator call fails.  No buffer is returned.
        """
        reference = resolve_reference(href, version)

        logger.debug("Pulling %s", reference)
        try:
            self._client.pull(reference)
        except FetchError:
            raise
        except Exception as exc:
            raise PullFailed(reference, exc) from exc

        logger.debug("Loading %s", reference)
        try:
            artifact = self._client.load(reference)
        except FetchError:
            raise
        except Exception as exc:
            raise LoadFailed(reference, exc) from exc

        buf = io.BytesIO()
        try:
            self._codec.encode(artifact, buf)
        except FetchError:
            raise
        except Exception as exc:
            raise EncodeFailed(reference, exc) from exc

        logger.debug("Encoded %s (%d bytes)", reference, buf.tell())
        buf.seek(0)
        return buf, reference

    def filename(self, locator: str | SplitResult, version: str) -> str:
        """Name of the file for ``locator`` at the caller's ``version``."""
        return artifact_filename(locator, version, self._extension)
