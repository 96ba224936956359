"""Content-addressed cache of pulled archives plus a reference index.

Storage layout::

    {base_path}/blobs/{sha256[0:2]}/{sha256[2:4]}/{sha256}.dat
    {base_path}/index.json      canonical reference -> CacheRecord

Blobs are immutable once stored.  The index is rewritten atomically under
``{base_path}/index.json.lock`` so concurrent writers never drop records.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from filelock import FileLock
from pydantic import ValidationError

from ocifetch.core.hasher import sha256_hex
from ocifetch.models.artifacts import CacheRecord
from ocifetch.models.reference import Reference

logger = logging.getLogger(__name__)


class ArtifactIntegrityError(RuntimeError):
    """Raised when a stored blob's hash does not match its address."""


class ContentCache:
    """SHA-256 keyed blob store with a reference index.

    Storing the same content twice is a no-op (idempotent).  Tagging a
    reference again points it at the new blob.

    Parameters
    ----------
    base_path:
        Root directory of the cache.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._blobs = self._base / "blobs"
        self._index_path = self._base / "index.json"
        self._lock_path = self._base / "index.json.lock"
        self._blobs.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    @staticmethod
    def _extract_digest(content_address: str) -> str:
        """Strip the ``sha256:`` prefix from a content address, if present."""
        return content_address.removeprefix("sha256:")

    def _blob_path(self, sha256_digest: str) -> Path:
        return self._blobs / sha256_digest[:2] / sha256_digest[2:4] / f"{sha256_digest}.dat"

    # ------------------------------------------------------------------
    # Blobs
    # ------------------------------------------------------------------

    def store(self, data: bytes) -> str:
        """Store data and return its ``sha256:<hex>`` content address.

        If the content already exists, verifies integrity instead of
        overwriting.
        """
        digest = sha256_hex(data)
        path = self._blob_path(digest)

        if path.exists():
            if not self.verify(digest):
                raise ArtifactIntegrityError(
                    f"Existing blob at {digest} failed integrity check"
                )
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        return f"sha256:{digest}"

    def retrieve(self, content_address: str) -> bytes:
        """Retrieve blob bytes by content address.

        Raises
        ------
        FileNotFoundError
            If no blob is stored under ``content_address``.
        ArtifactIntegrityError
            If the stored bytes no longer match the address.
        """
        digest = self._extract_digest(content_address)
        path = self._blob_path(digest)
        if not path.exists():
            raise FileNotFoundError(f"Blob not found: {content_address}")
        data = path.read_bytes()
        if sha256_hex(data) != digest:
            raise ArtifactIntegrityError(
                f"Blob at {content_address} failed integrity check"
            )
        return data

    def exists(self, content_address: str) -> bool:
        """Check if a blob exists in the cache."""
        return self._blob_path(self._extract_digest(content_address)).exists()

    def verify(self, content_address: str) -> bool:
        """Re-hash stored data and compare against the content address."""
        digest = self._extract_digest(content_address)
        path = self._blob_path(digest)
        if not path.exists():
            return False
        return sha256_hex(path.read_bytes()) == digest

    # ------------------------------------------------------------------
    # Reference index
    # ------------------------------------------------------------------

    def _read_index(self) -> dict[str, CacheRecord]:
        if not self._index_path.exists():
            return {}
        try:
            raw = json.loads(self._index_path.read_text(encoding="utf-8"))
            return {key: CacheRecord.model_validate(value) for key, value in raw.items()}
        except (json.JSONDecodeError, AttributeError, ValidationError) as exc:
            raise ArtifactIntegrityError(
                f"Cache index {self._index_path} is corrupt: {exc}"
            ) from exc

    def _write_index(self, index: dict[str, CacheRecord]) -> None:
        payload = {
            key: record.model_dump(mode="json") for key, record in sorted(index.items())
        }
        fd, tmp = tempfile.mkstemp(dir=self._base, prefix=".index-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            os.replace(tmp, self._index_path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def tag(self, reference: Reference, content_address: str, size_bytes: int = 0) -> CacheRecord:
        """Point ``reference`` at a stored blob."""
        if not self.exists(content_address):
            raise FileNotFoundError(f"Blob not found: {content_address}")
        record = CacheRecord(
            reference=reference.canonical(),
            content_address=content_address,
            size_bytes=size_bytes,
        )
        with FileLock(str(self._lock_path)):
            index = self._read_index()
            index[record.reference] = record
            self._write_index(index)
        logger.info("Cached %s -> %s", record.reference, content_address)
        return record

    def lookup(self, reference: Reference) -> CacheRecord | None:
        """Return the index record for ``reference``, or ``None``."""
        return self._read_index().get(reference.canonical())

    def records(self) -> list[CacheRecord]:
        """All index records, sorted by reference."""
        index = self._read_index()
        return [index[key] for key in sorted(index)]
