"""Gzip'd tar codec for artifacts.

Archive layout::

    <name>/artifact.json    canonical JSON (name, version, metadata)
    <name>/<path>           one entry per artifact file

Encoding is deterministic: entries are sorted, timestamps and owners are
zeroed and the gzip header carries no mtime or filename, so the same
artifact always encodes to the same bytes.
"""

from __future__ import annotations

import gzip
import io
import json
import tarfile
import zlib
from pathlib import PurePosixPath
from typing import BinaryIO

from pydantic import ValidationError

from ocifetch.core.hasher import canonical_json_bytes
from ocifetch.models.artifacts import Artifact

METADATA_FILE = "artifact.json"


class ArchiveFormatError(RuntimeError):
    """Raised when an artifact cannot be encoded or an archive cannot be decoded."""


def _check_relative(path: str) -> None:
    pure = PurePosixPath(path)
    if not path or pure.is_absolute() or ".." in pure.parts:
        raise ArchiveFormatError(f"unsafe archive path {path!r}")


class TarGzArchiveCodec:
    """Encode artifacts to ``.tgz`` bytes and decode them back."""

    def encode(self, artifact: Artifact, out: BinaryIO) -> None:
        """Write ``artifact`` as a gzip'd tar into ``out``."""
        if not artifact.name or "/" in artifact.name or artifact.name in (".", ".."):
            raise ArchiveFormatError(f"invalid artifact name {artifact.name!r}")
        if METADATA_FILE in artifact.files:
            raise ArchiveFormatError(f"{METADATA_FILE!r} is reserved")

        entries = dict(artifact.files)
        entries[METADATA_FILE] = canonical_json_bytes({
            "name": artifact.name,
            "version": artifact.version,
            "metadata": artifact.metadata,
        })

        with gzip.GzipFile(fileobj=out, mode="wb", filename="", mtime=0) as gz:
            with tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
                for path in sorted(entries):
                    _check_relative(path)
                    data = entries[path]
                    info = tarfile.TarInfo(f"{artifact.name}/{path}")
                    info.size = len(data)
                    info.mtime = 0
                    info.mode = 0o644
                    info.uid = info.gid = 0
                    info.uname = info.gname = ""
                    tar.addfile(info, io.BytesIO(data))

    def decode(self, data: bytes) -> Artifact:
        """Rebuild an artifact from ``.tgz`` bytes.

        Raises
        ------
        ArchiveFormatError
            If the archive is corrupt, holds unsafe or non-regular members,
            has more than one top-level directory, or lacks valid metadata.
        """
        files: dict[str, bytes] = {}
        roots: set[str] = set()
        try:
            with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
                for member in tar:
                    _check_relative(member.name)
                    if member.isdir():
                        continue
                    if not member.isfile():
                        raise ArchiveFormatError(
                            f"unsupported archive member {member.name!r}"
                        )
                    root, _, rel = member.name.partition("/")
                    if not rel:
                        raise ArchiveFormatError(
                            f"archive member {member.name!r} is outside a top-level directory"
                        )
                    roots.add(root)
                    fh = tar.extractfile(member)
                    files[rel] = fh.read() if fh is not None else b""
        except (tarfile.TarError, OSError, EOFError, zlib.error) as exc:
            raise ArchiveFormatError(f"corrupt archive: {exc}") from exc

        if len(roots) != 1:
            raise ArchiveFormatError(
                f"expected one top-level directory, found {sorted(roots)}"
            )
        root = roots.pop()

        raw_meta = files.pop(METADATA_FILE, None)
        if raw_meta is None:
            raise ArchiveFormatError(f"archive has no {root}/{METADATA_FILE}")
        try:
            meta = json.loads(raw_meta)
            name, version = meta["name"], meta["version"]
        except (ValueError, TypeError, KeyError) as exc:
            raise ArchiveFormatError(f"invalid {METADATA_FILE}: {exc}") from exc
        if name != root:
            raise ArchiveFormatError(
                f"metadata name {name!r} does not match directory {root!r}"
            )

        try:
            return Artifact(
                name=name,
                version=version,
                files=files,
                metadata=meta.get("metadata") or {},
            )
        except ValidationError as exc:
            raise ArchiveFormatError(f"invalid {METADATA_FILE}: {exc}") from exc
