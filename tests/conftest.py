"""Shared test fixtures for ocifetch."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

import pytest

from ocifetch.core.archive import TarGzArchiveCodec
from ocifetch.core.content_cache import ContentCache
from ocifetch.core.getter import RegistryGetter
from ocifetch.core.registry_client import DirectoryRegistryClient
from ocifetch.core.resolver import resolve_reference
from ocifetch.models.artifacts import Artifact
from ocifetch.models.reference import Reference


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeRegistryClient:
    """Registry client serving artifacts from a dict, recording every call."""

    def __init__(self, artifacts: dict[str, Artifact] | None = None) -> None:
        self.artifacts = dict(artifacts or {})
        self.pulled: list[Reference] = []
        self.loaded: list[Reference] = []
        self.pull_error: Exception | None = None
        self.load_error: Exception | None = None

    def pull(self, reference: Reference) -> None:
        self.pulled.append(reference)
        if self.pull_error is not None:
            raise self.pull_error
        if reference.canonical() not in self.artifacts:
            raise LookupError(f"{reference} not found")

    def load(self, reference: Reference) -> Artifact:
        self.loaded.append(reference)
        if self.load_error is not None:
            raise self.load_error
        return self.artifacts[reference.canonical()]


class FakeCodec:
    """Codec writing a readable, deterministic rendering of the artifact."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.encoded: list[Artifact] = []

    def encode(self, artifact: Artifact, out: BinaryIO) -> None:
        self.encoded.append(artifact)
        if self.error is not None:
            out.write(b"partial")
            raise self.error
        out.write(f"{artifact.name}@{artifact.version}\n".encode())
        for path in sorted(artifact.files):
            out.write(path.encode() + b"\n" + artifact.files[path])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def sample_artifact() -> Artifact:
    """A small chart-like artifact at version 1.2.3."""
    return Artifact(
        name="chart",
        version="1.2.3",
        files={
            "Chart.yaml": b"name: chart\nversion: 1.2.3\n",
            "templates/deployment.yaml": b"kind: Deployment\n",
            "values.yaml": b"replicas: 1\n",
        },
        metadata={"description": "sample chart"},
    )


@pytest.fixture
def fake_client(sample_artifact: Artifact) -> FakeRegistryClient:
    """In-memory registry holding ``host/repo/chart:1.2.3``."""
    return FakeRegistryClient({"host/repo/chart:1.2.3": sample_artifact})


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def failing_codec() -> FakeCodec:
    """Codec that writes a few bytes, then fails."""
    return FakeCodec(error=OSError("disk full"))


@pytest.fixture
def getter(fake_client: FakeRegistryClient, fake_codec: FakeCodec) -> RegistryGetter:
    """RegistryGetter wired to the in-memory collaborators."""
    return RegistryGetter(fake_client, fake_codec)


@pytest.fixture
def codec() -> TarGzArchiveCodec:
    return TarGzArchiveCodec()


@pytest.fixture
def content_cache(tmp_dir: Path) -> ContentCache:
    """Provide a fresh ContentCache in a temp directory."""
    return ContentCache(tmp_dir / "cache")


@pytest.fixture
def registry_root(tmp_dir: Path) -> Path:
    return tmp_dir / "registry"


@pytest.fixture
def directory_client(
    registry_root: Path,
    content_cache: ContentCache,
    codec: TarGzArchiveCodec,
    sample_artifact: Artifact,
) -> DirectoryRegistryClient:
    """Directory registry with the sample artifact published at
    ``localhost:5000/charts/chart:1.2.3``."""
    client = DirectoryRegistryClient(registry_root, content_cache, codec)
    client.publish(
        resolve_reference("oci://localhost:5000/charts/chart:1.2.3"),
        sample_artifact,
    )
    return client
