"""End-to-end integration tests: resolve, pull, load and encode through the
directory registry client, content cache and tar.gz codec, and via the CLI.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ocifetch.cli.app import app
from ocifetch.core.archive import TarGzArchiveCodec
from ocifetch.core.content_cache import ContentCache
from ocifetch.core.errors import MissingVersion, PullFailed
from ocifetch.core.getter import RegistryGetter
from ocifetch.core.hasher import sha256_hex
from ocifetch.core.providers import Providers, registry_provider
from ocifetch.core.registry_client import ArtifactNotFoundError, DirectoryRegistryClient
from ocifetch.core.resolver import resolve_reference
from ocifetch.models.artifacts import Artifact

runner = CliRunner()


class TestDirectoryPipeline:
    """Full chain over the default collaborators."""

    @pytest.fixture
    def real_getter(
        self, directory_client: DirectoryRegistryClient, codec: TarGzArchiveCodec
    ) -> RegistryGetter:
        return RegistryGetter(directory_client, codec)

    def test_get_pinned(self, real_getter, codec, sample_artifact):
        buf, ref = real_getter.get("oci://localhost:5000/charts/chart:1.2.3")
        assert str(ref) == "localhost:5000/charts/chart:1.2.3"
        assert codec.decode(buf.getvalue()) == sample_artifact

    def test_get_with_version(self, real_getter, content_cache):
        _, ref = real_getter.get("oci://localhost:5000/charts/chart", "1.2.3")
        assert content_cache.lookup(ref) is not None

    def test_output_matches_published_archive(self, real_getter, directory_client):
        buf, ref = real_getter.get("localhost:5000/charts/chart:1.2.3")
        assert buf.getvalue() == directory_client.archive_path(ref).read_bytes()

    def test_repeated_get_byte_identical(self, real_getter):
        first, _ = real_getter.get("localhost:5000/charts/chart:1.2.3")
        second, _ = real_getter.get("localhost:5000/charts/chart:1.2.3")
        assert sha256_hex(first.getvalue()) == sha256_hex(second.getvalue())

    def test_missing_tag_in_registry(self, real_getter):
        with pytest.raises(PullFailed) as info:
            real_getter.get("localhost:5000/charts/chart", "9.9.9")
        assert isinstance(info.value.cause, ArtifactNotFoundError)

    def test_unversioned_never_touches_registry(self, real_getter, content_cache):
        with pytest.raises(MissingVersion):
            real_getter.get("localhost:5000/charts/chart")
        assert content_cache.records() == []

    def test_through_providers(self, directory_client, codec):
        providers = Providers([registry_provider(directory_client, codec)])
        href = "oci://localhost:5000/charts/chart:1.2.3"
        getter = providers.for_url(href)
        buf, ref = getter.get(href)
        assert isinstance(buf, io.BytesIO)
        assert getter.filename(href, ref.tag) == "chart-1.2.3.tgz"


class TestPullCommand:
    """``ocifetch pull`` against a seeded directory registry."""

    @pytest.fixture
    def seeded(self, directory_client, registry_root: Path, tmp_path: Path) -> dict[str, str]:
        return {
            "registry": str(registry_root),
            "cache": str(tmp_path / "cli-cache"),
            "dest": str(tmp_path / "out"),
        }

    def _pull(self, seeded, *args: str):
        return runner.invoke(
            app,
            [
                "pull",
                *args,
                "--registry", seeded["registry"],
                "--cache", seeded["cache"],
                "--dest", seeded["dest"],
            ],
        )

    def test_pull_pinned(self, seeded, codec, sample_artifact):
        result = self._pull(seeded, "oci://localhost:5000/charts/chart:1.2.3")
        assert result.exit_code == 0, result.output
        written = Path(seeded["dest"]) / "chart-1.2.3.tgz"
        assert written.is_file()
        assert codec.decode(written.read_bytes()) == sample_artifact

    def test_pull_with_version(self, seeded):
        result = self._pull(seeded, "oci://localhost:5000/charts/chart", "--version", "1.2.3")
        assert result.exit_code == 0, result.output
        assert (Path(seeded["dest"]) / "chart-1.2.3.tgz").is_file()

    def test_pull_pinned_with_other_version_names_file_by_version(self, seeded):
        # The URL tag decides what is pulled; --version decides the name.
        result = self._pull(seeded, "oci://localhost:5000/charts/chart:1.2.3", "--version", "9.9.9")
        assert result.exit_code == 0, result.output
        assert (Path(seeded["dest"]) / "chart-9.9.9.tgz").is_file()

    @pytest.mark.parametrize("version", ["a/b", "../x"])
    def test_pull_rejects_version_that_is_a_path(self, seeded, version):
        result = self._pull(seeded, "oci://localhost:5000/charts/chart:1.2.3", "--version", version)
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Pull failed" in result.output
        assert not Path(seeded["dest"]).exists()

    def test_pull_missing_version(self, seeded):
        result = self._pull(seeded, "oci://localhost:5000/charts/chart")
        assert result.exit_code == 1
        assert not Path(seeded["dest"]).exists()

    def test_pull_unknown_scheme(self, seeded):
        result = self._pull(seeded, "https://localhost:5000/charts/chart:1.2.3")
        assert result.exit_code == 1

    def test_cache_lists_pulled_reference(self, seeded):
        self._pull(seeded, "oci://localhost:5000/charts/chart:1.2.3")
        result = runner.invoke(app, ["cache", "--cache", seeded["cache"], "--verify"])
        assert result.exit_code == 0, result.output
        records = ContentCache(Path(seeded["cache"])).records()
        assert [r.reference for r in records] == ["localhost:5000/charts/chart:1.2.3"]


class TestPublishedVersions:
    def test_multiple_versions(self, directory_client, codec, sample_artifact: Artifact):
        newer = sample_artifact.model_copy(update={"version": "2.0.0"})
        directory_client.publish(resolve_reference("localhost:5000/charts/chart:2.0.0"), newer)
        getter = RegistryGetter(directory_client, codec)
        old, _ = getter.get("localhost:5000/charts/chart", "1.2.3")
        new, _ = getter.get("localhost:5000/charts/chart", "2.0.0")
        assert codec.decode(old.getvalue()).version == "1.2.3"
        assert codec.decode(new.getvalue()).version == "2.0.0"
