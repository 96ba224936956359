"""Runtime configuration: env-driven.

Centralized config using pydantic-settings.  Reads from a .env file and
OCIFETCH_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class FetchConfig(BaseSettings):
    """Configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export OCIFETCH_LOG_LEVEL=DEBUG
        export OCIFETCH_CACHE_PATH=/var/cache/ocifetch
        export OCIFETCH_REGISTRY_ROOT=/srv/registry

    Or via .env file::

        OCIFETCH_ARCHIVE_EXTENSION=tgz
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="OCIFETCH_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage paths
    cache_path: Path = Path(".ocifetch/cache")
    registry_root: Path = Path(".ocifetch/registry")

    # Retrieval
    archive_extension: str = "tgz"
    default_scheme: str = "oci"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton: import as `from ocifetch.config import config`
config = FetchConfig()
