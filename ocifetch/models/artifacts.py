"""Artifact models: loaded package content and cache bookkeeping."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class Artifact(BaseModel):
    """A package loaded from a registry client.

    ``files`` maps archive-relative paths (without the top-level
    ``<name>/`` directory) to their raw bytes.  Only ``name`` and
    ``version`` carry meaning for the retrieval core.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    files: dict[str, bytes] = Field(default_factory=dict)
    metadata: dict[str, str] = Field(default_factory=dict)


class CacheRecord(BaseModel):
    """Index entry tying a canonical reference to a cached blob."""

    model_config = ConfigDict(frozen=True)

    reference: str
    content_address: str  # "sha256:<hex>"
    size_bytes: int = 0
    pulled_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
