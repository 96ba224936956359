"""ocifetch data models: all Pydantic v2, all frozen (immutable)."""

from ocifetch.models.artifacts import Artifact, CacheRecord
from ocifetch.models.reference import ParsedLocator, Reference

__all__ = [
    # references
    "ParsedLocator",
    "Reference",
    # artifacts
    "Artifact",
    "CacheRecord",
]
