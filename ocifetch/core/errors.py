"""Error taxonomy for reference resolution and retrieval.

Every failure aborts the current call.  Collaborator failures are wrapped
in the matching ``*Failed`` error with the original exception kept as
``cause`` (and chained as ``__cause__``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ocifetch.models.reference import Reference


class FetchError(RuntimeError):
    """Base class for every error surfaced by the retrieval core."""


class MalformedLocator(FetchError):
    """The locator cannot be split into a host and a repository path."""


class MalformedReference(FetchError):
    """Host, repository or tag do not form a valid registry reference."""


class MissingVersion(FetchError):
    """Neither a URL tag nor an explicit version was supplied."""


class SchemeNotSupported(FetchError):
    """No getter provider is registered for the URL scheme."""


class CollaboratorFailed(FetchError):
    """A registry client or codec call failed for ``reference``."""

    step = "collaborator"

    def __init__(self, reference: Reference, cause: BaseException) -> None:
        super().__init__(f"{self.step} failed for {reference}: {cause}")
        self.reference = reference
        self.cause = cause


class PullFailed(CollaboratorFailed):
    step = "pull"


class LoadFailed(CollaboratorFailed):
    step = "load"


class EncodeFailed(CollaboratorFailed):
    step = "encode"
