"""Registry reference models: parsed locators and fully tagged references."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ParsedLocator(BaseModel):
    """A caller-supplied locator split into its parts.

    ``existing_tag`` is ``None`` when the last path segment carries no
    ``:`` separator, and a (possibly empty) string otherwise.

    Examples
    --------
    >>> loc = ParsedLocator(scheme="oci", host="localhost:5000", path="charts/app", existing_tag="1.0.0")
    >>> loc.has_tag
    True
    """

    model_config = ConfigDict(frozen=True)

    scheme: str = ""
    host: str
    path: str
    existing_tag: str | None = None

    @property
    def has_tag(self) -> bool:
        return self.existing_tag is not None


class Reference(BaseModel):
    """A canonical identifier for one tagged artifact in one repository.

    A Reference always carries exactly one non-empty tag.

    Examples
    --------
    >>> ref = Reference(host="localhost:5000", repository="charts/app", tag="0.1.0")
    >>> str(ref)
    'localhost:5000/charts/app:0.1.0'
    >>> ref.basename
    'app'
    """

    model_config = ConfigDict(frozen=True)

    host: str
    repository: str
    tag: str

    @field_validator("tag")
    @classmethod
    def _tag_required(cls, value: str) -> str:
        if not value:
            raise ValueError("a reference must carry a tag")
        return value

    @property
    def name(self) -> str:
        """``host/repository`` without the tag."""
        return f"{self.host}/{self.repository}"

    @property
    def basename(self) -> str:
        """The last component of the repository path."""
        return self.repository.rsplit("/", 1)[-1]

    def canonical(self) -> str:
        return f"{self.name}:{self.tag}"

    def __str__(self) -> str:
        return self.canonical()
