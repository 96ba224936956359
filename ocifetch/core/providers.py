"""Getter providers: route locators to a getter by URL scheme."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict

from ocifetch.core.errors import SchemeNotSupported
from ocifetch.core.getter import RegistryGetter
from ocifetch.core.naming import DEFAULT_EXTENSION
from ocifetch.core.ports import ArchiveCodec, Getter, RegistryClient
from ocifetch.core.resolver import split_scheme

logger = logging.getLogger(__name__)


class Provider(BaseModel):
    """A getter factory and the URL schemes it serves."""

    model_config = ConfigDict(frozen=True)

    schemes: tuple[str, ...]
    factory: Callable[[], Getter]

    def provides(self, scheme: str) -> bool:
        return scheme.lower() in self.schemes


class Providers:
    """Ordered collection of providers; the first match wins.

    Parameters
    ----------
    providers:
        Providers to register, in lookup order.
    default_scheme:
        Scheme assumed for bare locators such as ``host/repo/chart``.
    """

    def __init__(
        self,
        providers: Iterable[Provider] = (),
        *,
        default_scheme: str = "oci",
    ) -> None:
        self._providers = list(providers)
        self._default_scheme = default_scheme

    def register(self, provider: Provider) -> None:
        self._providers.append(provider)
        logger.debug("Registered provider for %s", ", ".join(provider.schemes))

    def by_scheme(self, scheme: str) -> Getter:
        """Build a getter for ``scheme``.

        Raises
        ------
        SchemeNotSupported
            If no registered provider serves ``scheme``.
        """
        for provider in self._providers:
            if provider.provides(scheme):
                return provider.factory()
        raise SchemeNotSupported(f"scheme {scheme!r} not supported")

    def for_url(self, href: str) -> Getter:
        """Build a getter for the scheme of ``href``."""
        scheme, _ = split_scheme(href)
        return self.by_scheme(scheme or self._default_scheme)


def registry_provider(
    client: RegistryClient,
    codec: ArchiveCodec,
    *,
    extension: str = DEFAULT_EXTENSION,
) -> Provider:
    """Provider serving ``oci://`` locators through ``RegistryGetter``."""
    return Provider(
        schemes=("oci",),
        factory=lambda: RegistryGetter(client, codec, extension=extension),
    )
