"""
Environment Info Providers
==========================

Bounded Context: Ambient Environment Facts

Providers answer one question: what is the value of a given enrichment
field on this machine right now? Lookups are local and fast; a field
with no resolvable value yields None and is left out of the envelope.

Architecture:
    EnvironmentInfoProvider (abstract)
        ↓
    SystemEnvironmentProvider (platform + locale)
    StaticEnvironmentProvider (fixed values, optional fallback)
"""

import locale
import platform
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Tuple

from .schemas import EnrichmentField, coerce_field
from .schemas.fields import FieldLike

UNKNOWN_APP_VERSION = "Unknown Version"

_PLATFORM_NAMES = {
    "Darwin": "macOS",
    "Windows": "Windows",
    "Linux": "Linux",
}


class EnvironmentInfoProvider(ABC):
    """Source of environment facts for envelope enrichment."""

    @abstractmethod
    def lookup(self, field: EnrichmentField) -> Optional[str]:
        """
        Return the value for a concrete field, or None if unavailable.

        Never called with EnrichmentField.ALL.
        """
        raise NotImplementedError("Subclasses must implement lookup()")


class SystemEnvironmentProvider(EnvironmentInfoProvider):
    """
    Reads facts from the running interpreter's platform and locale.

    Attributes:
        app_version: Version string of the host application

    Example:
        >>> provider = SystemEnvironmentProvider(app_version="1.4.0")
        >>> provider.lookup(EnrichmentField.APP_VERSION)
        '1.4.0'
    """

    def __init__(self, app_version: Optional[str] = None):
        self.app_version = app_version

    def lookup(self, field: EnrichmentField) -> Optional[str]:
        if field is EnrichmentField.PLATFORM:
            value = _PLATFORM_NAMES.get(platform.system(), "Unknown")
        elif field is EnrichmentField.COUNTRY:
            value = self._locale_parts()[1]
        elif field is EnrichmentField.LANGUAGE:
            value = self._locale_parts()[0]
        elif field is EnrichmentField.DEVICE_TYPE:
            value = platform.machine()
        elif field is EnrichmentField.APP_VERSION:
            value = self.app_version or UNKNOWN_APP_VERSION
        elif field is EnrichmentField.OS_NAME:
            value = platform.system()
        elif field is EnrichmentField.OS_VERSION:
            value = platform.release()
        else:
            value = None
        return value or None

    @staticmethod
    def _locale_parts() -> Tuple[Optional[str], Optional[str]]:
        """Split the process locale into (language, country), e.g. en_US."""
        tag = locale.getlocale()[0]
        if not tag or tag in ("C", "POSIX"):
            return None, None
        language, _, country = tag.partition("_")
        return language or None, country or None


class StaticEnvironmentProvider(EnvironmentInfoProvider):
    """
    Fixed field values, optionally backed by another provider.

    Values given here win; fields not given are delegated to `fallback`
    (or reported as unavailable when there is none).

    Example:
        >>> provider = StaticEnvironmentProvider(
        ...     {"device_type": "kiosk"},
        ...     fallback=SystemEnvironmentProvider()
        ... )
    """

    def __init__(
        self,
        values: Mapping[FieldLike, str],
        fallback: Optional[EnvironmentInfoProvider] = None
    ):
        self.values: Dict[EnrichmentField, str] = {}
        for name, value in values.items():
            field = coerce_field(name)
            if field is EnrichmentField.ALL:
                raise ValueError("Cannot assign a value to EnrichmentField.ALL")
            self.values[field] = value
        self.fallback = fallback

    def lookup(self, field: EnrichmentField) -> Optional[str]:
        if field in self.values:
            return self.values[field] or None
        if self.fallback is not None:
            return self.fallback.lookup(field)
        return None


def create_environment(
    app_version: Optional[str] = None,
    overrides: Optional[Mapping[FieldLike, str]] = None
) -> EnvironmentInfoProvider:
    """
    Factory for the provider a configured client uses.

    Returns the system provider, with overrides layered on top when any
    are given.
    """
    provider: EnvironmentInfoProvider = SystemEnvironmentProvider(app_version=app_version)
    if overrides:
        provider = StaticEnvironmentProvider(overrides, fallback=provider)
    return provider
