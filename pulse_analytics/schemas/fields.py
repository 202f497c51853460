"""
Enrichment Fields
=================

Bounded Context: Envelope Metadata

Optional metadata keys a caller can request on any logging call. ALL is a
meta-value: it expands to every concrete field and never appears in an
envelope itself.
"""

from enum import Enum
from typing import Iterable, Tuple, Union


class EnrichmentField(str, Enum):
    """Environment facts that can be attached to an envelope."""
    PLATFORM = "platform"
    COUNTRY = "country"
    LANGUAGE = "language"
    DEVICE_TYPE = "device_type"
    APP_VERSION = "app_version"
    OS_NAME = "os_name"
    OS_VERSION = "os_version"
    ALL = "all"

    @property
    def key(self) -> str:
        """Envelope key the field is written under."""
        if self is EnrichmentField.ALL:
            raise ValueError("EnrichmentField.ALL has no envelope key")
        return self.value


# Canonical order; ALL expands to exactly this
CONCRETE_FIELDS: Tuple[EnrichmentField, ...] = (
    EnrichmentField.PLATFORM,
    EnrichmentField.COUNTRY,
    EnrichmentField.LANGUAGE,
    EnrichmentField.DEVICE_TYPE,
    EnrichmentField.APP_VERSION,
    EnrichmentField.OS_NAME,
    EnrichmentField.OS_VERSION,
)

FieldLike = Union[EnrichmentField, str]


def coerce_field(field: FieldLike) -> EnrichmentField:
    """
    Convert a field name (e.g. from YAML or the CLI) to EnrichmentField.

    Raises:
        ValueError: If the name is not a known field
    """
    if isinstance(field, EnrichmentField):
        return field
    try:
        return EnrichmentField(field)
    except ValueError:
        valid = ", ".join(f.value for f in EnrichmentField)
        raise ValueError(f"Unknown enrichment field {field!r} (expected one of: {valid})")


def expand_fields(fields: Iterable[FieldLike]) -> Tuple[EnrichmentField, ...]:
    """
    Resolve requested fields to the concrete set to look up.

    ALL anywhere in the input yields CONCRETE_FIELDS. Otherwise duplicates
    are dropped and first-seen order is kept.

    Example:
        >>> expand_fields(["os_name", EnrichmentField.PLATFORM, "os_name"])
        (<EnrichmentField.OS_NAME: 'os_name'>, <EnrichmentField.PLATFORM: 'platform'>)
    """
    requested = [coerce_field(f) for f in fields]
    if EnrichmentField.ALL in requested:
        return CONCRETE_FIELDS
    return tuple(dict.fromkeys(requested))
