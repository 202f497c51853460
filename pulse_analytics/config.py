"""
Configuration for the analytics client.

AnalyticsConfig is the static, YAML-loadable settings object used to build
an EventComposer. Configuration holds the one mutable setting, the API
key, which may be set after construction and rotated at any time.
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml

from .schemas import EnrichmentField, coerce_field
from .transport import DEFAULT_ENDPOINT


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Settings for EventComposer and its collaborators.

    Immutable after construction (frozen dataclass). Field names given as
    strings are coerced to EnrichmentField.
    """

    api_key: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT

    # HTTP transport
    timeout: float = 10.0
    max_workers: int = 4

    # Enrichment
    default_fields: Tuple[EnrichmentField, ...] = ()
    app_version: Optional[str] = None
    environment_overrides: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration."""
        if not self.endpoint:
            raise ValueError("endpoint cannot be empty")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

        if not 1 <= self.max_workers <= 64:
            raise ValueError(
                f"max_workers must be in [1, 64], got {self.max_workers}"
            )

        object.__setattr__(
            self,
            "default_fields",
            tuple(coerce_field(f) for f in self.default_fields)
        )

        for name in self.environment_overrides:
            if coerce_field(name) is EnrichmentField.ALL:
                raise ValueError("environment_overrides cannot set 'all'")

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "AnalyticsConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            api_key: "YOUR_API_KEY"
            endpoint: "https://api2.amplitude.com/2/httpapi"
            timeout: 10.0
            max_workers: 4
            default_fields: [platform, os_name, os_version]
            app_version: "1.4.0"
            environment_overrides:
              device_type: "kiosk"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {yaml_path}")

        return cls(
            api_key=data.get("api_key"),
            endpoint=data.get("endpoint", DEFAULT_ENDPOINT),
            timeout=float(data.get("timeout", 10.0)),
            max_workers=int(data.get("max_workers", 4)),
            default_fields=tuple(data.get("default_fields") or ()),
            app_version=data.get("app_version"),
            environment_overrides={
                str(k): str(v)
                for k, v in (data.get("environment_overrides") or {}).items()
            },
        )


class Configuration:
    """
    Holder for the API key.

    Absent until configure() is called. configure() may be called again to
    rotate the key; last write wins. Reads return a consistent snapshot.
    """

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self._lock = threading.Lock()

    def configure(self, api_key: str) -> bool:
        """
        Store the API key.

        Returns:
            True if the stored key changed
        """
        with self._lock:
            changed = api_key != self._api_key
            self._api_key = api_key
        return changed

    @property
    def api_key(self) -> Optional[str]:
        with self._lock:
            return self._api_key

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None
