"""Managed configuration sources and validation."""

from pathlib import Path
from typing import Mapping, Optional, Protocol

import yaml

from ..core.errors import ConfigurationMissingError, StorageError
from ..core.models import ConfigurationData, ConfigurationStatus

CERT_DOWNLOAD_URL_KEY = "cert_download_url"
CA_CERT_DOWNLOAD_URL_KEY = "ca_cert_download_url"
P12_PASSWORD_KEY = "p12_password"

REQUIRED_KEYS = (CERT_DOWNLOAD_URL_KEY, CA_CERT_DOWNLOAD_URL_KEY, P12_PASSWORD_KEY)


class ManagedConfigSource(Protocol):
    """Read access to device-management supplied string values."""

    def get(self, key: str) -> Optional[str]: ...


class DictConfigSource:
    """Managed configuration held in memory."""

    def __init__(self, values: Optional[Mapping[str, Optional[str]]] = None):
        self._values: dict[str, Optional[str]] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: Optional[str]) -> None:
        self._values[key] = value


class YamlConfigSource:
    """Managed configuration read from a YAML restrictions file.

    The file is re-read on every lookup so changes pushed by the management
    layer apply without restarting.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self, key: str) -> Optional[str]:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Failed to read managed configuration: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(
                f"Managed configuration {self.path} must be a mapping, got {type(data).__name__}"
            )

        value = data.get(key)
        return None if value is None else str(value)


class ConfigurationValidator:
    """Reads the three required settings; all or nothing."""

    def __init__(self, source: ManagedConfigSource):
        self.source = source

    def _read(self) -> dict[str, str]:
        # Values are passed through untouched; the password may contain spaces
        return {key: self.source.get(key) or "" for key in REQUIRED_KEYS}

    def validate(self) -> ConfigurationData:
        """Return the current configuration.

        Raises:
            ConfigurationMissingError: If any required value is empty or absent
        """
        values = self._read()
        missing = [key for key in REQUIRED_KEYS if not values[key]]
        if missing:
            raise ConfigurationMissingError(missing)

        return ConfigurationData(
            credential_download_url=values[CERT_DOWNLOAD_URL_KEY],
            trust_anchor_download_url=values[CA_CERT_DOWNLOAD_URL_KEY],
            bundle_password=values[P12_PASSWORD_KEY],
        )

    def status(self) -> ConfigurationStatus:
        values = self._read()
        return ConfigurationStatus(
            credential_download_url_set=bool(values[CERT_DOWNLOAD_URL_KEY]),
            trust_anchor_download_url_set=bool(values[CA_CERT_DOWNLOAD_URL_KEY]),
            bundle_password_set=bool(values[P12_PASSWORD_KEY]),
        )
