"""Configuration for cert-installer."""

from .managed import (
    CA_CERT_DOWNLOAD_URL_KEY,
    CERT_DOWNLOAD_URL_KEY,
    P12_PASSWORD_KEY,
    ConfigurationValidator,
    DictConfigSource,
    ManagedConfigSource,
    YamlConfigSource,
)
from .settings import InstallerSettings

__all__ = [
    "CA_CERT_DOWNLOAD_URL_KEY",
    "CERT_DOWNLOAD_URL_KEY",
    "P12_PASSWORD_KEY",
    "ConfigurationValidator",
    "DictConfigSource",
    "ManagedConfigSource",
    "YamlConfigSource",
    "InstallerSettings",
]
