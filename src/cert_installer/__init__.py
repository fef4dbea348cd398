"""cert-installer - Delegated credential installation for managed devices."""

from .config import ConfigurationValidator, DictConfigSource, InstallerSettings, YamlConfigSource
from .core import (
    CertificateRecord,
    ConfigurationData,
    OperationResult,
    TrustAnchorInfo,
    extract_fields,
    load_certificate,
    parse_credential_bundle,
)
from .installer import CertificateInstaller
from .storage import (
    AliasSequencer,
    CertificateRecordStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from .transport import RemoteFetcher
from .trust import InMemoryTrustAdministration, InstallFlags, TrustAdministrationPort

__version__ = "0.1.0"

__all__ = [
    # Installer
    "CertificateInstaller",
    # Config
    "ConfigurationValidator",
    "DictConfigSource",
    "InstallerSettings",
    "YamlConfigSource",
    # Core
    "CertificateRecord",
    "ConfigurationData",
    "OperationResult",
    "TrustAnchorInfo",
    "extract_fields",
    "load_certificate",
    "parse_credential_bundle",
    # Storage
    "AliasSequencer",
    "CertificateRecordStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Transport
    "RemoteFetcher",
    # Trust
    "InMemoryTrustAdministration",
    "InstallFlags",
    "TrustAdministrationPort",
]
