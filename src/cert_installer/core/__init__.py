"""Core functionality for cert-installer."""

from .crypto import (
    CredentialBundle,
    common_name,
    common_name_from_dn,
    extract_fields,
    format_serial,
    load_certificate,
    parse_credential_bundle,
)
from .errors import (
    CertInstallerError,
    ConfigurationMissingError,
    FetchError,
    HttpStatusError,
    EmptyResponseError,
    NetworkError,
    CredentialParseError,
    BadFormatError,
    NoKeyEntryError,
    InstallRejectedError,
    RemovalRejectedError,
    PermissionDeniedError,
    RecordNotFoundError,
    InvalidAliasError,
    StorageError,
)
from .models import (
    UNKNOWN_CN,
    CertificateFields,
    CertificateRecord,
    ConfigurationData,
    ConfigurationStatus,
    DelegationStatus,
    OperationResult,
    TrustAnchorInfo,
)

__all__ = [
    # Crypto
    "CredentialBundle",
    "common_name",
    "common_name_from_dn",
    "extract_fields",
    "format_serial",
    "load_certificate",
    "parse_credential_bundle",
    # Errors
    "CertInstallerError",
    "ConfigurationMissingError",
    "FetchError",
    "HttpStatusError",
    "EmptyResponseError",
    "NetworkError",
    "CredentialParseError",
    "BadFormatError",
    "NoKeyEntryError",
    "InstallRejectedError",
    "RemovalRejectedError",
    "PermissionDeniedError",
    "RecordNotFoundError",
    "InvalidAliasError",
    "StorageError",
    # Models
    "UNKNOWN_CN",
    "CertificateFields",
    "CertificateRecord",
    "ConfigurationData",
    "ConfigurationStatus",
    "DelegationStatus",
    "OperationResult",
    "TrustAnchorInfo",
]
