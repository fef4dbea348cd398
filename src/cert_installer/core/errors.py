"""Exception hierarchy for cert-installer.

Each error carries a ``kind`` tag. Public installer operations never raise
these; they catch them and report ``kind`` plus the message in an
``OperationResult``.
"""


class CertInstallerError(Exception):
    """Base exception for all cert-installer errors."""

    kind = "Error"


# Configuration errors
class ConfigurationMissingError(CertInstallerError):
    """One or more required managed configuration values are absent."""

    kind = "ConfigMissing"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required configuration: " + ", ".join(self.missing)
        )


# Fetch errors
class FetchError(CertInstallerError):
    """Base exception for remote download failures."""

    kind = "FetchError"


class HttpStatusError(FetchError):
    """Server answered with a non-2xx status."""

    def __init__(self, status: int, url: str):
        self.status = status
        self.url = url
        super().__init__(f"Download failed with HTTP {status} from {url}")


class EmptyResponseError(FetchError):
    """Server answered with an empty body."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Downloaded file from {url} is empty")


class NetworkError(FetchError):
    """Transport-level failure (DNS, connect, TLS, timeout)."""

    pass


# Parse errors
class CredentialParseError(CertInstallerError):
    """Base exception for credential material that cannot be decoded."""

    kind = "ParseError"


class BadFormatError(CredentialParseError):
    """Wrong password or corrupt archive/certificate."""

    pass


class NoKeyEntryError(CredentialParseError):
    """Archive decoded but holds no private key entry."""

    pass


# Trust store errors
class InstallRejectedError(CertInstallerError):
    """The privileged trust store declined an install."""

    kind = "InstallRejected"


class RemovalRejectedError(CertInstallerError):
    """The privileged trust store declined a removal."""

    kind = "RemovalRejected"


class PermissionDeniedError(CertInstallerError):
    """Delegated certificate-install capability has not been granted."""

    kind = "PermissionDenied"


# Record errors
class RecordNotFoundError(CertInstallerError):
    """No locally recorded key pair matches the alias."""

    kind = "RecordNotFound"

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"No installed key pair recorded under alias '{alias}'")


class InvalidAliasError(CertInstallerError):
    """Alias argument is blank."""

    kind = "InvalidAlias"


class StorageError(CertInstallerError):
    """Durable local state could not be read or written."""

    kind = "StorageError"
