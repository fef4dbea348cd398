"""Boundary to the privileged trust store administration capability."""

import enum
from abc import ABC, abstractmethod
from typing import Sequence

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12


class InstallFlags(enum.IntFlag):
    """Options for ``install_key_pair``."""

    NONE = 0
    REQUEST_CREDENTIALS_ACCESS = 1
    SET_USER_SELECTABLE = 2


class TrustAdministrationPort(ABC):
    """Privileged install/remove/list operations on the device trust store.

    The delegated capability is ambient: no caller identity is passed.
    Implementations return ``False`` when the store declines an operation and
    raise ``PermissionDeniedError`` when the capability is not granted.
    """

    @abstractmethod
    def has_delegation(self) -> bool:
        """Whether the certificate-install capability is currently granted."""

    @abstractmethod
    def install_key_pair(
        self,
        private_key: pkcs12.PKCS12PrivateKeyTypes,
        certificate_chain: Sequence[x509.Certificate],
        alias: str,
        flags: InstallFlags = InstallFlags.SET_USER_SELECTABLE,
    ) -> bool: ...

    @abstractmethod
    def install_trust_anchor(self, certificate: bytes) -> bool:
        """Install a CA certificate given as DER or PEM bytes."""

    @abstractmethod
    def remove_key_pair(self, alias: str) -> bool: ...

    @abstractmethod
    def list_trust_anchors(self) -> list[bytes]:
        """Encoded certificates of all installed CA certificates."""
