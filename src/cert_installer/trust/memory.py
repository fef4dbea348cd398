"""In-memory trust store administration for tests and local runs."""

from typing import Sequence

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from ..core.errors import PermissionDeniedError
from .port import InstallFlags, TrustAdministrationPort


class InstalledKeyPair:
    """Key pair held by ``InMemoryTrustAdministration``."""

    def __init__(
        self,
        private_key: pkcs12.PKCS12PrivateKeyTypes,
        certificate_chain: list[x509.Certificate],
        flags: InstallFlags,
    ):
        self.private_key = private_key
        self.certificate_chain = certificate_chain
        self.flags = flags


class InMemoryTrustAdministration(TrustAdministrationPort):
    """Trust store kept in process memory.

    ``reject_installs``/``reject_removals`` make the store decline calls and
    ``delegated=False`` makes every privileged call raise
    ``PermissionDeniedError``.
    """

    def __init__(self, delegated: bool = True):
        self.delegated = delegated
        self.reject_installs = False
        self.reject_removals = False
        self.key_pairs: dict[str, InstalledKeyPair] = {}
        self.trust_anchors: list[bytes] = []
        self.calls: list[str] = []

    def has_delegation(self) -> bool:
        return self.delegated

    def _check_delegation(self) -> None:
        if not self.delegated:
            raise PermissionDeniedError(
                "Calling package has not been delegated certificate installation"
            )

    def install_key_pair(
        self,
        private_key: pkcs12.PKCS12PrivateKeyTypes,
        certificate_chain: Sequence[x509.Certificate],
        alias: str,
        flags: InstallFlags = InstallFlags.SET_USER_SELECTABLE,
    ) -> bool:
        self.calls.append(f"install_key_pair:{alias}")
        self._check_delegation()
        if self.reject_installs or not certificate_chain:
            return False
        self.key_pairs[alias] = InstalledKeyPair(private_key, list(certificate_chain), flags)
        return True

    def install_trust_anchor(self, certificate: bytes) -> bool:
        self.calls.append("install_trust_anchor")
        self._check_delegation()
        if self.reject_installs:
            return False
        if certificate not in self.trust_anchors:
            self.trust_anchors.append(certificate)
        return True

    def remove_key_pair(self, alias: str) -> bool:
        self.calls.append(f"remove_key_pair:{alias}")
        self._check_delegation()
        if self.reject_removals:
            return False
        # Removing an unknown alias succeeds, as the platform store does
        self.key_pairs.pop(alias, None)
        return True

    def list_trust_anchors(self) -> list[bytes]:
        self.calls.append("list_trust_anchors")
        self._check_delegation()
        return list(self.trust_anchors)
