"""Install, remove and list credentials on behalf of the managed device."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..config.managed import ConfigurationValidator, ManagedConfigSource, YamlConfigSource
from ..config.settings import InstallerSettings
from ..core.crypto import extract_fields, load_certificate, parse_credential_bundle
from ..core.errors import (
    CertInstallerError,
    InstallRejectedError,
    InvalidAliasError,
    PermissionDeniedError,
    RecordNotFoundError,
    RemovalRejectedError,
)
from ..core.models import (
    CertificateRecord,
    DelegationStatus,
    OperationResult,
    TrustAnchorInfo,
)
from ..storage.kv import JsonFileKeyValueStore, KeyValueStore
from ..storage.records import CertificateRecordStore
from ..storage.sequence import AliasSequencer
from ..transport.fetcher import RemoteFetcher
from ..trust.port import InstallFlags, TrustAdministrationPort

logger = logging.getLogger(__name__)

TRUST_ANCHOR_PARSE_ERROR = "Error parsing certificate."


class CertificateInstaller:
    """Composes fetch, parse, privileged install and local bookkeeping.

    Every public operation blocks on network and file I/O and returns an
    ``OperationResult``; none of them raise.
    """

    def __init__(
        self,
        config_validator: ConfigurationValidator,
        trust_admin: TrustAdministrationPort,
        record_store: CertificateRecordStore,
        alias_sequencer: AliasSequencer,
        fetcher: Optional[RemoteFetcher] = None,
        install_flags: InstallFlags = InstallFlags.SET_USER_SELECTABLE,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """Initialize installer.

        Args:
            config_validator: Source of the managed configuration
            trust_admin: Privileged trust store capability
            record_store: Local record of installed key pairs
            alias_sequencer: Alias generator sharing durable state
            fetcher: Downloader (default: RemoteFetcher with 30s timeouts)
            install_flags: Flags passed with every key pair install
            clock: Returns the current time for ``installed_at``
        """
        self.config_validator = config_validator
        self.trust_admin = trust_admin
        self.record_store = record_store
        self.alias_sequencer = alias_sequencer
        self.fetcher = fetcher or RemoteFetcher()
        self.install_flags = install_flags
        self._clock = clock

    @classmethod
    def create(
        cls,
        config_source: ManagedConfigSource,
        trust_admin: TrustAdministrationPort,
        store: KeyValueStore,
        fetcher: Optional[RemoteFetcher] = None,
        **kwargs: Any,
    ) -> "CertificateInstaller":
        """Wire an installer whose counter and records share ``store``."""
        return cls(
            config_validator=ConfigurationValidator(config_source),
            trust_admin=trust_admin,
            record_store=CertificateRecordStore(store),
            alias_sequencer=AliasSequencer(store),
            fetcher=fetcher,
            **kwargs,
        )

    @classmethod
    def from_settings(
        cls,
        settings: InstallerSettings,
        trust_admin: TrustAdministrationPort,
        config_source: Optional[ManagedConfigSource] = None,
        fetcher: Optional[RemoteFetcher] = None,
    ) -> "CertificateInstaller":
        """Wire an installer with file-backed state from ``settings``.

        ``fetcher`` overrides the one built from the configured timeouts.
        """
        if config_source is None:
            if settings.managed_config_path is None:
                raise ValueError("config_source or settings.managed_config_path is required")
            config_source = YamlConfigSource(settings.managed_config_path)

        return cls.create(
            config_source=config_source,
            trust_admin=trust_admin,
            store=JsonFileKeyValueStore(settings.state_file),
            fetcher=fetcher
            or RemoteFetcher(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
            ),
        )

    # Public operations

    def install(self) -> OperationResult:
        """Download the PKCS#12 bundle and install its key pair.

        Returns:
            OperationResult whose value is the new alias
        """
        return self._run("install", self._install)

    def install_ca_cert(self) -> OperationResult:
        """Download and install the CA certificate.

        Returns:
            OperationResult whose value is the certificate's common name
        """
        return self._run("install_ca_cert", self._install_ca_cert)

    def remove_key_pair(self, alias: str) -> OperationResult:
        """Remove a key pair from the trust store and from local records.

        Returns:
            OperationResult whose value is a confirmation message
        """
        return self._run("remove_key_pair", lambda: self._remove_key_pair(alias))

    def get_key_pair(self, alias: str) -> OperationResult:
        """Look up the local record for ``alias``."""

        def lookup() -> CertificateRecord:
            record = self.record_store.find(alias)
            if record is None:
                raise RecordNotFoundError(alias)
            return record

        return self._run("get_key_pair", lookup)

    def list_key_pairs(self) -> OperationResult:
        """Installed key pairs, read from local records only."""

        def listing() -> OperationResult:
            loaded = self.record_store.load()
            warnings = []
            if loaded.skipped:
                warnings.append(f"Skipped {loaded.skipped} unreadable stored record(s)")
            return OperationResult.ok(loaded.records, warnings=warnings)

        return self._run("list_key_pairs", listing)

    def list_trust_anchors(self) -> OperationResult:
        """Installed CA certificates, queried live from the trust store.

        Entries that fail to parse are reported with ``error`` set instead of
        failing the whole listing.
        """
        return self._run("list_trust_anchors", self._list_trust_anchors)

    def describe_key_pairs(self) -> OperationResult:
        result = self.list_key_pairs()
        if not result:
            return result
        return OperationResult.ok(
            [record.describe() for record in result.value], warnings=result.warnings
        )

    def describe_trust_anchors(self) -> OperationResult:
        result = self.list_trust_anchors()
        if not result:
            return result
        return OperationResult.ok([anchor.describe() for anchor in result.value])

    def certificate_counts(self) -> tuple[int, int]:
        """(key pairs, trust anchors); a failed listing counts as zero."""
        key_pairs = self.list_key_pairs()
        anchors = self.list_trust_anchors()
        return (
            len(key_pairs.value) if key_pairs else 0,
            len(anchors.value) if anchors else 0,
        )

    def configuration_status(self) -> OperationResult:
        """Which managed configuration values are set."""
        return self._run("configuration_status", self.config_validator.status)

    def delegation_status(self) -> DelegationStatus:
        try:
            has_delegation = self.trust_admin.has_delegation()
        except CertInstallerError as e:
            logger.warning("Could not determine delegation status: %s", e)
            has_delegation = False

        try:
            has_configuration = self.config_validator.status().complete
        except CertInstallerError as e:
            logger.warning("Could not read managed configuration: %s", e)
            has_configuration = False

        return DelegationStatus(
            has_delegation=has_delegation, has_configuration=has_configuration
        )

    # Internals

    def _run(self, operation: str, func: Callable[[], Any]) -> OperationResult:
        try:
            value = func()
        except CertInstallerError as e:
            logger.warning("%s failed (%s): %s", operation, e.kind, e)
            return OperationResult.fail(str(e), e.kind)
        except Exception as e:
            logger.error("%s failed unexpectedly: %s", operation, e, exc_info=True)
            return OperationResult.fail(str(e) or type(e).__name__, "Unexpected")

        if isinstance(value, OperationResult):
            return value
        return OperationResult.ok(value)

    def _require_delegation(self) -> None:
        if not self.trust_admin.has_delegation():
            raise PermissionDeniedError(
                "Certificate installation has not been delegated to this application"
            )

    def _install(self) -> str:
        config = self.config_validator.validate()
        self._require_delegation()

        data = self.fetcher.fetch(config.credential_download_url)
        bundle = parse_credential_bundle(data, config.bundle_password)
        fields = extract_fields(bundle.certificate)

        # Consumed only once the bundle parsed; a rejected install still burns it
        alias = self.alias_sequencer.next_alias()

        installed = self.trust_admin.install_key_pair(
            bundle.private_key, bundle.chain, alias, self.install_flags
        )
        if not installed:
            raise InstallRejectedError(
                "Trust store declined the key pair. This may be due to key/cert "
                "format or permission issues."
            )

        record = CertificateRecord(
            alias=alias, installed_at=self._clock(), **fields.model_dump()
        )
        self.record_store.append(record)

        logger.info(
            "Installed key pair %s (CN=%s, serial %s)",
            alias,
            fields.common_name,
            fields.serial_number,
        )
        return alias

    def _install_ca_cert(self) -> str:
        config = self.config_validator.validate()
        self._require_delegation()

        data = self.fetcher.fetch(config.trust_anchor_download_url)
        fields = extract_fields(load_certificate(data))

        if not self.trust_admin.install_trust_anchor(data):
            raise InstallRejectedError("Trust store declined the CA certificate")

        logger.info(
            "Installed CA certificate CN=%s, serial %s",
            fields.common_name,
            fields.serial_number,
        )
        return fields.common_name

    def _remove_key_pair(self, alias: str) -> str:
        alias = (alias or "").strip()
        if not alias:
            raise InvalidAliasError("Alias must not be blank")
        self._require_delegation()

        if not self.trust_admin.remove_key_pair(alias):
            raise RemovalRejectedError(f"Trust store declined to remove key pair '{alias}'")

        removed = self.record_store.remove_by_alias(alias)
        if not removed:
            logger.warning("Removed %s from the trust store but it had no local record", alias)
            return f"Key pair '{alias}' removed from the trust store (no local record found)"

        logger.info("Removed key pair %s", alias)
        return f"Key pair '{alias}' removed"

    def _list_trust_anchors(self) -> list[TrustAnchorInfo]:
        anchors = []
        for encoded in self.trust_admin.list_trust_anchors():
            try:
                anchors.append(TrustAnchorInfo.from_fields(extract_fields(load_certificate(encoded))))
            except Exception as e:
                logger.error("Error parsing CA certificate: %s", e, exc_info=True)
                anchors.append(TrustAnchorInfo(error=TRUST_ANCHOR_PARSE_ERROR))
        return anchors
