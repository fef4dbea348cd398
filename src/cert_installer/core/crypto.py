"""PKCS#12 bundle parsing and X.509 metadata extraction."""

from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from .errors import BadFormatError, NoKeyEntryError
from .models import UNKNOWN_CN, CertificateFields

PEM_MARKER = b"-----BEGIN"


class CredentialBundle:
    """Private key and certificate chain decoded from a PKCS#12 archive."""

    def __init__(
        self,
        private_key: pkcs12.PKCS12PrivateKeyTypes,
        certificate: x509.Certificate,
        additional_certificates: Optional[list[x509.Certificate]] = None,
        friendly_name: Optional[str] = None,
    ):
        """Initialize bundle.

        Args:
            private_key: Key of the selected key entry
            certificate: Leaf certificate paired with the key
            additional_certificates: Remaining certificates of the chain
            friendly_name: Entry name stored in the archive, if any
        """
        self.private_key = private_key
        self.certificate = certificate
        self.additional_certificates = additional_certificates or []
        self.friendly_name = friendly_name

    @property
    def chain(self) -> list[x509.Certificate]:
        """Leaf first, followed by any bundled intermediates."""
        return [self.certificate, *self.additional_certificates]


def parse_credential_bundle(data: bytes, password: str) -> CredentialBundle:
    """Decode a password-protected PKCS#12 archive.

    The key entry used is the first one the archive yields.

    Args:
        data: Raw archive bytes
        password: Archive password

    Returns:
        CredentialBundle with the key and its certificate chain

    Raises:
        BadFormatError: If the password is wrong, the archive is corrupt, or
            the key has no matching certificate
        NoKeyEntryError: If the archive holds no private key entry
    """
    try:
        loaded = pkcs12.load_pkcs12(data, password.encode("utf-8") if password else None)
    except (ValueError, TypeError) as e:
        raise BadFormatError(
            f"Could not decode PKCS#12 archive (wrong password or corrupt file): {e}"
        ) from e

    if loaded.key is None:
        raise NoKeyEntryError(
            "Could not find a key entry in the provided keystore. Check alias and file contents."
        )

    if loaded.cert is None:
        raise BadFormatError(
            "PKCS#12 archive holds a private key but no certificate matching it"
        )

    friendly_name = None
    if loaded.cert.friendly_name:
        friendly_name = loaded.cert.friendly_name.decode("utf-8", errors="replace")

    return CredentialBundle(
        private_key=loaded.key,
        certificate=loaded.cert.certificate,
        additional_certificates=[c.certificate for c in loaded.additional_certs],
        friendly_name=friendly_name,
    )


def load_certificate(data: bytes) -> x509.Certificate:
    """Load a single X.509 certificate from PEM or DER bytes.

    Raises:
        BadFormatError: If the bytes are not a certificate
    """
    try:
        if PEM_MARKER in data:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except ValueError as e:
        raise BadFormatError(f"Could not parse certificate: {e}") from e


def common_name(name: x509.Name) -> str:
    """First CN of ``name`` in RFC 2253 rendering order.

    RFC 2253 renders RDNs last to first, so the sequence is walked in reverse.
    """
    for rdn in reversed(name.rdns):
        for attribute in rdn:
            if attribute.oid == NameOID.COMMON_NAME:
                value = attribute.value
                if isinstance(value, bytes):
                    value = value.decode("utf-8", errors="replace")
                return value
    return UNKNOWN_CN


def common_name_from_dn(dn: str) -> str:
    """Common name from an RFC 2253/4514 distinguished name string.

    Raises:
        BadFormatError: If ``dn`` is not a valid distinguished name
    """
    try:
        name = x509.Name.from_rfc4514_string(dn)
    except ValueError as e:
        raise BadFormatError(f"Invalid distinguished name {dn!r}: {e}") from e
    return common_name(name)


def format_serial(serial_number: int) -> str:
    return format(serial_number, "X")


def extract_fields(certificate: x509.Certificate) -> CertificateFields:
    """Derive trackable fields from a certificate."""
    return CertificateFields(
        common_name=common_name(certificate.subject),
        subject_dn=certificate.subject.rfc4514_string(),
        issuer_dn=certificate.issuer.rfc4514_string(),
        serial_number=format_serial(certificate.serial_number),
        valid_from=certificate.not_valid_before_utc,
        valid_to=certificate.not_valid_after_utc,
    )
