"""Shared fixtures: generated certificates, PKCS#12 bundles and a wired installer."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from cert_installer import (
    CertificateInstaller,
    DictConfigSource,
    InMemoryKeyValueStore,
    InMemoryTrustAdministration,
    RemoteFetcher,
)

CERT_URL = "https://mdm.example.com/client.p12"
CA_URL = "https://mdm.example.com/ca.pem"
PASSWORD = "test12345"


def make_name(**attributes: str) -> x509.Name:
    oids = {
        "CN": NameOID.COMMON_NAME,
        "O": NameOID.ORGANIZATION_NAME,
        "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
        "C": NameOID.COUNTRY_NAME,
    }
    return x509.Name([x509.NameAttribute(oids[k], v) for k, v in attributes.items()])


def make_certificate(
    subject: Optional[x509.Name] = None,
    serial_number: int = 0x1A2B3C,
    is_ca: bool = False,
) -> tuple[ec.EllipticCurvePrivateKey, x509.Certificate]:
    """Self-signed certificate and its key."""
    key = ec.generate_private_key(ec.SECP256R1())
    subject = subject if subject is not None else make_name(CN="Jane Doe", O="ExampleCorp", C="US")
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(serial_number)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return key, certificate


def make_p12(
    password: str = PASSWORD,
    subject: Optional[x509.Name] = None,
    serial_number: int = 0x1A2B3C,
    with_key: bool = True,
) -> bytes:
    key, certificate = make_certificate(subject, serial_number)
    return pkcs12.serialize_key_and_certificates(
        name=b"client",
        key=key if with_key else None,
        cert=certificate if with_key else None,
        cas=None if with_key else [certificate],
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode()),
    )


def make_ca_pem(common_name: str = "Example Root CA", serial_number: int = 0xCAFE) -> bytes:
    _, certificate = make_certificate(make_name(CN=common_name, O="ExampleCorp"), serial_number, is_ca=True)
    return certificate.public_bytes(serialization.Encoding.PEM)


class FakeServer:
    """Maps URLs to canned responses and records requests."""

    def __init__(self):
        self.responses: dict[str, httpx.Response] = {}
        self.requests: list[str] = []

    def serve(self, url: str, content: bytes = b"", status_code: int = 200) -> None:
        self.responses[url] = httpx.Response(status_code, content=content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.responses:
            return httpx.Response(404)
        return self.responses[url]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def config_source() -> DictConfigSource:
    return DictConfigSource(
        {
            "cert_download_url": CERT_URL,
            "ca_cert_download_url": CA_URL,
            "p12_password": PASSWORD,
        }
    )


@pytest.fixture
def trust_admin() -> InMemoryTrustAdministration:
    return InMemoryTrustAdministration()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def installer(
    server: FakeServer,
    config_source: DictConfigSource,
    trust_admin: InMemoryTrustAdministration,
    kv_store: InMemoryKeyValueStore,
) -> CertificateInstaller:
    return CertificateInstaller.create(
        config_source=config_source,
        trust_admin=trust_admin,
        store=kv_store,
        fetcher=RemoteFetcher(http_client=server.client()),
        clock=lambda: datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


@pytest.fixture
def p12_factory() -> Callable[..., bytes]:
    return make_p12
