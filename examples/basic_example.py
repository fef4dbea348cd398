#!/usr/bin/env python3
"""
Basic example demonstrating the cert-installer workflow:
1. Managed configuration points at a PKCS#12 bundle and a CA certificate
2. The installer downloads and installs both
3. Installed key pairs and CA certificates are listed, then a key pair is removed

Downloads are served from memory and the trust store is the in-memory fake, so
the example runs without a network or a managed device.
"""

import logging
from datetime import datetime, timedelta, timezone

import httpx
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

PASSWORD = "test12345"


def self_signed(common_name: str, is_ca: bool):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "ExampleCorp"),
        ]
    )
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return key, cert


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("=== cert-installer - Basic Example ===\n")

    # ============================================================================
    # STEP 1: Publish credential material
    # ============================================================================
    print("1. Publishing PKCS#12 bundle and CA certificate...")
    client_key, client_cert = self_signed("device-42.example.com", is_ca=False)
    _, ca_cert = self_signed("Example Root CA", is_ca=True)
    files = {
        "https://mdm.example.com/client.p12": pkcs12.serialize_key_and_certificates(
            b"client",
            client_key,
            client_cert,
            None,
            serialization.BestAvailableEncryption(PASSWORD.encode()),
        ),
        "https://mdm.example.com/ca.pem": ca_cert.public_bytes(serialization.Encoding.PEM),
    }

    def serve(request: httpx.Request) -> httpx.Response:
        content = files.get(str(request.url))
        return httpx.Response(200, content=content) if content else httpx.Response(404)

    print(f"   ✓ {len(files)} files available\n")

    # ============================================================================
    # STEP 2: Wire the installer
    # ============================================================================
    print("2. Wiring installer...")
    trust_admin = InMemoryTrustAdministration()
    installer = CertificateInstaller.create(
        config_source=DictConfigSource(
            {
                "cert_download_url": "https://mdm.example.com/client.p12",
                "ca_cert_download_url": "https://mdm.example.com/ca.pem",
                "p12_password": PASSWORD,
            }
        ),
        trust_admin=trust_admin,
        store=InMemoryKeyValueStore(),
        fetcher=RemoteFetcher(http_client=httpx.Client(transport=httpx.MockTransport(serve))),
    )
    status = installer.delegation_status()
    print(f"   ✓ Delegation: {status.has_delegation}, configuration: {status.has_configuration}\n")

    # ============================================================================
    # STEP 3: Install
    # ============================================================================
    print("3. Installing key pair and CA certificate...")
    result = installer.install()
    print(f"   ✓ Key pair installed as alias '{result.value}'")
    result = installer.install_ca_cert()
    print(f"   ✓ CA certificate installed, CN: '{result.value}'\n")

    # ============================================================================
    # STEP 4: List
    # ============================================================================
    print("4. Listing installed credentials...")
    for line in installer.describe_key_pairs().value:
        print(f"   🔑 {line}")
    for line in installer.describe_trust_anchors().value:
        print(f"   🏛️ {line}")
    print()

    # ============================================================================
    # STEP 5: Remove
    # ============================================================================
    print("5. Removing key pair...")
    result = installer.remove_key_pair("cert1")
    print(f"   ✓ {result.value}")
    print(f"   ✓ Remaining counts: {installer.certificate_counts()}\n")

    print("=== Example completed successfully! ===")


if __name__ == "__main__":
    main()
