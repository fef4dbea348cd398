#!/usr/bin/env python3
"""FastAPI Integration Example - HTTP admin surface for the installer.

Run with:
    uvicorn examples.fastapi_example:app

Managed configuration is read from ``restrictions.yaml`` and state is kept in
``./cert-installer-state``.
"""

from cert_installer import CertificateInstaller, InMemoryTrustAdministration, InstallerSettings
from cert_installer.integrations.fastapi import create_app

settings = InstallerSettings(managed_config_path="restrictions.yaml")

# A real deployment passes the device's privileged trust store adapter here
installer = CertificateInstaller.from_settings(settings, InMemoryTrustAdministration())

app = create_app(installer)
