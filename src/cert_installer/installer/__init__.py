"""Installation orchestration."""

from .orchestrator import TRUST_ANCHOR_PARSE_ERROR, CertificateInstaller

__all__ = ["CertificateInstaller", "TRUST_ANCHOR_PARSE_ERROR"]
