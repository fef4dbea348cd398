"""Privileged trust store administration."""

from .memory import InMemoryTrustAdministration, InstalledKeyPair
from .port import InstallFlags, TrustAdministrationPort

__all__ = [
    "TrustAdministrationPort",
    "InstallFlags",
    "InMemoryTrustAdministration",
    "InstalledKeyPair",
]
