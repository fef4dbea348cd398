"""Core data models for cert-installer."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

UNKNOWN_CN = "Unknown CN"
MASKED_PASSWORD = "********"


class ConfigurationData(BaseModel):
    """Validated managed configuration. All three values are non-empty."""

    credential_download_url: str = Field(description="PKCS#12 bundle URL")
    trust_anchor_download_url: str = Field(description="CA certificate URL")
    bundle_password: str = Field(repr=False, description="PKCS#12 password")

    model_config = {"frozen": True}

    def masked(self) -> dict[str, str]:
        """Display form with the password hidden."""
        return {
            "credential_download_url": self.credential_download_url,
            "trust_anchor_download_url": self.trust_anchor_download_url,
            "bundle_password": MASKED_PASSWORD,
        }


class ConfigurationStatus(BaseModel):
    """Which managed configuration values are currently set."""

    credential_download_url_set: bool
    trust_anchor_download_url_set: bool
    bundle_password_set: bool

    @property
    def complete(self) -> bool:
        return (
            self.credential_download_url_set
            and self.trust_anchor_download_url_set
            and self.bundle_password_set
        )


class CertificateFields(BaseModel):
    """Trackable fields derived from an X.509 certificate."""

    common_name: str
    subject_dn: str
    issuer_dn: str
    serial_number: str = Field(description="Uppercase hex, no prefix")
    valid_from: datetime
    valid_to: datetime


class CertificateRecord(CertificateFields):
    """Local claim that a key pair was installed under ``alias``."""

    alias: str
    installed_at: datetime

    @field_validator("alias")
    @classmethod
    def alias_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("alias must not be blank")
        return v

    def describe(self) -> str:
        return f"Alias: {self.alias}, CN: {self.common_name}, Serial: {self.serial_number}"


class TrustAnchorInfo(BaseModel):
    """One entry of a trust anchor listing.

    Entries that could not be parsed carry only ``error``.
    """

    common_name: Optional[str] = None
    serial_number: Optional[str] = None
    subject_dn: Optional[str] = None
    issuer_dn: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    error: Optional[str] = None

    @classmethod
    def from_fields(cls, fields: CertificateFields) -> "TrustAnchorInfo":
        return cls(**fields.model_dump())

    def describe(self) -> str:
        if self.error:
            return self.error
        return f"CN: {self.common_name}, Serial: {self.serial_number}"


class DelegationStatus(BaseModel):
    """Whether the installer can currently act."""

    has_delegation: bool
    has_configuration: bool

    @property
    def can_install(self) -> bool:
        return self.has_delegation and self.has_configuration

    @property
    def can_remove(self) -> bool:
        # Removal does not need managed configuration
        return self.has_delegation


class OperationResult(BaseModel):
    """Outcome of a public installer operation."""

    success: bool = Field(description="Whether the operation succeeded")
    value: Any = Field(default=None, description="Operation output on success")
    error: Optional[str] = Field(default=None, description="Cause if failed")
    error_kind: Optional[str] = Field(default=None, description="Error taxonomy tag")
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, value: Any = None, warnings: Optional[list[str]] = None) -> "OperationResult":
        return cls(success=True, value=value, warnings=warnings or [])

    @classmethod
    def fail(cls, error: str, kind: str) -> "OperationResult":
        return cls(success=False, error=error, error_kind=kind)

    def __bool__(self) -> bool:
        """Allow using OperationResult in boolean context."""
        return self.success
