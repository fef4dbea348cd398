"""Installer runtime settings."""

import math
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from ..core.errors import StorageError

DEFAULT_TIMEOUT = 30.0


class InstallerSettings(BaseModel):
    """Settings that are not part of managed configuration."""

    connect_timeout: float = Field(default=DEFAULT_TIMEOUT, description="Seconds")
    read_timeout: float = Field(default=DEFAULT_TIMEOUT, description="Seconds")
    state_path: Path = Field(
        default=Path("cert-installer-state"),
        description="Directory holding the durable counter and record collection",
    )
    managed_config_path: Path | None = Field(
        default=None, description="YAML file of managed restrictions"
    )

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def timeout_finite(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("timeouts must be positive and finite")
        return v

    @property
    def state_file(self) -> Path:
        return self.state_path / "state.json"

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "InstallerSettings":
        """Load settings from a YAML file.

        Raises:
            StorageError: If the file cannot be read or parsed
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise StorageError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Failed to load settings: {e}") from e

        return cls.model_validate(data)
