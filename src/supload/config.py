"""Runtime configuration for supload."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from supload.config_manager import default_config_dir
from supload.transport import DEFAULT_AUTH_URL


class AuthConfig(BaseModel):
    """Credentials and endpoint for the auth handshake."""

    model_config = ConfigDict(validate_assignment=True)

    auth_url: str = Field(DEFAULT_AUTH_URL, description="Authentication endpoint")
    user: Optional[str] = Field(None, description="Storage user name")
    key: Optional[str] = Field(None, description="Storage user key", repr=False)

    @field_validator("auth_url")
    @classmethod
    def validate_auth_url(cls, v: str) -> str:
        if not v.startswith("http://") and not v.startswith("https://"):
            raise ValueError("Auth URL must start with http:// or https://")
        return v


class TransferConfig(BaseModel):
    """Per-run transfer behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    digest_check: bool = Field(True, description="Skip unchanged files and verify ETags")
    quiet: bool = Field(False, description="Only print errors")
    recursive: bool = Field(False, description="Upload a directory tree")
    timeout: float = Field(60.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    chunk_size: int = Field(8192, ge=1, description="Read size for MD5 calculation")


class Config(BaseModel):
    """Top-level configuration."""

    auth: AuthConfig = Field(default_factory=AuthConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)
    verbose: bool = False
    config_dir: Path = Field(default_factory=default_config_dir)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration from SUPLOAD_* environment variables."""
        config = cls()

        if os.getenv("SUPLOAD_AUTH_URL"):
            config.auth.auth_url = os.environ["SUPLOAD_AUTH_URL"]
        config.auth.user = os.getenv("SUPLOAD_USER") or config.auth.user
        config.auth.key = os.getenv("SUPLOAD_KEY") or config.auth.key

        if os.getenv("SUPLOAD_TIMEOUT"):
            config.transfer.timeout = float(os.environ["SUPLOAD_TIMEOUT"])
        if os.getenv("SUPLOAD_VERBOSE"):
            config.verbose = _env_flag("SUPLOAD_VERBOSE")

        return config

    def missing_credentials(self) -> list:
        """Names of required credentials that are not set."""
        missing = []
        if not self.auth.user:
            missing.append("user")
        if not self.auth.key:
            missing.append("key")
        return missing


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")
