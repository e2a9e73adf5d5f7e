"""Configuration management for glacierctl.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from glacierctl.core.exceptions import ConfigurationError, ProfileNotFoundError, ValidationError
from glacierctl.core.validation import validate_timeout

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "glacierctl"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_REGION = "us-east-1"
DEFAULT_ACCOUNT_ID = "-"
DEFAULT_PART_SIZE_MB = 1
DEFAULT_TIMEOUT = 300

# Environment variable names
ENV_REGION = "GLACIER_REGION"
ENV_AWS_REGION = "AWS_DEFAULT_REGION"
ENV_ENDPOINT_URL = "GLACIER_ENDPOINT_URL"
ENV_VAULT = "GLACIER_VAULT"
ENV_PROFILE = "GLACIER_PROFILE"
ENV_TIMEOUT = "GLACIER_TIMEOUT"
ENV_VERIFY_SSL = "GLACIER_VERIFY_SSL"


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Configuration profile for one account/region pair."""

    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    account_id: str = DEFAULT_ACCOUNT_ID
    default_vault: Optional[str] = None
    part_size_mb: int = DEFAULT_PART_SIZE_MB
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    @property
    def url(self) -> str:
        """Service endpoint for this profile."""
        return self.endpoint_url or f"https://glacier.{self.region}.amazonaws.com"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "region": self.region,
            "endpoint_url": self.endpoint_url,
            "account_id": self.account_id,
            "default_vault": self.default_vault,
            "part_size_mb": self.part_size_mb,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            region=data.get("region", DEFAULT_REGION),
            endpoint_url=data.get("endpoint_url"),
            account_id=str(data.get("account_id", DEFAULT_ACCOUNT_ID)),
            default_vault=data.get("default_vault"),
            part_size_mb=int(data.get("part_size_mb", DEFAULT_PART_SIZE_MB)),
            timeout=int(data.get("timeout", DEFAULT_TIMEOUT)),
            verify_ssl=data.get("verify_ssl", True),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
                raise ConfigurationError(f"Failed to load config: {e}") from e

        if profile := os.getenv(ENV_PROFILE):
            config.default_profile = profile

        # Environment variable overrides apply on top of the active profile
        overrides: dict[str, Any] = {}
        if region := os.getenv(ENV_REGION) or os.getenv(ENV_AWS_REGION):
            overrides["region"] = region
        if endpoint := os.getenv(ENV_ENDPOINT_URL):
            overrides["endpoint_url"] = endpoint
        if vault := os.getenv(ENV_VAULT):
            overrides["default_vault"] = vault
        if timeout := os.getenv(ENV_TIMEOUT):
            try:
                overrides["timeout"] = validate_timeout(int(timeout))
            except (ValueError, ValidationError) as e:
                raise ConfigurationError(
                    f"{ENV_TIMEOUT} must be a positive integer", field="timeout", value=timeout
                ) from e
        if verify := os.getenv(ENV_VERIFY_SSL):
            overrides["verify_ssl"] = verify.lower() in ("true", "1", "yes")

        if overrides:
            base = config.profiles.get(config.default_profile, Profile())
            data = base.to_dict()
            data.update(overrides)
            config.profiles[config.default_profile] = Profile.from_dict(data)

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file.

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(self, name: str, **settings: Any) -> Profile:
        """Add or update a profile.

        Args:
            name: Profile name.
            **settings: Profile fields (region, endpoint_url, default_vault, ...).

        Returns:
            Created profile.
        """
        profile = Profile(**settings)
        self.profiles[name] = profile
        return profile

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name
