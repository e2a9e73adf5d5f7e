"""Input validation helpers for glacierctl.

Each validator returns the normalized value or raises a ValidationError
subclass with the offending field attached.
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

from glacierctl.core.exceptions import (
    InvalidPartSizeError,
    InvalidURLError,
    InvalidVaultNameError,
    PathValidationError,
    ValidationError,
)

# =============================================================================
# Constants
# =============================================================================

VAULT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]{1,255}$")
REGION_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d+$")
MAX_DESCRIPTION_LENGTH = 1024
STDIN_MARKER = "-"


# =============================================================================
# Remote Endpoint
# =============================================================================


def validate_endpoint_url(url: str) -> str:
    """Validate and normalize a service endpoint URL.

    Args:
        url: Endpoint URL (scheme defaults to https).

    Returns:
        URL without trailing slash.

    Raises:
        InvalidURLError: If the URL has no host or an unsupported scheme.
    """
    url = url.strip()
    if not url:
        raise InvalidURLError(url, "URL is empty")

    if "://" not in url:
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, f"unsupported scheme '{parsed.scheme}'")
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host")

    return url.rstrip("/")


def validate_region(region: str) -> str:
    """Validate an AWS-style region name such as ``eu-central-1``."""
    region = region.strip().lower()
    if not REGION_PATTERN.match(region):
        raise ValidationError(f"Invalid region: {region}", field="region", value=region)
    return region


# =============================================================================
# Archive Parameters
# =============================================================================


def validate_vault_name(vault: str | None) -> str:
    """Validate a vault name.

    Vault names are 1-255 characters of letters, digits, underscore,
    hyphen and period.
    """
    if not vault:
        raise InvalidVaultNameError("", "vault name is required")
    if not VAULT_NAME_PATTERN.match(vault):
        raise InvalidVaultNameError(
            vault, "use 1-255 characters from a-z, A-Z, 0-9, '_', '-', '.'"
        )
    return vault


def validate_part_size_mb(part_size_mb: int) -> int:
    """Validate a part size given in mebibytes.

    Only positivity is checked. Whether the service accepts the size is
    left to the service, which rejects the upload on initiation.
    """
    if isinstance(part_size_mb, bool) or not isinstance(part_size_mb, int):
        raise InvalidPartSizeError(part_size_mb, "must be a whole number of MiB")
    if part_size_mb <= 0:
        raise InvalidPartSizeError(part_size_mb)
    return part_size_mb


def validate_skip_parts(skip_parts: int | None) -> int:
    """Validate the resume threshold. ``None`` means no parts are skipped."""
    if skip_parts is None:
        return 0
    if skip_parts < 0:
        raise ValidationError(
            f"Invalid skip parts: {skip_parts} (must be >= 0)",
            field="skip_parts",
            value=skip_parts,
        )
    return skip_parts


def validate_description(description: str | None) -> str:
    """Validate an archive description.

    The service accepts up to 1024 printable ASCII characters.
    """
    if not description:
        return ""
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description too long ({len(description)} > {MAX_DESCRIPTION_LENGTH})",
            field="description",
        )
    if any(not (32 <= ord(ch) <= 126) for ch in description):
        raise ValidationError(
            "Description must contain printable ASCII characters only",
            field="description",
            value=description,
        )
    return description


def validate_timeout(timeout: int) -> int:
    """Validate a per-request timeout in seconds."""
    if timeout <= 0:
        raise ValidationError(
            f"Invalid timeout: {timeout} (must be > 0)",
            field="timeout",
            value=timeout,
        )
    return timeout


# =============================================================================
# Input Source
# =============================================================================


def validate_input_path(path: str) -> str:
    """Validate the upload input.

    Args:
        path: File path, or ``-`` for standard input.

    Returns:
        The path unchanged.

    Raises:
        PathValidationError: If the file is missing or is not a regular file.
    """
    if path == STDIN_MARKER:
        return path

    p = Path(path)
    if not p.exists():
        raise PathValidationError(path, "does not exist")
    if not p.is_file():
        raise PathValidationError(path, "not a regular file")
    return path
