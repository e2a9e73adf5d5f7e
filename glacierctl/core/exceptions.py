"""Exception hierarchy for glacierctl.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class GlacierCtlError(Exception):
    """Base exception for all glacierctl errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GlacierCtlError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(GlacierCtlError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class InvalidVaultNameError(ValidationError):
    """Vault name does not follow the service naming rules."""

    def __init__(self, vault: str, reason: str = ""):
        msg = f"Invalid vault name: {vault}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="vault", value=vault)
        self.vault = vault
        self.reason = reason


class InvalidPartSizeError(ValidationError):
    """Part size is not a positive whole number of bytes."""

    def __init__(self, part_size: Any, reason: str = "must be positive"):
        super().__init__(
            f"Invalid part size: {part_size} ({reason})",
            field="part_size",
            value=part_size,
        )
        self.part_size = part_size


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Connection Errors
# =============================================================================


class ConnectionError(GlacierCtlError):
    """Base class for connection-related errors."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


class NetworkError(ConnectionError):
    """Network-level error (DNS, TCP, TLS, timeouts)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, url)
        self.cause = cause


class ServerUnreachableError(ConnectionError):
    """Server is not reachable."""

    def __init__(self, url: str):
        super().__init__(f"Server unreachable: {url}", url)


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthenticationError(GlacierCtlError):
    """Credentials are missing or were refused."""

    def __init__(self, url: str | None = None, reason: str = ""):
        msg = "Authentication failed"
        if url:
            msg = f"{msg} for {url}"
        if reason:
            msg = f"{msg}: {reason}"
        details = {"url": url} if url else {}
        super().__init__(msg, details)
        self.url = url
        self.reason = reason


# =============================================================================
# Remote Errors
# =============================================================================


class RemoteRejectedError(GlacierCtlError):
    """The archive service refused a call.

    Checksum mismatches, range conflicts, unknown vaults and invalid part
    sizes all arrive as this error; ``code`` carries the service's error
    code (e.g. ``InvalidParameterValueException``).
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        details: dict[str, Any] = {"operation": operation}
        if status_code is not None:
            details["status_code"] = status_code
        if code:
            details["code"] = code
        super().__init__(f"{operation} rejected: {message}", details)
        self.operation = operation
        self.reason = message
        self.status_code = status_code
        self.code = code


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(GlacierCtlError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class UploadError(OperationError):
    """Error during upload."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        full_details = details or {}
        if file_path:
            full_details["file"] = file_path
        super().__init__("upload", message, full_details)
        self.file_path = file_path


class SourceReadError(OperationError):
    """Reading the input stream failed."""

    def __init__(self, source: str, reason: str = ""):
        msg = f"Failed to read from {source}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__("read", msg, {"source": source})
        self.source = source
        self.reason = reason


class PartUploadError(UploadError):
    """Upload aborted at a specific part.

    Carries enough context to re-run the upload with ``--skip-parts``.
    """

    def __init__(
        self,
        part_index: int,
        cause: Exception,
        upload_id: str | None = None,
        phase: str = "upload_part",
    ):
        details: dict[str, Any] = {"part": part_index, "phase": phase}
        if upload_id:
            details["upload_id"] = upload_id
        super().__init__(f"Upload failed at part {part_index}: {cause}", details=details)
        self.part_index = part_index
        self.cause = cause
        self.upload_id = upload_id
        self.phase = phase

    @property
    def resume_hint(self) -> str:
        """Command-line flag that skips the parts already accepted."""
        return f"--skip-parts {self.part_index}"


class FinalizeError(UploadError):
    """Every part was sent but completing the upload failed.

    Skipping parts cannot help here: a re-run opens a new upload, so the
    whole input has to be sent again.
    """

    def __init__(self, upload_id: str, parts_sent: int, cause: Exception):
        super().__init__(
            f"Completing upload {upload_id} failed after all {parts_sent} parts were sent: {cause}",
            details={"upload_id": upload_id, "phase": "finalizing"},
        )
        self.upload_id = upload_id
        self.parts_sent = parts_sent
        self.cause = cause
