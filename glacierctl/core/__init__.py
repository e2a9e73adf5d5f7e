"""Core modules for glacierctl."""

from glacierctl.core.auth import Credentials, SigV4Auth
from glacierctl.core.client import GlacierClient
from glacierctl.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile
from glacierctl.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    GlacierCtlError,
    NetworkError,
    OperationError,
    FinalizeError,
    PartUploadError,
    RemoteRejectedError,
    ServerUnreachableError,
    SourceReadError,
    UploadError,
    ValidationError,
)
from glacierctl.core.logging import LogContext, get_audit_logger, setup_logging
from glacierctl.core.output import (
    OutputFormat,
    print_error,
    print_output,
    print_success,
    print_upload_summary,
    print_warning,
)
from glacierctl.core.validation import (
    validate_description,
    validate_endpoint_url,
    validate_input_path,
    validate_part_size_mb,
    validate_region,
    validate_skip_parts,
    validate_timeout,
    validate_vault_name,
)

__all__ = [
    # Exceptions
    "GlacierCtlError",
    "AuthenticationError",
    "ConfigurationError",
    "ConnectionError",
    "NetworkError",
    "ServerUnreachableError",
    "RemoteRejectedError",
    "ValidationError",
    "OperationError",
    "UploadError",
    "SourceReadError",
    "PartUploadError",
    "FinalizeError",
    # Validation
    "validate_endpoint_url",
    "validate_region",
    "validate_vault_name",
    "validate_part_size_mb",
    "validate_skip_parts",
    "validate_description",
    "validate_timeout",
    "validate_input_path",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Client
    "GlacierClient",
    # Auth
    "Credentials",
    "SigV4Auth",
    # Output
    "OutputFormat",
    "print_output",
    "print_upload_summary",
    "print_error",
    "print_warning",
    "print_success",
    # Logging
    "get_audit_logger",
    "setup_logging",
    "LogContext",
]
