"""Logging utilities for glacierctl.

Provides per-upload log context and an audit trail of remote changes.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
AUDIT_LOGGER_NAME = "glacierctl.audit"


def setup_logging(
    level: int = logging.INFO,
    *,
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging for glacierctl.

    Args:
        level: Base logging level.
        quiet: If True, only show errors.
        verbose: If True, show debug messages.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )

    # Request lines would repeat every part
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Log Context
# =============================================================================


class LogContext:
    """Logs the start and end of an upload with the parts it got through.

    ``record_part`` is fed once per part handled, so a failure is logged
    with how far the upload got.
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or logging.getLogger(__name__)
        self.context = context
        self.parts = 0
        self.parts_skipped = 0
        self.bytes_read = 0
        self.start_time: Optional[float] = None

    def record_part(self, part_bytes: int, *, skipped: bool = False) -> None:
        """Count one part read from the input."""
        self.parts += 1
        self.bytes_read += part_bytes
        if skipped:
            self.parts_skipped += 1

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time if self.start_time is not None else 0.0

    def __enter__(self) -> "LogContext":
        self.start_time = time.monotonic()
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        self.logger.info("Starting %s (%s)", self.operation, ctx_str)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type:
            self.logger.error(
                "%s failed after %.2fs with %d parts done (%d bytes): %s",
                self.operation,
                self.elapsed,
                self.parts,
                self.bytes_read,
                exc_val,
            )
        else:
            self.logger.info(
                "%s completed in %.2fs: %d parts, %d bytes, %d skipped",
                self.operation,
                self.elapsed,
                self.parts,
                self.bytes_read,
                self.parts_skipped,
            )


@contextmanager
def log_context(
    operation: str,
    logger: Optional[logging.Logger] = None,
    **context: Any,
) -> Generator[LogContext, None, None]:
    """Context manager form of ``LogContext``."""
    ctx = LogContext(operation, logger, **context)
    with ctx:
        yield ctx


# =============================================================================
# Audit Logger
# =============================================================================


class AuditLogger:
    """Logger for audit trail of archive operations."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def log_operation(
        self,
        operation: str,
        *,
        vault: Optional[str] = None,
        upload_id: Optional[str] = None,
        archive_id: Optional[str] = None,
        success: bool = True,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log an auditable operation.

        Args:
            operation: Name of the operation.
            vault: Target vault name.
            upload_id: Multipart upload identifier.
            archive_id: Archive identifier issued on completion.
            success: Whether operation succeeded.
            details: Additional details.
        """
        audit_record: dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "operation": operation,
            "success": success,
        }

        if vault:
            audit_record["vault"] = vault
        if upload_id:
            audit_record["upload_id"] = upload_id
        if archive_id:
            audit_record["archive_id"] = archive_id
        if details:
            audit_record["details"] = details

        level = logging.INFO if success else logging.WARNING
        self.logger.log(level, "AUDIT: %s", audit_record)


def get_audit_logger() -> AuditLogger:
    """Get the audit logger instance."""
    return AuditLogger()
