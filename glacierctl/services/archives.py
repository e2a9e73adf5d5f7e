"""Archive service for vault upload operations.

Wires an input source, the remote client and the part scheduler together
and reports the result as an ``UploadSummary``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from glacierctl.core.exceptions import (
    FinalizeError,
    PartUploadError,
    SourceReadError,
    UploadError,
)
from glacierctl.core.logging import get_audit_logger, log_context
from glacierctl.core.validation import (
    validate_description,
    validate_input_path,
    validate_part_size_mb,
    validate_skip_parts,
    validate_vault_name,
)
from glacierctl.models.archive import MultipartUpload
from glacierctl.models.progress import OperationPhase, UploadProgress, UploadSummary
from glacierctl.uploaders.constants import DEFAULT_PART_SIZE_MB, MEGABYTE
from glacierctl.uploaders.multipart import PartUploadScheduler
from glacierctl.uploaders.sources import open_source
from glacierctl.uploaders.treehash import compute_tree_hash

from .base import BaseService

logger = logging.getLogger(__name__)


class ArchiveService(BaseService):
    """Service for archive uploads and multipart upload housekeeping."""

    def upload(
        self,
        source_path: str,
        vault: str,
        part_size_mb: int = DEFAULT_PART_SIZE_MB,
        description: str = "",
        skip_parts: int | None = None,
        dry_run: bool = False,
        progress_callback: Callable[[UploadProgress], None] | None = None,
    ) -> UploadSummary:
        """Upload a file, or stdin for ``-``, as one archive.

        Args:
            source_path: Input file path or ``-``.
            vault: Target vault name.
            part_size_mb: Part size in MiB.
            description: Archive description.
            skip_parts: Do not send parts with index below this value.
                Skipped parts are still read and hashed.
            dry_run: Read and hash only; make no remote calls.
            progress_callback: Called for every progress event.

        Returns:
            UploadSummary for the completed archive.

        Raises:
            ValidationError: If an argument is invalid.
            PartUploadError: If a part could not be read or sent.
            FinalizeError: If every part was sent but completion failed.
        """
        vault = validate_vault_name(vault)
        part_size_mb = validate_part_size_mb(part_size_mb)
        skip = validate_skip_parts(skip_parts)
        description = validate_description(description)
        validate_input_path(source_path)

        client = None if dry_run else self._require_client()
        audit = get_audit_logger()
        start_time = time.time()

        if progress_callback:
            progress_callback(
                UploadProgress(phase=OperationPhase.PREPARING, message="Preparing upload")
            )

        with log_context(
            "archive upload",
            logger,
            vault=vault,
            source=source_path,
            part_size_mb=part_size_mb,
            skip_parts=skip,
        ) as log_ctx:

            def on_progress(p: UploadProgress) -> None:
                if p.is_part:
                    log_ctx.record_part(p.part_bytes, skipped=p.skipped)
                if progress_callback:
                    progress_callback(p)

            with open_source(source_path) as source:
                scheduler = PartUploadScheduler(
                    client,
                    source,
                    vault,
                    part_size_mb * MEGABYTE,
                    description=description,
                    skip_parts=skip,
                    dry_run=dry_run,
                    progress_callback=on_progress,
                )
                try:
                    confirmation = scheduler.run()
                except PartUploadError as e:
                    audit.log_operation(
                        "archive_upload",
                        vault=vault,
                        upload_id=e.upload_id,
                        success=False,
                        details={"part": e.part_index, "error": str(e.cause)},
                    )
                    raise
                except FinalizeError as e:
                    audit.log_operation(
                        "archive_upload",
                        vault=vault,
                        upload_id=e.upload_id,
                        success=False,
                        details={"parts_sent": e.parts_sent, "error": str(e.cause)},
                    )
                    raise

        session = scheduler.completed_session
        summary = UploadSummary(
            success=True,
            vault=vault,
            archive_id=confirmation.archive_id,
            upload_id=session.upload_id,
            checksum=confirmation.checksum,
            archive_size=session.archive_size,
            parts_total=session.parts_total,
            parts_submitted=session.parts_submitted,
            parts_skipped=session.parts_skipped,
            duration=time.time() - start_time,
            dry_run=dry_run,
            location=confirmation.location,
        )

        if not dry_run:
            audit.log_operation(
                "archive_upload",
                vault=vault,
                upload_id=session.upload_id,
                archive_id=confirmation.archive_id,
                details={"size": session.archive_size, "checksum": confirmation.checksum},
            )
        return summary

    def tree_hash(self, source_path: str) -> tuple[str, int]:
        """Compute the archive tree hash of a file or stdin locally.

        Returns:
            Tuple of (hex tree hash, size in bytes).
        """
        validate_input_path(source_path)
        with open_source(source_path) as source:
            try:
                return compute_tree_hash(source.stream)
            except OSError as e:
                raise SourceReadError(source.name, str(e)) from e
            except ValueError as e:
                raise UploadError(str(e), file_path=source_path) from e

    def list_uploads(self, vault: str) -> list[MultipartUpload]:
        """List in-progress multipart uploads for a vault."""
        return self._require_client().list_multipart_uploads(validate_vault_name(vault))

    def abort(self, vault: str, upload_id: str) -> bool:
        """Abort an in-progress multipart upload."""
        vault = validate_vault_name(vault)
        self._require_client().abort_multipart_upload(upload_id, vault)
        get_audit_logger().log_operation("abort_upload", vault=vault, upload_id=upload_id)
        return True
