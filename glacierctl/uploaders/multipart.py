"""Sequential multipart archive upload.

The scheduler reads the input one part at a time, hashes every byte in
1 MiB sub-chunks, submits the part with its own tree hash, and finally
completes the upload with the tree hash of the whole archive:

    AWAITING_SESSION -> READING(0) -> SUBMITTING(0) -> READING(1) -> ...
        -> REDUCING -> FINALIZING -> DONE

Any failure moves to FAILED and aborts the run; nothing is retried or
rolled back. Parts below ``skip_parts`` are read and hashed but not sent,
so the archive checksum is the same as for a full run. This lets an
operator re-run an upload without re-sending parts the service already
accepted. A failed part reports its index to use as ``skip_parts``; a
failed completion reports that every part was already sent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from glacierctl.core.exceptions import (
    FinalizeError,
    GlacierCtlError,
    InvalidPartSizeError,
    PartUploadError,
    UploadError,
)
from glacierctl.models.archive import ArchiveConfirmation
from glacierctl.models.progress import OperationPhase, UploadProgress
from glacierctl.uploaders.sources import SequentialByteSource
from glacierctl.uploaders.treehash import hash_chunks, tree_hash_hex

logger = logging.getLogger(__name__)


# =============================================================================
# Remote Contract
# =============================================================================


class RemoteArchiveClient(Protocol):
    """The three remote operations the scheduler depends on."""

    def initiate_multipart_upload(
        self, vault: str, description: str, part_size: int
    ) -> str: ...

    def upload_part(
        self,
        upload_id: str,
        vault: str,
        byte_range: str,
        body: bytes,
        checksum: str,
    ) -> Any: ...

    def complete_multipart_upload(
        self,
        upload_id: str,
        vault: str,
        archive_size: int,
        checksum: str,
    ) -> ArchiveConfirmation: ...


# =============================================================================
# Byte Ranges
# =============================================================================


def part_range(part_index: int, part_size: int, length: int) -> tuple[int, int]:
    """Inclusive absolute byte range of a part.

    The end is clamped to the bytes actually read, which is shorter than
    ``part_size`` only for the final part.
    """
    start = part_index * part_size
    return start, start + length - 1


def format_range(start: int, end: int) -> str:
    """Content-Range value for a part of an archive of unknown total size."""
    return f"bytes {start}-{end}/*"


# =============================================================================
# Upload Session
# =============================================================================


class UploadState(Enum):
    """Scheduler states."""

    AWAITING_SESSION = "awaiting_session"
    READING = "reading"
    SUBMITTING = "submitting"
    REDUCING = "reducing"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class UploadSession:
    """Mutable state of one in-progress archive upload.

    ``digests`` holds one sub-chunk digest per MiB of input across the whole
    archive, in stream order, for every byte read whether or not its part
    was sent.
    """

    part_size: int
    upload_id: str
    archive_size: int = 0
    digests: list[bytes] = field(default_factory=list, repr=False)
    parts_total: int = 0
    parts_submitted: int = 0
    parts_skipped: int = 0
    _final_checksum: str | None = field(default=None, init=False, repr=False)

    def record_part(self, data: bytes) -> list[bytes]:
        """Account for a freshly read part and hash it.

        Returns:
            The digests belonging to this part only.
        """
        self.archive_size += len(data)
        part_digests = hash_chunks(data)
        self.digests.extend(part_digests)
        self.parts_total += 1
        return part_digests

    @property
    def final_checksum(self) -> str | None:
        """Archive tree hash, set once after the input is exhausted."""
        return self._final_checksum

    def seal(self) -> str:
        """Compute and freeze the archive-level tree hash.

        Raises:
            RuntimeError: If the checksum was already computed.
            ValueError: If nothing was read.
        """
        if self._final_checksum is not None:
            raise RuntimeError("final checksum already computed")
        self._final_checksum = tree_hash_hex(self.digests)
        return self._final_checksum


# =============================================================================
# Scheduler
# =============================================================================


class PartUploadScheduler:
    """Drives the read, hash, submit loop for one archive."""

    def __init__(
        self,
        client: RemoteArchiveClient | None,
        source: SequentialByteSource,
        vault: str,
        part_size: int,
        *,
        description: str = "",
        skip_parts: int = 0,
        dry_run: bool = False,
        progress_callback: Callable[[UploadProgress], None] | None = None,
    ) -> None:
        if part_size <= 0:
            raise InvalidPartSizeError(part_size)
        if client is None and not dry_run:
            raise ValueError("a remote client is required unless dry_run is set")

        self.client = client
        self.source = source
        self.vault = vault
        self.part_size = part_size
        self.description = description
        self.skip_parts = max(skip_parts, 0)
        self.dry_run = dry_run
        self.progress_callback = progress_callback

        self.state = UploadState.AWAITING_SESSION
        self.part_index = 0
        self.session: UploadSession | None = None

    # =========================================================================
    # Run
    # =========================================================================

    def run(self) -> ArchiveConfirmation:
        """Upload the whole source and complete the archive.

        Returns:
            The service's archive confirmation (or a local one for dry runs).

        Raises:
            PartUploadError: A read or part upload failed. Carries the part
                index to pass as ``skip_parts`` on the next run.
            FinalizeError: Every part was sent but completion was refused.
            UploadError: The source was empty.
            GlacierCtlError: Starting the session failed.
        """
        try:
            upload_id = self._begin_session()
        except Exception:
            self.state = UploadState.FAILED
            raise

        session = UploadSession(part_size=self.part_size, upload_id=upload_id)
        self.session = session

        try:
            self._upload_parts(session)

            self.state = UploadState.REDUCING
            if not session.digests:
                raise UploadError("Input is empty; nothing to archive")
            checksum = session.seal()
            logger.debug("Archive tree hash %s over %d sub-chunks", checksum, len(session.digests))

            self.state = UploadState.FINALIZING
            self._notify(session, OperationPhase.FINALIZING, 0, "Completing archive")
            confirmation = self._finalize(session, checksum)
        except GlacierCtlError as e:
            phase = self.state
            self.state = UploadState.FAILED
            self._notify(session, OperationPhase.ERROR, 0, str(e))
            if isinstance(e, UploadError):
                raise
            if phase == UploadState.FINALIZING:
                raise FinalizeError(upload_id, session.parts_total, e) from e
            raise PartUploadError(
                self.part_index,
                e,
                upload_id=upload_id or None,
                phase=phase.value,
            ) from e
        except Exception:
            self.state = UploadState.FAILED
            raise

        self.state = UploadState.DONE
        self._notify(session, OperationPhase.COMPLETE, 0, "Archive complete")
        return confirmation

    @property
    def completed_session(self) -> UploadSession:
        """Session of a finished run.

        Raises:
            RuntimeError: If ``run`` has not completed successfully.
        """
        if self.state != UploadState.DONE or self.session is None:
            raise RuntimeError(f"upload has not completed (state: {self.state.value})")
        return self.session

    # =========================================================================
    # States
    # =========================================================================

    def _remote(self) -> RemoteArchiveClient:
        if self.client is None:
            raise RuntimeError("a remote client is required unless dry_run is set")
        return self.client

    def _begin_session(self) -> str:
        if self.dry_run:
            logger.info("Dry run: not starting a remote upload")
            return ""
        upload_id = self._remote().initiate_multipart_upload(
            self.vault, self.description, self.part_size
        )
        logger.info("Started multipart upload %s to vault %s", upload_id, self.vault)
        return upload_id

    def _upload_parts(self, session: UploadSession) -> None:
        self.part_index = 0
        while True:
            self.state = UploadState.READING
            logger.info("Processing part %d...", self.part_index)
            data = self.source.read_next(self.part_size)
            if data is None:
                return

            part_digests = session.record_part(data)
            start, end = part_range(self.part_index, self.part_size, len(data))

            self.state = UploadState.SUBMITTING
            self._submit(session, data, part_digests, format_range(start, end))
            self.part_index += 1

    def _submit(
        self,
        session: UploadSession,
        data: bytes,
        part_digests: list[bytes],
        byte_range: str,
    ) -> None:
        n = self.part_index
        checksum = tree_hash_hex(part_digests)
        logger.debug("Part %d: range=%s tree_hash=%s", n, byte_range, checksum)

        if n < self.skip_parts:
            logger.info("Skipping part %d", n)
            session.parts_skipped += 1
            self._notify(session, OperationPhase.SKIPPING, len(data), f"Skipped part {n}")
            return

        if self.dry_run:
            logger.info("Simulate uploading of part %d", n)
        else:
            self._remote().upload_part(session.upload_id, self.vault, byte_range, data, checksum)
            logger.info("Successfully uploaded part %d", n)
        session.parts_submitted += 1
        self._notify(session, OperationPhase.UPLOADING, len(data), f"Uploaded part {n}")

    def _finalize(self, session: UploadSession, checksum: str) -> ArchiveConfirmation:
        if self.dry_run:
            return ArchiveConfirmation(checksum=checksum, archive_size=session.archive_size)
        return self._remote().complete_multipart_upload(
            session.upload_id, self.vault, session.archive_size, checksum
        )

    def _notify(
        self,
        session: UploadSession,
        phase: OperationPhase,
        part_bytes: int,
        message: str,
    ) -> None:
        if self.progress_callback is None:
            return
        self.progress_callback(
            UploadProgress(
                phase=phase,
                part_index=self.part_index,
                part_bytes=part_bytes,
                bytes_read=session.archive_size,
                parts_submitted=session.parts_submitted,
                parts_skipped=session.parts_skipped,
                message=message,
            )
        )

