"""Progress models for tracking upload status.

Provides dataclasses for per-part progress and the upload summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OperationPhase(Enum):
    """Operation phases for progress tracking."""

    PREPARING = "preparing"
    UPLOADING = "uploading"
    SKIPPING = "skipping"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class UploadProgress:
    """Progress after one part has been read, hashed and (maybe) submitted."""

    phase: OperationPhase
    part_index: int = 0
    part_bytes: int = 0
    bytes_read: int = 0
    parts_submitted: int = 0
    parts_skipped: int = 0
    message: str = ""

    @property
    def skipped(self) -> bool:
        """Whether the remote call for this part was skipped."""
        return self.phase == OperationPhase.SKIPPING

    @property
    def is_part(self) -> bool:
        """Whether this event reports a part that was read."""
        return self.phase in (OperationPhase.UPLOADING, OperationPhase.SKIPPING)


@dataclass
class UploadSummary:
    """Upload operation summary."""

    success: bool
    vault: str
    archive_id: str = ""
    upload_id: str = ""
    checksum: str = ""
    archive_size: int = 0
    parts_total: int = 0
    parts_submitted: int = 0
    parts_skipped: int = 0
    duration: float = 0.0
    dry_run: bool = False
    location: str | None = None

    @property
    def throughput_mbps(self) -> float:
        """Read throughput in MiB/s."""
        if self.duration == 0:
            return 0.0
        return self.archive_size / (1024 * 1024) / self.duration

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "success": self.success,
            "vault": self.vault,
            "archive_id": self.archive_id,
            "upload_id": self.upload_id,
            "checksum": self.checksum,
            "archive_size": self.archive_size,
            "parts_total": self.parts_total,
            "parts_submitted": self.parts_submitted,
            "parts_skipped": self.parts_skipped,
            "duration": round(self.duration, 2),
            "throughput_mbps": round(self.throughput_mbps, 2),
            "dry_run": self.dry_run,
            "location": self.location,
        }
