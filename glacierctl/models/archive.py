"""Archive and multipart upload models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import BaseModel


class ArchiveConfirmation(BaseModel):
    """Result of completing a multipart upload.

    ``archive_id`` is empty for dry runs, where nothing reaches the service.
    """

    archive_id: str = Field("", description="Archive ID issued by the service")
    location: str | None = Field(None, description="Relative URI of the new archive")
    checksum: str = Field(..., description="Archive tree hash (hex)")
    archive_size: int = Field(..., ge=0, description="Archive size in bytes")

    @property
    def is_dry_run(self) -> bool:
        """True when the confirmation was produced without contacting the service."""
        return not self.archive_id


class MultipartUpload(BaseModel):
    """In-progress multipart upload as listed by the service."""

    upload_id: str = Field(..., alias="MultipartUploadId")
    vault_arn: str | None = Field(None, alias="VaultARN")
    description: str | None = Field(None, alias="ArchiveDescription")
    part_size: int | None = Field(None, alias="PartSizeInBytes")
    created: datetime | None = Field(None, alias="CreationDate")

    @property
    def part_size_mb(self) -> float:
        """Part size in MiB."""
        return (self.part_size or 0) / (1024 * 1024)
