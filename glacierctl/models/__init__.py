"""Data models for glacierctl.

Provides Pydantic models for service payloads and progress tracking.
"""

from __future__ import annotations

from .archive import ArchiveConfirmation, MultipartUpload
from .base import BaseModel
from .progress import OperationPhase, UploadProgress, UploadSummary

__all__ = [
    # Base
    "BaseModel",
    # Archives
    "ArchiveConfirmation",
    "MultipartUpload",
    # Progress
    "OperationPhase",
    "UploadProgress",
    "UploadSummary",
]
