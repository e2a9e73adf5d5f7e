"""Service layer for glacierctl.

Provides service classes that encapsulate vault operations.
"""

from __future__ import annotations

from .archives import ArchiveService
from .base import BaseService

__all__ = [
    "BaseService",
    "ArchiveService",
]
