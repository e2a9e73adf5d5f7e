"""Base service holding the remote client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from glacierctl.core.client import GlacierClient


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, client: Optional["GlacierClient"]) -> None:
        """Initialize service with a client.

        Args:
            client: GlacierClient instance, or None for purely local work
                (tree hashing, dry runs).
        """
        self.client = client

    def _require_client(self) -> "GlacierClient":
        """Return the client, failing clearly when none was configured."""
        if self.client is None:
            raise RuntimeError(f"{type(self).__name__} needs a GlacierClient for this operation")
        return self.client
