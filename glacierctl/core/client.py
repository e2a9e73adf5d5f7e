"""HTTP client for the archive service REST API.

Implements the multipart upload operations over httpx. Every failure is
surfaced immediately; retries are left to the operator (see ``--skip-parts``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from glacierctl.core.exceptions import (
    NetworkError,
    RemoteRejectedError,
    ServerUnreachableError,
)
from glacierctl.core.validation import validate_endpoint_url
from glacierctl.models.archive import ArchiveConfirmation, MultipartUpload
from glacierctl.uploaders.constants import (
    DEFAULT_ACCOUNT_ID,
    DEFAULT_TIMEOUT,
    GLACIER_API_VERSION,
)
from glacierctl.uploaders.treehash import linear_hash_hex

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

HEADER_API_VERSION = "x-amz-glacier-version"
HEADER_UPLOAD_ID = "x-amz-multipart-upload-id"
HEADER_PART_SIZE = "x-amz-part-size"
HEADER_DESCRIPTION = "x-amz-archive-description"
HEADER_TREE_HASH = "x-amz-sha256-tree-hash"
HEADER_CONTENT_HASH = "x-amz-content-sha256"
HEADER_ARCHIVE_SIZE = "x-amz-archive-size"
HEADER_ARCHIVE_ID = "x-amz-archive-id"


def endpoint_for_region(region: str) -> str:
    """Public service endpoint for a region."""
    return f"https://glacier.{region}.amazonaws.com"


# =============================================================================
# GlacierClient
# =============================================================================


@dataclass
class GlacierClient:
    """HTTP client for vault multipart uploads."""

    base_url: str
    account_id: str = DEFAULT_ACCOUNT_ID
    auth: httpx.Auth | None = None
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    transport: httpx.BaseTransport | None = field(default=None, repr=False)
    _client: httpx.Client | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate and normalize URL."""
        self.base_url = validate_endpoint_url(self.base_url)

    # =========================================================================
    # Client Management
    # =========================================================================

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.verify_ssl,
                auth=self.auth,
                headers={HEADER_API_VERSION: GLACIER_API_VERSION},
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GlacierClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # =========================================================================
    # HTTP
    # =========================================================================

    def _vault_path(self, vault: str, *parts: str) -> str:
        segments = [self.account_id, "vaults", vault, *parts]
        return "/" + "/".join(quote(s, safe="-_.~") for s in segments)

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        params: dict[str, Any] | None = None,
        expected: tuple[int, ...] = (200, 201, 204),
    ) -> httpx.Response:
        """Execute one request, converting failures to glacierctl errors.

        Raises:
            ServerUnreachableError: If the connection could not be opened.
            NetworkError: On timeouts and other transport failures.
            RemoteRejectedError: If the service answered with an error status.
        """
        client = self._get_client()
        try:
            resp = client.request(
                method,
                path,
                headers=headers,
                content=content,
                params=params,
            )
        except httpx.ConnectError as e:
            raise ServerUnreachableError(self.base_url) from e
        except httpx.TimeoutException as e:
            raise NetworkError(self.base_url, f"Timeout after {self.timeout}s") from e
        except httpx.TransportError as e:
            raise NetworkError(self.base_url, str(e)) from e

        if resp.status_code not in expected:
            raise self._rejection(operation, resp)
        return resp

    @staticmethod
    def _rejection(operation: str, resp: httpx.Response) -> RemoteRejectedError:
        """Build a RemoteRejectedError from the service's JSON error body."""
        code = None
        message = f"HTTP {resp.status_code}"
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            code = body.get("code") or body.get("type")
            message = body.get("message") or message
        elif resp.text:
            message = resp.text.strip()[:200]
        return RemoteRejectedError(operation, message, status_code=resp.status_code, code=code)

    # =========================================================================
    # Multipart Upload
    # =========================================================================

    def initiate_multipart_upload(self, vault: str, description: str, part_size: int) -> str:
        """Begin a multipart upload.

        Returns:
            Upload ID to use for every part and for completion.
        """
        headers = {HEADER_PART_SIZE: str(part_size)}
        if description:
            headers[HEADER_DESCRIPTION] = description

        resp = self._request(
            "initiate_multipart_upload",
            "POST",
            self._vault_path(vault, "multipart-uploads"),
            headers=headers,
            expected=(201,),
        )
        upload_id = resp.headers.get(HEADER_UPLOAD_ID)
        if not upload_id:
            raise RemoteRejectedError(
                "initiate_multipart_upload",
                "response did not include an upload ID",
                status_code=resp.status_code,
            )
        return upload_id

    def upload_part(
        self,
        upload_id: str,
        vault: str,
        byte_range: str,
        body: bytes,
        checksum: str,
    ) -> str:
        """Upload one part.

        Args:
            upload_id: Upload ID from ``initiate_multipart_upload``.
            vault: Vault name.
            byte_range: ``bytes {start}-{end}/*``.
            body: Raw part bytes.
            checksum: Tree hash of the part (hex).

        Returns:
            Tree hash echoed by the service.
        """
        headers = {
            "Content-Range": byte_range,
            "Content-Type": "application/octet-stream",
            HEADER_TREE_HASH: checksum,
            HEADER_CONTENT_HASH: linear_hash_hex(body),
        }
        resp = self._request(
            "upload_part",
            "PUT",
            self._vault_path(vault, "multipart-uploads", upload_id),
            headers=headers,
            content=body,
            expected=(204,),
        )
        return resp.headers.get(HEADER_TREE_HASH, checksum)

    def complete_multipart_upload(
        self,
        upload_id: str,
        vault: str,
        archive_size: int,
        checksum: str,
    ) -> ArchiveConfirmation:
        """Complete a multipart upload and assemble the archive."""
        headers = {
            HEADER_ARCHIVE_SIZE: str(archive_size),
            HEADER_TREE_HASH: checksum,
        }
        resp = self._request(
            "complete_multipart_upload",
            "POST",
            self._vault_path(vault, "multipart-uploads", upload_id),
            headers=headers,
            expected=(201,),
        )
        return ArchiveConfirmation(
            archive_id=resp.headers.get(HEADER_ARCHIVE_ID, ""),
            location=resp.headers.get("Location"),
            checksum=resp.headers.get(HEADER_TREE_HASH, checksum),
            archive_size=archive_size,
        )

    def abort_multipart_upload(self, upload_id: str, vault: str) -> None:
        """Abort an in-progress upload, discarding its parts."""
        self._request(
            "abort_multipart_upload",
            "DELETE",
            self._vault_path(vault, "multipart-uploads", upload_id),
            expected=(204,),
        )

    def list_multipart_uploads(self, vault: str, limit: int | None = None) -> list[MultipartUpload]:
        """List in-progress uploads for a vault, following pagination markers."""
        uploads: list[MultipartUpload] = []
        params: dict[str, Any] = {}
        if limit:
            params["limit"] = str(limit)

        while True:
            resp = self._request(
                "list_multipart_uploads",
                "GET",
                self._vault_path(vault, "multipart-uploads"),
                params=params or None,
                expected=(200,),
            )
            data = resp.json()
            for item in data.get("UploadsList") or []:
                uploads.append(MultipartUpload.model_validate(item))

            marker = data.get("Marker")
            if not marker or (limit and len(uploads) >= limit):
                break
            params["marker"] = marker

        return uploads
