"""Request signing for the archive service.

Implements AWS Signature Version 4 as an ``httpx.Auth`` flow so every
request issued by ``GlacierClient`` is signed just before it is sent.
"""

from __future__ import annotations

import hashlib
import hmac
import os
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from urllib.parse import quote

import httpx

from glacierctl.core.exceptions import AuthenticationError

# =============================================================================
# Constants
# =============================================================================

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE_NAME = "glacier"

ENV_ACCESS_KEY = "AWS_ACCESS_KEY_ID"
ENV_SECRET_KEY = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN = "AWS_SESSION_TOKEN"


# =============================================================================
# Credentials
# =============================================================================


@dataclass
class Credentials:
    """Access key pair with optional session token."""

    access_key: str
    secret_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> Credentials:
        """Read credentials from the standard AWS environment variables.

        Raises:
            AuthenticationError: If the key pair is not set.
        """
        access_key = os.getenv(ENV_ACCESS_KEY)
        secret_key = os.getenv(ENV_SECRET_KEY)
        if not access_key or not secret_key:
            raise AuthenticationError(
                reason=f"Set {ENV_ACCESS_KEY} and {ENV_SECRET_KEY} to sign requests"
            )
        return cls(
            access_key=access_key,
            secret_key=secret_key,
            session_token=os.getenv(ENV_SESSION_TOKEN) or None,
        )


# =============================================================================
# Signing helpers
# =============================================================================


def _sign(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def signing_key(secret_key: str, datestamp: str, region: str, service: str) -> bytes:
    """Derive the SigV4 signing key for one day, region and service."""
    k_date = _sign(("AWS4" + secret_key).encode("utf-8"), datestamp)
    k_region = _sign(k_date, region)
    k_service = _sign(k_region, service)
    return _sign(k_service, "aws4_request")


def canonical_query(url: httpx.URL) -> str:
    """Sorted, percent-encoded query string."""
    items = sorted(url.params.multi_items())
    return "&".join(f"{quote(k, safe='-_.~')}={quote(v, safe='-_.~')}" for k, v in items)


def canonical_headers(request: httpx.Request) -> tuple[str, str]:
    """Return ``(canonical_headers, signed_headers)`` for a request.

    Signs ``host``, ``content-type`` when present, and every ``x-amz-*``
    header.
    """
    headers: dict[str, str] = {}
    for name, value in request.headers.items():
        lname = name.lower()
        if lname == "host" or lname == "content-type" or lname.startswith("x-amz-"):
            headers[lname] = " ".join(value.strip().split())
    names = sorted(headers)
    canonical = "".join(f"{n}:{headers[n]}\n" for n in names)
    return canonical, ";".join(names)


# =============================================================================
# SigV4Auth
# =============================================================================


class SigV4Auth(httpx.Auth):
    """httpx auth flow producing AWS Signature Version 4 headers."""

    requires_request_body = True

    def __init__(
        self,
        credentials: Credentials,
        region: str,
        service: str = SERVICE_NAME,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.credentials = credentials
        self.region = region
        self.service = service
        self._now = now or (lambda: datetime.now(timezone.utc))

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self.sign(request)
        yield request

    def sign(self, request: httpx.Request) -> None:
        """Add ``x-amz-date``, token and ``Authorization`` headers in place."""
        now = self._now()
        amzdate = now.strftime("%Y%m%dT%H%M%SZ")
        datestamp = now.strftime("%Y%m%d")

        request.headers["x-amz-date"] = amzdate
        if self.credentials.session_token:
            request.headers["x-amz-security-token"] = self.credentials.session_token

        payload_hash = hashlib.sha256(request.content).hexdigest()
        path = request.url.raw_path.split(b"?", 1)[0].decode("ascii") or "/"
        headers_block, signed_headers = canonical_headers(request)

        canonical_request = "\n".join(
            [
                request.method.upper(),
                path,
                canonical_query(request.url),
                headers_block,
                signed_headers,
                payload_hash,
            ]
        )

        credential_scope = f"{datestamp}/{self.region}/{self.service}/aws4_request"
        string_to_sign = "\n".join(
            [
                ALGORITHM,
                amzdate,
                credential_scope,
                hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
            ]
        )

        key = signing_key(self.credentials.secret_key, datestamp, self.region, self.service)
        signature = hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        request.headers["Authorization"] = (
            f"{ALGORITHM} Credential={self.credentials.access_key}/{credential_scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )
