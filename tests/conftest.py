"""Pytest configuration and fixtures for glacierctl tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from glacierctl.core.exceptions import RemoteRejectedError
from glacierctl.models.archive import ArchiveConfirmation

MIB = 1024 * 1024


class FakeArchiveClient:
    """In-memory stand-in for GlacierClient that records every call."""

    def __init__(
        self,
        *,
        fail_on_initiate: bool = False,
        fail_on_call: int | None = None,
        fail_on_complete: bool = False,
    ) -> None:
        self.fail_on_initiate = fail_on_initiate
        self.fail_on_call = fail_on_call
        self.fail_on_complete = fail_on_complete
        self.initiated: list[dict] = []
        self.parts: list[dict] = []
        self.completed: list[dict] = []
        self.aborted: list[tuple[str, str]] = []

    def initiate_multipart_upload(self, vault: str, description: str, part_size: int) -> str:
        if self.fail_on_initiate:
            raise RemoteRejectedError(
                "initiate_multipart_upload",
                f"Vault not found: {vault}",
                status_code=404,
                code="ResourceNotFoundException",
            )
        self.initiated.append({"vault": vault, "description": description, "part_size": part_size})
        return "upload-1"

    def upload_part(
        self,
        upload_id: str,
        vault: str,
        byte_range: str,
        body: bytes,
        checksum: str,
    ) -> str:
        if self.fail_on_call is not None and len(self.parts) == self.fail_on_call:
            raise RemoteRejectedError(
                "upload_part",
                "Checksum mismatch",
                status_code=400,
                code="InvalidParameterValueException",
            )
        self.parts.append(
            {
                "upload_id": upload_id,
                "vault": vault,
                "range": byte_range,
                "size": len(body),
                "checksum": checksum,
            }
        )
        return checksum

    def complete_multipart_upload(
        self,
        upload_id: str,
        vault: str,
        archive_size: int,
        checksum: str,
    ) -> ArchiveConfirmation:
        if self.fail_on_complete:
            raise RemoteRejectedError(
                "complete_multipart_upload",
                "Archive size does not match uploaded parts",
                status_code=400,
            )
        self.completed.append(
            {
                "upload_id": upload_id,
                "vault": vault,
                "archive_size": archive_size,
                "checksum": checksum,
            }
        )
        return ArchiveConfirmation(
            archive_id="archive-1",
            location=f"/-/vaults/{vault}/archives/archive-1",
            checksum=checksum,
            archive_size=archive_size,
        )

    def list_multipart_uploads(self, vault: str) -> list:
        return []

    def abort_multipart_upload(self, upload_id: str, vault: str) -> None:
        self.aborted.append((upload_id, vault))

    def close(self) -> None:
        pass

    def __enter__(self) -> "FakeArchiveClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


ISOLATED_ENV_VARS = (
    "GLACIER_PROFILE",
    "GLACIER_REGION",
    "GLACIER_ENDPOINT_URL",
    "GLACIER_VAULT",
    "GLACIER_TIMEOUT",
    "GLACIER_VERIFY_SSL",
    "AWS_DEFAULT_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the caller's environment and config file out of every test."""
    for name in ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COLUMNS", "200")
    config_file = tmp_path / "glacierctl" / "config.yaml"
    monkeypatch.setattr("glacierctl.core.config.CONFIG_FILE", config_file)
    monkeypatch.setattr("glacierctl.cli.config_cmd.CONFIG_FILE", config_file)
    return config_file


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_client() -> FakeArchiveClient:
    """Recording remote client that accepts everything."""
    return FakeArchiveClient()


@pytest.fixture
def make_client():
    """Factory for FakeArchiveClient with failure switches."""
    return FakeArchiveClient


@pytest.fixture
def patterned_bytes():
    """Deterministic non-uniform content of a given size."""

    def _make(size: int) -> bytes:
        block = bytes(range(256)) + b"glacier"
        repeats = size // len(block) + 1
        return (block * repeats)[:size]

    return _make


@pytest.fixture
def sample_config_yaml() -> str:
    """Sample config YAML content."""
    return """
default_profile: test
output_format: table

profiles:
  test:
    region: eu-central-1
    default_vault: backups
    part_size_mb: 8
    timeout: 120

  local:
    region: us-east-1
    endpoint_url: http://localhost:4566
    verify_ssl: false
"""
