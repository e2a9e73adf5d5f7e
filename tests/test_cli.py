"""Tests for glacierctl CLI commands."""

from __future__ import annotations

import hashlib
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from glacierctl.cli.main import cli
from glacierctl.core.config import Config
from glacierctl.models.archive import MultipartUpload

MIB = 1024 * 1024


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")


@pytest.fixture
def archive_file(temp_dir, patterned_bytes):
    path = temp_dir / "backup.tar"
    path.write_bytes(patterned_bytes(2 * MIB + 5))
    return path


@pytest.fixture
def patched_client(fake_client):
    with patch("glacierctl.cli.common.GlacierClient", return_value=fake_client) as factory:
        yield factory


# =============================================================================
# Basic CLI Tests
# =============================================================================


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_cli_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "glacierctl" in result.output
        assert "upload" in result.output
        assert "treehash" in result.output
        assert "uploads" in result.output

    def test_cli_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "glacierctl" in result.output
        assert "0.1.0" in result.output

    def test_upload_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["upload", "--help"])
        assert result.exit_code == 0
        assert "--part-size" in result.output
        assert "--vault-name" in result.output
        assert "--skip-parts" in result.output
        assert "--description" in result.output
        assert "power of two" not in result.output


# =============================================================================
# Upload Command Tests
# =============================================================================


class TestUploadCommand:
    """Tests for the upload command."""

    def test_upload_json(self, runner, archive_file, credentials, fake_client, patched_client):
        result = runner.invoke(
            cli,
            ["upload", str(archive_file), "-v", "my-vault", "-s", "1", "-d", "nightly", "-o", "json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["archive_id"] == "archive-1"
        assert data["upload_id"] == "upload-1"
        assert data["parts_total"] == 3
        assert data["parts_submitted"] == 3
        assert data["archive_size"] == 2 * MIB + 5
        assert [p["range"] for p in fake_client.parts] == [
            "bytes 0-1048575/*",
            "bytes 1048576-2097151/*",
            "bytes 2097152-2097156/*",
        ]
        assert fake_client.initiated[0]["description"] == "nightly"

    def test_client_built_from_profile(self, runner, archive_file, credentials, patched_client):
        result = runner.invoke(
            cli, ["upload", str(archive_file), "-v", "my-vault", "-r", "eu-west-1", "-q"]
        )

        assert result.exit_code == 0, result.output
        kwargs = patched_client.call_args.kwargs
        assert kwargs["base_url"] == "https://glacier.eu-west-1.amazonaws.com"
        assert kwargs["auth"].region == "eu-west-1"

    def test_upload_quiet_prints_archive_id(
        self, runner, archive_file, credentials, patched_client
    ):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault", "-q"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "archive-1"

    def test_upload_table(self, runner, archive_file, credentials, patched_client):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault"])

        assert result.exit_code == 0, result.output
        assert "Archive successfully uploaded." in result.stdout
        assert "archive-1" in result.stdout
        assert f"2.00 MiB ({2 * MIB + 5} bytes)" in result.stdout
        assert "3 (3 sent)" in result.stdout
        assert "MiB/s" in result.stdout

    def test_upload_table_with_skip(self, runner, archive_file, credentials, patched_client):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault", "-k", "2"])

        assert result.exit_code == 0, result.output
        assert "3 (1 sent, 2 skipped)" in result.stdout

    def test_skip_parts(self, runner, archive_file, credentials, fake_client, patched_client):
        result = runner.invoke(
            cli, ["upload", str(archive_file), "-v", "my-vault", "-k", "2", "-o", "json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["parts_skipped"] == 2
        assert data["parts_submitted"] == 1
        assert len(fake_client.parts) == 1
        assert "Skipping parts 0-1" in result.output

    def test_part_failure_shows_resume_hint(
        self, runner, archive_file, credentials, make_client
    ):
        client = make_client(fail_on_call=1)
        with patch("glacierctl.cli.common.GlacierClient", return_value=client):
            result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault"])

        assert result.exit_code == 3
        assert "Upload failed at part 1" in result.output
        assert "upload-1" in result.output
        assert "--skip-parts 1" in result.output

    def test_finalize_failure_has_no_resume_hint(
        self, runner, archive_file, credentials, make_client
    ):
        client = make_client(fail_on_complete=True)
        with patch("glacierctl.cli.common.GlacierClient", return_value=client):
            result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault"])

        assert result.exit_code == 3
        assert len(client.parts) == 3
        assert "Upload ID: upload-1" in result.output
        assert "All 3 parts were sent" in result.output
        assert "uploads abort upload-1" in result.output
        assert "Re-run with --skip-parts" not in result.output

    def test_dry_run_makes_no_remote_calls(self, runner, archive_file):
        with patch("glacierctl.cli.common.GlacierClient") as factory:
            result = runner.invoke(
                cli, ["upload", str(archive_file), "-v", "my-vault", "--dry-run", "-o", "json"]
            )

        assert result.exit_code == 0, result.output
        factory.assert_not_called()
        data = json.loads(result.stdout)
        assert data["dry_run"] is True
        assert data["parts_total"] == 3
        assert data["archive_id"] == ""

    def test_missing_credentials(self, runner, archive_file):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault"])

        assert result.exit_code == 2
        assert "AWS_ACCESS_KEY_ID" in result.output

    def test_vault_required(self, runner, archive_file):
        result = runner.invoke(cli, ["upload", str(archive_file)])

        assert result.exit_code != 0
        assert "Vault required" in result.output

    def test_vault_from_profile(self, runner, archive_file, credentials, fake_client, patched_client):
        config = Config()
        config.add_profile("default", region="us-east-1", default_vault="profile-vault")
        config.save()

        result = runner.invoke(cli, ["upload", str(archive_file), "-q"])

        assert result.exit_code == 0, result.output
        assert fake_client.initiated[0]["vault"] == "profile-vault"

    def test_part_size_from_profile(self, runner, archive_file, credentials, fake_client, patched_client):
        config = Config()
        config.add_profile("default", part_size_mb=4)
        config.save()

        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault", "-q"])

        assert result.exit_code == 0, result.output
        assert fake_client.initiated[0]["part_size"] == 4 * MIB
        assert len(fake_client.parts) == 1

    def test_invalid_part_size(self, runner, archive_file, credentials, fake_client, patched_client):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "my-vault", "-s", "0"])

        assert result.exit_code == 1
        assert "part size" in result.output.lower()
        assert fake_client.initiated == []

    def test_part_size_need_not_be_power_of_two(self, runner, archive_file):
        result = runner.invoke(
            cli, ["upload", str(archive_file), "-v", "my-vault", "-s", "3", "--dry-run", "-o", "json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["parts_total"] == 1

    def test_negative_skip_rejected(self, runner, archive_file):
        result = runner.invoke(cli, ["upload", str(archive_file), "-v", "v", "-k", "-1"])
        assert result.exit_code == 2

    def test_missing_file(self, runner, temp_dir, credentials, patched_client):
        result = runner.invoke(cli, ["upload", str(temp_dir / "nope.tar"), "-v", "my-vault"])

        assert result.exit_code == 1
        assert "nope.tar" in result.output

    def test_stdin(self, runner, credentials, fake_client, patched_client):
        result = runner.invoke(
            cli, ["upload", "-", "-v", "my-vault", "-o", "json"], input=b"streamed bytes"
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["archive_size"] == 14
        assert fake_client.parts[0]["range"] == "bytes 0-13/*"


# =============================================================================
# Treehash Command Tests
# =============================================================================


class TestTreehashCommand:
    """Tests for the treehash command."""

    def test_quiet(self, runner, temp_dir):
        path = temp_dir / "small.bin"
        path.write_bytes(b"hello")

        result = runner.invoke(cli, ["treehash", str(path), "-q"])

        assert result.exit_code == 0
        assert result.stdout.strip() == hashlib.sha256(b"hello").hexdigest()

    def test_json(self, runner, temp_dir):
        path = temp_dir / "small.bin"
        path.write_bytes(b"hello")

        result = runner.invoke(cli, ["treehash", str(path), "-o", "json"])

        data = json.loads(result.stdout)
        assert data["size"] == 5
        assert data["tree_hash"] == hashlib.sha256(b"hello").hexdigest()

    def test_empty_file(self, runner, temp_dir):
        path = temp_dir / "empty.bin"
        path.write_bytes(b"")

        result = runner.invoke(cli, ["treehash", str(path)])

        assert result.exit_code == 1
        assert "empty" in result.output


# =============================================================================
# Uploads Command Tests
# =============================================================================


class TestUploadsCommands:
    """Tests for the uploads command group."""

    def test_list(self, runner, credentials, fake_client, patched_client):
        fake_client.list_multipart_uploads = lambda vault: [
            MultipartUpload(upload_id="U1", description="nightly", part_size=4 * MIB)
        ]

        result = runner.invoke(cli, ["uploads", "list", "-v", "my-vault", "-o", "json"])

        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows[0]["upload_id"] == "U1"
        assert rows[0]["part_size_mb"] == "4"

    def test_abort_with_confirmation(self, runner, credentials, fake_client, patched_client):
        result = runner.invoke(cli, ["uploads", "abort", "U1", "-v", "my-vault"], input="y\n")

        assert result.exit_code == 0, result.output
        assert fake_client.aborted == [("U1", "my-vault")]
        assert "Aborted upload U1" in result.output

    def test_abort_declined(self, runner, credentials, fake_client, patched_client):
        result = runner.invoke(cli, ["uploads", "abort", "U1", "-v", "my-vault"], input="n\n")

        assert result.exit_code == 1
        assert fake_client.aborted == []


# =============================================================================
# Config Command Tests
# =============================================================================


class TestConfigCommands:
    """Tests for config commands."""

    def test_init_and_show(self, runner, isolated_env):
        result = runner.invoke(
            cli,
            ["config", "init", "--region", "eu-central-1", "--vault-name", "backups"],
        )
        assert result.exit_code == 0, result.output
        assert isolated_env.exists()

        config = Config.load(isolated_env)
        assert config.default_profile == "default"
        assert config.get_profile().default_vault == "backups"

        result = runner.invoke(cli, ["config", "show", "-o", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["profiles"] == ["default"]

    def test_init_refuses_overwrite(self, runner):
        runner.invoke(cli, ["config", "init", "--region", "us-east-1"])
        result = runner.invoke(cli, ["config", "init", "--region", "us-east-1"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_invalid_region(self, runner):
        result = runner.invoke(cli, ["config", "init", "--region", "nowhere"])
        assert result.exit_code == 1
        assert "Invalid region" in result.output

    def test_add_profile_and_switch(self, runner):
        runner.invoke(cli, ["config", "init", "--region", "us-east-1"])
        result = runner.invoke(
            cli, ["config", "add-profile", "eu", "--region", "eu-west-1", "--timeout", "60"]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["config", "use-context", "eu"])
        assert result.exit_code == 0

        result = runner.invoke(cli, ["config", "current-context"])
        assert result.stdout.strip() == "eu"

    def test_use_unknown_context(self, runner):
        runner.invoke(cli, ["config", "init", "--region", "us-east-1"])
        result = runner.invoke(cli, ["config", "use-context", "missing"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_add_profile_rejects_non_positive_timeout(self, runner, isolated_env):
        runner.invoke(cli, ["config", "init", "--region", "us-east-1"])
        result = runner.invoke(
            cli, ["config", "add-profile", "eu", "--region", "eu-west-1", "--timeout", "0"]
        )

        assert result.exit_code == 1
        assert "Invalid timeout" in result.output
        assert not Config.load(isolated_env).has_profile("eu")
