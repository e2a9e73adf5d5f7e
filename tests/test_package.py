"""Tests for glacierctl package imports and exports."""

from __future__ import annotations


class TestPackageImports:
    """Tests for package imports."""

    def test_import_glacierctl(self):
        import glacierctl

        assert hasattr(glacierctl, "__version__")

    def test_top_level_exports(self):
        import glacierctl

        for name in glacierctl.__all__:
            assert hasattr(glacierctl, name), name

    def test_import_core_modules(self):
        from glacierctl.core import auth, client, config, exceptions, logging, output, validation

        assert client is not None
        assert config is not None
        assert auth is not None
        assert exceptions is not None
        assert validation is not None
        assert output is not None
        assert logging is not None

    def test_import_models(self):
        from glacierctl.models import archive, base, progress

        assert base is not None
        assert archive is not None
        assert progress is not None

    def test_import_uploaders(self):
        from glacierctl.uploaders import constants, multipart, sources, treehash

        assert constants.HASH_CHUNK_SIZE == 1024 * 1024
        assert multipart is not None
        assert sources is not None
        assert treehash is not None

    def test_import_services(self):
        from glacierctl.services import archives, base

        assert base is not None
        assert archives is not None

    def test_import_cli(self):
        from glacierctl.cli import archive, common, config_cmd, main, uploads

        assert main is not None
        assert common is not None
        assert config_cmd is not None
        assert archive is not None
        assert uploads is not None


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_base_error(self):
        from glacierctl.core.exceptions import GlacierCtlError

        exc = GlacierCtlError("test error", {"vault": "v"})
        assert str(exc) == "test error (vault=v)"
        assert isinstance(exc, Exception)

    def test_auth_error(self):
        from glacierctl.core.exceptions import AuthenticationError

        exc = AuthenticationError("https://glacier.example.com", "bad signature")
        assert "bad signature" in str(exc)

    def test_network_error(self):
        from glacierctl.core.exceptions import ConnectionError, NetworkError

        exc = NetworkError("https://glacier.example.com", "connection reset")
        assert "glacier.example.com" in str(exc)
        assert isinstance(exc, ConnectionError)

    def test_remote_rejected(self):
        from glacierctl.core.exceptions import RemoteRejectedError

        exc = RemoteRejectedError(
            "upload_part", "bad hash", status_code=400, code="InvalidParameterValueException"
        )
        assert exc.reason == "bad hash"
        assert "upload_part rejected: bad hash" in str(exc)

    def test_part_upload_error(self):
        from glacierctl.core.exceptions import PartUploadError, UploadError

        exc = PartUploadError(7, RuntimeError("boom"), upload_id="U1")
        assert isinstance(exc, UploadError)
        assert exc.resume_hint == "--skip-parts 7"
        assert exc.details["upload_id"] == "U1"
        assert "Upload failed at part 7: boom" in str(exc)

    def test_finalize_error(self):
        from glacierctl.core.exceptions import FinalizeError, PartUploadError, UploadError

        exc = FinalizeError("U1", 5, RuntimeError("size mismatch"))
        assert isinstance(exc, UploadError)
        assert not isinstance(exc, PartUploadError)
        assert exc.parts_sent == 5
        assert "after all 5 parts were sent: size mismatch" in str(exc)

    def test_validation_errors(self):
        from glacierctl.core.exceptions import (
            InvalidPartSizeError,
            InvalidURLError,
            InvalidVaultNameError,
            PathValidationError,
        )

        assert "bad-url" in str(InvalidURLError("bad-url", "missing scheme"))
        assert "0" in str(InvalidPartSizeError(0))
        assert "my vault" in str(InvalidVaultNameError("my vault", "spaces"))
        assert "/bad/path" in str(PathValidationError("/bad/path", "does not exist"))
