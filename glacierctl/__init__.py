"""glacierctl - A CLI for multipart uploads to cold-storage vaults.

This package uploads large files or standard input to an archive vault
using the multipart upload protocol:
- Fixed 1 MiB sub-chunk SHA-256 hashing and tree hash reduction
- Strictly sequential part upload with byte-range bookkeeping
- Manual resumption by skipping parts already accepted by the service
"""

__version__ = "0.1.0"

from glacierctl.core.client import GlacierClient
from glacierctl.core.config import Config, Profile
from glacierctl.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    FinalizeError,
    GlacierCtlError,
    NetworkError,
    PartUploadError,
    RemoteRejectedError,
    SourceReadError,
    ValidationError,
)
from glacierctl.uploaders.multipart import PartUploadScheduler, UploadSession
from glacierctl.uploaders.treehash import tree_hash, tree_hash_hex

__all__ = [
    "__version__",
    "GlacierClient",
    "Config",
    "Profile",
    "PartUploadScheduler",
    "UploadSession",
    "tree_hash",
    "tree_hash_hex",
    "GlacierCtlError",
    "AuthenticationError",
    "ConfigurationError",
    "FinalizeError",
    "NetworkError",
    "PartUploadError",
    "RemoteRejectedError",
    "SourceReadError",
    "ValidationError",
]
