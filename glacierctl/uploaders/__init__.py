"""Hashing and transfer engine for glacierctl.

- Tree hash: 1 MiB sub-chunk digests reduced pairwise to one root
- Sources: sequential byte sources over files and stdin
- Multipart: the upload session and sequential part scheduler

Use `ArchiveService` from `glacierctl.services.archives` as the public API.
"""

from glacierctl.uploaders.constants import (
    DEFAULT_PART_SIZE_MB,
    DEFAULT_TIMEOUT,
    DIGEST_SIZE,
    HASH_CHUNK_SIZE,
    MEGABYTE,
)
from glacierctl.uploaders.multipart import (
    PartUploadScheduler,
    RemoteArchiveClient,
    UploadSession,
    UploadState,
    format_range,
    part_range,
)
from glacierctl.uploaders.sources import SequentialByteSource, StreamSource, open_source
from glacierctl.uploaders.treehash import (
    ChunkHasher,
    compute_tree_hash,
    hash_chunks,
    tree_hash,
    tree_hash_hex,
)

__all__ = [
    # Constants
    "DEFAULT_PART_SIZE_MB",
    "DEFAULT_TIMEOUT",
    "DIGEST_SIZE",
    "HASH_CHUNK_SIZE",
    "MEGABYTE",
    # Tree hash
    "ChunkHasher",
    "compute_tree_hash",
    "hash_chunks",
    "tree_hash",
    "tree_hash_hex",
    # Sources
    "SequentialByteSource",
    "StreamSource",
    "open_source",
    # Multipart
    "PartUploadScheduler",
    "RemoteArchiveClient",
    "UploadSession",
    "UploadState",
    "format_range",
    "part_range",
]
