"""SHA-256 tree hash computation.

Archives are hashed in fixed 1 MiB sub-chunks. The leaf digests are reduced
pairwise into a single root: each adjacent pair is concatenated and hashed,
an unpaired trailing digest is carried up unchanged, and the process repeats
until one digest remains.

The same reduction produces both the part-level checksum (leaves of one
part) and the archive-level checksum (leaves of the whole stream).
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import BinaryIO

from glacierctl.uploaders.constants import DEFAULT_READ_SIZE, DIGEST_SIZE, HASH_CHUNK_SIZE


def hash_chunks(data: bytes, chunk_size: int = HASH_CHUNK_SIZE) -> list[bytes]:
    """SHA-256 each fixed-size sub-chunk of a buffer.

    Args:
        data: Buffer of any length.
        chunk_size: Sub-chunk size; the last sub-chunk may be shorter.

    Returns:
        One 32-byte digest per sub-chunk, in buffer order. Empty for an
        empty buffer.
    """
    view = memoryview(data)
    return [
        hashlib.sha256(view[i : i + chunk_size]).digest()
        for i in range(0, len(view), chunk_size)
    ]


def tree_hash(digests: Sequence[bytes]) -> bytes:
    """Reduce an ordered sequence of digests to the tree hash root.

    Args:
        digests: Non-empty sequence of 32-byte digests.

    Returns:
        Root digest. A single digest is returned unchanged.

    Raises:
        ValueError: If the sequence is empty.
    """
    if not digests:
        raise ValueError("tree hash requires at least one digest")

    level = list(digests)
    while len(level) > 1:
        parents: list[bytes] = []
        for i in range(0, len(level) - 1, 2):
            parents.append(hashlib.sha256(level[i] + level[i + 1]).digest())
        if len(level) % 2:
            parents.append(level[-1])
        level = parents
    return level[0]


def tree_hash_hex(digests: Sequence[bytes]) -> str:
    """Tree hash root as lowercase hex, the form used in request headers."""
    return tree_hash(digests).hex()


def linear_hash_hex(data: bytes) -> str:
    """Plain SHA-256 of a whole body as lowercase hex."""
    return hashlib.sha256(data).hexdigest()


class ChunkHasher:
    """Appends sub-chunk digests of successive buffers to a digest list.

    The list is owned by the caller (normally an ``UploadSession``) and is
    only ever appended to.
    """

    def __init__(self, digests: list[bytes] | None = None, chunk_size: int = HASH_CHUNK_SIZE):
        self.digests = digests if digests is not None else []
        self.chunk_size = chunk_size

    def update(self, data: bytes) -> list[bytes]:
        """Hash ``data`` and append its digests.

        Returns:
            The digests appended for this buffer only.
        """
        new = hash_chunks(data, self.chunk_size)
        self.digests.extend(new)
        return new

    def hexdigest(self) -> str:
        """Tree hash over everything hashed so far."""
        return tree_hash_hex(self.digests)


def compute_tree_hash(
    stream: BinaryIO,
    read_size: int = DEFAULT_READ_SIZE,
) -> tuple[str, int]:
    """Compute the tree hash of an entire binary stream.

    ``read_size`` must be a multiple of the sub-chunk size so that reads
    never split a sub-chunk.

    Args:
        stream: Binary stream positioned at the start of the data.
        read_size: Bytes requested per read.

    Returns:
        Tuple of (hex tree hash, total bytes read).

    Raises:
        ValueError: If ``read_size`` is not a multiple of 1 MiB or the
            stream is empty.
    """
    if read_size <= 0 or read_size % HASH_CHUNK_SIZE:
        raise ValueError(f"read_size must be a positive multiple of {HASH_CHUNK_SIZE}")

    hasher = ChunkHasher()
    total = 0
    buffer = bytearray()
    while True:
        block = stream.read(read_size - len(buffer))
        if not block:
            break
        buffer += block
        if len(buffer) == read_size:
            hasher.update(bytes(buffer))
            total += len(buffer)
            buffer.clear()
    if buffer:
        hasher.update(bytes(buffer))
        total += len(buffer)

    if not hasher.digests:
        raise ValueError("cannot compute tree hash of an empty stream")
    return hasher.hexdigest(), total


__all__ = [
    "DIGEST_SIZE",
    "ChunkHasher",
    "compute_tree_hash",
    "hash_chunks",
    "linear_hash_hex",
    "tree_hash",
    "tree_hash_hex",
]
