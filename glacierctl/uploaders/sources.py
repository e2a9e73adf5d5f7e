"""Sequential byte sources feeding the part scheduler."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, Protocol

from glacierctl.core.exceptions import SourceReadError
from glacierctl.core.validation import STDIN_MARKER


class SequentialByteSource(Protocol):
    """Produces successive buffers; ``None`` marks end of stream."""

    def read_next(self, max_bytes: int) -> bytes | None: ...


class StreamSource:
    """Adapts a binary stream to ``SequentialByteSource``.

    Pipes and stdin may return short reads, so each call keeps reading
    until ``max_bytes`` are collected or the stream ends. Only the final
    buffer of a stream can be shorter than ``max_bytes``.
    """

    def __init__(self, stream: BinaryIO, name: str = "<stream>"):
        self.stream = stream
        self.name = name
        self.position = 0
        self._eof = False

    def read_next(self, max_bytes: int) -> bytes | None:
        if max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {max_bytes}")
        if self._eof:
            return None

        chunks: list[bytes] = []
        remaining = max_bytes
        while remaining:
            try:
                block = self.stream.read(remaining)
            except OSError as e:
                raise SourceReadError(self.name, str(e)) from e
            if not block:
                self._eof = True
                break
            chunks.append(block)
            remaining -= len(block)

        if not chunks:
            return None
        data = b"".join(chunks)
        self.position += len(data)
        return data


@contextmanager
def open_source(path: str) -> Iterator[StreamSource]:
    """Open a file, or standard input for ``-``, as a ``StreamSource``.

    Standard input is left open on exit.

    Raises:
        SourceReadError: If the file cannot be opened.
    """
    if path == STDIN_MARKER:
        yield StreamSource(sys.stdin.buffer, name="<stdin>")
        return

    try:
        stream = open(path, "rb")
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from e

    with stream:
        yield StreamSource(stream, name=path)
