"""Byte-level primitives shared by the decoder stages."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from terminfo.errors import TruncationError

_INT_FORMATS = {2: "h", 4: "i"}


class ByteSource(Protocol):
    def read(self, size: int = ..., /) -> bytes: ...


class EntryReader:
    """Forward-only reader over a byte stream that tracks its offset.

    ``read_exact`` retries short reads until the stream reports EOF, so pipes
    and sockets behave like regular files.
    """

    def __init__(self, stream: BinaryIO | ByteSource) -> None:
        self._stream = stream
        self.offset = 0

    def read_up_to(self, size: int) -> bytes:
        """Read ``size`` bytes, or fewer if the stream ends first."""
        chunks: list[bytes] = []
        remaining = size
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self.offset += len(data)
        return data

    def read_exact(self, size: int, section: str) -> bytes:
        start = self.offset
        data = self.read_up_to(size)
        if len(data) != size:
            raise TruncationError(section, size, len(data), start)
        return data

    def read_ints(self, count: int, width: int, section: str) -> tuple[int, ...]:
        """Read ``count`` little-endian signed integers of ``width`` bytes."""
        raw = self.read_exact(count * width, section)
        return struct.unpack(f"<{count}{_INT_FORMATS[width]}", raw)

    def skip_pad(self, odd_length: int, section: str) -> None:
        """Consume one alignment byte when ``odd_length`` is odd."""
        if odd_length & 1:
            self.read_exact(1, section)


@dataclass(slots=True)
class OffsetCursor:
    """Sequential consumer of an immutable offset table."""

    offsets: tuple[int, ...]
    position: int = 0

    def next(self) -> int:
        if self.position >= len(self.offsets):
            raise IndexError("offset table exhausted")
        value = self.offsets[self.position]
        self.position += 1
        return value


def string_at(blob: bytes, offset: int, limit: int | None = None) -> bytes | None:
    """Return the NUL-terminated bytes at ``offset`` in ``blob``.

    Offsets outside ``[0, limit)`` (``limit`` defaults to ``len(blob)``) mean
    the string is absent and yield None. A missing terminator ends the string
    at the end of the blob.
    """
    bound = len(blob) if limit is None else min(limit, len(blob))
    if offset < 0 or offset >= bound:
        return None
    end = blob.find(b"\x00", offset)
    if end < 0:
        end = len(blob)
    return blob[offset:end]
