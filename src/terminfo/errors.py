"""Exceptions raised while decoding a compiled terminfo entry."""
from __future__ import annotations


class TermInfoError(Exception):
    """Base class for decode failures."""


class FormatError(TermInfoError):
    """Raised when the entry is structurally invalid (magic, sizes, terminators)."""


class TruncationError(TermInfoError):
    """Raised when the stream ends before a mandatory field is fully read."""

    def __init__(self, section: str, expected: int, received: int, offset: int) -> None:
        super().__init__(
            f"truncated {section} at byte {offset}: "
            f"expected {expected} bytes, got {received}"
        )
        self.section = section
        self.expected = expected
        self.received = received
        self.offset = offset
