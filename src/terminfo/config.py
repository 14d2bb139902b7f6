"""Decoder configuration."""
from __future__ import annotations

import codecs
from dataclasses import dataclass, fields
from pathlib import Path

from terminfo.io_utils import load_json

# Upper bound on the declared size of a legacy entry. Guards against corrupt
# size fields driving large allocations.
MAX_ENTRY_SIZE = 32768


@dataclass(frozen=True, slots=True)
class DecodeOptions:
    """Knobs for a single decode call.

    ``encoding`` must be a codec that maps every byte to a character;
    ``latin-1`` keeps capability strings byte-for-byte.
    """

    max_entry_size: int = MAX_ENTRY_SIZE
    encoding: str = "latin-1"

    def __post_init__(self) -> None:
        if self.max_entry_size <= 0:
            raise ValueError(
                f"max_entry_size must be > 0, got {self.max_entry_size}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {self.encoding!r}") from exc

    @classmethod
    def from_json(cls, path: Path) -> DecodeOptions:
        """Load from a JSON object file. Unknown keys are rejected."""
        data = load_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"{path}: unknown option(s): {', '.join(unknown)}")
        return cls(
            max_entry_size=int(data.get("max_entry_size", MAX_ENTRY_SIZE)),
            encoding=str(data.get("encoding", "latin-1")),
        )
