"""Core types for compiled terminfo decoding.

Type hierarchy:
  Header          : Legacy 12-byte header plus derived sizes
  ExtendedHeader  : 10-byte header of the optional user-defined trailer
  TermInfo        : Decoded entry; read-only mappings keyed by short name
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

MAGIC_LEGACY = 0o432      # 16-bit numeric fields
MAGIC_EXTENDED = 0o1036   # 32-bit numeric fields

HEADER_SIZE = 12
EXTENDED_HEADER_SIZE = 10


@dataclass(frozen=True, slots=True)
class Header:
    """Legacy header fields, all little-endian signed 16-bit in the source."""

    magic: int
    names_size: int
    bool_count: int
    num_count: int
    str_count: int
    str_size: int

    @property
    def number_width(self) -> int:
        """Byte width of every numeric field in the entry."""
        return 4 if self.magic == MAGIC_EXTENDED else 2

    @property
    def entry_size(self) -> int:
        """Declared size of the legacy section, header and padding included."""
        pad = (self.names_size + self.bool_count) & 1
        return (
            HEADER_SIZE
            + self.names_size
            + self.bool_count
            + pad
            + self.num_count * self.number_width
            + self.str_count * 2
            + self.str_size
        )


@dataclass(frozen=True, slots=True)
class ExtendedHeader:
    """Header of the user-defined capability trailer."""

    bool_count: int
    num_count: int
    str_count: int
    str_size: int   # number of used string-table slots; informational
    str_limit: int  # byte size of the trailing value + name blob

    @property
    def name_count(self) -> int:
        return self.bool_count + self.num_count + self.str_count


@dataclass(frozen=True, slots=True)
class TermInfo:
    """A decoded terminfo entry.

    ``bools``, ``numbers`` and ``strings`` are independent namespaces keyed by
    short capability name. A capability missing from the source is missing
    from the mapping; there are no default values.

    The ``extended_*`` tuples name, in source order, the capabilities that
    came from the user-defined section.

    The hash skips the three mappings; equality still compares them.
    """

    names: tuple[str, ...]
    bools: Mapping[str, bool] = field(hash=False)
    numbers: Mapping[str, int] = field(hash=False)
    strings: Mapping[str, str] = field(hash=False)
    extended_bools: tuple[str, ...] = ()
    extended_numbers: tuple[str, ...] = ()
    extended_strings: tuple[str, ...] = ()
    number_width: int = 2

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "bools", MappingProxyType(dict(self.bools)))
        object.__setattr__(self, "numbers", MappingProxyType(dict(self.numbers)))
        object.__setattr__(self, "strings", MappingProxyType(dict(self.strings)))
        if self.number_width not in (2, 4):
            raise ValueError(f"number_width must be 2 or 4, got {self.number_width}")
        if -1 in self.numbers.values():
            raise ValueError("numbers must not contain the absent sentinel -1")

    @property
    def name(self) -> str:
        """Canonical terminal name ("" when the entry declares no names)."""
        return self.names[0] if self.names else ""

    @property
    def aliases(self) -> tuple[str, ...]:
        """Names between the canonical name and the trailing description."""
        return self.names[1:-1]

    @property
    def description(self) -> str:
        """Free-text description, the last name field when there are several."""
        return self.names[-1] if len(self.names) > 1 else ""

    def has_bool(self, cap: str) -> bool:
        return cap in self.bools

    def has_number(self, cap: str) -> bool:
        return cap in self.numbers

    def has_string(self, cap: str) -> bool:
        return cap in self.strings

    def get_bool(self, cap: str) -> bool | None:
        return self.bools.get(cap)

    def get_number(self, cap: str) -> int | None:
        return self.numbers.get(cap)

    def get_string(self, cap: str) -> str | None:
        return self.strings.get(cap)


def terminfo_to_dict(info: TermInfo) -> dict[str, Any]:
    """JSON-ready view of a decoded entry."""
    return {
        "names": list(info.names),
        "bools": dict(info.bools),
        "numbers": dict(info.numbers),
        "strings": dict(info.strings),
        "extended": {
            "bools": list(info.extended_bools),
            "numbers": list(info.extended_numbers),
            "strings": list(info.extended_strings),
        },
        "number_width": info.number_width,
    }
