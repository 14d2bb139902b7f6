"""Compiled terminfo entry decoder.

Construction: single forward pass over the stream, one stage per section.

  header → names → booleans → pad → numbers → string offsets → string blob
         → [pad] → extended header → extended booleans → pad
         → extended numbers → extended value offsets → name offsets → blob

Every stage consumes exactly the bytes the previous one left unread. The
extended trailer is optional: end of stream where it would begin is a normal
legacy-only entry, not an error.
"""
from __future__ import annotations

import io
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TypeVar

from terminfo.caps import BOOL_NAMES, NUMBER_NAMES, STRING_NAMES
from terminfo.config import DecodeOptions
from terminfo.errors import FormatError, TruncationError
from terminfo.stream import ByteSource, EntryReader, OffsetCursor, string_at
from terminfo.types import (
    EXTENDED_HEADER_SIZE,
    HEADER_SIZE,
    MAGIC_EXTENDED,
    MAGIC_LEGACY,
    ExtendedHeader,
    Header,
    TermInfo,
)

T = TypeVar("T")

ABSENT_NUMBER = -1

_DEFAULT_OPTIONS = DecodeOptions()


@dataclass(slots=True)
class _ExtendedCaps:
    bools: list[tuple[str, bool]]
    numbers: list[tuple[str, int]]
    strings: list[tuple[str, str]]


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def parse_header(raw: bytes, options: DecodeOptions | None = None) -> Header:
    """Parse and validate the 12-byte legacy header."""
    opts = options or _DEFAULT_OPTIONS
    if len(raw) != HEADER_SIZE:
        raise ValueError(f"header must be {HEADER_SIZE} bytes, got {len(raw)}")
    header = Header(*struct.unpack("<6h", raw))
    if header.magic not in (MAGIC_LEGACY, MAGIC_EXTENDED):
        raise FormatError(f"bad magic number {header.magic:#o}")
    for field_name in ("names_size", "bool_count", "num_count", "str_count", "str_size"):
        value = getattr(header, field_name)
        if value < 0:
            raise FormatError(f"negative {field_name} in header: {value}")
    if header.entry_size > opts.max_entry_size:
        raise FormatError(
            f"declared entry size {header.entry_size} exceeds "
            f"limit {opts.max_entry_size}"
        )
    return header


def _parse_extended_header(raw: bytes) -> ExtendedHeader:
    ext = ExtendedHeader(*struct.unpack("<5h", raw))
    for field_name in ("bool_count", "num_count", "str_count", "str_size", "str_limit"):
        value = getattr(ext, field_name)
        if value < 0:
            raise FormatError(f"negative extended {field_name}: {value}")
    return ext


# ---------------------------------------------------------------------------
# Legacy section stages
# ---------------------------------------------------------------------------

def _read_names(reader: EntryReader, header: Header, encoding: str) -> tuple[str, ...]:
    raw = reader.read_exact(header.names_size, "names")
    if not raw:
        return ()
    if raw[-1] != 0:
        raise FormatError("names section is not NUL-terminated")
    return tuple(_text(raw[:-1], encoding).split("|"))


def _read_flags(reader: EntryReader, count: int, section: str) -> list[bool]:
    return [b == 1 for b in reader.read_exact(count, section)]


def _read_numbers(
    reader: EntryReader, count: int, width: int, section: str,
) -> list[int | None]:
    """Numeric table with the absent sentinel replaced by None."""
    return [
        None if v == ABSENT_NUMBER else v
        for v in reader.read_ints(count, width, section)
    ]


def _read_legacy_strings(
    reader: EntryReader, header: Header, encoding: str,
) -> list[str | None]:
    offsets = reader.read_ints(header.str_count, 2, "string offsets")
    blob = reader.read_exact(header.str_size, "string table")
    values: list[str | None] = []
    for off in offsets:
        raw = string_at(blob, off, header.str_size)
        values.append(None if raw is None else _text(raw, encoding))
    return values


def _by_position(names: tuple[str, ...], values: list[T | None]) -> dict[str, T]:
    """Map table positions to static names, dropping absent and unknown slots."""
    return {
        name: value
        for name, value in zip(names, values)
        if value is not None
    }


# ---------------------------------------------------------------------------
# Extended section
# ---------------------------------------------------------------------------

def _name_region_start(blob: bytes, value_offsets: tuple[int, ...], limit: int) -> int:
    """First byte of the name region inside the extended blob.

    Names are packed right after the last value string, so the region starts
    one byte past the terminator of the highest in-range value offset. An
    orphaned value string stored beyond that offset is not detected.
    """
    valid = [off for off in value_offsets if 0 <= off < limit]
    if not valid:
        return 0
    highest = max(valid)
    end = blob.find(b"\x00", highest)
    if end < 0:
        return len(blob)
    return end + 1


def _recover_name(
    blob: bytes, base: int, cursor: OffsetCursor, encoding: str,
) -> str | None:
    """Consume one name offset and resolve it against the name region."""
    offset = cursor.next()
    if offset < 0:
        return None
    raw = string_at(blob, base + offset)
    if not raw:
        return None
    return _text(raw, encoding)


def _read_extended(
    reader: EntryReader, header: Header, encoding: str,
) -> _ExtendedCaps | None:
    """Parse the user-defined trailer; None when the stream ends before it."""
    if header.entry_size & 1 and not reader.read_up_to(1):
        return None
    header_start = reader.offset
    raw = reader.read_up_to(EXTENDED_HEADER_SIZE)
    if not raw:
        return None
    if len(raw) != EXTENDED_HEADER_SIZE:
        raise TruncationError(
            "extended header", EXTENDED_HEADER_SIZE, len(raw), header_start,
        )
    ext = _parse_extended_header(raw)
    width = header.number_width

    flags = _read_flags(reader, ext.bool_count, "extended booleans")
    reader.skip_pad(ext.bool_count, "extended alignment")
    numbers = _read_numbers(reader, ext.num_count, width, "extended numbers")
    value_offsets = reader.read_ints(ext.str_count, 2, "extended string offsets")
    cursor = OffsetCursor(reader.read_ints(ext.name_count, 2, "extended name offsets"))
    blob = reader.read_exact(ext.str_limit, "extended string table")

    base = _name_region_start(blob, value_offsets, ext.str_limit)
    caps = _ExtendedCaps(bools=[], numbers=[], strings=[])

    # Name offsets are ordered: all booleans, then numbers, then strings.
    for flag in flags:
        name = _recover_name(blob, base, cursor, encoding)
        if name is not None:
            caps.bools.append((name, flag))
    for number in numbers:
        name = _recover_name(blob, base, cursor, encoding)
        if name is not None and number is not None:
            caps.numbers.append((name, number))
    for off in value_offsets:
        name = _recover_name(blob, base, cursor, encoding)
        raw_value = string_at(blob, off, ext.str_limit)
        if name is not None and raw_value is not None:
            caps.strings.append((name, _text(raw_value, encoding)))
    return caps


# ---------------------------------------------------------------------------
# Assembly and entry points
# ---------------------------------------------------------------------------

def _merge(
    legacy: dict[str, T], extended: list[tuple[str, T]],
) -> tuple[dict[str, T], tuple[str, ...]]:
    merged = dict(legacy)
    names: list[str] = []
    for name, value in extended:
        if name in merged:
            continue
        merged[name] = value
        names.append(name)
    return merged, tuple(names)


def _text(raw: bytes, encoding: str) -> str:
    return raw.decode(encoding, errors="surrogateescape")


def read_terminfo(
    stream: BinaryIO | ByteSource, options: DecodeOptions | None = None,
) -> TermInfo:
    """Decode one compiled terminfo entry from an open binary stream.

    Raises FormatError for structurally invalid entries and TruncationError
    when the stream ends inside a mandatory section.
    """
    opts = options or _DEFAULT_OPTIONS
    reader = EntryReader(stream)

    header = parse_header(reader.read_exact(HEADER_SIZE, "header"), opts)
    width = header.number_width

    names = _read_names(reader, header, opts.encoding)
    flags = _read_flags(reader, header.bool_count, "booleans")
    reader.skip_pad(header.names_size + header.bool_count, "alignment")
    numbers = _read_numbers(reader, header.num_count, width, "numbers")
    strings = _read_legacy_strings(reader, header, opts.encoding)

    bools = _by_position(BOOL_NAMES, flags)
    nums = _by_position(NUMBER_NAMES, numbers)
    strs = _by_position(STRING_NAMES, strings)

    ext = _read_extended(reader, header, opts.encoding)
    if ext is None:
        return TermInfo(
            names=names, bools=bools, numbers=nums, strings=strs,
            number_width=width,
        )

    bools, ext_bools = _merge(bools, ext.bools)
    nums, ext_numbers = _merge(nums, ext.numbers)
    strs, ext_strings = _merge(strs, ext.strings)
    return TermInfo(
        names=names,
        bools=bools,
        numbers=nums,
        strings=strs,
        extended_bools=ext_bools,
        extended_numbers=ext_numbers,
        extended_strings=ext_strings,
        number_width=width,
    )


def decode_terminfo(data: bytes, options: DecodeOptions | None = None) -> TermInfo:
    """Decode a compiled entry held in memory."""
    return read_terminfo(io.BytesIO(data), options)


def load_terminfo(path: Path, options: DecodeOptions | None = None) -> TermInfo:
    """Decode the compiled entry stored at ``path``."""
    with open(path, "rb") as fh:
        return read_terminfo(fh, options)
