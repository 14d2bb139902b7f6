"""Decoder for compiled terminfo entries."""

from terminfo.config import MAX_ENTRY_SIZE, DecodeOptions
from terminfo.decoder import decode_terminfo, load_terminfo, parse_header, read_terminfo
from terminfo.errors import FormatError, TermInfoError, TruncationError
from terminfo.types import ExtendedHeader, Header, TermInfo, terminfo_to_dict

__all__ = [
    "DecodeOptions",
    "ExtendedHeader",
    "FormatError",
    "Header",
    "MAX_ENTRY_SIZE",
    "TermInfo",
    "TermInfoError",
    "TruncationError",
    "decode_terminfo",
    "load_terminfo",
    "parse_header",
    "read_terminfo",
    "terminfo_to_dict",
]
