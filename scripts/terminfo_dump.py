#!/usr/bin/env python3
"""Decode compiled terminfo entries and print them as JSON.

Usage:
    python3 scripts/terminfo_dump.py /usr/share/terminfo/x/xterm-256color

    # Several entries, custom decode options, only user-defined capabilities
    python3 scripts/terminfo_dump.py x/xterm v/vt100 \
      --config decode_options.json --extended-only --verbose

Structured JSON output goes to stdout; human messages go to stderr.
Exit status is 1 when any entry fails to decode.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from terminfo import (
    DecodeOptions,
    TermInfo,
    TermInfoError,
    TruncationError,
    load_terminfo,
    terminfo_to_dict,
)
from terminfo.io_utils import dumps_json


def dump_json(obj: Any) -> None:
    sys.stdout.buffer.write(dumps_json(obj))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()


def log(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode compiled terminfo entries and print them as JSON."
    )
    parser.add_argument(
        "paths", nargs="+", type=Path, help="Compiled terminfo entry files"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with decode options (max_entry_size, encoding).",
    )
    parser.add_argument(
        "--extended-only",
        action="store_true",
        help="Only report capabilities from the user-defined section.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Print progress to stderr"
    )
    return parser


def extended_view(info: TermInfo) -> dict[str, Any]:
    """Names plus only the user-defined capabilities of an entry."""
    return {
        "names": list(info.names),
        "bools": {k: info.bools[k] for k in info.extended_bools},
        "numbers": {k: info.numbers[k] for k in info.extended_numbers},
        "strings": {k: info.strings[k] for k in info.extended_strings},
    }


def error_kind(exc: Exception) -> str:
    if isinstance(exc, TruncationError):
        return "truncated"
    if isinstance(exc, TermInfoError):
        return "format"
    return "io"


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    options = DecodeOptions.from_json(args.config) if args.config else DecodeOptions()

    entries: dict[str, Any] = {}
    errors: list[dict[str, str]] = []
    for path in args.paths:
        if args.verbose:
            log(f"Decoding {path}...")
        try:
            info = load_terminfo(path, options)
        except (TermInfoError, OSError) as exc:
            log(f"ERROR: {path}: {exc}")
            errors.append({"path": str(path), "kind": error_kind(exc), "message": str(exc)})
            continue
        entries[str(path)] = extended_view(info) if args.extended_only else terminfo_to_dict(info)
        if args.verbose:
            log(
                f"  {info.name}: {len(info.bools)} bools, "
                f"{len(info.numbers)} numbers, {len(info.strings)} strings"
            )

    dump_json({"entries": entries, "errors": errors})
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
