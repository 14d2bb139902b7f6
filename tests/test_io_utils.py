"""Tests for terminfo.io_utils."""
from __future__ import annotations

from pathlib import Path

from terminfo.io_utils import dumps_json, load_json, save_json


def test_save_and_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "entry.json"
    save_json({"names": ["vt100"], "numbers": {"cols": 80}}, path)
    assert load_json(path) == {"names": ["vt100"], "numbers": {"cols": 80}}


def test_dumps_sorts_keys() -> None:
    assert dumps_json({"b": 1, "a": 2}, pretty=False) == b'{"a":2,"b":1}'


def test_dumps_pretty_is_indented() -> None:
    assert b"\n  " in dumps_json({"a": [1]})
