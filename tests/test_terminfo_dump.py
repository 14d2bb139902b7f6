"""Tests for scripts/terminfo_dump.py."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from scripts.terminfo_dump import build_parser, error_kind, extended_view, main
from terminfo import FormatError, TruncationError, decode_terminfo
from terminfo.io_utils import save_json
from terminfo_fixtures import build_extended, build_legacy, with_extended


def _write_entry(tmp_path: Path) -> Path:
    data = with_extended(
        build_legacy("xterm-kitty|KovIdTTY", bools=[0, 1], numbers=[80]),
        build_extended(bools=[("fullkbd", True)], strings=[("Sync", "\x1bP=%p1%ds\x1b\\")]),
    )
    path = tmp_path / "xterm-kitty"
    path.write_bytes(data)
    return path


def test_parser_requires_paths() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_dump_single_entry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_entry(tmp_path)
    assert main([str(path)]) == 0
    payload = json.loads(capsys.readouterr().out)
    entry = payload["entries"][str(path)]
    assert entry["names"] == ["xterm-kitty", "KovIdTTY"]
    assert entry["bools"] == {"bw": False, "am": True, "fullkbd": True}
    assert entry["numbers"] == {"cols": 80}
    assert entry["extended"]["strings"] == ["Sync"]
    assert payload["errors"] == []


def test_dump_extended_only(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_entry(tmp_path)
    assert main([str(path), "--extended-only"]) == 0
    entry = json.loads(capsys.readouterr().out)["entries"][str(path)]
    assert entry["bools"] == {"fullkbd": True}
    assert entry["numbers"] == {}
    assert entry["strings"] == {"Sync": "\x1bP=%p1%ds\x1b\\"}


def test_dump_reports_failures(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = _write_entry(tmp_path)
    truncated = tmp_path / "truncated"
    truncated.write_bytes(good.read_bytes()[:20])
    missing = tmp_path / "missing"

    assert main([str(good), str(truncated), str(missing), "--verbose"]) == 1
    captured = capsys.readouterr()
    payload = json.loads(captured.out)
    assert list(payload["entries"]) == [str(good)]
    kinds = {row["path"]: row["kind"] for row in payload["errors"]}
    assert kinds == {str(truncated): "truncated", str(missing): "io"}
    assert "Decoding" in captured.err
    assert "ERROR" in captured.err


def test_dump_uses_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_entry(tmp_path)
    config = tmp_path / "options.json"
    save_json({"max_entry_size": 16}, config)
    assert main([str(path), "--config", str(config)]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["errors"][0]["kind"] == "format"


def test_extended_view_matches_decoded_entry(tmp_path: Path) -> None:
    info = decode_terminfo(_write_entry(tmp_path).read_bytes())
    view = extended_view(info)
    assert view["names"] == ["xterm-kitty", "KovIdTTY"]
    assert view["bools"] == {"fullkbd": True}


def test_error_kind() -> None:
    assert error_kind(TruncationError("header", 12, 3, 0)) == "truncated"
    assert error_kind(FormatError("bad magic")) == "format"
    assert error_kind(FileNotFoundError("x")) == "io"
