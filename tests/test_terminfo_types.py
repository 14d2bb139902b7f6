"""Tests for terminfo.types."""
from __future__ import annotations

import dataclasses

import pytest

from terminfo import TermInfo, terminfo_to_dict
from terminfo.types import ExtendedHeader, Header


def _info() -> TermInfo:
    return TermInfo(
        names=("screen", "VT 100/ANSI X3.64 virtual terminal"),
        bools={"am": True, "AX": True},
        numbers={"cols": 80},
        strings={"cup": "\x1b[%i%p1%d;%p2%dH"},
        extended_bools=("AX",),
    )


class TestTermInfo:
    def test_mappings_are_read_only(self) -> None:
        info = _info()
        with pytest.raises(TypeError):
            info.bools["xenl"] = True  # type: ignore[index]

    def test_fields_are_frozen(self) -> None:
        info = _info()
        with pytest.raises(dataclasses.FrozenInstanceError):
            info.names = ()  # type: ignore[misc]

    def test_source_dict_is_copied(self) -> None:
        numbers = {"cols": 80}
        info = TermInfo(names=("vt100",), bools={}, numbers=numbers, strings={})
        numbers["lines"] = 24
        assert "lines" not in info.numbers

    def test_hashable(self) -> None:
        assert hash(_info()) == hash(_info())
        assert len({_info(), _info()}) == 1

    def test_hash_ignores_mappings_but_equality_does_not(self) -> None:
        a = TermInfo(names=("vt100",), bools={}, numbers={"cols": 80}, strings={})
        b = TermInfo(names=("vt100",), bools={}, numbers={"cols": 132}, strings={})
        assert hash(a) == hash(b)
        assert a != b

    def test_sentinel_rejected(self) -> None:
        with pytest.raises(ValueError, match="sentinel"):
            TermInfo(names=(), bools={}, numbers={"cols": -1}, strings={})

    def test_bad_number_width(self) -> None:
        with pytest.raises(ValueError, match="number_width"):
            TermInfo(names=(), bools={}, numbers={}, strings={}, number_width=3)

    def test_presence_and_lookup(self) -> None:
        info = _info()
        assert info.has_bool("am")
        assert not info.has_bool("xenl")
        assert info.get_bool("xenl") is None
        assert info.get_number("cols") == 80
        assert info.has_string("cup")
        assert info.get_string("el") is None

    def test_name_parts(self) -> None:
        info = _info()
        assert info.name == "screen"
        assert info.aliases == ()
        assert info.description == "VT 100/ANSI X3.64 virtual terminal"

    def test_single_name_has_no_description(self) -> None:
        info = TermInfo(names=("dumb",), bools={}, numbers={}, strings={})
        assert info.description == ""

    def test_to_dict(self) -> None:
        payload = terminfo_to_dict(_info())
        assert payload["names"] == ["screen", "VT 100/ANSI X3.64 virtual terminal"]
        assert payload["bools"] == {"am": True, "AX": True}
        assert payload["extended"] == {"bools": ["AX"], "numbers": [], "strings": []}
        assert payload["number_width"] == 2


class TestHeaders:
    def test_entry_size_with_pad(self) -> None:
        header = Header(magic=0o432, names_size=6, bool_count=1, num_count=2, str_count=3, str_size=10)
        assert header.entry_size == 12 + 6 + 1 + 1 + 4 + 6 + 10

    def test_extended_name_count(self) -> None:
        ext = ExtendedHeader(bool_count=2, num_count=1, str_count=4, str_size=9, str_limit=40)
        assert ext.name_count == 7
