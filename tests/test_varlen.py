"""Tests for wspan_dir.varlen: variable-length token codec."""
from __future__ import annotations

import pytest

from wspan_dir.errors import InvalidLengthPrefixError, TruncatedReadError
from wspan_dir.ribbon import Ribbon
from wspan_dir.varlen import (
    Digit,
    NonDigit,
    decode_marker,
    encode_var_number,
    encode_var_string,
    parse_int_prefix,
    read_var_number,
    read_var_string,
)


class TestDecodeMarker:
    def test_digit(self) -> None:
        assert decode_marker("7") == Digit(7)

    def test_non_digit(self) -> None:
        assert decode_marker("Q") == NonDigit("Q")

    def test_non_ascii_digit_is_not_a_count(self) -> None:
        assert decode_marker("٣") == NonDigit("٣")

    def test_match_dispatch(self) -> None:
        seen: list[str] = []
        for ch in "3*":
            match decode_marker(ch):
                case Digit(count=k):
                    seen.append(f"count:{k}")
                case NonDigit(char=c):
                    seen.append(f"char:{c}")
        assert seen == ["count:3", "char:*"]


class TestReadVarString:
    @pytest.mark.parametrize("k", range(10))
    def test_count_prefixed(self, k: int) -> None:
        payload = "A*>0/9 b$z"[:k]
        r = Ribbon(f"{k}{payload}REST")
        assert read_var_string(r) == payload
        assert r.pos == 1 + len(payload)
        assert r.remaining() == "REST"

    @pytest.mark.parametrize("ch", ["A", "*", ">", "/"])
    def test_short_form_consumes_one_char(self, ch: str) -> None:
        r = Ribbon(f"{ch}212")
        assert read_var_string(r) == ch
        assert r.pos == 1

    def test_truncated_count_returns_remainder(self) -> None:
        r = Ribbon("5ab")
        assert read_var_string(r) == "ab"
        assert r.at_end()

    def test_truncated_count_strict_raises_with_partial(self) -> None:
        r = Ribbon("5ab", base=100)
        with pytest.raises(TruncatedReadError) as excinfo:
            read_var_string(r, strict=True)
        err = excinfo.value
        assert err.partial == "ab"
        assert err.expected == 5
        assert err.available == 2
        assert err.position == 100
        assert r.at_end()

    def test_empty_input(self) -> None:
        assert read_var_string(Ribbon("")) == ""
        with pytest.raises(TruncatedReadError, match="end of input"):
            read_var_string(Ribbon(""), strict=True)


class TestReadVarNumber:
    def test_multi_digit(self) -> None:
        r = Ribbon("3175X")
        assert read_var_number(r) == 175
        assert r.remaining() == "X"

    def test_zero_forms(self) -> None:
        assert read_var_number(Ribbon("10")) == 0
        assert read_var_number(Ribbon("0")) == 0

    def test_non_numeric_lenient_is_none(self) -> None:
        assert read_var_number(Ribbon("X")) is None

    def test_non_numeric_strict_raises(self) -> None:
        with pytest.raises(InvalidLengthPrefixError, match="numeric") as excinfo:
            read_var_number(Ribbon("X"), strict=True)
        assert excinfo.value.token == "X"

    def test_digit_prefix_lenient(self) -> None:
        assert read_var_number(Ribbon("21a")) == 1
        with pytest.raises(InvalidLengthPrefixError):
            read_var_number(Ribbon("21a"), strict=True)


class TestParseIntPrefix:
    def test_values(self) -> None:
        assert parse_int_prefix("42") == 42
        assert parse_int_prefix("7up") == 7
        assert parse_int_prefix("up7") is None
        assert parse_int_prefix("") is None


class TestEncoders:
    def test_encode_var_string(self) -> None:
        assert encode_var_string("abc") == "3abc"
        assert encode_var_string("") == "0"

    def test_encode_var_string_too_long(self) -> None:
        with pytest.raises(ValueError, match="too long"):
            encode_var_string("x" * 10)

    def test_encode_var_number(self) -> None:
        assert encode_var_number(12) == "212"
        assert encode_var_number(0) == "10"
        assert read_var_number(Ribbon(encode_var_number(11175))) == 11175

    def test_encode_var_number_negative(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            encode_var_number(-1)
