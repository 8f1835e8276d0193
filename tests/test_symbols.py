"""Tests for symbol table decoding."""

import pytest

from qvd.core.errors import (
    DecodeError,
    NumericParseError,
    TruncatedSymbolError,
    UnknownSymbolTagError,
)
from qvd.core.models import Symbol, SymbolKind
from qvd.core.symbols import decode_symbols
from qvd_factory import (
    double_symbol,
    dual_double_symbol,
    dual_int_symbol,
    int_symbol,
    text_symbol,
)


def _decode(buf: bytes, **kwargs):
    return decode_symbols(buf, 0, len(buf), **kwargs)


@pytest.mark.unit
def test_double():
    buf = bytes(
        [
            0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x40, 0x7A, 0x40,
            0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x50, 0x7A, 0x40,
        ]
    )
    assert _decode(buf) == [Symbol.double(420.0), Symbol.double(421.0)]


@pytest.mark.unit
def test_int():
    buf = bytes([0x01, 0x0A, 0x00, 0x00, 0x00, 0x01, 0x14, 0x00, 0x00, 0x00])
    assert _decode(buf) == [Symbol.integer(10), Symbol.integer(20)]


@pytest.mark.unit
def test_negative_int():
    symbols = _decode(int_symbol(-7) + int_symbol(-(2**31)))
    assert [s.value for s in symbols] == [-7, -(2**31)]


@pytest.mark.unit
def test_string():
    buf = text_symbol("example text") + text_symbol("rust") + text_symbol("")
    assert _decode(buf) == [
        Symbol.string("example text"),
        Symbol.string("rust"),
        Symbol.string(""),
    ]


@pytest.mark.unit
def test_utf8_string():
    buf = bytes(
        [
            0x04, 0xE4, 0xB9, 0x9F, 0xE6, 0x9C, 0x89, 0xE4, 0xB8, 0xAD, 0xE6, 0x96, 0x87,
            0xE7, 0xAE, 0x80, 0xE4, 0xBD, 0x93, 0xE5, 0xAD, 0x97, 0x00,
            0x04, 0xF0, 0x9F, 0x90, 0x8D, 0xF0, 0x9F, 0xA6, 0x80, 0x00,
            0x04, 0x54, 0x72, 0xC3, 0xA4, 0x67, 0x65, 0x72, 0x00,
        ]
    )
    assert [s.text for s in _decode(buf)] == ["也有中文简体字", "🐍🦀", "Träger"]


@pytest.mark.unit
def test_mixed_numbers():
    buf = bytes(
        [
            0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x40, 0x7A, 0x40,
            0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x50, 0x7A, 0x40,
            0x01, 0x01, 0x00, 0x00, 0x00,
            0x01, 0x02, 0x00, 0x00, 0x00,
            0x05, 0x00, 0x00, 0x00, 0x00, 0x37, 0x30, 0x30, 0x30, 0x00,
            0x06, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x38, 0x36, 0x35, 0x2E, 0x32, 0x00,
        ]
    )
    assert _decode(buf) == [
        Symbol.double(420.0),
        Symbol.double(421.0),
        Symbol.integer(1),
        Symbol.integer(2),
        Symbol.dual_integer(7000, "7000"),
        Symbol.dual_double(865.2, "865.2"),
    ]


@pytest.mark.unit
def test_dual_symbols_ignore_skipped_bytes():
    buf = dual_int_symbol("1234", junk=b"\x2a\x41\x50\x01") + dual_double_symbol(
        "0.5", junk=b"\x01" * 8
    )
    first, second = _decode(buf)

    assert first.kind is SymbolKind.DUAL_INTEGER
    assert (first.number, first.text) == (1234, "1234")
    assert second.kind is SymbolKind.DUAL_DOUBLE
    assert (second.number, second.text) == (0.5, "0.5")


@pytest.mark.unit
def test_dual_integer_keeps_leading_zeros():
    (symbol,) = _decode(dual_int_symbol("007"))

    assert symbol.number == 7
    assert str(symbol) == "007"


@pytest.mark.unit
def test_decoding_starts_at_offset():
    buf = b"\xff\xff" + int_symbol(5) + text_symbol("tail")
    symbols = decode_symbols(buf, 2, 5)

    assert symbols == [Symbol.integer(5)]


@pytest.mark.unit
def test_empty_range():
    assert decode_symbols(int_symbol(1), 0, 0) == []


@pytest.mark.unit
def test_unknown_tag_reports_field_and_offset():
    buf = b"\x00" * 3 + int_symbol(1) + b"\x09\x00\x00"
    with pytest.raises(UnknownSymbolTagError) as excinfo:
        decode_symbols(buf, 3, len(buf) - 3, field_name="Broken")

    err = excinfo.value
    assert err.tag == 9
    assert err.field_name == "Broken"
    assert err.offset == 8
    assert "field='Broken'" in str(err)
    assert isinstance(err, DecodeError)


@pytest.mark.unit
@pytest.mark.parametrize(
    "buf",
    [
        int_symbol(1)[:3],
        double_symbol(1.5)[:8],
        b"\x04abc",
        b"\x05\x00\x00",
        b"\x06\x00\x00\x00\x00\x00\x00\x00\x0012",
    ],
    ids=["integer", "double", "string", "dual-integer", "dual-double"],
)
def test_truncated_payload(buf):
    with pytest.raises(TruncatedSymbolError):
        _decode(buf, field_name="F")


@pytest.mark.unit
def test_string_terminator_outside_field_range():
    # The terminator exists in the buffer but past the field's declared length
    buf = text_symbol("abc")
    with pytest.raises(TruncatedSymbolError, match="Unterminated"):
        decode_symbols(buf, 0, len(buf) - 1)


@pytest.mark.unit
def test_range_beyond_buffer():
    with pytest.raises(TruncatedSymbolError, match="exceeds buffer"):
        decode_symbols(int_symbol(1), 0, 10, field_name="F")


@pytest.mark.unit
def test_fewer_symbols_than_declared():
    buf = int_symbol(1) + int_symbol(2)
    with pytest.raises(TruncatedSymbolError, match="declares 3"):
        _decode(buf, expected_count=3)


@pytest.mark.unit
def test_more_symbols_than_declared():
    buf = int_symbol(1) + int_symbol(2)
    with pytest.raises(DecodeError, match="declares 1") as excinfo:
        _decode(buf, expected_count=1)
    assert not isinstance(excinfo.value, TruncatedSymbolError)


@pytest.mark.unit
def test_dual_double_text_must_be_numeric():
    buf = text_symbol("rust") + dual_double_symbol("double")
    with pytest.raises(NumericParseError, match="double") as excinfo:
        _decode(buf, field_name="Mixed")
    assert excinfo.value.offset == 6


@pytest.mark.unit
def test_dual_integer_text_must_be_integer():
    with pytest.raises(NumericParseError):
        _decode(dual_int_symbol("12.5"))


@pytest.mark.unit
@pytest.mark.parametrize("text", ["1_000", " 7 ", "7 ", "\u0667", "+", "", "0x1F", "1e3"])
def test_dual_integer_rejects_non_decimal_text(text):
    with pytest.raises(NumericParseError):
        _decode(dual_int_symbol(text), field_name="F")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text", ["nan", "inf", "-Infinity", "1_000.5", " 2.5", "\u0661.5", ".", "1e", "1,5"]
)
def test_dual_double_rejects_non_decimal_text(text):
    with pytest.raises(NumericParseError):
        _decode(dual_double_symbol(text), field_name="F")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [("-12", -12), ("+3", 3), ("0007", 7)],
)
def test_dual_integer_accepts_decimal_text(text, expected):
    (symbol,) = _decode(dual_int_symbol(text))
    assert (symbol.number, str(symbol)) == (expected, text)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [("1.", 1.0), (".5", 0.5), ("-2.50", -2.5), ("1E3", 1000.0), ("6.02e-2", 0.0602), ("42", 42.0)],
)
def test_dual_double_accepts_decimal_text(text, expected):
    (symbol,) = _decode(dual_double_symbol(text))
    assert (symbol.number, str(symbol)) == (expected, text)


@pytest.mark.unit
def test_invalid_utf8_is_replaced():
    (symbol,) = _decode(b"\x04ab\xffc\x00")
    assert symbol.text == "ab�c"
