"""Decoding of per-field symbol tables."""

from __future__ import annotations

import re
from typing import Optional

from qvd.core.constants import (
    DOUBLE_STRUCT,
    DUAL_DOUBLE_SKIP,
    DUAL_INTEGER_SKIP,
    INTEGER_STRUCT,
    STRING_TERMINATOR,
    TAG_DOUBLE,
    TAG_DUAL_DOUBLE,
    TAG_DUAL_INTEGER,
    TAG_INTEGER,
    TAG_STRING,
    TEXT_ENCODING,
)
from qvd.core.errors import (
    DecodeError,
    NumericParseError,
    TruncatedSymbolError,
    UnknownSymbolTagError,
)
from qvd.core.models import FieldDescriptor, Symbol

# Plain ASCII decimal literals only: no underscores, padding, Unicode digits, nan or inf
INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
DOUBLE_TEXT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class _SymbolStream:
    """Cursor over one field's symbol table range."""

    def __init__(self, buffer: bytes, start: int, end: int, field_name: Optional[str]) -> None:
        self.buffer = buffer
        self.pos = start
        self.end = end
        self.field_name = field_name

    def take(self, size: int, what: str) -> bytes:
        if self.pos + size > self.end:
            raise TruncatedSymbolError(
                f"Truncated {what}: need {size} bytes, "
                f"{max(self.end - self.pos, 0)} left",
                field_name=self.field_name,
                offset=self.pos,
            )
        chunk = self.buffer[self.pos : self.pos + size]
        self.pos += size
        return chunk

    def take_text(self) -> str:
        terminator = self.buffer.find(bytes([STRING_TERMINATOR]), self.pos, self.end)
        if terminator < 0:
            raise TruncatedSymbolError(
                "Unterminated string symbol",
                field_name=self.field_name,
                offset=self.pos,
            )
        raw = self.buffer[self.pos : terminator]
        self.pos = terminator + 1
        return raw.decode(TEXT_ENCODING, errors="replace")


def _parse_int(text: str, field_name: Optional[str], offset: int) -> int:
    if INTEGER_TEXT.fullmatch(text) is None:
        raise NumericParseError(
            f"Dual integer text is not an integer: {text!r}",
            field_name=field_name,
            offset=offset,
        )
    return int(text)


def _parse_float(text: str, field_name: Optional[str], offset: int) -> float:
    if DOUBLE_TEXT.fullmatch(text) is None:
        raise NumericParseError(
            f"Dual double text is not a number: {text!r}",
            field_name=field_name,
            offset=offset,
        )
    return float(text)


def decode_symbols(
    buffer: bytes,
    start: int,
    length: int,
    field_name: Optional[str] = None,
    expected_count: Optional[int] = None,
) -> list[Symbol]:
    """
    Decode a symbol table occupying ``buffer[start:start + length]``.

    Args:
        buffer: Full file content (shared, read-only)
        start: Absolute offset of the first tag byte
        length: Byte length of the symbol table
        field_name: Used for error context only
        expected_count: Declared number of symbols, validated when given

    Returns:
        Symbols in on-disk order (list index = symbol index)

    Raises:
        UnknownSymbolTagError: On a tag outside {1, 2, 4, 5, 6}
        TruncatedSymbolError: If the range or the buffer ends mid-symbol
        NumericParseError: If a dual symbol's text is not a number
    """
    end = start + length
    if end > len(buffer):
        raise TruncatedSymbolError(
            f"Symbol table {start}:{end} exceeds buffer of {len(buffer)} bytes",
            field_name=field_name,
            offset=len(buffer),
        )

    stream = _SymbolStream(buffer, start, end, field_name)
    symbols: list[Symbol] = []
    while stream.pos < end:
        tag_offset = stream.pos
        tag = buffer[tag_offset]
        stream.pos += 1

        if tag == TAG_INTEGER:
            (value,) = INTEGER_STRUCT.unpack(stream.take(INTEGER_STRUCT.size, "integer"))
            symbols.append(Symbol.integer(value))
        elif tag == TAG_DOUBLE:
            (number,) = DOUBLE_STRUCT.unpack(stream.take(DOUBLE_STRUCT.size, "double"))
            symbols.append(Symbol.double(number))
        elif tag == TAG_STRING:
            symbols.append(Symbol.string(stream.take_text()))
        elif tag == TAG_DUAL_INTEGER:
            stream.take(DUAL_INTEGER_SKIP, "dual integer")
            text = stream.take_text()
            symbols.append(Symbol.dual_integer(_parse_int(text, field_name, tag_offset), text))
        elif tag == TAG_DUAL_DOUBLE:
            stream.take(DUAL_DOUBLE_SKIP, "dual double")
            text = stream.take_text()
            symbols.append(Symbol.dual_double(_parse_float(text, field_name, tag_offset), text))
        else:
            raise UnknownSymbolTagError(tag, field_name=field_name, offset=tag_offset)

    if expected_count is not None and len(symbols) != expected_count:
        error = TruncatedSymbolError if len(symbols) < expected_count else DecodeError
        raise error(
            f"Decoded {len(symbols)} symbols, header declares {expected_count}",
            field_name=field_name,
            offset=end,
        )
    return symbols


def decode_field_symbols(buffer: bytes, data_start: int, field: FieldDescriptor) -> list[Symbol]:
    """Decode the symbol table of ``field`` from a complete QVD buffer."""
    return decode_symbols(
        buffer,
        data_start + field.symbol_offset,
        field.symbol_length,
        field_name=field.name,
        expected_count=field.symbol_count,
    )


__all__ = ["decode_symbols", "decode_field_symbols"]
