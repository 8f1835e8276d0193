"""
QVD data models: header descriptors and decoded symbols.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from qvd.core.constants import DOUBLE_STRUCT

Number = Union[int, float]
CellValue = Union[int, float, str]


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Layout of a single field (column) as declared in the XML header.

    Attributes:
        name: Field name
        bit_width: Width of the row index entry in bits (0 = constant column)
        bias: Added to the raw bit value to obtain the symbol index
        bit_offset: Bit position of the entry inside a row record
        symbol_offset: Start of the symbol table, relative to the symbol section
        symbol_length: Byte length of the symbol table
        symbol_count: Declared number of symbols (None when not declared)
    """

    name: str
    bit_width: int
    bias: int
    bit_offset: int
    symbol_offset: int
    symbol_length: int
    symbol_count: Optional[int] = None

    @property
    def symbol_end(self) -> int:
        return self.symbol_offset + self.symbol_length

    @property
    def bit_end(self) -> int:
        return self.bit_offset + self.bit_width

    def __repr__(self) -> str:
        return (
            f"FieldDescriptor(name={self.name!r}, "
            f"bits={self.bit_offset}+{self.bit_width}, bias={self.bias}, "
            f"symbols={self.symbol_offset}:{self.symbol_end})"
        )


@dataclass(frozen=True)
class TableHeader:
    """
    Parsed QVD header.

    Attributes:
        table_name: Table name (informational)
        record_count: Number of rows
        record_byte_size: Size of one packed row record in bytes
        symbol_table_length: Byte length of the whole symbol-table section
        index_length: Declared byte length of the row index block (if any)
        data_start: Absolute offset where the symbol-table section begins
        fields: Field descriptors in declared order
    """

    table_name: str
    record_count: int
    record_byte_size: int
    symbol_table_length: int
    index_length: Optional[int]
    data_start: int
    fields: tuple[FieldDescriptor, ...]

    @property
    def index_start(self) -> int:
        """Absolute offset of the row index block."""
        return self.data_start + self.symbol_table_length

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __repr__(self) -> str:
        return (
            f"TableHeader(table={self.table_name!r}, "
            f"records={self.record_count}, fields={len(self.fields)}, "
            f"record_bytes={self.record_byte_size}, "
            f"symbols={self.data_start}:{self.index_start})"
        )


class SymbolKind(str, Enum):
    """Closed set of symbol variants, one per type tag."""

    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    DUAL_INTEGER = "dual_integer"
    DUAL_DOUBLE = "dual_double"

    @property
    def is_dual(self) -> bool:
        return self in (SymbolKind.DUAL_INTEGER, SymbolKind.DUAL_DOUBLE)


@dataclass(frozen=True, eq=False)
class Symbol:
    """
    One unique value of a field's symbol table.

    Integer/double symbols carry only ``number``, string symbols only
    ``text``, dual symbols carry both: the parsed number and the original
    text as stored on disk.
    """

    kind: SymbolKind
    number: Optional[Number] = None
    text: Optional[str] = None

    def _key(self) -> tuple[Any, ...]:
        # Doubles compare by bit pattern so NaN symbols equal themselves
        number: Any = self.number
        if isinstance(number, float):
            number = DOUBLE_STRUCT.pack(number)
        return (self.kind, number, self.text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @classmethod
    def integer(cls, value: int) -> "Symbol":
        return cls(SymbolKind.INTEGER, number=value)

    @classmethod
    def double(cls, value: float) -> "Symbol":
        return cls(SymbolKind.DOUBLE, number=value)

    @classmethod
    def string(cls, value: str) -> "Symbol":
        return cls(SymbolKind.STRING, text=value)

    @classmethod
    def dual_integer(cls, value: int, text: str) -> "Symbol":
        return cls(SymbolKind.DUAL_INTEGER, number=value, text=text)

    @classmethod
    def dual_double(cls, value: float, text: str) -> "Symbol":
        return cls(SymbolKind.DUAL_DOUBLE, number=value, text=text)

    @property
    def value(self) -> CellValue:
        """Native Python value: the number when present, else the text."""
        if self.number is not None:
            return self.number
        return self.text if self.text is not None else ""

    def __str__(self) -> str:
        if self.text is not None:
            return self.text
        return format_number(self.number)


def format_number(number: Optional[Number]) -> str:
    """Canonical decimal form; integral floats drop the fractional part."""
    if number is None:
        return ""
    if isinstance(number, float):
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return repr(number)
    return str(number)


__all__ = [
    "CellValue",
    "FieldDescriptor",
    "TableHeader",
    "SymbolKind",
    "Symbol",
    "format_number",
]
