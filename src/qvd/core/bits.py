"""
Bit-level access to the row index block.

Row records pack one index per field without byte alignment. Bits are
stuffed least-significant first: a record read as a little-endian integer
holds each field's value at ``(record >> bit_offset) & mask``.
"""

from __future__ import annotations

from typing import Optional

from qvd.core.errors import IndexOutOfRangeError, TruncatedIndexError
from qvd.core.models import FieldDescriptor


class BitCursor:
    """
    Read-only cursor over a byte sequence addressed in bits.

    The position is ``byte_index * 8 + bit_offset``; ``read`` extracts the
    next ``width`` bits in stuffed order and advances past them.
    """

    def __init__(self, data: bytes, bit_position: int = 0) -> None:
        self._data = data
        self._limit = len(data) * 8
        self._position = 0
        self.seek(bit_position)

    @property
    def position(self) -> int:
        return self._position

    @property
    def byte_index(self) -> int:
        return self._position >> 3

    @property
    def bit_offset(self) -> int:
        return self._position & 7

    @property
    def remaining(self) -> int:
        return self._limit - self._position

    def seek(self, bit_position: int) -> None:
        if bit_position < 0 or bit_position > self._limit:
            raise TruncatedIndexError(
                f"Bit position {bit_position} outside buffer of {self._limit} bits",
                offset=bit_position >> 3,
            )
        self._position = bit_position

    def skip(self, bits: int) -> None:
        self.seek(self._position + bits)

    def peek(self, width: int) -> int:
        """Return the next ``width`` bits as an unsigned integer without advancing."""
        if width == 0:
            return 0
        end = self._position + width
        if end > self._limit:
            raise TruncatedIndexError(
                f"Need {width} bits at bit {self._position}, {self.remaining} left",
                offset=self.byte_index,
            )
        first = self._position >> 3
        last = (end + 7) >> 3
        chunk = int.from_bytes(self._data[first:last], "little")
        return (chunk >> (self._position & 7)) & ((1 << width) - 1)

    def read(self, width: int) -> int:
        value = self.peek(width)
        self._position += width
        return value


def decode_row_indexes(
    buffer: bytes,
    index_start: int,
    record_byte_size: int,
    record_count: int,
    field: FieldDescriptor,
    symbol_count: Optional[int] = None,
) -> list[int]:
    """
    Resolve the symbol index of every row for one field.

    Args:
        buffer: Full file content (shared, read-only)
        index_start: Absolute offset of the row index block
        record_byte_size: Size of one row record in bytes
        record_count: Number of rows
        field: Field whose entries are extracted
        symbol_count: Size of the field's symbol table; bounds-checked when given

    Raises:
        TruncatedIndexError: If the block is shorter than the declared rows
        IndexOutOfRangeError: If a resolved index falls outside the symbol table
    """
    block_end = index_start + record_count * record_byte_size
    if block_end > len(buffer):
        raise TruncatedIndexError(
            f"Row index block needs {record_count * record_byte_size} bytes, "
            f"{max(len(buffer) - index_start, 0)} available",
            field_name=field.name,
            offset=len(buffer),
        )

    def check(index: int, row: int) -> int:
        if index < 0 or (symbol_count is not None and index >= symbol_count):
            raise IndexOutOfRangeError(
                index,
                symbol_count if symbol_count is not None else 0,
                row=row,
                field_name=field.name,
                offset=index_start + row * record_byte_size,
            )
        return index

    if field.bit_width == 0:
        if record_count == 0:
            return []
        return [check(field.bias, 0)] * record_count

    cursor = BitCursor(buffer)
    base = index_start * 8 + field.bit_offset
    record_bits = record_byte_size * 8
    indexes: list[int] = []
    for row in range(record_count):
        cursor.seek(base + row * record_bits)
        indexes.append(check(cursor.read(field.bit_width) + field.bias, row))
    return indexes


__all__ = ["BitCursor", "decode_row_indexes"]
