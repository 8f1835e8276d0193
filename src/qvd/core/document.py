"""In-memory QVD document: column-major storage with a lazy row view."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Sequence, Union, overload

from qvd.core.models import CellValue, Symbol, TableHeader


@dataclass(frozen=True)
class Column:
    """
    One decoded field.

    Attributes:
        name: Field name
        symbols: Unique values of the field, in symbol-table order
        indexes: Symbol index of every row
        cells: Symbol of every row (``symbols[indexes[row]]``)
    """

    name: str
    symbols: tuple[Symbol, ...]
    indexes: tuple[int, ...]
    cells: tuple[Symbol, ...] = field(repr=False)

    @classmethod
    def from_indexes(
        cls, name: str, symbols: Sequence[Symbol], indexes: Sequence[int]
    ) -> "Column":
        symbols = tuple(symbols)
        return cls(
            name=name,
            symbols=symbols,
            indexes=tuple(indexes),
            cells=tuple(symbols[i] for i in indexes),
        )

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, row: int) -> CellValue:
        return self.cells[row].value

    def cell(self, row: int) -> Symbol:
        return self.cells[row]

    def values(self) -> list[CellValue]:
        return [c.value for c in self.cells]

    def texts(self) -> list[str]:
        """Row values rendered as text, dual symbols keep their stored text."""
        return [str(c) for c in self.cells]

    def __repr__(self) -> str:
        return f"Column(name={self.name!r}, rows={len(self.cells)}, symbols={len(self.symbols)})"


class RowView(Sequence[tuple[Any, ...]]):
    """
    Restartable, lazily computed sequence of row tuples.

    Each row is built on access by indexing every column at the row position;
    nothing is transposed up front.
    """

    def __init__(
        self,
        columns: tuple[Column, ...],
        record_count: int,
        convert: Callable[[Symbol], Any],
    ) -> None:
        self._columns = columns
        self._record_count = record_count
        self._convert = convert

    def __len__(self) -> int:
        return self._record_count

    def _row(self, row: int) -> tuple[Any, ...]:
        convert = self._convert
        return tuple(convert(col.cells[row]) for col in self._columns)

    @overload
    def __getitem__(self, index: int) -> tuple[Any, ...]: ...

    @overload
    def __getitem__(self, index: slice) -> list[tuple[Any, ...]]: ...

    def __getitem__(
        self, index: Union[int, slice]
    ) -> Union[tuple[Any, ...], list[tuple[Any, ...]]]:
        if isinstance(index, slice):
            return [self._row(i) for i in range(*index.indices(self._record_count))]
        if index < 0:
            index += self._record_count
        if not 0 <= index < self._record_count:
            raise IndexError(f"Row {index} out of range (rows={self._record_count})")
        return self._row(index)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        for row in range(self._record_count):
            yield self._row(row)

    def __repr__(self) -> str:
        return f"RowView(rows={self._record_count}, columns={len(self._columns)})"


def _native(symbol: Symbol) -> CellValue:
    return symbol.value


class QvdDocument:
    """
    Immutable, fully decoded QVD table.

    Safe to share between threads once constructed.
    """

    def __init__(self, header: TableHeader, columns: Sequence[Column]) -> None:
        self._header = header
        self._columns = tuple(columns)

    @classmethod
    def read(
        cls, path: Union[str, "os.PathLike[str]"], max_workers: Optional[int] = None
    ) -> "QvdDocument":
        from qvd.core.reader import read_qvd

        return read_qvd(path, max_workers=max_workers)

    @classmethod
    def from_bytes(cls, data: bytes, max_workers: Optional[int] = None) -> "QvdDocument":
        from qvd.core.reader import read_qvd

        return read_qvd(data, max_workers=max_workers)

    @property
    def header(self) -> TableHeader:
        return self._header

    @property
    def table_name(self) -> str:
        return self._header.table_name

    @property
    def record_count(self) -> int:
        return self._header.record_count

    @property
    def field_names(self) -> list[str]:
        return [c.name for c in self._columns]

    def columns(self) -> tuple[Column, ...]:
        return self._columns

    def column(self, name: str) -> Column:
        for col in self._columns:
            if col.name == name:
                return col
        raise KeyError(f"Column not found: {name}")

    def rows(self) -> RowView:
        """Rows as tuples of native values, in field order."""
        return RowView(self._columns, self.record_count, _native)

    def text_rows(self) -> RowView:
        """Rows as tuples of rendered text, in field order."""
        return RowView(self._columns, self.record_count, str)

    def __len__(self) -> int:
        return self.record_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QvdDocument):
            return NotImplemented
        return self._header == other._header and self._columns == other._columns

    def __hash__(self) -> int:
        return hash((self._header, self._columns))

    def __repr__(self) -> str:
        return (
            f"QvdDocument(table={self.table_name!r}, "
            f"rows={self.record_count}, columns={self.field_names})"
        )


__all__ = ["Column", "RowView", "QvdDocument"]
