"""Exception hierarchy for QVD decoding."""

from __future__ import annotations

from typing import Optional


class QvdError(Exception):
    """
    Base class for every failure raised while loading a QVD file.

    Attributes:
        field_name: Field being decoded when the error occurred (if any)
        offset: Absolute byte offset in the source buffer (if known)
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        offset: Optional[int] = None,
    ) -> None:
        self.message = message
        self.field_name = field_name
        self.offset = offset
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.field_name is not None:
            context.append(f"field={self.field_name!r}")
        if self.offset is not None:
            context.append(f"offset={self.offset}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    @property
    def kind(self) -> str:
        return type(self).__name__


class QvdIOError(QvdError):
    """Raised when the source file cannot be read."""


class MetadataError(QvdError):
    """Raised when the XML header is malformed or lacks required attributes."""


class DecodeError(QvdError):
    """Base class for failures in the symbol table or row index block."""


class UnknownSymbolTagError(DecodeError):
    """Raised on a symbol type tag outside {1, 2, 4, 5, 6}."""

    def __init__(
        self, tag: int, *, field_name: Optional[str] = None, offset: Optional[int] = None
    ) -> None:
        self.tag = tag
        super().__init__(
            f"Unknown symbol tag: {tag}", field_name=field_name, offset=offset
        )


class TruncatedSymbolError(DecodeError):
    """Raised when a symbol table ends before its declared payload."""


class TruncatedIndexError(DecodeError):
    """Raised when the row index block is shorter than the header declares."""


class IndexOutOfRangeError(DecodeError):
    """Raised when a resolved row index does not point into the symbol table."""

    def __init__(
        self,
        index: int,
        symbol_count: int,
        *,
        row: Optional[int] = None,
        field_name: Optional[str] = None,
        offset: Optional[int] = None,
    ) -> None:
        self.index = index
        self.symbol_count = symbol_count
        self.row = row
        super().__init__(
            f"Symbol index {index} out of range [0, {symbol_count}) at row {row}",
            field_name=field_name,
            offset=offset,
        )


class NumericParseError(DecodeError):
    """Raised when the text of a dual symbol is not a valid number."""


__all__ = [
    "QvdError",
    "QvdIOError",
    "MetadataError",
    "DecodeError",
    "UnknownSymbolTagError",
    "TruncatedSymbolError",
    "TruncatedIndexError",
    "IndexOutOfRangeError",
    "NumericParseError",
]
