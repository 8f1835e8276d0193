"""QVD core functionality."""

from .bits import BitCursor, decode_row_indexes
from .document import Column, QvdDocument, RowView
from .errors import (
    DecodeError,
    IndexOutOfRangeError,
    MetadataError,
    NumericParseError,
    QvdError,
    QvdIOError,
    TruncatedIndexError,
    TruncatedSymbolError,
    UnknownSymbolTagError,
)
from .metadata import parse_table_header, read_table_header, split_header
from .models import FieldDescriptor, Symbol, SymbolKind, TableHeader
from .reader import QvdReader, read_qvd
from .symbols import decode_symbols

__all__ = [
    "read_qvd",
    "QvdReader",
    "QvdDocument",
    "Column",
    "RowView",
    "FieldDescriptor",
    "TableHeader",
    "Symbol",
    "SymbolKind",
    "BitCursor",
    "decode_row_indexes",
    "decode_symbols",
    "split_header",
    "parse_table_header",
    "read_table_header",
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
