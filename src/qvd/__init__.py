"""qvd - reader for QVD columnar table files."""

__version__ = "0.1.0"

from .config import ReaderConfig  # noqa: E402
from .core import (  # noqa: E402
    Column,
    DecodeError,
    IndexOutOfRangeError,
    MetadataError,
    NumericParseError,
    QvdDocument,
    QvdError,
    QvdIOError,
    QvdReader,
    Symbol,
    SymbolKind,
    TruncatedIndexError,
    TruncatedSymbolError,
    UnknownSymbolTagError,
    read_qvd,
)

__all__ = [
    "read_qvd",
    "QvdReader",
    "QvdDocument",
    "Column",
    "Symbol",
    "SymbolKind",
    "ReaderConfig",
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
