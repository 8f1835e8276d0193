"""QvdReader: loads a QVD buffer and decodes its fields in parallel."""

from __future__ import annotations

import os
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Optional, Union

from qvd.core.bits import decode_row_indexes
from qvd.core.constants import MAX_DEFAULT_WORKERS
from qvd.core.document import Column, QvdDocument
from qvd.core.errors import QvdError, QvdIOError, TruncatedIndexError
from qvd.core.metadata import read_table_header
from qvd.core.models import FieldDescriptor, TableHeader
from qvd.core.symbols import decode_field_symbols
from qvd.monitoring.metrics import (
    DOCUMENTS_LOADED,
    FIELDS_DECODED,
    LOAD_DURATION,
    LOAD_FAILURES,
    ROWS_DECODED,
)
from qvd.utils.logging import get_logger, log_context

if TYPE_CHECKING:
    from qvd.config.config import ReaderConfig

logger = get_logger(__name__)

Source = Union[str, "os.PathLike[str]", bytes, bytearray, memoryview]


def default_workers() -> int:
    return min(MAX_DEFAULT_WORKERS, (os.cpu_count() or 1) + 4)


def _read_source(source: Source) -> tuple[bytes, str]:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), "<buffer>"
    path = os.fspath(source)
    try:
        with open(path, "rb") as f:
            return f.read(), str(path)
    except OSError as exc:
        raise QvdIOError(f"Cannot read QVD file {path!r}: {exc.strerror or exc}") from exc


def decode_column(buffer: bytes, header: TableHeader, field: FieldDescriptor) -> Column:
    """Decode one field into a Column (symbols, row indexes, row values)."""
    symbols = decode_field_symbols(buffer, header.data_start, field)
    indexes = decode_row_indexes(
        buffer,
        header.index_start,
        header.record_byte_size,
        header.record_count,
        field,
        symbol_count=len(symbols),
    )
    logger.debug(
        "field_decoded",
        field=field.name,
        symbols=len(symbols),
        bit_width=field.bit_width,
    )
    return Column.from_indexes(field.name, symbols, indexes)


class QvdReader:
    """
    Reader for QVD files.

    One task per field is submitted to a bounded thread pool; all tasks share
    the same read-only buffer. Columns are collected by field position, so
    the resulting order never depends on completion order.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        config: Optional["ReaderConfig"] = None,
    ) -> None:
        if max_workers is None and config is not None:
            max_workers = config.max_workers
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers or default_workers()

    def read(self, source: Source) -> QvdDocument:
        buffer, name = _read_source(source)
        return self.load(buffer, name=name)

    def load(self, buffer: bytes, name: str = "<buffer>") -> QvdDocument:
        """
        Decode a complete QVD buffer.

        Raises:
            QvdError: Any metadata or decode failure; no partial document is built
        """
        started = time.perf_counter()
        with log_context(source=name):
            try:
                header = read_table_header(buffer)
                logger.info(
                    "qvd_load_started",
                    table=header.table_name,
                    records=header.record_count,
                    fields=len(header.fields),
                    size_bytes=len(buffer),
                )
                self._check_index_length(header)
                columns = self._decode_columns(buffer, header)
            except QvdError as exc:
                LOAD_FAILURES.labels(error=exc.kind).inc()
                logger.error(
                    "qvd_load_failed",
                    error=exc.kind,
                    field=exc.field_name,
                    offset=exc.offset,
                    message=exc.message,
                )
                raise

            duration = time.perf_counter() - started
            LOAD_DURATION.observe(duration)
            DOCUMENTS_LOADED.inc()
            FIELDS_DECODED.inc(len(columns))
            ROWS_DECODED.inc(header.record_count)
            logger.info(
                "qvd_load_finished",
                table=header.table_name,
                records=header.record_count,
                fields=len(columns),
                duration_seconds=round(duration, 6),
            )
            return QvdDocument(header, columns)

    def _check_index_length(self, header: TableHeader) -> None:
        # Trailing bytes after the block are tolerated, a short block is not
        expected = header.record_count * header.record_byte_size
        if header.index_length is not None and header.index_length < expected:
            raise TruncatedIndexError(
                f"Declared index length {header.index_length} is smaller than "
                f"{header.record_count} records x {header.record_byte_size} bytes",
                offset=header.index_start,
            )

    def _decode_columns(self, buffer: bytes, header: TableHeader) -> list[Column]:
        if not header.fields:
            return []

        workers = min(self.max_workers, len(header.fields))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="qvd-field") as pool:
            futures: list[Future[Column]] = [
                pool.submit(decode_column, buffer, header, field) for field in header.fields
            ]
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                error = future.exception() if future in done else None
                if error is not None:
                    for other in futures:
                        other.cancel()
                    raise error
            # Collected by field position, not completion order
            return [future.result() for future in futures]


def read_qvd(
    source: Source,
    *,
    max_workers: Optional[int] = None,
    config: Optional["ReaderConfig"] = None,
) -> QvdDocument:
    """
    Load a QVD file (path or in-memory buffer) into a QvdDocument.

    Raises:
        QvdIOError: If the file cannot be read
        MetadataError: If the header is malformed
        DecodeError: If a symbol table or the row index block is corrupt
    """
    return QvdReader(max_workers=max_workers, config=config).read(source)


__all__ = ["QvdReader", "read_qvd", "decode_column", "default_workers"]
