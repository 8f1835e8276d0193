"""Parsing of the XML header that precedes the binary sections of a QVD file."""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from typing import Optional

from qvd.core.constants import FIELD_TAG, HEADER_ROOT_TAG, HEADER_TERMINATOR
from qvd.core.errors import MetadataError
from qvd.core.models import FieldDescriptor, TableHeader


def split_header(buffer: bytes) -> tuple[bytes, int]:
    """
    Locate the end of the XML header.

    Returns:
        Tuple of (header bytes without terminator, offset of the symbol section)

    Raises:
        MetadataError: If the zero byte terminating the header is missing
    """
    end = buffer.find(HEADER_TERMINATOR)
    if end < 0:
        raise MetadataError("Header terminator not found", offset=len(buffer))
    return bytes(buffer[:end]), end + len(HEADER_TERMINATOR)


def _read_int(
    element: ET.Element,
    tag: str,
    *,
    required: bool,
    field_name: Optional[str] = None,
    allow_negative: bool = False,
) -> Optional[int]:
    raw = element.findtext(tag)
    if raw is None or not raw.strip():
        if required:
            raise MetadataError(f"Missing required attribute {tag}", field_name=field_name)
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        raise MetadataError(
            f"Attribute {tag} is not an integer: {raw.strip()!r}", field_name=field_name
        ) from None
    if value < 0 and not allow_negative:
        raise MetadataError(f"Attribute {tag} is negative: {value}", field_name=field_name)
    return value


def _parse_fields(root: ET.Element) -> list[FieldDescriptor]:
    container = root.find("Fields")
    if container is None:
        raise MetadataError("Missing required element Fields")

    fields: list[FieldDescriptor] = []
    next_bit_offset = 0
    for position, node in enumerate(container.findall(FIELD_TAG)):
        name = node.findtext("FieldName")
        if name is None:
            raise MetadataError(f"Missing required attribute FieldName on field #{position}")

        bit_width = _read_int(node, "BitWidth", required=True, field_name=name)
        bias = _read_int(node, "Bias", required=True, field_name=name, allow_negative=True)
        symbol_offset = _read_int(node, "Offset", required=True, field_name=name)
        symbol_length = _read_int(node, "Length", required=True, field_name=name)
        symbol_count = _read_int(node, "NoOfSymbols", required=False, field_name=name)
        bit_offset = _read_int(node, "BitOffset", required=False, field_name=name)
        if bit_offset is None:
            # Without BitOffset, fields are packed back to back in declared order
            bit_offset = next_bit_offset

        field = FieldDescriptor(
            name=name,
            bit_width=bit_width,  # type: ignore[arg-type]
            bias=bias,  # type: ignore[arg-type]
            bit_offset=bit_offset,
            symbol_offset=symbol_offset,  # type: ignore[arg-type]
            symbol_length=symbol_length,  # type: ignore[arg-type]
            symbol_count=symbol_count,
        )
        next_bit_offset = field.bit_end
        fields.append(field)
    return fields


def parse_table_header(header: bytes, data_start: int = 0) -> TableHeader:
    """
    Parse the XML header into a TableHeader.

    Args:
        header: Raw XML bytes (terminator excluded)
        data_start: Absolute offset of the symbol-table section

    Raises:
        MetadataError: If the XML is malformed or inconsistent
    """
    try:
        root = ET.fromstring(header.strip())
    except ET.ParseError as exc:
        raise MetadataError(f"Malformed XML header: {exc}") from exc

    if root.tag != HEADER_ROOT_TAG:
        raise MetadataError(f"Unexpected root element {root.tag!r} (expected {HEADER_ROOT_TAG!r})")

    fields = _parse_fields(root)
    record_count = _read_int(root, "NoOfRecords", required=True)

    record_byte_size = _read_int(root, "RecordByteSize", required=False)
    if record_byte_size is None:
        record_byte_size = math.ceil(max((f.bit_end for f in fields), default=0) / 8)

    symbol_table_length = _read_int(root, "Offset", required=False)
    if symbol_table_length is None:
        symbol_table_length = max((f.symbol_end for f in fields), default=0)

    record_bits = record_byte_size * 8
    for field in fields:
        if field.bit_end > record_bits:
            raise MetadataError(
                f"Bit range {field.bit_offset}+{field.bit_width} exceeds "
                f"record size of {record_byte_size} bytes",
                field_name=field.name,
            )
        if field.symbol_end > symbol_table_length:
            raise MetadataError(
                f"Symbol table {field.symbol_offset}:{field.symbol_end} exceeds "
                f"symbol section length {symbol_table_length}",
                field_name=field.name,
            )

    return TableHeader(
        table_name=(root.findtext("TableName") or "").strip(),
        record_count=record_count,  # type: ignore[arg-type]
        record_byte_size=record_byte_size,
        symbol_table_length=symbol_table_length,
        index_length=_read_int(root, "Length", required=False),
        data_start=data_start,
        fields=tuple(fields),
    )


def read_table_header(buffer: bytes) -> TableHeader:
    """Split and parse the header of a complete QVD buffer."""
    header, data_start = split_header(buffer)
    return parse_table_header(header, data_start)


__all__ = ["split_header", "parse_table_header", "read_table_header"]
