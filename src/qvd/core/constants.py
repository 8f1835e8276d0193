"""
QVD format constants: header terminator, symbol tags and payload structs.
"""

from __future__ import annotations

import struct

# The XML header is terminated by the first zero byte ("...</QvdTableHeader>\r\n\0")
HEADER_TERMINATOR = b"\x00"
HEADER_ROOT_TAG = "QvdTableHeader"
FIELD_TAG = "QvdFieldHeader"

# Symbol type tags (one byte preceding every symbol)
TAG_INTEGER = 1  # <i4
TAG_DOUBLE = 2  # <f8
TAG_STRING = 4  # zero terminated text
TAG_DUAL_INTEGER = 5  # 4 unused bytes + zero terminated text
TAG_DUAL_DOUBLE = 6  # 8 unused bytes + zero terminated text

STRING_TERMINATOR = 0

# Struct formats for fixed-width payloads
INTEGER_STRUCT = struct.Struct("<i")
DOUBLE_STRUCT = struct.Struct("<d")

# Bytes skipped before the text of dual symbols
DUAL_INTEGER_SKIP = 4
DUAL_DOUBLE_SKIP = 8

TEXT_ENCODING = "utf-8"

# Worker pool upper bound used when no explicit size is configured
MAX_DEFAULT_WORKERS = 32
