"""Monitoring utilities for qvd."""

from .metrics import (
    DOCUMENTS_LOADED,
    FIELDS_DECODED,
    LOAD_DURATION,
    LOAD_FAILURES,
    ROWS_DECODED,
)

__all__ = [
    "DOCUMENTS_LOADED",
    "LOAD_FAILURES",
    "FIELDS_DECODED",
    "ROWS_DECODED",
    "LOAD_DURATION",
]
