"""Prometheus metrics for QVD loading."""

from prometheus_client import Counter, Histogram

# Counters
DOCUMENTS_LOADED = Counter(
    "qvd_documents_loaded_total", "Number of QVD documents loaded successfully"
)
LOAD_FAILURES = Counter(
    "qvd_load_failures_total", "QVD loads aborted by an error", ["error"]
)
FIELDS_DECODED = Counter(
    "qvd_fields_decoded_total", "Number of fields (columns) decoded"
)
ROWS_DECODED = Counter("qvd_rows_decoded_total", "Number of records decoded")

# Histograms
LOAD_DURATION = Histogram(
    "qvd_load_duration_seconds",
    "Duration of a complete QVD load (header, symbols and row indexes)",
)

__all__ = [
    "DOCUMENTS_LOADED",
    "LOAD_FAILURES",
    "FIELDS_DECODED",
    "ROWS_DECODED",
    "LOAD_DURATION",
]
