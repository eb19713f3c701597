"""Prometheus metrics for the notes service.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Note operation metrics
# ---------------------------------------------------------------------------

NOTE_OPERATIONS = Counter(
    "notes_operations_total",
    "Total number of note operations",
    ["operation", "status"],  # status: success, not_found, storage_error
)

NOTES_STORED = Gauge(
    "notes_stored",
    "Number of notes in the collection after the last operation",
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS = Counter(
    "notes_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_DURATION = Histogram(
    "notes_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
)
