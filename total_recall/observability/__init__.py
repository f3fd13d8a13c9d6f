"""Observability helpers."""

from total_recall.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_scan,
    record_file_skipped,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_scan",
    "record_file_skipped",
]
