"""
Prometheus metrics collection for contactsync

Instrumentation for the ingestion path (uploads, upsert outcomes,
duplicate keys) and the export path (exports, snapshot replays), plus
counters for best-effort side effects that failed without failing the
primary operation.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

uploads_total = Counter(
    name="contactsync_uploads_total",
    documentation="Total number of upload ingestion runs",
    labelnames=["file_format", "status"],  # status: success, failure, rejected
    registry=REGISTRY,
)

rows_upserted_total = Counter(
    name="contactsync_rows_upserted_total",
    documentation="Total number of rows applied by the upsert engine",
    labelnames=["outcome"],  # outcome: inserted, updated
    registry=REGISTRY,
)

duplicate_keys_total = Counter(
    name="contactsync_duplicate_keys_total",
    documentation="Duplicate natural keys reported during ingestion",
    labelnames=["kind"],  # kind: in_file, existing
    registry=REGISTRY,
)

upload_batch_size = Histogram(
    name="contactsync_upload_batch_size_rows",
    documentation="Number of rows in each uploaded batch",
    buckets=[10, 100, 500, 1000, 5000, 10000, 50000, 100000],
    registry=REGISTRY,
)

upload_duration_seconds = Histogram(
    name="contactsync_upload_duration_seconds",
    documentation="Time spent ingesting one upload in seconds",
    labelnames=["file_format"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
    registry=REGISTRY,
)

# =======================
# EXPORT METRICS
# =======================

exports_total = Counter(
    name="contactsync_exports_total",
    documentation="Total number of exports produced",
    labelnames=["format", "status"],  # status: success, failure
    registry=REGISTRY,
)

exported_records_total = Counter(
    name="contactsync_exported_records_total",
    documentation="Total number of records written into export files",
    labelnames=["format"],
    registry=REGISTRY,
)

snapshot_replays_total = Counter(
    name="contactsync_snapshot_replays_total",
    documentation="Total number of snapshot page replays",
    labelnames=["status"],  # status: success, not_found
    registry=REGISTRY,
)

snapshot_missing_records_total = Counter(
    name="contactsync_snapshot_missing_records_total",
    documentation="Snapshot slots skipped because the record no longer exists",
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

side_effect_failures_total = Counter(
    name="contactsync_side_effect_failures_total",
    documentation="Non-fatal persistence failures (reports, snapshots, activity)",
    labelnames=["component"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(upload_duration_seconds, file_format="csv"):
            ...
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        metric = self.histogram.labels(**self.labels) if self.labels else self.histogram
        self.timer = metric.time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    if labels:
        histogram.labels(**labels).observe(value)
    else:
        histogram.observe(value)


# =======================
# PIPELINE HELPERS
# =======================

def record_ingestion(
    file_format: str,
    processed: int,
    inserted: int,
    updated: int,
    duplicates_in_file: int,
    duplicates_existing: int,
) -> None:
    """
    Record the outcome of a successful ingestion run.

    Args:
        file_format: Input format (csv, xlsx)
        processed: Rows processed
        inserted: Rows tagged as inserted
        updated: Rows tagged as updated
        duplicates_in_file: Distinct keys repeated inside the file
        duplicates_existing: Keys that already existed in the store
    """
    increment_counter(uploads_total, 1, file_format=file_format, status="success")
    observe_histogram(upload_batch_size, processed)
    if inserted:
        increment_counter(rows_upserted_total, inserted, outcome="inserted")
    if updated:
        increment_counter(rows_upserted_total, updated, outcome="updated")
    if duplicates_in_file:
        increment_counter(duplicate_keys_total, duplicates_in_file, kind="in_file")
    if duplicates_existing:
        increment_counter(duplicate_keys_total, duplicates_existing, kind="existing")


def record_side_effect_failure(component: str) -> None:
    """Count a best-effort write that failed (report, snapshot, activity)."""
    increment_counter(side_effect_failures_total, 1, component=component)
