"""
Prometheus metrics collection for order-etl

This module provides metrics instrumentation for monitoring
cleaning throughput, data quality, and canonical store writes.
"""
import os
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from order_etl.core.models import PipelineResult

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

# Records processed counter
records_processed_total = Counter(
    name="order_etl_records_processed_total",
    documentation="Total number of raw orders processed by the pipeline",
    labelnames=["status"],  # status: accepted, rejected, duplicate
    registry=REGISTRY,
)

# Batch processing duration
processing_duration_seconds = Histogram(
    name="order_etl_processing_duration_seconds",
    documentation="Time spent cleaning one batch in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# Batch size
batch_size = Histogram(
    name="order_etl_batch_size_records",
    documentation="Number of raw orders in each batch",
    buckets=[10, 100, 1000, 10000, 100000, 1000000],
    registry=REGISTRY,
)

# Batches processed counter
batches_processed_total = Counter(
    name="order_etl_batches_processed_total",
    documentation="Total number of batches processed",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

# Rejections by reason code
rejections_total = Counter(
    name="order_etl_rejections_total",
    documentation="Total number of rejection reasons raised",
    labelnames=["reason"],
    registry=REGISTRY,
)

# Repairs by kind
repairs_total = Counter(
    name="order_etl_repairs_total",
    documentation="Total number of recoverable repairs applied",
    labelnames=["repair"],
    registry=REGISTRY,
)

# =======================
# CANONICAL STORE METRICS
# =======================

canonical_writes_total = Counter(
    name="order_etl_canonical_writes_total",
    documentation="Total number of records written to the canonical store",
    labelnames=["store"],
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


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: only bind a port when the endpoint is actually requested
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


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


# =======================
# METRICS COLLECTOR CLASS
# =======================

class MetricsCollector:
    """
    Metrics collector for the cleaning pipeline.

    Translates pipeline results and store writes into Prometheus metrics.
    """

    def record_batch(
        self,
        result: PipelineResult,
        duration_seconds: float = 0.0
    ) -> None:
        """
        Record a processed batch.

        Args:
            result: Outcome of the batch
            duration_seconds: Time taken to clean the batch
        """
        increment_counter(records_processed_total, len(result.accepted), status="accepted")
        increment_counter(records_processed_total, len(result.rejected), status="rejected")
        increment_counter(records_processed_total, len(result.discarded), status="duplicate")

        for rejected in result.rejected:
            for reason in rejected.reasons:
                increment_counter(rejections_total, 1, reason=reason.value)

        for repair, count in result.repairs.items():
            increment_counter(repairs_total, count, repair=repair)

        batch_size.observe(result.total_records)
        if duration_seconds > 0:
            processing_duration_seconds.observe(duration_seconds)
        increment_counter(batches_processed_total, 1, status="success")

    def record_batch_failure(self) -> None:
        """Record a batch aborted by a fatal error."""
        increment_counter(batches_processed_total, 1, status="failure")

    def record_canonical_write(self, store: str, record_count: int) -> None:
        """
        Record a bulk insert into the canonical store.

        Args:
            store: Store implementation name (e.g. "memory", "postgres")
            record_count: Number of records written
        """
        if record_count > 0:
            increment_counter(canonical_writes_total, record_count, store=store)
