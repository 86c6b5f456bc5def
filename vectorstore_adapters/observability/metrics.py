"""Prometheus metrics for the vector store adapters.

Provides metrics instrumentation for:
- Vector store operation latency and outcome per backend
- Documents uploaded
- Embedding request latency and batch size
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["store", "operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

VECTORSTORE_OPERATION_TOTAL = Counter(
    "vectorstore_operations_total",
    "Total vector store operations",
    ["store", "operation", "status"],
)

VECTORSTORE_DOCUMENTS_TOTAL = Counter(
    "vectorstore_documents_total",
    "Documents uploaded to a vector store",
    ["store"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

EMBEDDING_BATCH_SIZE = Histogram(
    "embedding_batch_size",
    "Embedding batch size",
    ["model"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500],
)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for a metrics response."""
    return CONTENT_TYPE_LATEST


@contextmanager
def track_vectorstore_operation(store: str, operation: str) -> Iterator[None]:
    """Time a vector store operation and count its outcome.

    The status label is "error" when the block raises; the exception
    propagates unchanged.

    Args:
        store: Backend name, e.g. "gemfire".
        operation: Operation name, e.g. "similarity_search".
    """
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        VECTORSTORE_OPERATION_DURATION.labels(
            store=store, operation=operation, status=status
        ).observe(duration)
        VECTORSTORE_OPERATION_TOTAL.labels(
            store=store, operation=operation, status=status
        ).inc()


def track_documents_uploaded(store: str, count: int) -> None:
    """Count documents sent to a store."""
    VECTORSTORE_DOCUMENTS_TOTAL.labels(store=store).inc(count)


def track_embedding_request(
    model: str,
    duration: float,
    batch_size: int,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        batch_size: Number of texts in the batch.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()
    EMBEDDING_BATCH_SIZE.labels(model=model).observe(batch_size)
