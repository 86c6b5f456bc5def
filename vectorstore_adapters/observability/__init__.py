"""Observability module for metrics and monitoring."""

from vectorstore_adapters.observability.metrics import (
    get_metrics,
    track_documents_uploaded,
    track_embedding_request,
    track_vectorstore_operation,
)

__all__ = [
    "get_metrics",
    "track_documents_uploaded",
    "track_embedding_request",
    "track_vectorstore_operation",
]
