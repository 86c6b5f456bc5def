"""Embedding service module."""

from vectorstore_adapters.embeddings.models import EmbeddingResult
from vectorstore_adapters.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
]

