"""Vector store module."""

from vectorstore_adapters.vectorstore.factory import create_vector_store
from vectorstore_adapters.vectorstore.gemfire import (
    GemFireVectorStore,
    GemFireVectorStoreConfig,
    GemFireVectorStoreConfigBuilder,
)
from vectorstore_adapters.vectorstore.models import SearchRequest
from vectorstore_adapters.vectorstore.service import VectorStore

__all__ = [
    "GemFireVectorStore",
    "GemFireVectorStoreConfig",
    "GemFireVectorStoreConfigBuilder",
    "SearchRequest",
    "VectorStore",
    "create_vector_store",
]
