"""Redis (RediSearch) implementation of the vector store.

Documents are stored as hashes under ``{prefix}{id}`` with the content,
a float32 little-endian embedding blob and JSON-encoded metadata.
Requires the ``redis`` extra.
"""

import json
import struct
from collections.abc import Sequence
from typing import Any

import redis
from pydantic import BaseModel, ConfigDict, Field
from redis.commands.search.query import Query

from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.embeddings.service import EmbeddingService
from vectorstore_adapters.exceptions import (
    ErrorCode,
    IndexNotFoundError,
    UnsupportedOperationError,
    VectorStoreError,
)
from vectorstore_adapters.logging_config import get_logger
from vectorstore_adapters.observability.metrics import (
    track_documents_uploaded,
    track_vectorstore_operation,
)
from vectorstore_adapters.vectorstore.models import (
    DISTANCE_METADATA_FIELD,
    SearchRequest,
    check_reserved_keys,
)
from vectorstore_adapters.vectorstore.service import VectorStore

logger = get_logger(__name__)

STORE_NAME = "redis"

# Alias of the KNN distance in search results.
SCORE_FIELD = "vector_score"


class RedisVectorStoreConfig(BaseModel):
    """Index layout for a Redis vector store."""

    model_config = ConfigDict(frozen=True)

    index_name: str = Field(default="vectorstore-index", min_length=1)
    prefix: str = Field(default="embedding:", min_length=1)
    content_field: str = Field(default="content", min_length=1)
    embedding_field: str = Field(default="embedding", min_length=1)
    metadata_field: str = Field(default="metadata", min_length=1)
    vector_algorithm: str = Field(default="HNSW", pattern="^(HNSW|FLAT)$")
    distance_metric: str = Field(default="COSINE", pattern="^(COSINE|IP|L2)$")


def to_blob(vector: Sequence[float]) -> bytes:
    """Pack a vector as float32 little-endian bytes."""
    return struct.pack(f"<{len(vector)}f", *vector)


def _as_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def translate_redis_error(exc: redis.RedisError, index_name: str) -> VectorStoreError:
    """Map a redis-py failure to the adapter's error taxonomy."""
    details = {"index": index_name, "error": str(exc)}
    if isinstance(exc, redis.ResponseError) and (
        "unknown index name" in str(exc).lower() or "no such index" in str(exc).lower()
    ):
        return IndexNotFoundError(f"Index {index_name} not found: {exc}", details=details)
    if isinstance(exc, (redis.ConnectionError, redis.TimeoutError)):
        return VectorStoreError(
            f"Redis connection failed: {exc}",
            code=ErrorCode.TRANSPORT_ERROR,
            details=details,
        )
    return VectorStoreError(f"Redis command failed: {exc}", details=details)


class RedisVectorStore(VectorStore):
    """Vector store backed by a RediSearch vector index."""

    def __init__(
        self,
        config: RedisVectorStoreConfig,
        embedding_service: EmbeddingService,
        client: redis.Redis,
        initialize_schema: bool = False,
    ) -> None:
        """Initialize the Redis vector store.

        Args:
            config: Index layout.
            embedding_service: Embeds documents and queries.
            client: Redis connection.
            initialize_schema: Create the index now if it does not exist.
        """
        self._config = config
        self._embedding_service = embedding_service
        self._client = client

        if initialize_schema and not self.index_exists():
            self.create_index()

    @property
    def config(self) -> RedisVectorStoreConfig:
        return self._config

    @property
    def index_name(self) -> str:
        return self._config.index_name

    def _key(self, document_id: str) -> str:
        return f"{self._config.prefix}{document_id}"

    def close(self) -> None:
        self._client.close()

    def index_exists(self, name: str | None = None) -> bool:
        """Check whether the index is defined."""
        index_name = name or self.index_name
        try:
            self._client.ft(index_name).info()
        except redis.RedisError as e:
            error = translate_redis_error(e, index_name)
            if isinstance(error, IndexNotFoundError):
                return False
            raise error from e
        return True

    def add(self, documents: list[Document]) -> None:
        """Embed documents and write them in one pipeline."""
        if not documents:
            return

        with track_vectorstore_operation(STORE_NAME, "add"):
            pipe = self._client.pipeline(transaction=False)
            for document in documents:
                check_reserved_keys(document.metadata)
                document.embedding = self._embedding_service.embed_document(document)
                pipe.hset(
                    self._key(document.id),
                    mapping={
                        self._config.content_field: document.content,
                        self._config.embedding_field: to_blob(document.embedding),
                        self._config.metadata_field: json.dumps(document.metadata),
                    },
                )

            try:
                pipe.execute()
            except redis.RedisError as e:
                raise translate_redis_error(e, self.index_name) from e

        logger.debug(
            f"Stored {len(documents)} documents",
            extra={"index": self.index_name},
        )
        track_documents_uploaded(STORE_NAME, len(documents))

    def delete(self, ids: list[str]) -> bool:
        """Delete documents; True only if every key was removed."""
        if not ids:
            return True

        try:
            with track_vectorstore_operation(STORE_NAME, "delete"):
                deleted = self._client.delete(*(self._key(i) for i in ids))
        except redis.RedisError as e:
            logger.warning(
                f"Error removing documents: {e}",
                extra={"index": self.index_name, "count": len(ids)},
            )
            return False
        return deleted == len(ids)

    def similarity_search(self, request: SearchRequest) -> list[Document]:
        """Run a KNN query and return hits at or above the threshold."""
        if request.has_filter_expression:
            raise UnsupportedOperationError(
                "Redis vector store does not support metadata filter expressions yet.",
                details={"filter_expression": request.filter_expression},
            )

        with track_vectorstore_operation(STORE_NAME, "similarity_search"):
            vector = self._embedding_service.embed(request.query)
            query = (
                Query(
                    f"*=>[KNN {request.top_k} @{self._config.embedding_field} "
                    f"$vector AS {SCORE_FIELD}]"
                )
                .sort_by(SCORE_FIELD)
                .return_fields(
                    self._config.content_field,
                    self._config.metadata_field,
                    SCORE_FIELD,
                )
                .paging(0, request.top_k)
                .dialect(2)
            )
            try:
                result = self._client.ft(self.index_name).search(
                    query, query_params={"vector": to_blob(vector)}
                )
            except redis.RedisError as e:
                raise translate_redis_error(e, self.index_name) from e

        documents = []
        for doc in result.docs:
            distance = float(getattr(doc, SCORE_FIELD))
            if 1 - distance < request.similarity_threshold:
                continue
            raw_metadata = getattr(doc, self._config.metadata_field, None)
            metadata = json.loads(_as_str(raw_metadata)) if raw_metadata else {}
            metadata[DISTANCE_METADATA_FIELD] = distance
            documents.append(
                Document(
                    id=_as_str(doc.id).removeprefix(self._config.prefix),
                    content=_as_str(getattr(doc, self._config.content_field, "")),
                    metadata=metadata,
                )
            )
        return documents

    def create_index(self, name: str | None = None) -> None:
        """Create the vector index over the configured key prefix."""
        index_name = name or self.index_name
        dimensions = self._embedding_service.dimensions
        args: list[Any] = [
            "FT.CREATE", index_name,
            "ON", "HASH",
            "PREFIX", 1, self._config.prefix,
            "SCHEMA",
            self._config.content_field, "TEXT",
            self._config.metadata_field, "TEXT",
            self._config.embedding_field, "VECTOR", self._config.vector_algorithm, 6,
            "TYPE", "FLOAT32",
            "DIM", dimensions,
            "DISTANCE_METRIC", self._config.distance_metric,
        ]  # fmt: skip

        with track_vectorstore_operation(STORE_NAME, "create_index"):
            try:
                self._client.execute_command(*args)
            except redis.RedisError as e:
                raise translate_redis_error(e, index_name) from e
        logger.info(f"Created index: {index_name}", extra={"dimensions": dimensions})

    def delete_index(self, name: str | None = None, delete_data: bool = True) -> None:
        """Drop the index and, by default, the indexed hashes."""
        index_name = name or self.index_name
        args = ["FT.DROPINDEX", index_name]
        if delete_data:
            args.append("DD")

        with track_vectorstore_operation(STORE_NAME, "delete_index"):
            try:
                self._client.execute_command(*args)
            except redis.RedisError as e:
                raise translate_redis_error(e, index_name) from e
        logger.info(f"Deleted index: {index_name}")
