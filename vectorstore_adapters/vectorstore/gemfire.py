"""GemFire VectorDB implementation of the vector store.

Talks to the GemFire VectorDB HTTP service under
``http[s]://{host}:{port}/gemfire-vectordb/v1/indexes``.
"""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vectorstore_adapters.config import GemFireSettings
from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.embeddings.service import EmbeddingService
from vectorstore_adapters.exceptions import (
    BadRequestError,
    ConfigurationError,
    ErrorCode,
    IndexNotFoundError,
    UnexpectedResponseError,
    UnsupportedOperationError,
    ValidationError,
    VectorStoreError,
)
from vectorstore_adapters.logging_config import get_logger
from vectorstore_adapters.observability.metrics import (
    track_documents_uploaded,
    track_vectorstore_operation,
)
from vectorstore_adapters.vectorstore.models import (
    CreateIndexRequest,
    DeleteIndexRequest,
    QueryRequest,
    QueryResult,
    SearchRequest,
    UploadEmbedding,
    check_reserved_keys,
    to_float32,
)
from vectorstore_adapters.vectorstore.service import VectorStore

logger = get_logger(__name__)

STORE_NAME = "gemfire"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_BEAM_WIDTH = 100
DEFAULT_MAX_CONNECTIONS = 16
DEFAULT_BUCKETS = 0
DEFAULT_SIMILARITY_FUNCTION = "COSINE"
DEFAULT_FIELDS = ("vector",)
DEFAULT_DOCUMENT_FIELD = "document"
DEFAULT_CONNECTION_TIMEOUT = 5.0
DEFAULT_REQUEST_TIMEOUT = 30.0

MAX_BEAM_WIDTH = 3199
MAX_CONNECTIONS = 512

BASE_PATH = "/gemfire-vectordb/v1/indexes"
EMBEDDINGS_PATH = "embeddings"
QUERY_PATH = "query"

_QUERY_RESULTS = TypeAdapter(list[QueryResult])


class GemFireVectorStoreConfig(BaseModel):
    """Connection and index-creation parameters for a GemFire index.

    Immutable. Build one with :meth:`builder` or :meth:`from_settings`.
    Timeouts are in seconds; 0 disables the timeout.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, gt=0)
    ssl_enabled: bool = False
    connection_timeout: float = Field(default=DEFAULT_CONNECTION_TIMEOUT, ge=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, ge=0)
    index_name: str = Field(min_length=1)
    beam_width: int = Field(default=DEFAULT_BEAM_WIDTH, gt=0, le=MAX_BEAM_WIDTH)
    max_connections: int = Field(default=DEFAULT_MAX_CONNECTIONS, gt=0, le=MAX_CONNECTIONS)
    buckets: int = Field(default=DEFAULT_BUCKETS, ge=0)
    vector_similarity_function: str = Field(default=DEFAULT_SIMILARITY_FUNCTION, min_length=1)
    fields: tuple[str, ...] = Field(default=DEFAULT_FIELDS, min_length=1)
    document_field: str = Field(default=DEFAULT_DOCUMENT_FIELD, min_length=1)

    @classmethod
    def builder(cls) -> "GemFireVectorStoreConfigBuilder":
        return GemFireVectorStoreConfigBuilder()

    @classmethod
    def from_settings(cls, settings: GemFireSettings) -> "GemFireVectorStoreConfig":
        """Build a config from GEMFIRE_* environment settings.

        Raises:
            ConfigurationError: If no index name is configured.
            ValidationError: If a setting is out of range.
        """
        if not settings.index_name:
            raise ConfigurationError(
                "GEMFIRE_INDEX_NAME must be set",
                details={"setting": "index_name"},
            )
        return (
            cls.builder()
            .with_host(settings.host)
            .with_port(settings.port)
            .with_ssl_enabled(settings.ssl_enabled)
            .with_connection_timeout(settings.connection_timeout)
            .with_request_timeout(settings.request_timeout)
            .with_index_name(settings.index_name)
            .with_beam_width(settings.beam_width)
            .with_max_connections(settings.max_connections)
            .with_buckets(settings.buckets)
            .with_vector_similarity_function(settings.vector_similarity_function)
            .with_fields(settings.fields)
            .with_document_field(settings.document_field)
            .build()
        )

    @property
    def base_url(self) -> str:
        scheme = "https" if self.ssl_enabled else "http"
        return f"{scheme}://{self.host}:{self.port}{BASE_PATH}"

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.request_timeout or None,
            connect=self.connection_timeout or None,
        )

    def create_client(self) -> httpx.Client:
        """Create an HTTP client bound to the index collection URL."""
        return httpx.Client(base_url=self.base_url, timeout=self.timeout)


class GemFireVectorStoreConfigBuilder:
    """Fluent builder for :class:`GemFireVectorStoreConfig`.

    Every ``with_*`` call validates its argument immediately.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def _set(self, name: str, value: Any, valid: bool, message: str) -> "GemFireVectorStoreConfigBuilder":
        if not valid:
            raise ValidationError(message, details={"field": name, "value": value})
        self._values[name] = value
        return self

    def with_host(self, host: str) -> "GemFireVectorStoreConfigBuilder":
        return self._set("host", host, bool(host and host.strip()), "host must have a value")

    def with_port(self, port: int) -> "GemFireVectorStoreConfigBuilder":
        return self._set("port", port, port > 0, "port must be positive")

    def with_ssl_enabled(self, ssl_enabled: bool) -> "GemFireVectorStoreConfigBuilder":
        self._values["ssl_enabled"] = ssl_enabled
        return self

    def with_connection_timeout(self, timeout: float) -> "GemFireVectorStoreConfigBuilder":
        return self._set("connection_timeout", timeout, timeout >= 0, "timeout must be >= 0")

    def with_request_timeout(self, timeout: float) -> "GemFireVectorStoreConfigBuilder":
        return self._set("request_timeout", timeout, timeout >= 0, "timeout must be >= 0")

    def with_index_name(self, index_name: str) -> "GemFireVectorStoreConfigBuilder":
        return self._set(
            "index_name",
            index_name,
            bool(index_name and index_name.strip()),
            "index_name must have a value",
        )

    def with_beam_width(self, beam_width: int) -> "GemFireVectorStoreConfigBuilder":
        if beam_width <= 0:
            raise ValidationError(
                "beam_width must be positive",
                details={"field": "beam_width", "value": beam_width},
            )
        return self._set(
            "beam_width",
            beam_width,
            beam_width <= MAX_BEAM_WIDTH,
            "beam_width must be less than 3200",
        )

    def with_max_connections(self, max_connections: int) -> "GemFireVectorStoreConfigBuilder":
        if max_connections <= 0:
            raise ValidationError(
                "max_connections must be positive",
                details={"field": "max_connections", "value": max_connections},
            )
        return self._set(
            "max_connections",
            max_connections,
            max_connections <= MAX_CONNECTIONS,
            "max_connections must be at most 512",
        )

    def with_buckets(self, buckets: int) -> "GemFireVectorStoreConfigBuilder":
        return self._set("buckets", buckets, buckets >= 0, "buckets must not be negative")

    def with_vector_similarity_function(self, function: str) -> "GemFireVectorStoreConfigBuilder":
        return self._set(
            "vector_similarity_function",
            function,
            bool(function and function.strip()),
            "vector_similarity_function must have a value",
        )

    def with_fields(self, fields: list[str] | tuple[str, ...]) -> "GemFireVectorStoreConfigBuilder":
        return self._set(
            "fields",
            tuple(fields),
            bool(fields) and all(f and f.strip() for f in fields),
            "fields must be a non-empty list of names",
        )

    def with_document_field(self, document_field: str) -> "GemFireVectorStoreConfigBuilder":
        return self._set(
            "document_field",
            document_field,
            bool(document_field and document_field.strip()),
            "document_field must have a value",
        )

    def build(self) -> GemFireVectorStoreConfig:
        """Create the config.

        Raises:
            ValidationError: If no index name was given.
        """
        if "index_name" not in self._values:
            raise ValidationError(
                "index_name must have a value",
                details={"field": "index_name"},
            )
        return GemFireVectorStoreConfig(**self._values)


def translate_http_error(exc: httpx.HTTPError, index_name: str) -> VectorStoreError:
    """Map an httpx failure to the adapter's error taxonomy.

    Args:
        exc: The failure raised by httpx.
        index_name: Index the request targeted, for the message.

    Returns:
        The exception to raise in place of ``exc``.
    """
    if not isinstance(exc, httpx.HTTPStatusError):
        return VectorStoreError(
            f"Got an unexpected error: {exc}",
            code=ErrorCode.TRANSPORT_ERROR,
            details={"index": index_name, "error": str(exc)},
        )

    status_code = exc.response.status_code
    details = {
        "index": index_name,
        "status_code": status_code,
        "body": exc.response.text[:500],
    }
    if status_code == httpx.codes.NOT_FOUND:
        return IndexNotFoundError(f"Index {index_name} not found: {exc}", details=details)
    if status_code == httpx.codes.BAD_REQUEST:
        return BadRequestError(f"Bad Request: {exc}", details=details)
    return UnexpectedResponseError(f"Got an unexpected HTTP error: {exc}", details=details)


class GemFireVectorStore(VectorStore):
    """Vector store backed by a GemFire VectorDB index.

    Document content travels in the metadata under the configured
    document field and is moved back into ``Document.content`` on search.
    """

    def __init__(
        self,
        config: GemFireVectorStoreConfig,
        embedding_service: EmbeddingService,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the GemFire vector store.

        Args:
            config: Connection and index parameters.
            embedding_service: Embeds documents and queries.
            client: Existing client bound to ``config.base_url`` (for testing).
        """
        self._config = config
        self._embedding_service = embedding_service
        self._client = client or config.create_client()
        self._owns_client = client is None

    @property
    def config(self) -> GemFireVectorStoreConfig:
        return self._config

    @property
    def index_name(self) -> str:
        return self._config.index_name

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    def _send(
        self,
        method: str,
        url: str,
        index_name: str,
        body: Any = None,
    ) -> httpx.Response:
        try:
            response = self._client.request(method, url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise translate_http_error(e, index_name) from e
        except (httpx.StreamError, RuntimeError) as e:
            # Stream misuse and sends on a closed client
            raise VectorStoreError(
                f"Got an unexpected error: {e}",
                code=ErrorCode.TRANSPORT_ERROR,
                details={"index": index_name, "error": str(e)},
            ) from e
        return response

    def add(self, documents: list[Document]) -> None:
        """Embed documents and upload them in one request."""
        if not documents:
            return

        with track_vectorstore_operation(STORE_NAME, "add"):
            uploads = []
            for document in documents:
                check_reserved_keys(document.metadata, self._config.document_field)
            for document in documents:
                document.embedding = self._embedding_service.embed_document(document)
                uploads.append(
                    UploadEmbedding.from_document(
                        document, document.embedding, self._config.document_field
                    ).to_wire()
                )

            logger.debug(
                f"Uploading {len(uploads)} embeddings",
                extra={"index": self.index_name},
            )
            self._send(
                "POST",
                f"/{self.index_name}/{EMBEDDINGS_PATH}",
                self.index_name,
                body=uploads,
            )

        track_documents_uploaded(STORE_NAME, len(uploads))

    def delete(self, ids: list[str]) -> bool:
        """Delete embeddings by key; never raises for remote failures."""
        try:
            with track_vectorstore_operation(STORE_NAME, "delete"):
                self._send(
                    "DELETE",
                    f"/{self.index_name}/{EMBEDDINGS_PATH}",
                    self.index_name,
                    body=ids,
                )
        except Exception as e:
            logger.warning(
                f"Error removing embeddings: {e}",
                extra={"index": self.index_name, "count": len(ids)},
            )
            return False
        return True

    def similarity_search(self, request: SearchRequest) -> list[Document]:
        """Query the index and return hits at or above the threshold."""
        if request.has_filter_expression:
            raise UnsupportedOperationError(
                "GemFire currently does not support metadata filter expressions.",
                details={"filter_expression": request.filter_expression},
            )

        with track_vectorstore_operation(STORE_NAME, "similarity_search"):
            vector = to_float32(self._embedding_service.embed(request.query))
            query = QueryRequest(
                vector=vector,
                top_k=request.top_k,
                k_per_bucket=request.top_k,
                include_metadata=True,
            )
            logger.debug(
                "Querying index",
                extra={"index": self.index_name, "top_k": request.top_k},
            )
            response = self._send(
                "POST",
                f"/{self.index_name}/{QUERY_PATH}",
                self.index_name,
                body=query.to_wire(),
            )

            try:
                hits = _QUERY_RESULTS.validate_json(response.content)
            except PydanticValidationError as e:
                raise VectorStoreError(
                    f"Malformed query response: {e}",
                    code=ErrorCode.TRANSPORT_ERROR,
                    details={"index": self.index_name},
                ) from e

        return [
            hit.to_document(self._config.document_field)
            for hit in hits
            if hit.score >= request.similarity_threshold
        ]

    def create_index(self, name: str | None = None) -> None:
        """Create the index using the configured index parameters."""
        index_name = name or self.index_name
        request = CreateIndexRequest(
            name=index_name,
            beam_width=self._config.beam_width,
            max_connections=self._config.max_connections,
            vector_similarity_function=self._config.vector_similarity_function,
            fields=list(self._config.fields),
            buckets=self._config.buckets,
        )
        logger.debug("Creating index", extra={"request": request.to_wire()})

        with track_vectorstore_operation(STORE_NAME, "create_index"):
            # The collection root has no trailing slash
            self._send(
                "POST",
                str(self._client.base_url).rstrip("/"),
                index_name,
                body=request.to_wire(),
            )
        logger.info(f"Created index: {index_name}")

    def delete_index(self, name: str | None = None, delete_data: bool = True) -> None:
        """Delete the index and, by default, its data."""
        index_name = name or self.index_name

        with track_vectorstore_operation(STORE_NAME, "delete_index"):
            self._send(
                "DELETE",
                f"/{index_name}",
                index_name,
                body=DeleteIndexRequest(delete_data=delete_data).to_wire(),
            )
        logger.info(f"Deleted index: {index_name}")
