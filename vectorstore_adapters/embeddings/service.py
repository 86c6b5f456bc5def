"""Embedding service interface and implementations."""

import time
from abc import ABC, abstractmethod

import httpx

from vectorstore_adapters.config import EmbeddingSettings, get_settings
from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.embeddings.models import EmbeddingResult
from vectorstore_adapters.exceptions import EmbeddingError, ErrorCode
from vectorstore_adapters.logging_config import get_logger
from vectorstore_adapters.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Converts text into fixed-length vectors. Vector stores call it for
    every document they upload and every query they run.
    """

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects, in input order.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...

    def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text.

        Raises:
            EmbeddingError: If embedding fails.
        """
        return self.embed_batch([text])[0].embedding

    def embed_document(self, document: Document) -> list[float]:
        """Generate the embedding vector for a document's content."""
        return self.embed(document.content)


class HTTPEmbeddingService(EmbeddingService):
    """Embedding service using HTTP API.

    Compatible with OpenAI-style embedding APIs and
    text-embeddings-inference (TEI) servers.
    """

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "BAAI/bge-large-en-v1.5": 1024,
        "BAAI/bge-base-en-v1.5": 768,
        "BAAI/bge-small-en-v1.5": 384,
        "sentence-transformers/all-MiniLM-L6-v2": 384,
        "text-embedding-ada-002": 1536,
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
    }

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the HTTP embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None
        self._dimensions: int | None = self._settings.dimensions

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._settings.timeout or None)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HTTPEmbeddingService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions."""
        if self._dimensions is not None:
            return self._dimensions

        if self._settings.model in self.MODEL_DIMENSIONS:
            return self.MODEL_DIMENSIONS[self._settings.model]

        raise EmbeddingError(
            f"Unknown dimensions for model {self._settings.model}; "
            "set EMBEDDING_DIMENSIONS or embed a text first",
            code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
            details={"model": self._settings.model},
        )

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects.

        Raises:
            EmbeddingError: If embedding fails.
        """
        if not texts:
            return []

        client = self._get_client()
        url = f"{self._settings.base_url}/embeddings"

        all_results: list[EmbeddingResult] = []
        batch_size = self._settings.batch_size

        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            start_time = time.perf_counter()
            try:
                batch_results = self._embed_batch_request(client, url, batch)
            except EmbeddingError:
                track_embedding_request(
                    self.model_name,
                    time.perf_counter() - start_time,
                    len(batch),
                    success=False,
                )
                raise
            track_embedding_request(
                self.model_name, time.perf_counter() - start_time, len(batch)
            )
            all_results.extend(batch_results)

        return all_results

    def _embed_batch_request(
        self,
        client: httpx.Client,
        url: str,
        texts: list[str],
    ) -> list[EmbeddingResult]:
        """Make embedding request for a batch.

        Raises:
            EmbeddingError: If request fails.
        """
        payload = {
            "input": texts,
            "model": self._settings.model,
        }

        try:
            response = client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"url": url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Embedding request error: {e}", extra={"url": url})
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                details={"url": url},
            ) from e

        try:
            data = response.json()
            embeddings = data["data"]
            if len(embeddings) != len(texts):
                raise ValueError(
                    f"expected {len(texts)} embeddings, got {len(embeddings)}"
                )

            results: list[EmbeddingResult] = []
            for text, emb_data in zip(texts, embeddings, strict=True):
                embedding = emb_data["embedding"]

                if self._dimensions is None and embedding:
                    self._dimensions = len(embedding)

                results.append(
                    EmbeddingResult(
                        text=text,
                        embedding=embedding,
                        model=self._settings.model,
                        dimensions=len(embedding),
                    )
                )

            return results

        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                details={"error": str(e)},
            ) from e
