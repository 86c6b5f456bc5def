"""Vector store interface."""

from abc import ABC, abstractmethod
from types import TracebackType

from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.vectorstore.models import SearchRequest


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Every operation is synchronous and makes one round trip to the
    backing service.
    """

    @abstractmethod
    def add(self, documents: list[Document]) -> None:
        """Embed and upload documents.

        Each document's ``embedding`` is set as a side effect. The upload
        is all-or-nothing from the caller's point of view.

        Args:
            documents: Documents to store.

        Raises:
            VectorStoreError: If the upload fails.
            EmbeddingError: If a document cannot be embedded.
        """
        ...

    @abstractmethod
    def delete(self, ids: list[str]) -> bool:
        """Delete documents by id.

        Failures are logged, not raised.

        Args:
            ids: Document ids to delete.

        Returns:
            True if the backend accepted the deletion, False otherwise.
        """
        ...

    @abstractmethod
    def similarity_search(self, request: SearchRequest) -> list[Document]:
        """Find documents similar to the request's query text.

        Args:
            request: Query text, top-k and similarity threshold.

        Returns:
            Matching documents in backend order. Each carries a
            "distance" metadata entry.

        Raises:
            UnsupportedOperationError: If the request has a filter expression.
            VectorStoreError: If the query fails.
        """
        ...

    @abstractmethod
    def create_index(self, name: str | None = None) -> None:
        """Create the index.

        Args:
            name: Index name. Defaults to the configured index.

        Raises:
            VectorStoreError: If creation fails.
        """
        ...

    @abstractmethod
    def delete_index(self, name: str | None = None, delete_data: bool = True) -> None:
        """Drop the index.

        Args:
            name: Index name. Defaults to the configured index.
            delete_data: Also remove the stored documents.

        Raises:
            VectorStoreError: If deletion fails.
        """
        ...

    def close(self) -> None:
        """Release client resources owned by the store."""

    def __enter__(self) -> "VectorStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
