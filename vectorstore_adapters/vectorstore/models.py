"""Vector store data models.

``SearchRequest`` is the backend-independent query. The remaining models
are the GemFire VectorDB wire records; their aliases are the JSON field
names the service expects.
"""

from array import array
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.exceptions import ValidationError

# Result metadata key holding ``1 - score``.
DISTANCE_METADATA_FIELD = "distance"


class SearchRequest(BaseModel):
    """A similarity search query.

    Attributes:
        query: Text to search for; embedded before the query is sent.
        top_k: Number of nearest results to request.
        similarity_threshold: Minimum score a hit needs to be returned.
        filter_expression: Metadata filter. No adapter supports it yet.
    """

    query: str = Field(description="Query text")
    top_k: int = Field(default=4, ge=1, description="Requested number of results")
    similarity_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Minimum similarity score",
    )
    filter_expression: str | None = Field(
        default=None,
        description="Metadata filter expression",
    )

    @property
    def has_filter_expression(self) -> bool:
        return bool(self.filter_expression)


def to_float32(vector: Sequence[float]) -> list[float]:
    """Narrow a double-precision vector to single precision.

    The returned Python floats hold exactly the float32 values.
    """
    return array("f", vector).tolist()


def check_reserved_keys(metadata: dict[str, Any], *reserved_keys: str) -> None:
    """Reject caller metadata that would collide with store-owned keys.

    The distance key is always reserved.

    Raises:
        ValidationError: If ``metadata`` uses a reserved key.
    """
    for reserved in (DISTANCE_METADATA_FIELD, *reserved_keys):
        if reserved in metadata:
            raise ValidationError(
                f"Metadata key '{reserved}' is reserved by the vector store",
                details={"key": reserved},
            )


def inject_content(
    metadata: dict[str, Any],
    content_field: str,
    content: str,
) -> dict[str, Any]:
    """Return a copy of ``metadata`` with ``content`` stored under ``content_field``.

    Raises:
        ValidationError: If the caller's metadata already uses a reserved key.
    """
    check_reserved_keys(metadata, content_field)
    return {**metadata, content_field: content}


def extract_content(
    metadata: dict[str, Any],
    content_field: str,
) -> tuple[str, dict[str, Any]]:
    """Split stored metadata into (content, remaining metadata)."""
    remaining = dict(metadata)
    content = remaining.pop(content_field, None)
    return ("" if content is None else str(content)), remaining


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump with service field names, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CreateIndexRequest(_WireModel):
    """Body of the create-index call."""

    name: str
    beam_width: int = Field(alias="beam-width")
    max_connections: int = Field(alias="max-connections")
    vector_similarity_function: str = Field(alias="vector-similarity-function")
    fields: list[str]
    buckets: int


class DeleteIndexRequest(_WireModel):
    """Body of the delete-index call."""

    delete_data: bool = Field(default=True, alias="delete-data")


class UploadEmbedding(_WireModel):
    """One entry of an embeddings upload."""

    key: str
    vector: list[float]
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_document(
        cls,
        document: Document,
        vector: Sequence[float],
        content_field: str,
    ) -> "UploadEmbedding":
        """Build the upload entry for a document.

        The vector is narrowed to float32 and the document content is
        stored in the metadata under ``content_field``.
        """
        return cls(
            key=document.id,
            vector=to_float32(vector),
            metadata=inject_content(document.metadata, content_field, document.content),
        )


class QueryRequest(_WireModel):
    """Body of a similarity query."""

    vector: list[float]
    top_k: int = Field(alias="top-k")
    k_per_bucket: int = Field(alias="k-per-bucket")
    include_metadata: bool = Field(default=True, alias="include-metadata")


class QueryResult(_WireModel):
    """One hit of a similarity query."""

    key: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_document(self, content_field: str) -> Document:
        """Convert the hit to a Document.

        The content is taken out of the metadata and the metadata gains a
        distance entry of ``1 - score``.
        """
        content, metadata = extract_content(self.metadata, content_field)
        metadata[DISTANCE_METADATA_FIELD] = 1 - self.score
        return Document(id=self.key, content=content, metadata=metadata)
