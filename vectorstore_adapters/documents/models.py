"""Document data models."""

from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class Document(BaseModel):
    """A unit of content stored in a vector store.

    Attributes:
        id: Unique identifier; also the key in the remote index.
        content: The text content that gets embedded.
        metadata: Caller-supplied string-keyed metadata.
        embedding: Embedding vector, assigned by the store on upload.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique document identifier",
    )
    content: str = Field(description="Text content of the document")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Document metadata",
    )
    embedding: list[float] | None = Field(
        default=None,
        description="Embedding vector (set by the vector store)",
    )

    @classmethod
    def from_file(cls, path: Path, **metadata: Any) -> "Document":
        """Create a document from a text file.

        The file name is recorded under the "source" metadata key unless
        the caller supplies one.

        Args:
            path: Path to the file.
            **metadata: Additional metadata.

        Returns:
            New Document instance.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        metadata.setdefault("source", path.name)
        return cls(content=path.read_text(encoding="utf-8"), metadata=metadata)
