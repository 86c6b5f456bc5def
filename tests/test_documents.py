"""Tests for document models."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from vectorstore_adapters.documents.models import Document


class TestDocument:
    """Tests for Document model."""

    def test_defaults(self) -> None:
        """Id is generated and metadata/embedding start empty."""
        doc = Document(content="Hello, world!")
        assert doc.content == "Hello, world!"
        assert doc.id
        assert doc.metadata == {}
        assert doc.embedding is None

    def test_ids_are_unique(self) -> None:
        """Each document gets its own id."""
        assert Document(content="a").id != Document(content="a").id

    def test_explicit_id(self) -> None:
        """Caller-supplied id is kept."""
        doc = Document(id="doc-1", content="text", metadata={"spring": "great"})
        assert doc.id == "doc-1"
        assert doc.metadata == {"spring": "great"}

    def test_embedding_assignable(self) -> None:
        """The embedding slot can be filled after construction."""
        doc = Document(content="text")
        doc.embedding = [0.1, 0.2]
        assert doc.embedding == [0.1, 0.2]

    def test_from_file(self) -> None:
        """Document can be read from a text file."""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "spring.ai.txt"
            path.write_text("Spring AI provides abstractions.", encoding="utf-8")

            doc = Document.from_file(path, topic="spring")

        assert doc.content == "Spring AI provides abstractions."
        assert doc.metadata == {"source": "spring.ai.txt", "topic": "spring"}

    def test_from_file_keeps_caller_source(self) -> None:
        """An explicit source is not overwritten."""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "a.txt"
            path.write_text("x", encoding="utf-8")

            doc = Document.from_file(path, source="custom")

        assert doc.metadata["source"] == "custom"

    def test_from_missing_file(self) -> None:
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Document.from_file(Path("/nonexistent/file.txt"))
