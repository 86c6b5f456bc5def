"""Document module."""

from vectorstore_adapters.documents.models import Document

__all__ = ["Document"]
