"""Vector store adapters for GemFire VectorDB and Redis."""

__version__ = "0.1.0"
