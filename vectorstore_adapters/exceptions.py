"""Adapter exception hierarchy.

All custom exceptions inherit from VectorStoreAdapterError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "VS-1000"
    CONFIGURATION_ERROR = "VS-1001"
    VALIDATION_ERROR = "VS-1002"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "VS-3000"
    EMBEDDING_DIMENSION_MISMATCH = "VS-3001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "VS-4000"
    INDEX_NOT_FOUND = "VS-4001"
    UNSUPPORTED_OPERATION = "VS-4002"
    BAD_REQUEST = "VS-4003"
    UNEXPECTED_RESPONSE = "VS-4004"
    TRANSPORT_ERROR = "VS-4005"


class VectorStoreAdapterError(Exception):
    """Base exception for all adapter errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured reporting."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(VectorStoreAdapterError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(VectorStoreAdapterError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class EmbeddingError(VectorStoreAdapterError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(VectorStoreAdapterError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class IndexNotFoundError(VectorStoreError):
    """The remote index does not exist."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INDEX_NOT_FOUND, details)


class BadRequestError(VectorStoreError):
    """The remote service rejected the request as malformed."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.BAD_REQUEST, details)


class UnexpectedResponseError(VectorStoreError):
    """The remote service answered with an unexpected status code."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.UNEXPECTED_RESPONSE, details)


class UnsupportedOperationError(VectorStoreError):
    """The store does not support the requested feature."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.UNSUPPORTED_OPERATION, details)
