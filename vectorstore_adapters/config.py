"""Adapter configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class VectorStoreProvider(str, Enum):
    """Vector store backend selection."""

    AUTO = "auto"
    GEMFIRE = "gemfire"
    REDIS = "redis"


class EmbeddingSettings(BaseSettings):
    """Embedding service configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    base_url: str = Field(
        default="http://localhost:8081",
        description="Embedding service base URL",
    )
    model: str = Field(
        default="BAAI/bge-small-en-v1.5",
        description="Embedding model name",
    )
    batch_size: int = Field(
        default=32,
        ge=1,
        description="Batch size for embedding requests",
    )
    timeout: float = Field(
        default=60.0,
        ge=0,
        description="Request timeout in seconds",
    )
    dimensions: int | None = Field(
        default=None,
        ge=1,
        description="Embedding dimensions (learned from responses when unset)",
    )


class GemFireSettings(BaseSettings):
    """GemFire VectorDB connection and index configuration."""

    model_config = SettingsConfigDict(env_prefix="GEMFIRE_")

    host: str = Field(default="localhost", description="GemFire HTTP service host")
    port: int = Field(default=8080, gt=0, description="GemFire HTTP service port")
    ssl_enabled: bool = Field(default=False, description="Use https")
    connection_timeout: float = Field(
        default=5.0,
        ge=0,
        description="Connect timeout in seconds (0 disables)",
    )
    request_timeout: float = Field(
        default=30.0,
        ge=0,
        description="Read/write timeout in seconds (0 disables)",
    )
    index_name: str | None = Field(
        default=None,
        description="Name of the GemFire vector index",
    )
    beam_width: int = Field(default=100, gt=0, lt=3200)
    max_connections: int = Field(default=16, gt=0, le=512)
    buckets: int = Field(default=0, ge=0)
    vector_similarity_function: str = Field(default="COSINE")
    fields: list[str] = Field(default_factory=lambda: ["vector"])
    document_field: str = Field(
        default="document",
        description="Metadata key the document content is stored under",
    )


class RedisSettings(BaseSettings):
    """Redis vector index configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    url: SecretStr | None = Field(
        default=None,
        description="Redis connection URL (may embed a password)",
    )
    index: str = Field(default="vectorstore-index", description="RediSearch index name")
    prefix: str = Field(default="embedding:", description="Key prefix for stored documents")
    initialize_schema: bool = Field(
        default=False,
        description="Create the index on startup when missing",
    )


class VectorStoreSettings(BaseSettings):
    """Backend selection."""

    model_config = SettingsConfigDict(env_prefix="VECTORSTORE_")

    provider: VectorStoreProvider = Field(
        default=VectorStoreProvider.AUTO,
        description="Which vector store adapter to build",
    )


class Settings(BaseSettings):
    """Main settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    gemfire: GemFireSettings = Field(default_factory=GemFireSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    vectorstore: VectorStoreSettings = Field(default_factory=VectorStoreSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
