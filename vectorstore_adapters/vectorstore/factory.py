"""Build a vector store from settings.

The Redis adapter is only offered when the ``redis`` library is
installed; it is imported lazily so GemFire-only installs never need it.
"""

from importlib.util import find_spec

from vectorstore_adapters.config import Settings, VectorStoreProvider, get_settings
from vectorstore_adapters.embeddings.service import EmbeddingService
from vectorstore_adapters.exceptions import ConfigurationError
from vectorstore_adapters.logging_config import get_logger
from vectorstore_adapters.vectorstore.gemfire import (
    GemFireVectorStore,
    GemFireVectorStoreConfig,
)
from vectorstore_adapters.vectorstore.service import VectorStore

logger = get_logger(__name__)


def redis_available() -> bool:
    """Check whether the redis client library can be imported."""
    return find_spec("redis") is not None


def resolve_provider(settings: Settings) -> VectorStoreProvider:
    """Pick the concrete backend for the configured provider.

    ``auto`` selects Redis when the library is installed and REDIS_URL is
    set, GemFire otherwise.

    Raises:
        ConfigurationError: If Redis is requested but not installed.
    """
    provider = settings.vectorstore.provider
    if provider == VectorStoreProvider.AUTO:
        if redis_available() and settings.redis.url is not None:
            return VectorStoreProvider.REDIS
        return VectorStoreProvider.GEMFIRE

    if provider == VectorStoreProvider.REDIS and not redis_available():
        raise ConfigurationError(
            "VECTORSTORE_PROVIDER=redis requires the 'redis' package "
            "(pip install vectorstore-adapters[redis])",
            details={"provider": provider.value},
        )
    return provider


def create_vector_store(
    embedding_service: EmbeddingService,
    settings: Settings | None = None,
) -> VectorStore:
    """Create the configured vector store.

    Args:
        embedding_service: Embeds documents and queries for the store.
        settings: Settings to use. Loaded from the environment if omitted.

    Returns:
        A GemFire or Redis vector store.

    Raises:
        ConfigurationError: If the selected backend is not fully configured.
    """
    settings = settings or get_settings()
    provider = resolve_provider(settings)
    logger.info(f"Creating vector store: {provider.value}")

    if provider == VectorStoreProvider.REDIS:
        return _create_redis_store(embedding_service, settings)

    config = GemFireVectorStoreConfig.from_settings(settings.gemfire)
    return GemFireVectorStore(config, embedding_service)


def _create_redis_store(
    embedding_service: EmbeddingService,
    settings: Settings,
) -> VectorStore:
    import redis

    from vectorstore_adapters.vectorstore.redis_store import (
        RedisVectorStore,
        RedisVectorStoreConfig,
    )

    if settings.redis.url is None:
        raise ConfigurationError(
            "REDIS_URL must be set",
            details={"setting": "url"},
        )

    client = redis.Redis.from_url(settings.redis.url.get_secret_value())
    config = RedisVectorStoreConfig(
        index_name=settings.redis.index,
        prefix=settings.redis.prefix,
    )
    return RedisVectorStore(
        config,
        embedding_service,
        client,
        initialize_schema=settings.redis.initialize_schema,
    )
