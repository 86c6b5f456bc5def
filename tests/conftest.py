"""Pytest configuration and shared fixtures."""

import json
import math
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from vectorstore_adapters.embeddings.models import EmbeddingResult
from vectorstore_adapters.embeddings.service import EmbeddingService
from vectorstore_adapters.vectorstore.gemfire import (
    BASE_PATH,
    GemFireVectorStore,
    GemFireVectorStoreConfig,
)

VOCABULARY = ["spring", "shelter", "depression", "time", "economy", "framework"]


class KeywordEmbeddingService(EmbeddingService):
    """Deterministic embeddings: one dimension per vocabulary word plus a bias."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    @property
    def model_name(self) -> str:
        return "keyword-test"

    @property
    def dimensions(self) -> int:
        return len(VOCABULARY) + 1

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        results = []
        for text in texts:
            self.calls.append(text)
            lowered = text.lower()
            vector = [lowered.count(word) * 0.1 for word in VOCABULARY] + [0.01]
            results.append(
                EmbeddingResult(
                    text=text,
                    embedding=vector,
                    model=self.model_name,
                    dimensions=len(vector),
                )
            )
        return results


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeGemFireService:
    """In-memory stand-in for the GemFire VectorDB HTTP service."""

    def __init__(self) -> None:
        self.indexes: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def body(self, index: int = -1) -> Any:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(BASE_PATH).strip("/")
        parts = path.split("/") if path else []
        body = json.loads(request.content) if request.content else None

        if not parts and request.method == "POST":
            if body["name"] in self.indexes:
                return httpx.Response(400, json={"error": "index exists"})
            self.indexes[body["name"]] = {"spec": body, "embeddings": {}}
            return httpx.Response(201)

        if not parts or parts[0] not in self.indexes:
            return httpx.Response(404, json={"error": "index not found"})
        index = self.indexes[parts[0]]

        if len(parts) == 1 and request.method == "DELETE":
            del self.indexes[parts[0]]
            return httpx.Response(200)

        if parts[1:] == ["embeddings"] and request.method == "POST":
            for entry in body:
                index["embeddings"][entry["key"]] = entry
            return httpx.Response(201)

        if parts[1:] == ["embeddings"] and request.method == "DELETE":
            for key in body:
                index["embeddings"].pop(key, None)
            return httpx.Response(200)

        if parts[1:] == ["query"] and request.method == "POST":
            hits = [
                {
                    "key": key,
                    "score": _cosine(body["vector"], entry["vector"]),
                    "metadata": dict(entry.get("metadata") or {}),
                }
                for key, entry in index["embeddings"].items()
            ]
            hits.sort(key=lambda hit: hit["score"], reverse=True)
            return httpx.Response(200, json=hits[: body["top-k"]])

        return httpx.Response(400, json={"error": "bad request"})


@pytest.fixture
def embedding_service() -> KeywordEmbeddingService:
    return KeywordEmbeddingService()


@pytest.fixture
def gemfire_service() -> FakeGemFireService:
    return FakeGemFireService()


@pytest.fixture
def gemfire_config() -> GemFireVectorStoreConfig:
    return GemFireVectorStoreConfig.builder().with_index_name("spring-ai-index").build()


@pytest.fixture
def gemfire_store(
    gemfire_config: GemFireVectorStoreConfig,
    gemfire_service: FakeGemFireService,
    embedding_service: KeywordEmbeddingService,
) -> Generator[GemFireVectorStore, None, None]:
    """GemFire store wired to the in-memory service, index created."""
    client = httpx.Client(
        base_url=gemfire_config.base_url,
        transport=httpx.MockTransport(gemfire_service.handler),
    )
    store = GemFireVectorStore(gemfire_config, embedding_service, client=client)
    store.create_index()
    gemfire_service.requests.clear()
    yield store
    client.close()
