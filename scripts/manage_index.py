#!/usr/bin/env python
"""Manage a vector store index from the shell.

Usage:
    python -m scripts.manage_index create-index
    python -m scripts.manage_index add docs/spring.ai.txt docs/time.shelter.txt
    python -m scripts.manage_index search "Spring" --top-k 3
    python -m scripts.manage_index delete <id> [<id> ...]
    python -m scripts.manage_index delete-index --keep-data

The backend and index come from the environment (VECTORSTORE_PROVIDER,
GEMFIRE_*, REDIS_*, EMBEDDING_*).
"""

import argparse
import json
import sys
from pathlib import Path

from vectorstore_adapters.config import get_settings
from vectorstore_adapters.documents.models import Document
from vectorstore_adapters.embeddings.service import HTTPEmbeddingService
from vectorstore_adapters.exceptions import VectorStoreAdapterError
from vectorstore_adapters.logging_config import get_logger, setup_logging
from vectorstore_adapters.vectorstore.factory import create_vector_store
from vectorstore_adapters.vectorstore.models import SearchRequest
from vectorstore_adapters.vectorstore.service import VectorStore

logger = get_logger(__name__)


def run(store: VectorStore, args: argparse.Namespace) -> int:
    """Execute one command against a store.

    Returns:
        Process exit code.
    """
    if args.command == "create-index":
        store.create_index(args.name)
        print(f"Created index {args.name or 'from configuration'}")
        return 0

    if args.command == "delete-index":
        store.delete_index(args.name, delete_data=not args.keep_data)
        print(f"Deleted index {args.name or 'from configuration'}")
        return 0

    if args.command == "add":
        documents = [Document.from_file(path) for path in args.files]
        store.add(documents)
        for document in documents:
            print(f"{document.id}\t{document.metadata['source']}")
        return 0

    if args.command == "delete":
        if store.delete(args.ids):
            print(f"Deleted {len(args.ids)} documents")
            return 0
        print("Delete failed; see log for details", file=sys.stderr)
        return 1

    results = store.similarity_search(
        SearchRequest(
            query=args.query,
            top_k=args.top_k,
            similarity_threshold=args.threshold,
        )
    )
    for document in results:
        print(
            json.dumps(
                {
                    "id": document.id,
                    "distance": document.metadata.get("distance"),
                    "metadata": document.metadata,
                    "content": document.content[:200],
                }
            )
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Manage a vector store index",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Log level override")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create-index", help="Create the index")
    create.add_argument("--name", default=None, help="Index name (default: configured)")

    drop = commands.add_parser("delete-index", help="Delete the index")
    drop.add_argument("--name", default=None, help="Index name (default: configured)")
    drop.add_argument(
        "--keep-data",
        action="store_true",
        help="Keep stored documents",
    )

    add = commands.add_parser("add", help="Embed and upload text files")
    add.add_argument("files", type=Path, nargs="+", help="Text files to upload")

    delete = commands.add_parser("delete", help="Delete documents by id")
    delete.add_argument("ids", nargs="+", help="Document ids")

    search = commands.add_parser("search", help="Run a similarity search")
    search.add_argument("query", help="Query text")
    search.add_argument("--top-k", type=int, default=4, help="Number of results")
    search.add_argument(
        "--threshold",
        type=float,
        default=0.0,
        help="Minimum similarity score (0-1)",
    )

    return parser


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()
    setup_logging(level=args.log_level)

    settings = get_settings()
    try:
        with HTTPEmbeddingService(settings.embedding) as embedding_service:
            with create_vector_store(embedding_service, settings) as store:
                exit_code = run(store, args)
    except VectorStoreAdapterError as e:
        logger.error(e.message, extra={"code": e.code.value, "details": e.details})
        exit_code = 2

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
