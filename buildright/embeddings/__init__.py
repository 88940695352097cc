"""Embedding readiness reporting."""

from buildright.embeddings.status import (
    EmbeddingStatus,
    belongs_to_chat,
    get_embedding_status,
    parse_metadata,
)

__all__ = [
    "EmbeddingStatus",
    "belongs_to_chat",
    "get_embedding_status",
    "parse_metadata",
]
