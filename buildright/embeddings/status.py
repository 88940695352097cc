"""Semantic-search readiness for a chat's uploaded documents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.db.models import MultimodalEmbeddingModel
from buildright.models import EmbeddingContentType

logger = structlog.get_logger()

NO_EMBEDDINGS_MESSAGE = "No embeddings found. Upload a PDF to generate embeddings."


@dataclass(slots=True)
class EmbeddingStatus:
    chat_id: str
    total: int = 0
    textual: int = 0
    visual: int = 0
    combined: int = 0

    @property
    def available(self) -> bool:
        return self.total > 0

    @property
    def message(self) -> str:
        if self.available:
            return f"{self.total} embeddings ready for semantic search"
        return NO_EMBEDDINGS_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "chatId": self.chat_id,
            "embeddingsAvailable": self.available,
            "summary": {
                "total": self.total,
                "textual": self.textual,
                "visual": self.visual,
                "combined": self.combined,
            },
            "message": self.message,
            "searchReady": self.available,
        }


def parse_metadata(raw: Any) -> dict | None:
    """Return metadata as a dict, or None when it cannot be read.

    Metadata arrives either as a decoded JSON object or as its serialized
    string form.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return None
    return raw if isinstance(raw, dict) else None


def belongs_to_chat(chat_column: str | None, metadata: Any, chat_id: str) -> bool:
    if chat_column is not None:
        return chat_column == chat_id
    parsed = parse_metadata(metadata)
    return parsed is not None and parsed.get("chatId") == chat_id


async def get_embedding_status(session: AsyncSession, chat_id: str) -> EmbeddingStatus:
    """Count the chat's embeddings per content type.

    Rows are narrowed in the store by the indexed chat_id column. Rows whose
    chat_id has not been backfilled yet are matched on metadata["chatId"];
    unreadable metadata excludes the row.
    """
    stmt = select(
        MultimodalEmbeddingModel.content_type,
        MultimodalEmbeddingModel.chat_id,
        MultimodalEmbeddingModel.metadata_,
    ).where(
        or_(
            MultimodalEmbeddingModel.chat_id == chat_id,
            MultimodalEmbeddingModel.chat_id.is_(None),
        )
    )
    rows = (await session.execute(stmt)).all()

    status = EmbeddingStatus(chat_id=chat_id)
    for content_type, chat_column, metadata in rows:
        if not belongs_to_chat(chat_column, metadata, chat_id):
            continue
        status.total += 1
        if content_type == EmbeddingContentType.TEXTUAL.value:
            status.textual += 1
        elif content_type == EmbeddingContentType.VISUAL.value:
            status.visual += 1
        elif content_type == EmbeddingContentType.COMBINED.value:
            status.combined += 1

    logger.info(
        "embedding_status_checked",
        chat_id=chat_id,
        total=status.total,
        textual=status.textual,
        visual=status.visual,
        combined=status.combined,
    )
    return status
