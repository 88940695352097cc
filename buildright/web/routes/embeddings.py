"""Embedding readiness routes.

Routes:
- GET /api/embeddings/status?chatId=  - Embedding counts for a chat
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from buildright.db.connection import get_session
from buildright.embeddings import get_embedding_status
from buildright.web.auth import CurrentUser, require_user
from buildright.web.errors import internal_error

logger = structlog.get_logger()

router = APIRouter(tags=["embeddings"])


@router.get("/api/embeddings/status")
async def embedding_status(
    chat_id: str | None = Query(default=None, alias="chatId"),
    user: CurrentUser = Depends(require_user),
):
    if not chat_id:
        return JSONResponse(status_code=400, content={"error": "chatId parameter is required"})

    try:
        async with get_session() as session:
            status = await get_embedding_status(session, chat_id)
        return JSONResponse(content=status.to_dict())
    except Exception as exc:
        logger.error("embedding_status_failed", chat_id=chat_id, error=str(exc))
        return internal_error("Status check failed", exc)
