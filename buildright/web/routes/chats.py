"""Chat management routes.

Routes:
- PATCH /api/chats/{chat_id}/title  - Rename a chat owned by the caller
"""

from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from buildright.chats import update_chat_title
from buildright.db.connection import get_session
from buildright.exceptions import CatalogError
from buildright.web.auth import CurrentUser, require_user
from buildright.web.errors import error_response, internal_error
from buildright.web.models import ChatTitleUpdate

logger = structlog.get_logger()

router = APIRouter(tags=["chats"])


@router.patch("/api/chats/{chat_id}/title")
async def rename_chat(
    chat_id: UUID,
    payload: ChatTitleUpdate,
    user: CurrentUser = Depends(require_user),
):
    try:
        async with get_session() as session:
            result = await update_chat_title(session, chat_id, user.user_id, payload.title)
    except CatalogError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.error("chat_title_update_failed", chat_id=str(chat_id), error=str(exc))
        return internal_error("Failed to update chat title", exc)

    return JSONResponse(content=result.to_dict())
