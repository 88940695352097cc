"""Chat operations backing the chat header."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.db.models import ChatModel
from buildright.exceptions import ForbiddenError, InvalidRequestError, NotFoundError

logger = structlog.get_logger()


@dataclass(slots=True)
class TitleUpdate:
    chat_id: UUID
    title: str
    updated: bool

    def to_dict(self) -> dict:
        return {"chatId": str(self.chat_id), "title": self.title, "updated": self.updated}


async def update_chat_title(
    session: AsyncSession, chat_id: UUID, user_id: str, title: str | None
) -> TitleUpdate:
    """Rename a chat owned by ``user_id``.

    The title is trimmed first. Submitting the current title is a no-op.
    """
    new_title = (title or "").strip()
    if not new_title:
        raise InvalidRequestError("Title cannot be empty")

    chat = await session.get(ChatModel, chat_id)
    if chat is None:
        raise NotFoundError("Chat not found")
    if chat.user_id != user_id:
        raise ForbiddenError("You do not have access to this chat")

    if chat.title == new_title:
        return TitleUpdate(chat_id=chat.id, title=chat.title, updated=False)

    chat.title = new_title
    await session.flush()
    logger.info("chat_title_updated", chat_id=str(chat.id), user_id=user_id)
    return TitleUpdate(chat_id=chat.id, title=new_title, updated=True)
