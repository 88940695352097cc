"""Database layer for BuildRight with async SQLAlchemy."""

from buildright.db.connection import close_db, get_db, get_session, init_db
from buildright.db.models import (
    Base,
    BuildingCodeModel,
    BuildingCodeSectionModel,
    BuildingCodeVersionModel,
    ChatModel,
    MultimodalEmbeddingModel,
)

__all__ = [
    "Base",
    "BuildingCodeModel",
    "BuildingCodeVersionModel",
    "BuildingCodeSectionModel",
    "MultimodalEmbeddingModel",
    "ChatModel",
    "close_db",
    "get_db",
    "get_session",
    "init_db",
]
