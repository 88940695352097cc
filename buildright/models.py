"""Domain enumerations shared by the database layer, services and API."""

from __future__ import annotations

from enum import Enum


class CodeType(str, Enum):
    """Discipline a building code regulates."""

    BUILDING = "building"
    FIRE = "fire"
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    ENERGY = "energy"
    ACCESSIBILITY = "accessibility"
    ZONING = "zoning"
    LOCAL = "local"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ProcessingStatus(str, Enum):
    """Ingestion state of an uploaded code version."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class EmbeddingContentType(str, Enum):
    """Modality of a multimodal embedding chunk."""

    TEXTUAL = "textual"
    VISUAL = "visual"
    COMBINED = "combined"


class ChatVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
