"""SQLAlchemy async database models for BuildRight.

Maps to the PostgreSQL schema for the building code catalog and the
multimodal embeddings produced by PDF ingestion.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from buildright.models import (
    ChatVisibility,
    CodeType,
    ProcessingStatus,
)

EMBEDDING_DIMENSIONS = 1536


def _in_list(column: str, values: list[str]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class BuildingCodeModel(Base):
    """A named regulatory code (FBC, IBC, ...)."""

    __tablename__ = "building_codes"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    code_name: Mapped[str] = mapped_column(Text, nullable=False)
    # Natural key; the unique index below is the authoritative guard
    code_abbreviation: Mapped[str] = mapped_column(Text, nullable=False)
    jurisdiction: Mapped[str | None] = mapped_column(Text)
    code_type: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[str | None] = mapped_column(Text)
    official_url: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    versions: Mapped[list["BuildingCodeVersionModel"]] = relationship(
        back_populates="building_code", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            _in_list("code_type", CodeType.values()),
            name="building_codes_code_type_check",
        ),
        Index("idx_building_codes_abbreviation_unique", "code_abbreviation", unique=True),
        Index("idx_building_codes_code_type", "code_type"),
        Index("idx_building_codes_is_active", "is_active"),
    )


class BuildingCodeVersionModel(Base):
    """One dated revision of a building code."""

    __tablename__ = "building_code_versions"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    building_code_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("building_codes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version: Mapped[str] = mapped_column(Text, nullable=False)  # '2023', '2021'
    effective_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    superseded_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    source_file: Mapped[str | None] = mapped_column(Text)  # uploaded PDF path
    processing_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=ProcessingStatus.PENDING.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    building_code: Mapped["BuildingCodeModel"] = relationship(back_populates="versions")

    __table_args__ = (
        CheckConstraint(
            _in_list("processing_status", [s.value for s in ProcessingStatus]),
            name="building_code_versions_processing_status_check",
        ),
        Index("idx_building_code_versions_is_default", "is_default"),
    )


class BuildingCodeSectionModel(Base):
    """A clause or subsection of one code version."""

    __tablename__ = "building_code_sections"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    building_code_version_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("building_code_versions.id", ondelete="CASCADE"),
        nullable=False,
    )
    section_number: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    chapter: Mapped[str | None] = mapped_column(Text)
    parent_section_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True))
    hierarchy: Mapped[list | None] = mapped_column(JSON)
    keywords: Mapped[list | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_building_code_sections_version_id", "building_code_version_id"),
        Index("idx_building_code_sections_chapter", "chapter"),
    )


class MultimodalEmbeddingModel(Base):
    """Vector-search chunk generated from an uploaded drawing page."""

    __tablename__ = "multimodal_embeddings"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    page_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True))
    content_type: Mapped[str] = mapped_column(String(32), nullable=False)
    chunk_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    embedding: Mapped[list[float] | None] = mapped_column(Vector(EMBEDDING_DIMENSIONS))
    bounding_box: Mapped[dict | None] = mapped_column(JSON)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[dict | str | None] = mapped_column("metadata", JSON)

    # Promoted from metadata["chatId"]; NULL until backfilled
    chat_id: Mapped[str | None] = mapped_column(Text, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ChatModel(Base):
    """Chat conversation that documents and embeddings hang off."""

    __tablename__ = "chats"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    visibility: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ChatVisibility.PRIVATE.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
