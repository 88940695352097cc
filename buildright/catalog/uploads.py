"""Building code document uploads.

An upload stores the document, creates or reuses the version it belongs to,
and parses the document into sections. The version moves
pending/processing -> completed, or -> failed when the document cannot be
parsed; the failed state is kept so clients can poll it.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.catalog.models import CodeSummary, version_record
from buildright.catalog.parser import chunk_text, extract_text, parse_sections
from buildright.catalog.repository import count_sections_by_version
from buildright.catalog.service import parse_effective_date
from buildright.db.models import (
    BuildingCodeModel,
    BuildingCodeSectionModel,
    BuildingCodeVersionModel,
)
from buildright.exceptions import InvalidRequestError, NotFoundError
from buildright.models import ProcessingStatus

logger = structlog.get_logger()

ALLOWED_CONTENT_TYPES = [
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]


@dataclass(slots=True)
class UploadResult:
    code: BuildingCodeModel
    version: BuildingCodeVersionModel
    file_name: str
    file_size: int
    section_count: int = 0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": "Building code uploaded and processed successfully",
            "version": version_record(self.version),
            "buildingCode": CodeSummary.from_model(self.code).to_dict(include_versions=False),
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "sectionCount": self.section_count,
            "processingStatus": self.version.processing_status,
        }


def _parse_uuid(value: str | None, label: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidRequestError(f"Invalid {label}") from None


def validate_upload(
    file_name: str | None,
    content_type: str | None,
    building_code_id: str | None,
    version: str | None,
) -> UUID:
    """Check the form fields in the order clients report them; returns the code id."""
    if not file_name:
        raise InvalidRequestError("No file provided")
    if not building_code_id:
        raise InvalidRequestError("Building code ID is required")
    if not version:
        raise InvalidRequestError("Version is required")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidRequestError(
            f"Invalid file type. Allowed types: {', '.join(ALLOWED_CONTENT_TYPES)}"
        )
    return _parse_uuid(building_code_id, "building code ID")


def _safe(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", name)


def stored_file_name(abbreviation: str, version: str, original: str) -> str:
    return f"{_safe(abbreviation)}_{_safe(version)}_{int(time.time() * 1000)}_{_safe(original)}"


def store_document(
    upload_dir: Path, abbreviation: str, version: str, original: str, data: bytes
) -> Path:
    """Write the document under <upload_dir>/<abbreviation>/<version>/."""
    target_dir = upload_dir / _safe(abbreviation) / _safe(version)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / stored_file_name(abbreviation, version, original)
    path.write_bytes(data)
    return path


async def upsert_upload_version(
    session: AsyncSession,
    code: BuildingCodeModel,
    version: str,
    effective_date: datetime | None,
    source_file: str,
) -> BuildingCodeVersionModel:
    """Point the (code, version) pair at a new document and mark it processing.

    New versions are not default; existing ones keep their default flag.
    """
    result = await session.execute(
        select(BuildingCodeVersionModel)
        .where(
            BuildingCodeVersionModel.building_code_id == code.id,
            BuildingCodeVersionModel.version == version,
        )
        .limit(1)
    )
    model = result.scalar_one_or_none()

    if model is None:
        model = BuildingCodeVersionModel(
            building_code_id=code.id,
            version=version,
            is_default=False,
        )
        session.add(model)

    model.effective_date = effective_date
    model.source_file = source_file
    model.processing_status = ProcessingStatus.PROCESSING.value
    await session.flush()
    return model


async def replace_sections(
    session: AsyncSession, version: BuildingCodeVersionModel, raw_text: str
) -> int:
    """Replace the version's sections with those parsed from ``raw_text``."""
    sections = parse_sections(raw_text)

    await session.execute(
        delete(BuildingCodeSectionModel).where(
            BuildingCodeSectionModel.building_code_version_id == version.id
        )
    )

    if sections:
        for section in sections:
            session.add(
                BuildingCodeSectionModel(
                    building_code_version_id=version.id,
                    section_number=section.number,
                    title=section.title,
                    content=section.content,
                    chapter=section.chapter,
                    hierarchy=section.hierarchy,
                    keywords=[],
                )
            )
        count = len(sections)
    else:
        chunks = chunk_text(raw_text)
        for i, chunk in enumerate(chunks, 1):
            session.add(
                BuildingCodeSectionModel(
                    building_code_version_id=version.id,
                    section_number=f"chunk-{i}",
                    title=f"Document Chunk {i}",
                    content=chunk,
                    chapter="1",
                    hierarchy=["1", str(i)],
                    keywords=[],
                )
            )
        count = len(chunks)

    await session.flush()
    return count


async def upload_building_code_document(
    session: AsyncSession,
    *,
    building_code_id: str | None,
    version: str | None,
    effective_date: str | None,
    file_name: str | None,
    content_type: str | None,
    data: bytes,
    upload_dir: Path,
    max_bytes: int | None = None,
) -> UploadResult:
    """Store a document for a code version and parse it into sections.

    A document that cannot be read or yields no text leaves the version in
    ``failed`` and is reported through ``UploadResult.error``; the caller
    still commits so the status sticks.

    Raises:
        InvalidRequestError: missing field, bad type, bad id or date
        NotFoundError: unknown building code
    """
    code_id = validate_upload(file_name, content_type, building_code_id, version)
    if max_bytes is not None and len(data) > max_bytes:
        raise InvalidRequestError(f"File exceeds the {max_bytes} byte upload limit")
    parsed_date = parse_effective_date(effective_date)

    code = await session.get(BuildingCodeModel, code_id)
    if code is None:
        raise NotFoundError("Building code not found")

    path = store_document(upload_dir, code.code_abbreviation, version, file_name, data)
    logger.info(
        "building_code_document_stored",
        code=code.code_abbreviation,
        version=version,
        path=str(path),
        size=len(data),
    )

    model = await upsert_upload_version(session, code, version, parsed_date, str(path))
    result = UploadResult(code=code, version=model, file_name=path.name, file_size=len(data))

    try:
        raw_text = extract_text(path)
        if not raw_text.strip():
            raise ValueError("No text content found in file")
    except Exception as exc:
        model.processing_status = ProcessingStatus.FAILED.value
        await session.flush()
        logger.warning(
            "building_code_processing_failed",
            version_id=str(model.id),
            error=str(exc),
        )
        result.error = str(exc)
        return result

    result.section_count = await replace_sections(session, model, raw_text)
    model.processing_status = ProcessingStatus.COMPLETED.value
    await session.flush()
    await session.refresh(model)

    logger.info(
        "building_code_document_processed",
        version_id=str(model.id),
        sections=result.section_count,
    )
    return result


async def get_upload_status(session: AsyncSession, version_id: str | None) -> dict[str, Any]:
    """Processing state of one version plus its code name and section count.

    Raises:
        InvalidRequestError: missing or malformed version id
        NotFoundError: unknown version
    """
    if not version_id:
        raise InvalidRequestError("Version ID is required")
    parsed_id = _parse_uuid(version_id, "version ID")

    row = (
        await session.execute(
            select(
                BuildingCodeVersionModel,
                BuildingCodeModel.code_name,
                BuildingCodeModel.code_abbreviation,
            )
            .outerjoin(
                BuildingCodeModel,
                BuildingCodeVersionModel.building_code_id == BuildingCodeModel.id,
            )
            .where(BuildingCodeVersionModel.id == parsed_id)
            .limit(1)
        )
    ).first()
    if row is None:
        raise NotFoundError("Version not found")

    model, code_name, code_abbreviation = row
    counts = await count_sections_by_version(session, [model.id])

    status = version_record(model)
    status.update(
        codeName=code_name,
        codeAbbreviation=code_abbreviation,
        sectionCount=counts.get(model.id, 0),
    )
    return {"version": status}
