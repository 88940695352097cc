"""Catalog write operations: create building codes and seed defaults."""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.catalog.models import CreatedBuildingCode
from buildright.catalog.repository import find_code_by_abbreviation
from buildright.db.models import BuildingCodeModel, BuildingCodeVersionModel
from buildright.exceptions import ConflictError, InvalidRequestError
from buildright.models import CodeType, ProcessingStatus

logger = structlog.get_logger()

REQUIRED_FIELDS_MESSAGE = "Missing required fields: codeName, codeAbbreviation, codeType"
INVALID_CODE_TYPE_MESSAGE = f"Invalid codeType. Must be one of: {', '.join(CodeType.values())}"

DEFAULT_CODES: list[dict[str, str]] = [
    {
        "code_name": "Florida Building Code",
        "code_abbreviation": "FBC",
        "jurisdiction": "Florida",
        "code_type": "building",
        "description": "Florida Building Code for building construction and safety",
        "official_url": "https://www.floridabuilding.org/",
    },
    {
        "code_name": "International Building Code",
        "code_abbreviation": "IBC",
        "jurisdiction": "International",
        "code_type": "building",
        "description": "International Building Code - model building code",
        "official_url": "https://www.iccsafe.org/",
    },
    {
        "code_name": "International Fire Code",
        "code_abbreviation": "IFC",
        "jurisdiction": "International",
        "code_type": "fire",
        "description": "International Fire Code for fire prevention and safety",
        "official_url": "https://www.iccsafe.org/",
    },
    {
        "code_name": "International Plumbing Code",
        "code_abbreviation": "IPC",
        "jurisdiction": "International",
        "code_type": "plumbing",
        "description": "International Plumbing Code for plumbing systems",
        "official_url": "https://www.iccsafe.org/",
    },
    {
        "code_name": "International Mechanical Code",
        "code_abbreviation": "IMC",
        "jurisdiction": "International",
        "code_type": "mechanical",
        "description": "International Mechanical Code for HVAC systems",
        "official_url": "https://www.iccsafe.org/",
    },
]
DEFAULT_VERSION = "2023"
DEFAULT_EFFECTIVE_DATE = datetime(2023, 1, 1)


def parse_effective_date(value: str | datetime | None) -> datetime | None:
    """Accept ISO dates ("2023-01-01") and datetimes; empty means no date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise InvalidRequestError(
            f"Invalid effectiveDate '{value}'. Expected an ISO-8601 date."
        ) from None


def validate_new_code(
    code_name: str | None,
    code_abbreviation: str | None,
    code_type: str | None,
) -> None:
    if not code_name or not code_abbreviation or not code_type:
        raise InvalidRequestError(REQUIRED_FIELDS_MESSAGE)

    if code_type not in CodeType.values():
        raise InvalidRequestError(INVALID_CODE_TYPE_MESSAGE)


def _duplicate_message(abbreviation: str) -> str:
    return f"Building code with abbreviation '{abbreviation}' already exists"


async def create_building_code(
    session: AsyncSession,
    *,
    code_name: str | None,
    code_abbreviation: str | None,
    code_type: str | None,
    jurisdiction: str | None = None,
    description: str | None = None,
    official_url: str | None = None,
    version: str | None = None,
    effective_date: str | datetime | None = None,
) -> CreatedBuildingCode:
    """Insert an active building code, plus a default version when given.

    The abbreviation lookup only produces a friendly message. Two writers
    can both pass it; the unique index on code_abbreviation rejects the
    second insert and that IntegrityError is reported as the same conflict.

    Raises:
        InvalidRequestError: missing required field, bad codeType or date
        ConflictError: abbreviation already taken
    """
    validate_new_code(code_name, code_abbreviation, code_type)
    parsed_effective_date = parse_effective_date(effective_date) if version else None

    if await find_code_by_abbreviation(session, code_abbreviation) is not None:
        raise ConflictError(_duplicate_message(code_abbreviation))

    code = BuildingCodeModel(
        code_name=code_name,
        code_abbreviation=code_abbreviation,
        jurisdiction=jurisdiction,
        code_type=code_type,
        description=description,
        official_url=official_url,
        is_active=True,
    )
    session.add(code)

    # Only the code insert can hit the abbreviation index; a failing version
    # insert is not a conflict and propagates as is.
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        logger.warning("building_code_conflict", abbreviation=code_abbreviation)
        raise ConflictError(_duplicate_message(code_abbreviation)) from None

    new_version = None
    if version:
        new_version = BuildingCodeVersionModel(
            building_code_id=code.id,
            version=version,
            effective_date=parsed_effective_date,
            is_default=True,
            processing_status=ProcessingStatus.PENDING.value,
        )
        session.add(new_version)
        await session.flush()

    # Load server-generated timestamps
    await session.refresh(code)
    if new_version is not None:
        await session.refresh(new_version)

    logger.info(
        "building_code_created",
        code_id=str(code.id),
        abbreviation=code_abbreviation,
        version=version,
    )
    return CreatedBuildingCode(code=code, version=new_version)


async def seed_default_codes(session: AsyncSession) -> int:
    """Insert the default catalog entries that are not present yet.

    Each seeded code gets a default "2023" version in pending state.
    Returns the number of codes inserted.
    """
    inserted = 0
    for entry in DEFAULT_CODES:
        if await find_code_by_abbreviation(session, entry["code_abbreviation"]) is not None:
            continue

        code = BuildingCodeModel(is_active=True, **entry)
        session.add(code)
        await session.flush()
        session.add(
            BuildingCodeVersionModel(
                building_code_id=code.id,
                version=DEFAULT_VERSION,
                effective_date=DEFAULT_EFFECTIVE_DATE,
                is_default=True,
                processing_status=ProcessingStatus.PENDING.value,
            )
        )
        inserted += 1

    await session.flush()
    logger.info("default_codes_seeded", inserted=inserted)
    return inserted
