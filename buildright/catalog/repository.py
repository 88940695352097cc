"""Read queries for the building code catalog."""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.catalog.models import (
    CatalogFilters,
    CatalogListing,
    CatalogStats,
    CodeSummary,
    VersionSummary,
)
from buildright.db.models import (
    BuildingCodeModel,
    BuildingCodeSectionModel,
    BuildingCodeVersionModel,
)

logger = structlog.get_logger()


async def list_building_codes(
    session: AsyncSession,
    code_type: str | None = None,
    jurisdiction: str | None = None,
    include_inactive: bool = False,
) -> CatalogListing:
    """Return the filtered catalog with versions and section counts.

    Every supplied filter narrows the result; inactive codes are hidden
    unless ``include_inactive`` is set. Codes and their versions are
    ordered newest first. Three queries are issued regardless of catalog
    size: codes, versions of those codes, and grouped section counts.
    """
    filters = CatalogFilters(
        code_type=code_type or None,
        jurisdiction=jurisdiction or None,
        include_inactive=include_inactive,
    )

    stmt = select(BuildingCodeModel).order_by(BuildingCodeModel.created_at.desc())
    if filters.code_type:
        stmt = stmt.where(BuildingCodeModel.code_type == filters.code_type)
    if filters.jurisdiction:
        stmt = stmt.where(BuildingCodeModel.jurisdiction == filters.jurisdiction)
    if not filters.include_inactive:
        stmt = stmt.where(BuildingCodeModel.is_active.is_(True))

    code_models = (await session.execute(stmt)).scalars().all()
    codes = [CodeSummary.from_model(model) for model in code_models]

    versions_by_code = await _load_versions(session, [c.id for c in codes])
    for code in codes:
        code.versions = versions_by_code.get(code.id, [])

    listing = CatalogListing(
        codes=codes,
        stats=CatalogStats.from_codes(codes),
        filters=filters,
    )
    logger.info(
        "building_codes_listed",
        count=len(codes),
        code_type=filters.code_type,
        jurisdiction=filters.jurisdiction,
        include_inactive=filters.include_inactive,
    )
    return listing


async def _load_versions(
    session: AsyncSession, code_ids: list[UUID]
) -> dict[UUID, list[VersionSummary]]:
    if not code_ids:
        return {}

    stmt = (
        select(BuildingCodeVersionModel)
        .where(BuildingCodeVersionModel.building_code_id.in_(code_ids))
        .order_by(BuildingCodeVersionModel.created_at.desc())
    )
    version_models = (await session.execute(stmt)).scalars().all()

    counts = await count_sections_by_version(session, [v.id for v in version_models])

    grouped: dict[UUID, list[VersionSummary]] = defaultdict(list)
    for model in version_models:
        grouped[model.building_code_id].append(
            VersionSummary.from_model(model, section_count=counts.get(model.id, 0))
        )
    return grouped


async def count_sections_by_version(
    session: AsyncSession, version_ids: list[UUID]
) -> dict[UUID, int]:
    """Return {version_id: section count}; versions without sections are absent."""
    if not version_ids:
        return {}

    stmt = (
        select(
            BuildingCodeSectionModel.building_code_version_id,
            func.count(BuildingCodeSectionModel.id),
        )
        .where(BuildingCodeSectionModel.building_code_version_id.in_(version_ids))
        .group_by(BuildingCodeSectionModel.building_code_version_id)
    )
    rows = (await session.execute(stmt)).all()
    return {version_id: count for version_id, count in rows}


async def find_code_by_abbreviation(
    session: AsyncSession, abbreviation: str
) -> BuildingCodeModel | None:
    result = await session.execute(
        select(BuildingCodeModel)
        .where(BuildingCodeModel.code_abbreviation == abbreviation)
        .limit(1)
    )
    return result.scalar_one_or_none()
