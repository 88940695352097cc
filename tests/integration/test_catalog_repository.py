"""Integration tests for the building code catalog reader.

Runs against an in-memory SQLite database built from the ORM metadata.
"""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.catalog import count_sections_by_version, list_building_codes


@pytest.mark.asyncio
async def test_empty_catalog(db_session: AsyncSession):
    listing = await list_building_codes(db_session)

    assert listing.codes == []
    assert listing.to_dict()["stats"] == {
        "totalCodes": 0,
        "activeCodesCount": 0,
        "codeTypes": [],
        "jurisdictions": [],
    }


@pytest.mark.asyncio
async def test_active_codes_newest_first(db_session: AsyncSession, make_code):
    await make_code("FBC", age=0, jurisdiction="Florida")
    await make_code("IBC", age=10)
    await make_code("IFC", age=5, code_type="fire")
    await make_code("OLD", age=20, is_active=False)

    listing = await list_building_codes(db_session)

    assert [c.code_abbreviation for c in listing.codes] == ["IBC", "IFC", "FBC"]
    assert listing.stats.total_codes == 3
    assert listing.stats.active_codes_count == 3
    assert listing.stats.code_types == ["building", "fire"]
    assert listing.stats.jurisdictions == ["International", "Florida"]


@pytest.mark.asyncio
async def test_include_inactive(db_session: AsyncSession, make_code):
    await make_code("FBC", age=0)
    await make_code("OLD", age=1, is_active=False)

    listing = await list_building_codes(db_session, include_inactive=True)

    assert [c.code_abbreviation for c in listing.codes] == ["OLD", "FBC"]
    assert listing.stats.total_codes == 2
    assert listing.stats.active_codes_count == 1
    assert listing.filters.include_inactive is True


@pytest.mark.asyncio
async def test_filters_combine(db_session: AsyncSession, make_code):
    await make_code("FBC", jurisdiction="Florida", code_type="building")
    await make_code("FFC", jurisdiction="Florida", code_type="fire", age=1)
    await make_code("IFC", jurisdiction="International", code_type="fire", age=2)

    listing = await list_building_codes(db_session, code_type="fire", jurisdiction="Florida")

    assert [c.code_abbreviation for c in listing.codes] == ["FFC"]
    assert listing.filters.to_dict() == {
        "codeType": "fire",
        "jurisdiction": "Florida",
        "includeInactive": False,
    }


@pytest.mark.asyncio
async def test_empty_filter_values_are_ignored(db_session: AsyncSession, make_code):
    await make_code("FBC")
    await make_code("IFC", code_type="fire", age=1)

    listing = await list_building_codes(db_session, code_type="", jurisdiction="")

    assert len(listing.codes) == 2
    assert listing.filters.code_type is None
    assert listing.filters.jurisdiction is None


@pytest.mark.asyncio
async def test_versions_with_section_counts(db_session: AsyncSession, make_code, make_version):
    fbc = await make_code("FBC")
    ibc = await make_code("IBC", age=1)
    await make_version(fbc, "2020", age=0, sections=2)
    await make_version(fbc, "2023", age=5, sections=3, is_default=True)
    await make_version(ibc, "2021", age=1)

    listing = await list_building_codes(db_session)
    by_abbr = {c.code_abbreviation: c for c in listing.codes}

    fbc_versions = by_abbr["FBC"].versions
    assert [v.version for v in fbc_versions] == ["2023", "2020"]
    assert [v.section_count for v in fbc_versions] == [3, 2]
    assert fbc_versions[0].is_default is True

    ibc_versions = by_abbr["IBC"].versions
    assert len(ibc_versions) == 1
    assert ibc_versions[0].section_count == 0


@pytest.mark.asyncio
async def test_code_without_versions(db_session: AsyncSession, make_code):
    await make_code("IPC", code_type="plumbing")

    listing = await list_building_codes(db_session)

    assert listing.codes[0].versions == []
    assert listing.to_dict()["codes"][0]["versions"] == []


@pytest.mark.asyncio
async def test_count_sections_by_version(db_session: AsyncSession, make_code, make_version):
    code = await make_code("IMC", code_type="mechanical")
    with_sections = await make_version(code, "2021", sections=4)
    empty = await make_version(code, "2024", age=1)

    counts = await count_sections_by_version(db_session, [with_sections.id, empty.id])

    assert counts == {with_sections.id: 4}
    assert await count_sections_by_version(db_session, []) == {}
