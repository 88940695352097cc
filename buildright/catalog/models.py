"""Data structures returned by the building code catalog.

``to_dict`` renders the camelCase JSON shape the chat UI consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from buildright.db.models import BuildingCodeModel, BuildingCodeVersionModel


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def version_record(model: BuildingCodeVersionModel) -> dict[str, Any]:
    """Full version row as returned by the write endpoints."""
    return {
        "id": str(model.id),
        "buildingCodeId": str(model.building_code_id),
        "version": model.version,
        "effectiveDate": _iso(model.effective_date),
        "supersededDate": _iso(model.superseded_date),
        "isDefault": model.is_default,
        "sourceFile": model.source_file,
        "processingStatus": model.processing_status,
        "createdAt": _iso(model.created_at),
    }


@dataclass(slots=True)
class VersionSummary:
    id: UUID
    version: str
    effective_date: datetime | None
    superseded_date: datetime | None
    is_default: bool
    processing_status: str
    created_at: datetime | None
    section_count: int = 0

    @classmethod
    def from_model(cls, model: BuildingCodeVersionModel, section_count: int = 0) -> VersionSummary:
        return cls(
            id=model.id,
            version=model.version,
            effective_date=model.effective_date,
            superseded_date=model.superseded_date,
            is_default=model.is_default,
            processing_status=model.processing_status,
            created_at=model.created_at,
            section_count=section_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "version": self.version,
            "effectiveDate": _iso(self.effective_date),
            "supersededDate": _iso(self.superseded_date),
            "isDefault": self.is_default,
            "processingStatus": self.processing_status,
            "createdAt": _iso(self.created_at),
            "sectionCount": self.section_count,
        }


@dataclass(slots=True)
class CodeSummary:
    id: UUID
    code_name: str
    code_abbreviation: str
    jurisdiction: str | None
    code_type: str
    is_active: bool
    description: str | None
    official_url: str | None
    created_at: datetime | None
    updated_at: datetime | None
    versions: list[VersionSummary] = field(default_factory=list)

    @classmethod
    def from_model(cls, model: BuildingCodeModel) -> CodeSummary:
        return cls(
            id=model.id,
            code_name=model.code_name,
            code_abbreviation=model.code_abbreviation,
            jurisdiction=model.jurisdiction,
            code_type=model.code_type,
            is_active=model.is_active,
            description=model.description,
            official_url=model.official_url,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_dict(self, include_versions: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": str(self.id),
            "codeName": self.code_name,
            "codeAbbreviation": self.code_abbreviation,
            "jurisdiction": self.jurisdiction,
            "codeType": self.code_type,
            "isActive": self.is_active,
            "description": self.description,
            "officialUrl": self.official_url,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if include_versions:
            data["versions"] = [v.to_dict() for v in self.versions]
        return data


@dataclass(slots=True)
class CatalogFilters:
    code_type: str | None = None
    jurisdiction: str | None = None
    include_inactive: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "codeType": self.code_type,
            "jurisdiction": self.jurisdiction,
            "includeInactive": self.include_inactive,
        }


@dataclass(slots=True)
class CatalogStats:
    total_codes: int
    active_codes_count: int
    code_types: list[str]
    jurisdictions: list[str]

    @classmethod
    def from_codes(cls, codes: list[CodeSummary]) -> CatalogStats:
        # dict.fromkeys keeps first-seen order, matching the listing order
        return cls(
            total_codes=len(codes),
            active_codes_count=sum(1 for c in codes if c.is_active),
            code_types=list(dict.fromkeys(c.code_type for c in codes)),
            jurisdictions=list(dict.fromkeys(c.jurisdiction for c in codes if c.jurisdiction)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCodes": self.total_codes,
            "activeCodesCount": self.active_codes_count,
            "codeTypes": self.code_types,
            "jurisdictions": self.jurisdictions,
        }


@dataclass(slots=True)
class CatalogListing:
    codes: list[CodeSummary]
    stats: CatalogStats
    filters: CatalogFilters

    def to_dict(self) -> dict[str, Any]:
        return {
            "codes": [c.to_dict() for c in self.codes],
            "stats": self.stats.to_dict(),
            "filters": self.filters.to_dict(),
        }


@dataclass(slots=True)
class CreatedBuildingCode:
    """Result of the catalog writer."""

    code: BuildingCodeModel
    version: BuildingCodeVersionModel | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": CodeSummary.from_model(self.code).to_dict(include_versions=False),
            "version": version_record(self.version) if self.version is not None else None,
        }
