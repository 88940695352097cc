"""Building code catalog: listing, creation and default seeding."""

from buildright.catalog.models import (
    CatalogFilters,
    CatalogListing,
    CatalogStats,
    CodeSummary,
    CreatedBuildingCode,
    VersionSummary,
)
from buildright.catalog.repository import (
    count_sections_by_version,
    find_code_by_abbreviation,
    list_building_codes,
)
from buildright.catalog.service import (
    DEFAULT_CODES,
    create_building_code,
    seed_default_codes,
)
from buildright.catalog.uploads import (
    UploadResult,
    get_upload_status,
    upload_building_code_document,
)

__all__ = [
    "DEFAULT_CODES",
    "CatalogFilters",
    "CatalogListing",
    "CatalogStats",
    "CodeSummary",
    "CreatedBuildingCode",
    "VersionSummary",
    "count_sections_by_version",
    "find_code_by_abbreviation",
    "list_building_codes",
    "create_building_code",
    "seed_default_codes",
    "UploadResult",
    "get_upload_status",
    "upload_building_code_document",
]
