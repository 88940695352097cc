"""Building code catalog routes.

Routes:
- GET  /api/building-codes  - List codes with versions, section counts and stats
- POST /api/building-codes  - Create a code, optionally with its first version
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from buildright.catalog import create_building_code, list_building_codes
from buildright.db.connection import get_session
from buildright.exceptions import CatalogError
from buildright.web.auth import CurrentUser, require_user
from buildright.web.errors import error_response, internal_error
from buildright.web.models import BuildingCodeCreate

logger = structlog.get_logger()

router = APIRouter(tags=["building-codes"])


@router.get("/api/building-codes")
async def get_building_codes(
    code_type: str | None = Query(default=None, alias="codeType"),
    jurisdiction: str | None = Query(default=None),
    include_inactive: str | None = Query(default=None, alias="includeInactive"),
    user: CurrentUser = Depends(require_user),
):
    """List building codes.

    Only active codes are returned unless ``includeInactive=true``. Each code
    carries its versions (newest first) with per-version section counts.
    """
    try:
        async with get_session() as session:
            listing = await list_building_codes(
                session,
                code_type=code_type,
                jurisdiction=jurisdiction,
                include_inactive=include_inactive == "true",
            )
        return JSONResponse(content=listing.to_dict())
    except Exception as exc:
        logger.error("building_codes_list_failed", user_id=user.user_id, error=str(exc))
        return internal_error("Failed to fetch building codes", exc)


@router.post("/api/building-codes")
async def post_building_code(
    payload: BuildingCodeCreate,
    user: CurrentUser = Depends(require_user),
):
    """Create a building code.

    400 on missing/invalid fields, 409 when the abbreviation is taken.
    """
    try:
        async with get_session() as session:
            created = await create_building_code(session, **payload.model_dump())
            body = created.to_dict()
    except CatalogError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.error("building_code_create_failed", user_id=user.user_id, error=str(exc))
        return internal_error("Failed to create building code", exc)

    body["message"] = "Building code created successfully"
    return JSONResponse(status_code=201, content=body)
