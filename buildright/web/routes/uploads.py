"""Building code document upload routes.

Routes:
- POST /api/building-codes/upload  - Upload a document for a code version and parse it
- GET  /api/building-codes/upload  - Processing status of a version (?versionId=)
"""

from __future__ import annotations

from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse

from buildright.catalog.uploads import get_upload_status, upload_building_code_document
from buildright.config import get_config
from buildright.db.connection import get_session
from buildright.exceptions import CatalogError
from buildright.web.auth import CurrentUser, require_user
from buildright.web.errors import error_response, internal_error

logger = structlog.get_logger()

router = APIRouter(tags=["building-codes"])


@router.post("/api/building-codes/upload")
async def upload_building_code(
    file: UploadFile | None = File(default=None),
    building_code_id: str | None = Form(default=None, alias="buildingCodeId"),
    version: str | None = Form(default=None),
    effective_date: str | None = Form(default=None, alias="effectiveDate"),
    user: CurrentUser = Depends(require_user),
):
    """Upload a building code document (PDF, text or Word).

    The version is created when missing, otherwise its document is replaced.
    Returns 500 with the version left ``failed`` when the document cannot be
    parsed.
    """
    uploads = get_config().uploads
    try:
        data = await file.read() if file is not None else b""
        async with get_session() as session:
            result = await upload_building_code_document(
                session,
                building_code_id=building_code_id,
                version=version,
                effective_date=effective_date,
                file_name=file.filename if file is not None else None,
                content_type=file.content_type if file is not None else None,
                data=data,
                upload_dir=Path(uploads.directory),
                max_bytes=uploads.max_bytes,
            )
            body = result.to_dict()
    except CatalogError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.error("building_code_upload_failed", user_id=user.user_id, error=str(exc))
        return internal_error("Failed to upload building code", exc)

    if not result.succeeded:
        return JSONResponse(
            status_code=500,
            content={"error": "File uploaded but processing failed", "details": result.error},
        )
    return JSONResponse(content=body)


@router.get("/api/building-codes/upload")
async def upload_status(
    version_id: str | None = Query(default=None, alias="versionId"),
    user: CurrentUser = Depends(require_user),
):
    try:
        async with get_session() as session:
            status = await get_upload_status(session, version_id)
    except CatalogError as exc:
        return error_response(exc)
    except Exception as exc:
        logger.error("upload_status_failed", version_id=version_id, error=str(exc))
        return internal_error("Failed to get upload status", exc)

    return JSONResponse(content=status)
