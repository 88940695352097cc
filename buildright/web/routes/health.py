"""Liveness and database connectivity route.

Routes:
- GET /health  - 200 when the database answers, 503 otherwise
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.db.connection import get_db

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Load balancers take the instance out of rotation on 503."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health_check_database_unreachable", error=str(exc))
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "disconnected", "detail": str(exc)},
        )
    return {"status": "ok", "database": "connected"}
