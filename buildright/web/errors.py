"""JSON error bodies shared by the API routes."""

from __future__ import annotations

from typing import Any, Sequence

from fastapi.responses import JSONResponse

from buildright.catalog.service import INVALID_CODE_TYPE_MESSAGE
from buildright.exceptions import CatalogError


def error_response(exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def internal_error(message: str, exc: Exception) -> JSONResponse:
    """500 body carrying the underlying failure in ``details``."""
    return JSONResponse(
        status_code=500,
        content={"error": message, "details": str(exc)},
    )


def validation_message(errors: Sequence[dict[str, Any]]) -> str:
    """Collapse pydantic request errors into the single message clients show.

    A wrongly typed ``codeType`` gets the same allowed-values message as an
    unknown one.
    """
    if any(err.get("type") == "json_invalid" for err in errors):
        return "Invalid JSON body"

    fields = [
        str(err["loc"][-1])
        for err in errors
        if len(err.get("loc", ())) > 1
    ]
    if "codeType" in fields:
        return INVALID_CODE_TYPE_MESSAGE
    if not fields:
        return "Invalid request body"
    return f"Invalid value for: {', '.join(dict.fromkeys(fields))}"
