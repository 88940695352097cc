"""Domain errors raised by BuildRight services.

Route handlers translate these into HTTP responses using ``status_code``.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(CatalogError):
    """Missing or malformed input."""

    status_code = 400


class ForbiddenError(CatalogError):
    status_code = 403


class NotFoundError(CatalogError):
    status_code = 404


class ConflictError(CatalogError):
    """Natural-key uniqueness violation."""

    status_code = 409
