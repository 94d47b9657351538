from __future__ import annotations


class CatalogError(Exception):
    """Base class for errors that are reported to API clients as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    status_code = 400


class Unauthorized(CatalogError):
    status_code = 401


class NotFound(CatalogError):
    status_code = 404


class StorageError(CatalogError):
    status_code = 500
