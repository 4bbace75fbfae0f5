"""Custom exception hierarchy for urbanmon."""

from __future__ import annotations

from typing import Any


class UrbanmonError(Exception):
    """Base exception for all urbanmon errors."""


class UrbanmonConfigError(UrbanmonError):
    """Invalid or missing configuration."""


class ReportValidationError(UrbanmonError):
    """A citizen report payload failed validation.

    ``errors`` carries the field-level details (pydantic error dicts) so
    the HTTP layer can answer with a 400 instead of a server error.
    """

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class PersistenceError(UrbanmonError):
    """Durable mirror failure (never fatal for the live store)."""


class SnapshotError(PersistenceError):
    """Snapshot files could not be read or written."""


class SheetsError(PersistenceError):
    """Google Sheets mirror failure."""


class SheetsAuthError(SheetsError):
    """Service-account token exchange failed."""


class SheetsTransportError(SheetsError):
    """HTTP-level failure talking to Sheets/Drive (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
