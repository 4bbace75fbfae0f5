"""Citizen report models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, ValidationError

from urbanmon.exceptions import ReportValidationError
from urbanmon.models._base import Timestamp, UrbanBaseModel


class ReportStatus(StrEnum):
    """Known report statuses.

    The store accepts any string; these are the values the dashboard
    knows how to label. ``OPEN``/``IN_PROGRESS_CAMEL``/``CLOSED`` come from
    spreadsheets maintained by hand.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    URGENT = "urgent"
    OPEN = "open"
    IN_PROGRESS_CAMEL = "inProgress"
    CLOSED = "closed"


class ReportCreate(UrbanBaseModel):
    """Validated body of a new citizen report."""

    issue_type: str = Field(min_length=1)
    location: str = Field(min_length=1)
    description: str = Field(min_length=1)
    photo_url: str | None = None
    user_id: int | None = None


class Report(UrbanBaseModel):
    """A stored citizen report."""

    id: int
    issue_type: str
    location: str
    description: str
    photo_url: str | None = None
    user_id: int | None = None
    status: str = ReportStatus.PENDING.value
    created_at: Timestamp
    updated_at: Timestamp


def parse_report_create(payload: Any) -> ReportCreate:
    """Validate an untrusted report payload.

    Raises
    ------
    ReportValidationError
        With pydantic's field-level error list when the payload is invalid.
    """
    try:
        return ReportCreate.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        raise ReportValidationError("Invalid report data", errors=errors) from exc
