"""Base model for urbanmon entities and views.

Every entity, create-input and view model inherits from
:class:`UrbanBaseModel` which provides:

* ``alias_generator=to_camel`` so snake_case attributes serialize as the
  camelCase keys the dashboard and snapshot files use.
* ``populate_by_name=True`` so Python callers can keep using snake_case.
* Frozen instances; the store replaces entities rather than mutating them.

Timestamp fields use :data:`Timestamp`, which coerces ISO strings and
epoch seconds/milliseconds into aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from urbanmon._normalize import parse_timestamp


def _require_timestamp(value: Any) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError("timestamp is required")
    return parsed


Timestamp = Annotated[datetime, BeforeValidator(_require_timestamp)]
"""Annotated type that coerces ISO strings / epoch numbers to aware UTC datetimes."""

OptionalTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Like :data:`Timestamp` but blank values become ``None``."""


class UrbanBaseModel(BaseModel):
    """Base for urbanmon models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
