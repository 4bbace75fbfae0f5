from __future__ import annotations

from datetime import UTC, datetime

import pytest

from urbanmon.exceptions import ReportValidationError
from urbanmon.models import AirQualitySample, Location, Report, User, parse_report_create


def test_location_accepts_nested_coordinates() -> None:
    location = Location.model_validate(
        {"id": "pune", "name": "Pune", "district": "Maharashtra", "coordinates": {"lat": 18.5204, "lng": 73.8567}}
    )

    assert location.latitude == pytest.approx(18.5204)
    assert location.longitude == pytest.approx(73.8567)
    assert "coordinates" not in location.to_wire()


def test_wire_format_uses_camel_case() -> None:
    sample = AirQualitySample(
        id=1,
        location_id="delhi",
        aqi=204,
        pm25=160,
        timestamp=datetime(2026, 1, 5, 10, 0, tzinfo=UTC),
    )

    wire = sample.to_wire()
    assert wire["locationId"] == "delhi"
    assert wire["pm25"] == 160
    assert wire["timestamp"].startswith("2026-01-05T10:00:00")


def test_models_accept_camel_case_input() -> None:
    report = Report.model_validate(
        {
            "id": 1,
            "issueType": "flooding",
            "location": "Downtown",
            "description": "Water",
            "createdAt": "2026-01-05T10:00:00Z",
            "updatedAt": 1767607200000,
        }
    )

    assert report.issue_type == "flooding"
    assert report.created_at == datetime(2026, 1, 5, 10, 0, tzinfo=UTC)
    assert report.updated_at == datetime(2026, 1, 5, 10, 0, tzinfo=UTC)
    assert report.status == "pending"


def test_parse_report_create_valid() -> None:
    report = parse_report_create(
        {"issueType": "noisePollution", "location": "MG Road", "description": "Loud at night", "extra": 1}
    )

    assert report.issue_type == "noisePollution"
    assert report.photo_url is None


def test_parse_report_create_reports_field_errors() -> None:
    with pytest.raises(ReportValidationError) as excinfo:
        parse_report_create({"issueType": "flooding", "location": ""})

    fields = {tuple(err["loc"]) for err in excinfo.value.errors}
    assert ("location",) in fields
    assert ("description",) in fields


def test_parse_report_create_rejects_non_object() -> None:
    with pytest.raises(ReportValidationError):
        parse_report_create(["not", "an", "object"])


def test_user_repr_hides_password() -> None:
    user = User(id=1, username="asha", password="hunter2", created_at=datetime(2026, 1, 1, tzinfo=UTC))

    assert "hunter2" not in repr(user)
