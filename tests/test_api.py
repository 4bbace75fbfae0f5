from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from urbanmon.api import create_app
from urbanmon.config import UrbanmonConfig


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app(UrbanmonConfig())) as test_client:
        yield test_client


def test_stats_overview(client: TestClient) -> None:
    response = client.get("/api/stats/overview")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"airQuality", "trafficCongestion", "floodRisk", "citizenReports"}
    assert body["floodRisk"]["value"] == 3


def test_locations_and_map(client: TestClient) -> None:
    assert len(client.get("/api/locations").json()) == 8

    geo = client.get("/api/map/data").json()
    assert geo["type"] == "FeatureCollection"
    assert len(geo["features"]) == 8


def test_air_quality_data_by_location(client: TestClient) -> None:
    samples = client.get("/api/air-quality/data", params={"locationId": "delhi"}).json()
    everything = client.get("/api/air-quality/data").json()

    assert [s["aqi"] for s in samples] == [204]
    assert samples[0]["locationId"] == "delhi"
    assert len(everything) == 8


def test_air_quality_prediction(client: TestClient) -> None:
    body = client.get("/api/air-quality/prediction").json()

    assert body["locationId"] == "delhi"
    assert set(body["predictions"]) == {"2h", "4h", "6h"}

    missing = client.get("/api/air-quality/prediction", params={"locationId": "atlantis"})
    assert missing.status_code == 404
    assert missing.json() == {"message": "No air quality data found for this location"}


def test_analyze_air_quality(client: TestClient) -> None:
    assert client.post("/api/air-quality/analyze", json={}).status_code == 400
    assert client.post("/api/air-quality/analyze", json={"locationId": "atlantis"}).status_code == 404

    body = client.post("/api/air-quality/analyze", json={"locationId": "delhi"}).json()

    assert body["aqi"] == {"label": "Very Unhealthy", "value": 210}
    assert body["recommendation"]["text"] == "Stay indoors and use air purifiers."
    assert len(body["mapData"]["data"]) == 80
    assert body["input"]["pm25"] == 160
    assert body["predictions"]["current"] == 204


def test_traffic_endpoints(client: TestClient) -> None:
    hotspots = client.get("/api/traffic/hotspots").json()
    assert hotspots[0]["location"] == "Delhi"
    assert hotspots[0]["congestionLevel"] == 92

    assert len(client.get("/api/traffic/data", params={"locationId": "pune"}).json()) == 1

    forecast = client.get("/api/traffic/predict", params={"locationId": "mumbai"}).json()
    assert set(forecast["predictions"]) == {"1h", "2h", "3h"}
    assert client.get("/api/traffic/predict", params={"locationId": "atlantis"}).status_code == 404


def test_report_listing(client: TestClient) -> None:
    body = client.get("/api/reports", params={"filter": "flood", "perPage": 5}).json()

    assert body["total"] == 1
    assert body["perPage"] == 5
    assert body["totalPages"] == 1
    assert body["reports"][0]["issue"]["type"] == "Flooding"


def test_create_report_validation_error(client: TestClient) -> None:
    response = client.post("/api/reports", json={"issueType": "flooding"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid report data"
    assert {tuple(err["loc"]) for err in body["errors"]} >= {("location",), ("description",)}


def test_create_report_rejects_non_json_body(client: TestClient) -> None:
    response = client.post("/api/reports", content=b"issueType=flooding", headers={"content-type": "text/plain"})

    assert response.status_code == 400


def test_report_lifecycle(client: TestClient) -> None:
    created = client.post(
        "/api/reports",
        json={"issueType": "noisePollution", "location": "MG Road, Bangalore", "description": "Drilling at 2am"},
    )
    assert created.status_code == 201
    report = created.json()
    assert report["id"] == 4
    assert report["status"] == "pending"

    fetched = client.get("/api/reports/4").json()
    assert fetched["issueType"] == "noisePollution"

    patched = client.patch("/api/reports/4", json={"status": "resolved"})
    assert patched.status_code == 200
    assert patched.json()["status"] == "resolved"

    assert client.get("/api/reports/999").status_code == 404
    assert client.patch("/api/reports/999", json={"status": "resolved"}).status_code == 404
    assert client.patch("/api/reports/4", json={}).status_code == 400


def test_save_without_durable_storage_conflicts(client: TestClient) -> None:
    response = client.post("/api/admin/save")

    assert response.status_code == 409
    assert "message" in response.json()


def test_save_with_file_storage(tmp_path: Path) -> None:
    config = UrbanmonConfig(storage_backend="file", data_dir=str(tmp_path))
    with TestClient(create_app(config)) as client:
        client.post(
            "/api/reports",
            json={"issueType": "flooding", "location": "Downtown", "description": "Water"},
        )
        response = client.post("/api/admin/save")

        assert response.status_code == 200
        assert response.json() == {"saved": True}
        reports = json.loads((tmp_path / "reports.json").read_text())
        assert len(reports["items"]) == 4
