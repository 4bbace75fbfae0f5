from __future__ import annotations

from datetime import UTC, datetime, timedelta

from urbanmon.models import (
    AirQualityCreate,
    Location,
    PredictionCreate,
    PredictionType,
    ReportCreate,
    TrafficCreate,
    UserCreate,
)
from urbanmon.store import ChangeAction, Collection, EntityStore, StoreChange, StoreSnapshot


class _Clock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 5, 10, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _location(location_id: str = "delhi", name: str = "Delhi") -> Location:
    return Location(id=location_id, name=name, district="NCR", latitude=28.6139, longitude=77.2090)


def _report(issue_type: str = "flooding") -> ReportCreate:
    return ReportCreate(issue_type=issue_type, location="Downtown, Oak Street", description="Water on the road")


def test_ids_start_at_one_and_are_per_collection() -> None:
    store = EntityStore()

    first = store.add_air_quality_data(AirQualityCreate(location_id="delhi", aqi=100))
    second = store.add_air_quality_data(AirQualityCreate(location_id="mumbai", aqi=90))
    traffic = store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=50))
    report = store.create_report(_report())

    assert (first.id, second.id) == (1, 2)
    assert traffic.id == 1
    assert report.id == 1


def test_sample_timestamp_defaults_to_clock() -> None:
    clock = _Clock()
    store = EntityStore(clock=clock)
    explicit = datetime(2025, 12, 31, tzinfo=UTC)

    stamped = store.add_air_quality_data(AirQualityCreate(location_id="delhi", aqi=100))
    kept = store.add_air_quality_data(AirQualityCreate(location_id="delhi", aqi=110, timestamp=explicit))

    assert stamped.timestamp == clock.now
    assert kept.timestamp == explicit


def test_sample_reads_filter_by_location() -> None:
    store = EntityStore()
    store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=90))
    store.add_traffic_data(TrafficCreate(location_id="mumbai", congestion_level=80))
    store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=70))

    assert [s.congestion_level for s in store.get_traffic_data("delhi")] == [90, 70]
    assert len(store.get_traffic_data()) == 3
    assert store.get_traffic_data("nowhere") == []


def test_new_report_is_pending_with_equal_timestamps() -> None:
    store = EntityStore()

    report = store.create_report(_report())

    assert report.status == "pending"
    assert report.created_at == report.updated_at
    assert store.get_report(report.id) == report


def test_update_report_changes_status_and_bumps_updated_at() -> None:
    clock = _Clock()
    store = EntityStore(clock=clock)
    report = store.create_report(_report())

    clock.advance(minutes=5)
    updated = store.update_report(report.id, "resolved")

    assert updated is not None
    assert updated.status == "resolved"
    assert updated.created_at == report.created_at
    assert updated.updated_at == clock.now
    assert store.get_all_reports() == [updated]


def test_update_report_never_moves_updated_at_backwards() -> None:
    clock = _Clock()
    store = EntityStore(clock=clock)
    report = store.create_report(_report())

    clock.advance(hours=-1)
    updated = store.update_report(report.id, "urgent")

    assert updated is not None
    assert updated.updated_at >= updated.created_at


def test_update_unknown_report_returns_none_without_notifying() -> None:
    store = EntityStore()
    changes: list[StoreChange] = []
    store.add_listener(changes.append)

    assert store.update_report(42, "resolved") is None
    assert changes == []


def test_add_location_upserts_by_id() -> None:
    store = EntityStore()
    store.add_location(_location())
    store.add_location(_location(name="New Delhi"))

    locations = store.get_locations()
    assert len(locations) == 1
    assert locations[0].name == "New Delhi"


def test_get_prediction_returns_latest_created_not_latest_inserted() -> None:
    store = EntityStore()
    newer = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)
    older = datetime(2026, 1, 5, 8, 0, tzinfo=UTC)

    store.add_prediction(
        PredictionCreate(
            location_id="delhi",
            type=PredictionType.AIR,
            current_value=200,
            predicted_values={"2h": 190},
            confidence=87,
            created_at=newer,
        )
    )
    store.add_prediction(
        PredictionCreate(
            location_id="delhi",
            type=PredictionType.AIR,
            current_value=150,
            predicted_values={"2h": 140},
            confidence=87,
            created_at=older,
        )
    )

    latest = store.get_prediction("delhi", "air")
    assert latest is not None
    assert latest.current_value == 200
    assert store.get_prediction("delhi", PredictionType.TRAFFIC) is None


def test_get_user_by_username() -> None:
    store = EntityStore()
    created = store.create_user(UserCreate(username="asha", password="pw"))

    assert store.get_user(created.id) == created
    assert store.get_user_by_username("asha") == created
    assert store.get_user_by_username("nobody") is None
    assert created.role == "citizen"


def test_listeners_receive_every_mutation() -> None:
    store = EntityStore()
    changes: list[StoreChange] = []
    store.add_listener(changes.append)

    report = store.create_report(_report())
    store.update_report(report.id, "resolved")
    store.add_location(_location())

    assert [(c.collection, c.action) for c in changes] == [
        (Collection.REPORTS, ChangeAction.CREATE),
        (Collection.REPORTS, ChangeAction.UPDATE),
        (Collection.LOCATIONS, ChangeAction.UPSERT),
    ]

    store.remove_listener(changes.append)
    store.create_report(_report())
    assert len(changes) == 3


def test_failing_listener_does_not_break_mutation() -> None:
    store = EntityStore()

    def _boom(change: StoreChange) -> None:
        raise RuntimeError("mirror down")

    store.add_listener(_boom)
    report = store.create_report(_report())

    assert store.get_report(report.id) == report


def test_snapshot_restore_keeps_counters() -> None:
    store = EntityStore()
    store.add_location(_location())
    store.create_report(_report())
    store.create_report(_report("airPollution"))
    snapshot = store.snapshot()

    restored = EntityStore()
    restored.restore(snapshot)
    report = restored.create_report(_report())

    assert report.id == 3
    assert restored.get_locations() == store.get_locations()
    assert restored.snapshot().reports[:2] == snapshot.reports


def test_restore_derives_missing_counters_from_max_id() -> None:
    source = EntityStore()
    for _ in range(4):
        source.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=40))
    snapshot = StoreSnapshot(traffic=source.get_traffic_data())

    store = EntityStore()
    store.restore(snapshot)

    assert store.next_id(Collection.TRAFFIC) == 5
    assert store.next_id(Collection.REPORTS) == 1


def test_restore_replaces_previous_contents() -> None:
    store = EntityStore()
    store.create_report(_report())

    store.restore(StoreSnapshot(locations=[_location()]))

    assert store.get_all_reports() == []
    assert [loc.id for loc in store.get_locations()] == ["delhi"]
