"""Authoritative in-memory entity store.

This is the only component allowed to assign ids and mutate entities.
Durable mirrors observe it through listeners or snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from urbanmon.models import (
    AirQualityCreate,
    AirQualitySample,
    Location,
    Prediction,
    PredictionCreate,
    PredictionType,
    Report,
    ReportCreate,
    ReportStatus,
    TrafficCreate,
    TrafficSample,
    User,
    UserCreate,
)
from urbanmon.store.events import (
    COUNTED_COLLECTIONS,
    ChangeAction,
    Collection,
    StoreChange,
    StoreSnapshot,
)

_logger = logging.getLogger(__name__)

StoreListener = Callable[[StoreChange], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _prediction_key(location_id: str, prediction_type: str) -> str:
    return f"{location_id}-{prediction_type}"


class EntityStore:
    """In-memory store for dashboard entities.

    Samples are grouped per location, predictions per ``(location, type)``.
    Ids are assigned from per-collection counters starting at 1. Reads
    return the stored (frozen) models; nothing is ever deleted.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._listeners: list[StoreListener] = []
        self._reset()

    def _reset(self) -> None:
        self._users: dict[int, User] = {}
        self._air_quality: dict[str, list[AirQualitySample]] = {}
        self._traffic: dict[str, list[TrafficSample]] = {}
        self._reports: list[Report] = []
        self._locations: dict[str, Location] = {}
        self._predictions: dict[str, list[Prediction]] = {}
        self._next_ids: dict[Collection, int] = {collection: 1 for collection in COUNTED_COLLECTIONS}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _allocate_id(self, collection: Collection) -> int:
        value = self._next_ids[collection]
        self._next_ids[collection] = value + 1
        return value

    def _notify(self, collection: Collection, action: ChangeAction, entity: object) -> None:
        change = StoreChange(collection=collection, action=action, entity=entity)  # type: ignore[arg-type]
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.exception("Store listener %r failed for %s %s", listener, action.value, collection.value)

    def add_listener(self, listener: StoreListener) -> None:
        """Register a callback invoked after every mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, data: UserCreate) -> User:
        user = User(
            id=self._allocate_id(Collection.USERS),
            username=data.username,
            password=data.password,
            role=data.role,
            created_at=self._clock(),
        )
        self._users[user.id] = user
        self._notify(Collection.USERS, ChangeAction.CREATE, user)
        return user

    def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        """First user with *username* in creation order; duplicates are shadowed."""
        return next((user for user in self._users.values() if user.username == username), None)

    # ------------------------------------------------------------------
    # Samples
    # ------------------------------------------------------------------

    def add_air_quality_data(self, data: AirQualityCreate) -> AirQualitySample:
        fields = data.model_dump(exclude={"timestamp"})
        sample = AirQualitySample(
            id=self._allocate_id(Collection.AIR_QUALITY),
            timestamp=data.timestamp or self._clock(),
            **fields,
        )
        self._air_quality.setdefault(sample.location_id, []).append(sample)
        self._notify(Collection.AIR_QUALITY, ChangeAction.CREATE, sample)
        return sample

    def get_air_quality_data(self, location_id: str | None = None) -> list[AirQualitySample]:
        """One location's history in insertion order, or every location's concatenated."""
        if location_id:
            return list(self._air_quality.get(location_id, []))
        return [sample for samples in self._air_quality.values() for sample in samples]

    def add_traffic_data(self, data: TrafficCreate) -> TrafficSample:
        fields = data.model_dump(exclude={"timestamp"})
        sample = TrafficSample(
            id=self._allocate_id(Collection.TRAFFIC),
            timestamp=data.timestamp or self._clock(),
            **fields,
        )
        self._traffic.setdefault(sample.location_id, []).append(sample)
        self._notify(Collection.TRAFFIC, ChangeAction.CREATE, sample)
        return sample

    def get_traffic_data(self, location_id: str | None = None) -> list[TrafficSample]:
        if location_id:
            return list(self._traffic.get(location_id, []))
        return [sample for samples in self._traffic.values() for sample in samples]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def create_report(
        self,
        data: ReportCreate,
        *,
        status: str | None = None,
        created_at: datetime | None = None,
    ) -> Report:
        """Store a new report.

        New reports are ``pending`` unless *status* is given (seeding and
        hand-maintained spreadsheets). ``created_at`` and ``updated_at``
        are the same instant.
        """
        now = created_at or self._clock()
        report = Report(
            id=self._allocate_id(Collection.REPORTS),
            status=status or ReportStatus.PENDING.value,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._reports.append(report)
        self._notify(Collection.REPORTS, ChangeAction.CREATE, report)
        return report

    def update_report(self, report_id: int, status: str) -> Report | None:
        """Replace the status and bump ``updated_at``; ``None`` when the id is unknown."""
        for index, report in enumerate(self._reports):
            if report.id != report_id:
                continue
            updated_at = max(self._clock(), report.updated_at)
            updated = report.model_copy(update={"status": status, "updated_at": updated_at})
            self._reports[index] = updated
            self._notify(Collection.REPORTS, ChangeAction.UPDATE, updated)
            return updated
        return None

    def get_report(self, report_id: int) -> Report | None:
        return next((report for report in self._reports if report.id == report_id), None)

    def get_all_reports(self) -> list[Report]:
        return list(self._reports)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def add_location(self, location: Location) -> Location:
        """Insert or overwrite the location keyed by its id."""
        self._locations[location.id] = location
        self._notify(Collection.LOCATIONS, ChangeAction.UPSERT, location)
        return location

    def get_location(self, location_id: str) -> Location | None:
        return self._locations.get(location_id)

    def get_locations(self) -> list[Location]:
        return list(self._locations.values())

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def add_prediction(self, data: PredictionCreate) -> Prediction:
        fields = data.model_dump(exclude={"created_at"})
        prediction = Prediction(
            id=self._allocate_id(Collection.PREDICTIONS),
            created_at=data.created_at or self._clock(),
            **fields,
        )
        key = _prediction_key(prediction.location_id, prediction.type.value)
        self._predictions.setdefault(key, []).append(prediction)
        self._notify(Collection.PREDICTIONS, ChangeAction.CREATE, prediction)
        return prediction

    def get_prediction(self, location_id: str, prediction_type: PredictionType | str) -> Prediction | None:
        """Most recently created prediction for the pair, regardless of insertion order."""
        key = _prediction_key(location_id, PredictionType(prediction_type).value)
        predictions = self._predictions.get(key)
        if not predictions:
            return None
        return max(predictions, key=lambda p: (p.created_at, p.id))

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def next_id(self, collection: Collection) -> int:
        return self._next_ids[collection]

    def snapshot(self) -> StoreSnapshot:
        """Copy every collection and counter into one snapshot."""
        return StoreSnapshot(
            users=list(self._users.values()),
            air_quality=self.get_air_quality_data(),
            traffic=self.get_traffic_data(),
            reports=list(self._reports),
            locations=list(self._locations.values()),
            predictions=[p for predictions in self._predictions.values() for p in predictions],
            next_ids=dict(self._next_ids),
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """Replace the whole store with *snapshot*.

        Counters missing from the snapshot are derived from the highest id
        in the collection. Listeners are not notified.
        """
        self._reset()
        for user in snapshot.users:
            self._users[user.id] = user
        for sample in snapshot.air_quality:
            self._air_quality.setdefault(sample.location_id, []).append(sample)
        for traffic in snapshot.traffic:
            self._traffic.setdefault(traffic.location_id, []).append(traffic)
        self._reports = list(snapshot.reports)
        for location in snapshot.locations:
            self._locations[location.id] = location
        for prediction in snapshot.predictions:
            key = _prediction_key(prediction.location_id, prediction.type.value)
            self._predictions.setdefault(key, []).append(prediction)

        for collection in COUNTED_COLLECTIONS:
            highest = max((item.id for item in snapshot.items(collection)), default=0)  # type: ignore[attr-defined]
            saved = snapshot.next_ids.get(collection)
            self._next_ids[collection] = max(saved or 0, highest + 1)
