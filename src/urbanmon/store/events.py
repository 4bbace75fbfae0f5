"""Store change notifications and the snapshot unit.

Every mutation of :class:`~urbanmon.store.memory.EntityStore` produces a
:class:`StoreChange` delivered to registered listeners. Durable mirrors
consume these; nothing else may write to the mirror.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from urbanmon.models import AirQualitySample, Location, Prediction, Report, TrafficSample, User


class Collection(StrEnum):
    USERS = "users"
    AIR_QUALITY = "air_quality"
    TRAFFIC = "traffic"
    REPORTS = "reports"
    LOCATIONS = "locations"
    PREDICTIONS = "predictions"


#: Collections whose ids are assigned by the store's auto-increment counters.
COUNTED_COLLECTIONS: tuple[Collection, ...] = (
    Collection.USERS,
    Collection.AIR_QUALITY,
    Collection.TRAFFIC,
    Collection.REPORTS,
    Collection.PREDICTIONS,
)


class ChangeAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    UPSERT = "upsert"


@dataclass(frozen=True)
class StoreChange:
    """A single applied mutation."""

    collection: Collection
    action: ChangeAction
    entity: BaseModel


class StoreSnapshot(BaseModel):
    """Every collection plus the next-id counters, taken at one instant."""

    model_config = ConfigDict(extra="forbid")

    users: list[User] = Field(default_factory=list)
    air_quality: list[AirQualitySample] = Field(default_factory=list)
    traffic: list[TrafficSample] = Field(default_factory=list)
    reports: list[Report] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)
    predictions: list[Prediction] = Field(default_factory=list)
    next_ids: dict[Collection, int] = Field(default_factory=dict)

    def items(self, collection: Collection) -> list[BaseModel]:
        return list(getattr(self, collection.value))
