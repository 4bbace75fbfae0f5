"""In-memory entity store and its change/snapshot types."""

from urbanmon.store.events import COUNTED_COLLECTIONS, ChangeAction, Collection, StoreChange, StoreSnapshot
from urbanmon.store.memory import EntityStore, StoreListener

__all__ = [
    "COUNTED_COLLECTIONS",
    "ChangeAction",
    "Collection",
    "EntityStore",
    "StoreChange",
    "StoreListener",
    "StoreSnapshot",
]
