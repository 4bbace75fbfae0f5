"""Durable mirror interface."""

from __future__ import annotations

from typing import Protocol

from urbanmon.store import EntityStore


class Mirror(Protocol):
    """Structural interface for durable copies of the entity store.

    The in-memory store stays authoritative. A mirror may fail at any time
    without affecting it. ``load`` returns ``False`` when nothing has been
    saved yet and raises :class:`~urbanmon.exceptions.PersistenceError` when
    a durable copy exists but cannot be read. ``save`` reports failure by
    returning ``False`` after logging.
    """

    async def load(self, store: EntityStore) -> bool:
        ...

    async def save(self, store: EntityStore) -> bool:
        ...

    async def start(self, store: EntityStore) -> None:
        ...

    async def stop(self) -> None:
        ...
