"""JSON snapshot files mirroring the entity store.

One file per collection under ``data_dir``::

    users.json         {"items": [...], "nextId": 3}
    air_quality.json   {"items": [...], "nextId": 9}
    ...
    locations.json     {"items": [...]}

Writes are plain ``write_text`` calls; a crash mid-save can leave a
truncated file, which the next ``load`` rejects as a whole.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from urbanmon._constants import DEFAULT_AUTOSAVE_MINUTES
from urbanmon.exceptions import SnapshotError
from urbanmon.store import COUNTED_COLLECTIONS, Collection, EntityStore, StoreSnapshot

_logger = logging.getLogger(__name__)


def snapshot_filename(collection: Collection) -> str:
    return f"{collection.value}.json"


def snapshot_to_files(snapshot: StoreSnapshot) -> dict[str, dict[str, Any]]:
    """Render *snapshot* as ``{filename: document}``."""
    files: dict[str, dict[str, Any]] = {}
    for collection in Collection:
        document: dict[str, Any] = {
            "items": [item.model_dump(mode="json", by_alias=True) for item in snapshot.items(collection)]
        }
        if collection in COUNTED_COLLECTIONS:
            document["nextId"] = snapshot.next_ids.get(collection, 1)
        files[snapshot_filename(collection)] = document
    return files


def has_snapshot(data_dir: Path) -> bool:
    """Whether *data_dir* holds at least one snapshot file."""
    return data_dir.is_dir() and any((data_dir / snapshot_filename(c)).exists() for c in Collection)


def read_snapshot(data_dir: Path, base: StoreSnapshot) -> StoreSnapshot:
    """Overlay every snapshot file found in *data_dir* onto *base*.

    Collections without a file keep *base*'s contents.

    Raises
    ------
    SnapshotError
        When the directory is missing or holds no snapshot files, or when
        any file fails to parse or validate.
    """
    if not data_dir.is_dir():
        raise SnapshotError(f"Snapshot directory {data_dir} does not exist")

    fields: dict[str, Any] = {collection.value: base.items(collection) for collection in Collection}
    next_ids: dict[Collection, int] = dict(base.next_ids)
    found = False
    for collection in Collection:
        path = data_dir / snapshot_filename(collection)
        if not path.exists():
            continue
        found = True
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(document, dict) or not isinstance(document.get("items"), list):
            raise SnapshotError(f"{path} has no 'items' list")
        fields[collection.value] = document["items"]
        next_id = document.get("nextId")
        if collection in COUNTED_COLLECTIONS and isinstance(next_id, int):
            next_ids[collection] = next_id
    if not found:
        raise SnapshotError(f"No snapshot files in {data_dir}")

    try:
        return StoreSnapshot.model_validate({**fields, "next_ids": next_ids})
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot data in {data_dir}: {exc}") from exc


def write_snapshot(data_dir: Path, snapshot: StoreSnapshot) -> None:
    """Write one file per collection, creating *data_dir* when missing."""
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        for filename, document in snapshot_to_files(snapshot).items():
            (data_dir / filename).write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Cannot write snapshot to {data_dir}: {exc}") from exc


class FileSnapshotMirror:
    """Periodic whole-store snapshots to JSON files.

    Parameters
    ----------
    data_dir : str or Path
        Directory holding the snapshot files.
    interval_minutes : float
        Period of the autosave task started by :meth:`start`.
    """

    def __init__(self, data_dir: str | Path, *, interval_minutes: float = DEFAULT_AUTOSAVE_MINUTES) -> None:
        self._data_dir = Path(data_dir)
        self._interval = interval_minutes * 60
        self._store: EntityStore | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    async def load(self, store: EntityStore) -> bool:
        """Restore *store* from disk.

        Returns ``False`` without touching the store when no snapshot has
        been written yet.

        Raises
        ------
        SnapshotError
            When snapshot files exist but cannot be read or validated. The
            store is left untouched.
        """
        if not has_snapshot(self._data_dir):
            _logger.info("No snapshot in %s; nothing to load", self._data_dir)
            return False
        snapshot = await asyncio.to_thread(read_snapshot, self._data_dir, store.snapshot())
        store.restore(snapshot)
        _logger.info(
            "Loaded snapshot from %s (%d locations, %d reports)",
            self._data_dir,
            len(snapshot.locations),
            len(snapshot.reports),
        )
        return True

    async def save(self, store: EntityStore) -> bool:
        snapshot = store.snapshot()
        try:
            await asyncio.to_thread(write_snapshot, self._data_dir, snapshot)
        except SnapshotError as exc:
            _logger.error("Snapshot save failed: %s", exc)
            return False
        _logger.debug("Saved snapshot to %s", self._data_dir)
        return True

    async def start(self, store: EntityStore) -> None:
        if self._task is not None:
            return
        self._store = store
        self._task = asyncio.create_task(self._autosave_loop(store), name="urbanmon-autosave")

    async def _autosave_loop(self, store: EntityStore) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.save(store)

    async def stop(self) -> None:
        """Cancel the autosave task and write one final snapshot."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._store is not None:
            await self.save(self._store)
            self._store = None
