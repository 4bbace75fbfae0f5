"""Assemble the store and its durable mirror from configuration."""

from __future__ import annotations

import logging

from urbanmon.config import UrbanmonConfig
from urbanmon.exceptions import PersistenceError, SheetsError, UrbanmonConfigError
from urbanmon.persistence import FileSnapshotMirror, Mirror
from urbanmon.seed import seed_store
from urbanmon.sheets import SheetsMirror
from urbanmon.store import EntityStore

_logger = logging.getLogger(__name__)


async def _connect_sheets(config: UrbanmonConfig) -> SheetsMirror | None:
    try:
        mirror = SheetsMirror.from_config(config)
    except UrbanmonConfigError as exc:
        _logger.error("Sheets backend unavailable, using in-memory storage: %s", exc)
        return None
    try:
        await mirror.connect()
    except SheetsError as exc:
        _logger.error("Cannot reach spreadsheet, using in-memory storage: %s", exc)
        await mirror.close()
        return None
    _logger.info("Mirroring to spreadsheet %s", mirror.spreadsheet_id)
    return mirror


def build_mirror(config: UrbanmonConfig) -> Mirror | None:
    """Mirror for the ``file`` backend; ``None`` for ``memory``.

    The ``sheets`` backend needs network setup and is built by
    :func:`open_store`.
    """
    if config.storage_backend == "file":
        return FileSnapshotMirror(config.data_dir, interval_minutes=config.autosave_minutes)
    return None


async def open_store(
    config: UrbanmonConfig,
    *,
    store: EntityStore | None = None,
    mirror: Mirror | None = None,
) -> tuple[EntityStore, Mirror | None]:
    """Create the store, load it from the mirror and start mirroring.

    A Sheets backend that cannot be configured or reached degrades to the
    plain in-memory store, as does any mirror whose saved data cannot be
    read; the saved copy is then left alone until the next start. When
    nothing was loaded and ``seed_sample_data`` is set, the sample data is
    added after the mirror starts so the mirror receives it too.
    """
    store = store or EntityStore()
    if mirror is None:
        if config.storage_backend == "sheets":
            mirror = await _connect_sheets(config)
        else:
            mirror = build_mirror(config)

    loaded = False
    if mirror is not None:
        try:
            loaded = await mirror.load(store)
        except PersistenceError as exc:
            # Seeding into an unreadable copy would duplicate ids in it.
            _logger.error("Cannot read saved data, mirroring disabled until restart: %s", exc)
            await mirror.stop()
            mirror = None
        else:
            await mirror.start(store)

    if not loaded and config.seed_sample_data and not store.get_locations():
        seed_store(store)
    return store, mirror
