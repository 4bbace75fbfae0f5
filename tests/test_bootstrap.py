from __future__ import annotations

from pathlib import Path

import pytest

from urbanmon.bootstrap import open_store
from urbanmon.config import UrbanmonConfig
from urbanmon.models import Location
from urbanmon.persistence import FileSnapshotMirror
from urbanmon.store import EntityStore


@pytest.mark.asyncio
async def test_memory_backend_seeds_sample_data() -> None:
    store, mirror = await open_store(UrbanmonConfig())

    assert mirror is None
    assert len(store.get_locations()) == 8
    assert len(store.get_all_reports()) == 3
    assert store.get_prediction("bangalore", "air") is not None


@pytest.mark.asyncio
async def test_seeding_can_be_disabled() -> None:
    store, _ = await open_store(UrbanmonConfig(seed_sample_data=False))

    assert store.get_locations() == []


@pytest.mark.asyncio
async def test_sheets_without_credentials_falls_back_to_memory() -> None:
    store, mirror = await open_store(UrbanmonConfig(storage_backend="sheets", google_api_credentials=None))

    assert mirror is None
    assert len(store.get_locations()) == 8


@pytest.mark.asyncio
async def test_file_backend_loads_existing_snapshot_instead_of_seeding(tmp_path: Path) -> None:
    existing = EntityStore()
    existing.add_location(Location(id="goa", name="Goa", latitude=15.3, longitude=74.1))
    await FileSnapshotMirror(tmp_path).save(existing)

    store, mirror = await open_store(UrbanmonConfig(storage_backend="file", data_dir=str(tmp_path)))
    try:
        assert isinstance(mirror, FileSnapshotMirror)
        assert [loc.id for loc in store.get_locations()] == ["goa"]
        assert store.get_all_reports() == []
    finally:
        assert mirror is not None
        await mirror.stop()


@pytest.mark.asyncio
async def test_file_backend_seeds_when_nothing_saved(tmp_path: Path) -> None:
    config = UrbanmonConfig(storage_backend="file", data_dir=str(tmp_path / "fresh"))

    store, mirror = await open_store(config)
    assert mirror is not None
    await mirror.stop()

    assert len(store.get_locations()) == 8
    assert (tmp_path / "fresh" / "locations.json").exists()
