from __future__ import annotations

import pytest

from urbanmon.config import UrbanmonConfig
from urbanmon.exceptions import UrbanmonConfigError

_ENV_KEYS = (
    "URBANMON_STORAGE",
    "URBANMON_DATA_DIR",
    "URBANMON_AUTOSAVE_MINUTES",
    "URBANMON_SEED_SAMPLE_DATA",
    "URBANMON_SPREADSHEET_ID",
    "URBANMON_SPREADSHEET_TITLE",
    "URBANMON_SHEETS_TIMEOUT",
    "URBANMON_REFERENCE_LOCATION",
    "URBANMON_HOST",
    "URBANMON_PORT",
    "GOOGLE_API_CREDENTIALS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = UrbanmonConfig.from_env()

    assert config.storage_backend == "memory"
    assert config.data_dir == "data"
    assert config.autosave_minutes == 5.0
    assert config.seed_sample_data is True
    assert config.port == 5000


def test_credentials_select_sheets_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_API_CREDENTIALS", '{"client_email": "x", "private_key": "y"}')

    config = UrbanmonConfig.from_env()

    assert config.storage_backend == "sheets"
    assert "private_key" not in repr(config)


def test_explicit_storage_wins_over_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_API_CREDENTIALS", "{}")
    monkeypatch.setenv("URBANMON_STORAGE", "File")
    monkeypatch.setenv("URBANMON_AUTOSAVE_MINUTES", "0.5")
    monkeypatch.setenv("URBANMON_SEED_SAMPLE_DATA", "no")

    config = UrbanmonConfig.from_env()

    assert config.storage_backend == "file"
    assert config.autosave_minutes == 0.5
    assert config.seed_sample_data is False


def test_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("URBANMON_PORT", "8080")

    config = UrbanmonConfig.from_env(port=9000, data_dir="/tmp/urbanmon")

    assert config.port == 9000
    assert config.data_dir == "/tmp/urbanmon"


def test_invalid_backend_rejected() -> None:
    with pytest.raises(UrbanmonConfigError):
        UrbanmonConfig(storage_backend="postgres")


def test_invalid_numeric_env_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("URBANMON_SHEETS_TIMEOUT", "soon")

    with pytest.raises(UrbanmonConfigError):
        UrbanmonConfig.from_env()


def test_non_positive_interval_rejected() -> None:
    with pytest.raises(UrbanmonConfigError):
        UrbanmonConfig(autosave_minutes=0)
