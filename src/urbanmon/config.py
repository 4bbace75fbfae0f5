"""Service configuration for urbanmon."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from urbanmon._constants import DEFAULT_AUTOSAVE_MINUTES, DEFAULT_SHEETS_TIMEOUT, SPREADSHEET_TITLE
from urbanmon.exceptions import UrbanmonConfigError

STORAGE_BACKENDS: frozenset[str] = frozenset({"memory", "file", "sheets"})


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class UrbanmonConfig:
    """Service configuration.

    Parameters
    ----------
    storage_backend : str
        ``"memory"``, ``"file"`` or ``"sheets"``. Selects the durable
        mirror attached to the in-memory store at startup.
    data_dir : str
        Directory holding the JSON snapshot files (``file`` backend).
    autosave_minutes : float
        Interval between periodic snapshot saves (``file`` backend).
    seed_sample_data : bool
        Populate an empty store with the sample cities, samples and reports.
    google_api_credentials : str or None
        Service-account JSON (``client_email`` and ``private_key``) used by
        the ``sheets`` backend.
    spreadsheet_id : str or None
        Existing spreadsheet to mirror into. When unset the spreadsheet
        named *spreadsheet_title* is looked up or created through Drive.
    spreadsheet_title : str
        Title used to find or create the spreadsheet.
    sheets_timeout : float
        Per-call timeout in seconds for Sheets/Drive requests.
    reference_location_id : str or None
        When set, the dashboard air-quality headline follows this location
        instead of the most recent sample overall.
    host : str
        Bind address for the HTTP API.
    port : int
        Port for the HTTP API.
    """

    storage_backend: str = "memory"
    data_dir: str = "data"
    autosave_minutes: float = DEFAULT_AUTOSAVE_MINUTES
    seed_sample_data: bool = True
    google_api_credentials: str | None = dataclasses.field(default=None, repr=False)
    spreadsheet_id: str | None = None
    spreadsheet_title: str = SPREADSHEET_TITLE
    sheets_timeout: float = DEFAULT_SHEETS_TIMEOUT
    reference_location_id: str | None = None
    host: str = "0.0.0.0"
    port: int = 5000

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            allowed = ", ".join(sorted(STORAGE_BACKENDS))
            raise UrbanmonConfigError(f"storage_backend must be one of {allowed}, got {self.storage_backend!r}")
        if self.autosave_minutes <= 0:
            raise UrbanmonConfigError(f"autosave_minutes must be positive, got {self.autosave_minutes}")
        if self.sheets_timeout <= 0:
            raise UrbanmonConfigError(f"sheets_timeout must be positive, got {self.sheets_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> UrbanmonConfig:
        """Create configuration from environment variables.

        Reads ``URBANMON_*`` variables plus ``GOOGLE_API_CREDENTIALS``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        UrbanmonConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "URBANMON_DATA_DIR": "data_dir",
            "GOOGLE_API_CREDENTIALS": "google_api_credentials",
            "URBANMON_SPREADSHEET_ID": "spreadsheet_id",
            "URBANMON_SPREADSHEET_TITLE": "spreadsheet_title",
            "URBANMON_REFERENCE_LOCATION": "reference_location_id",
            "URBANMON_HOST": "host",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        storage_env = env.get("URBANMON_STORAGE")
        if storage_env:
            config_kwargs["storage_backend"] = storage_env.strip().lower()
        elif config_kwargs.get("google_api_credentials") or overrides.get("google_api_credentials"):
            config_kwargs["storage_backend"] = "sheets"

        try:
            autosave_env = env.get("URBANMON_AUTOSAVE_MINUTES")
            if autosave_env is not None and "autosave_minutes" not in overrides:
                config_kwargs["autosave_minutes"] = float(autosave_env)

            timeout_env = env.get("URBANMON_SHEETS_TIMEOUT")
            if timeout_env is not None and "sheets_timeout" not in overrides:
                config_kwargs["sheets_timeout"] = float(timeout_env)

            port_env = env.get("URBANMON_PORT")
            if port_env is not None and "port" not in overrides:
                config_kwargs["port"] = int(port_env)
        except ValueError as exc:
            raise UrbanmonConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "seed_sample_data" not in overrides:
            config_kwargs["seed_sample_data"] = _env_bool(env.get("URBANMON_SEED_SAMPLE_DATA"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
