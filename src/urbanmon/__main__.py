"""Run the dashboard API.

Usage
-----
::

    python -m urbanmon --storage file --data-dir ./data
    URBANMON_STORAGE=sheets GOOGLE_API_CREDENTIALS="$(cat key.json)" python -m urbanmon

Command-line options override the ``URBANMON_*`` environment variables.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

import uvicorn

from urbanmon.api import create_app
from urbanmon.config import STORAGE_BACKENDS, UrbanmonConfig
from urbanmon.exceptions import UrbanmonConfigError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="urbanmon", description="City monitoring dashboard API.")
    parser.add_argument("--host", help="Bind address (default 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port (default 5000)")
    parser.add_argument("--storage", choices=sorted(STORAGE_BACKENDS), help="Durable storage backend")
    parser.add_argument("--data-dir", help="Snapshot directory for the file backend")
    parser.add_argument("--autosave-minutes", type=float, help="Snapshot interval for the file backend")
    parser.add_argument("--no-seed", action="store_true", help="Start empty instead of loading sample data")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.storage:
        overrides["storage_backend"] = args.storage
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.autosave_minutes is not None:
        overrides["autosave_minutes"] = args.autosave_minutes
    if args.no_seed:
        overrides["seed_sample_data"] = False

    try:
        config = UrbanmonConfig.from_env(**overrides)
    except UrbanmonConfigError as exc:
        raise SystemExit(f"urbanmon: {exc}") from exc

    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
