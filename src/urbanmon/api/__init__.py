"""HTTP API for the city dashboard."""

from urbanmon.api.app import create_app

__all__ = ["create_app"]
