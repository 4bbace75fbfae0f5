"""Durable mirrors for the entity store."""

from urbanmon.persistence.base import Mirror
from urbanmon.persistence.snapshot import FileSnapshotMirror, has_snapshot, read_snapshot, write_snapshot

__all__ = ["FileSnapshotMirror", "Mirror", "has_snapshot", "read_snapshot", "write_snapshot"]
