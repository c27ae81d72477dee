"""Errors raised while encoding or decoding table sync metadata."""

from __future__ import annotations


class TableSyncMetadataError(Exception):
    """Base class for sync metadata errors."""


class InstantParseError(TableSyncMetadataError, ValueError):
    """A stored value is not a valid instant."""

    def __init__(self, value: str, key: str | None = None, reason: str = "") -> None:
        self.value = value
        self.key = key
        where = f" for property {key}" if key else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot parse instant {value!r}{where}{detail}")


class MissingLastInstantError(TableSyncMetadataError, ValueError):
    """Serialization was requested without a last synced instant."""
