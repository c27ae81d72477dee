"""Table sync metadata: last synced instant plus out-of-order backlog, stored as table properties."""

from .config import MetadataConfig
from .errors import InstantParseError, MissingLastInstantError, TableSyncMetadataError
from .instants import format_instant, parse_instant
from .models import FieldState, SyncState, TableSyncMetadata

__all__ = [
    "TableSyncMetadata",
    "SyncState",
    "FieldState",
    "MetadataConfig",
    "TableSyncMetadataError",
    "InstantParseError",
    "MissingLastInstantError",
    "format_instant",
    "parse_instant",
]
