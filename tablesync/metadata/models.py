"""Table sync metadata stored in the target table's properties.

Tracks the last instant fully synced and the out-of-order instants that the
next sync must still consider. Both travel as plain strings in the table's
property bag; see ``TableSyncMetadata.as_map`` / ``from_map``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from .config import MetadataConfig
from .errors import MissingLastInstantError
from .instants import format_instant, parse_instant

logger = logging.getLogger("tablesync.metadata")


class SyncState(str, Enum):
    UNSYNCED = "UNSYNCED"  # nothing synced yet
    SYNCED = "SYNCED"


class FieldState(str, Enum):
    ABSENT = "ABSENT"    # property was never written
    EMPTY = "EMPTY"      # written, but holds no instants
    PRESENT = "PRESENT"


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TableSyncMetadata:
    """Immutable record of a table sync's progress."""

    XTABLE_LAST_INSTANT_SYNCED_PROP = "XTABLE_LAST_INSTANT_SYNCED"
    # Out-of-order instants that would be missed without explicit tracking.
    INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC_PROP = "INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC"

    last_instant_synced: datetime | None
    instants_to_consider_for_next_sync: tuple[datetime, ...] | None

    @classmethod
    def of(
        cls,
        last_instant_synced: datetime | None,
        instants_to_consider_for_next_sync: Iterable[datetime] | None,
    ) -> TableSyncMetadata:
        """Build a descriptor. Instants are taken as given, duplicates included."""
        pending = None
        if instants_to_consider_for_next_sync is not None:
            pending = tuple(instants_to_consider_for_next_sync)
        return cls(last_instant_synced, pending)

    # -- state ----------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        return SyncState.UNSYNCED if self.last_instant_synced is None else SyncState.SYNCED

    @property
    def last_instant_state(self) -> FieldState:
        return FieldState.ABSENT if self.last_instant_synced is None else FieldState.PRESENT

    @property
    def pending_state(self) -> FieldState:
        if self.instants_to_consider_for_next_sync is None:
            return FieldState.ABSENT
        if not self.instants_to_consider_for_next_sync:
            return FieldState.EMPTY
        return FieldState.PRESENT

    def with_last_instant_synced(self, instant: datetime | None) -> TableSyncMetadata:
        return replace(self, last_instant_synced=instant)

    def with_instants_to_consider_for_next_sync(
        self, instants: Iterable[datetime] | None
    ) -> TableSyncMetadata:
        return TableSyncMetadata.of(self.last_instant_synced, instants)

    # -- property bag ---------------------------------------------------------

    def as_map(self, config: MetadataConfig | None = None) -> dict[str, str]:
        """Serialize to table properties. Requires ``last_instant_synced``."""
        if self.last_instant_synced is None:
            raise MissingLastInstantError(
                "Cannot serialize table sync metadata without last_instant_synced"
            )
        cfg = config or MetadataConfig.from_env_or_default()
        pending = self._pending_to_string()
        count = len(self.instants_to_consider_for_next_sync or ())
        if cfg.pending_warn_threshold and count > cfg.pending_warn_threshold:
            logger.warning(
                "%d instants pending for next sync exceeds threshold %d",
                count, cfg.pending_warn_threshold,
            )
        last = format_instant(self.last_instant_synced)
        logger.debug("Serialized sync metadata: last=%s pending=%d", last, count)
        return {
            self.XTABLE_LAST_INSTANT_SYNCED_PROP: last,
            self.INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC_PROP: pending,
        }

    def merge_into(
        self,
        properties: Mapping[str, str] | None,
        config: MetadataConfig | None = None,
    ) -> dict[str, str]:
        """Return a copy of *properties* with this metadata's keys overwritten."""
        merged = dict(properties or {})
        merged.update(self.as_map(config))
        return merged

    @classmethod
    def from_map(
        cls,
        properties: Mapping[str, str] | None,
        config: MetadataConfig | None = None,
    ) -> TableSyncMetadata | None:
        """Read metadata from table properties.

        Returns None only when *properties* is None. A missing key leaves the
        matching field None, while an empty backlog string gives ``()``.
        Raises InstantParseError on malformed instants.
        """
        if properties is None:
            return None
        last_instant_synced = None
        pending = None
        if cls.XTABLE_LAST_INSTANT_SYNCED_PROP in properties:
            last_instant_synced = parse_instant(
                properties[cls.XTABLE_LAST_INSTANT_SYNCED_PROP],
                cls.XTABLE_LAST_INSTANT_SYNCED_PROP,
            )
        if cls.INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC_PROP in properties:
            pending = cls._string_to_pending(
                properties[cls.INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC_PROP]
            )
        metadata = cls(last_instant_synced, pending)
        cfg = config or MetadataConfig.from_env_or_default()
        if pending and cfg.pending_warn_threshold and len(pending) > cfg.pending_warn_threshold:
            logger.warning(
                "Loaded %d pending instants, above threshold %d",
                len(pending), cfg.pending_warn_threshold,
            )
        logger.debug(
            "Loaded sync metadata: state=%s pending=%s",
            metadata.state.value, metadata.pending_state.value,
        )
        return metadata

    # -- helpers --------------------------------------------------------------

    def _pending_to_string(self) -> str:
        if not self.instants_to_consider_for_next_sync:
            return ""
        # Formatting precedes sorting: naive instants raise ValueError, not TypeError.
        pairs = [(i, format_instant(i)) for i in self.instants_to_consider_for_next_sync]
        pairs.sort(key=lambda pair: pair[0])
        return ",".join(text for _, text in pairs)

    @classmethod
    def _string_to_pending(cls, value: str) -> tuple[datetime, ...]:
        if not value:
            return ()
        tokens = value.split(",")
        # Trailing empty tokens are dropped; leading or interior ones are errors.
        while tokens and tokens[-1] == "":
            tokens.pop()
        key = cls.INFLIGHT_COMMITS_TO_CONSIDER_FOR_NEXT_SYNC_PROP
        return tuple(parse_instant(token, key) for token in tokens)
