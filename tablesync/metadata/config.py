"""Sync metadata configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import dotenv_values

logger = logging.getLogger("tablesync.metadata.config")

DEFAULT_PENDING_WARN_THRESHOLD = 1000


@dataclass(frozen=True)
class MetadataConfig:
    """Immutable sync metadata configuration."""

    # Backlog size above which encode/decode logs a warning; 0 disables it.
    pending_warn_threshold: int = DEFAULT_PENDING_WARN_THRESHOLD

    @classmethod
    def from_env(cls, env_file: str | os.PathLike[str] | None = None) -> MetadataConfig:
        """Create config from environment, raising on invalid values.

        Values in *env_file* (a ``.env`` file) apply only where the process
        environment does not set them. The file is never loaded into
        ``os.environ``.
        """
        env: dict[str, str | None] = {}
        if env_file is not None:
            env.update(dotenv_values(env_file))
        env.update(os.environ)
        raw = env.get("TABLESYNC_PENDING_WARN_THRESHOLD") or str(DEFAULT_PENDING_WARN_THRESHOLD)
        try:
            threshold = int(raw)
        except ValueError:
            raise RuntimeError(f"TABLESYNC_PENDING_WARN_THRESHOLD must be an integer, got {raw!r}") from None
        if threshold < 0:
            raise RuntimeError("TABLESYNC_PENDING_WARN_THRESHOLD must be >= 0")
        return cls(pending_warn_threshold=threshold)

    @classmethod
    def from_env_or_default(cls) -> MetadataConfig:
        """Like from_env, but an invalid environment falls back to defaults."""
        try:
            return cls.from_env()
        except RuntimeError as exc:
            logger.warning("Ignoring invalid sync metadata config, using defaults: %s", exc)
            return cls()
