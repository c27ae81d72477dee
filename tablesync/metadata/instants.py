"""Canonical instant text form: UTC, ISO-8601, trailing ``Z``."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from .errors import InstantParseError

# Extended ISO-8601 only: no basic format, no comma decimals, offset required.
_INSTANT_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d{1,9})?)?(?:Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)
# Fractions longer than microseconds are truncated, not rounded.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def format_instant(instant: datetime) -> str:
    """Render *instant* as e.g. ``2024-01-02T00:00:00Z`` or ``2024-01-02T00:00:00.500Z``."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise ValueError(f"Naive datetime is not an instant: {instant!r}")
    utc = instant.astimezone(timezone.utc)
    text = utc.replace(tzinfo=None, microsecond=0).isoformat()
    micros = utc.microsecond
    if micros == 0:
        return text + "Z"
    if micros % 1000 == 0:
        return f"{text}.{micros // 1000:03d}Z"
    return f"{text}.{micros:06d}Z"


def parse_instant(value: str, key: str | None = None) -> datetime:
    """Parse an ISO-8601 instant into an aware UTC datetime.

    *key* only feeds the error message. Raises InstantParseError when the
    value is malformed or carries no offset.
    """
    if not isinstance(value, str):
        raise InstantParseError(repr(value), key, "not a string")
    text = value.strip()
    if not text:
        raise InstantParseError(value, key, "empty value")
    if not _INSTANT_RE.fullmatch(text):
        raise InstantParseError(value, key, "expected YYYY-MM-DDTHH:MM[:SS[.f]] with Z or offset")
    try:
        parsed = datetime.fromisoformat(_FRACTION_RE.sub(r"\1", text))
    except ValueError as exc:
        raise InstantParseError(value, key, str(exc)) from exc
    return parsed.astimezone(timezone.utc)
