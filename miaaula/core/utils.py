"""Time and rounding helpers shared by the report builders."""

from __future__ import annotations

import math
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def iso_timestamp(value: datetime) -> str:
    """
    Format as ISO-8601 UTC with millisecond precision and a Z suffix.

    Matches the timestamps already present in persisted report history,
    e.g. "2024-03-05T14:07:00.000Z".
    """
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string (Z suffix allowed) into an aware UTC datetime."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(raw))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13, not 12)."""
    return int(math.floor(value + 0.5))
