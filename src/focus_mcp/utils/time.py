"""Time helpers."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``.

    Naive values are assumed to be UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def day_bounds(day: datetime) -> tuple[str, str]:
    """Return ISO strings for the first and last instant of *day* (UTC)."""
    start = datetime.combine(day.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start.isoformat(), end.isoformat()


def normalize_timestamp(value: str | None) -> str | None:
    """Store timestamps as second-precision UTC ISO strings so they sort as text."""
    if value is None:
        return None
    return parse_iso(value).astimezone(timezone.utc).isoformat(timespec="seconds")


def parse_day(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` (or a full timestamp) into a UTC datetime."""
    if len(value) == 10:
        return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)
    return parse_iso(value)
