# ecr_secret_operator/core/clock.py

"""
Clock abstraction so that expiry arithmetic can be driven by a fake time in tests.
"""

from datetime import UTC, datetime, timedelta
import re
from typing import Protocol

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$",
    re.IGNORECASE,
)


class Clock(Protocol):
    """Knows how to get the current time."""

    def now(self) -> datetime: ...


class RealClock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock that returns whatever time it was last set to."""

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(1970, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def set_time(self, rfc3339: str) -> None:
        self._now = parse_time(rfc3339)

    def advance(self, delta: timedelta) -> None:
        self._now = self._now + delta


def parse_time(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp.

    Only the RFC3339 profile is accepted: full seconds precision, a 'T'
    separator and an explicit 'Z' or numeric offset.

    Raises:
        ValueError: If the value is not a valid RFC3339 timestamp.
    """
    match = _RFC3339.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Timestamp '{value}' is not an RFC3339 timestamp")

    date, time, fraction, offset = match.groups()
    normalized = f"{date}T{time}"
    if fraction:
        normalized += "." + fraction[:6].ljust(6, "0")
    normalized += "+00:00" if offset.upper() == "Z" else offset
    return datetime.fromisoformat(normalized)


def format_time(value: datetime) -> str:
    """Render a timestamp as RFC3339, UTC instants with a 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    if value.utcoffset() == timedelta(0):
        return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")
