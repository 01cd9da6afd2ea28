"""
Domain time utilities (pure).

Auction times are integer unix seconds. Conversions to and from datetimes
require timezone-aware UTC values so that display and storage agree.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the contract requirement that timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def to_unix_seconds(name: str, value: datetime) -> int:
    """Convert a UTC datetime to whole unix seconds (sub-second part dropped)."""

    require_utc_timestamp(name, value)
    return (value - _EPOCH) // timedelta(seconds=1)


def from_unix_seconds(seconds: int) -> datetime:
    """Convert unix seconds to a timezone-aware UTC datetime."""

    return _EPOCH + timedelta(seconds=seconds)


def now_unix_seconds() -> int:
    return to_unix_seconds("now", datetime.now(timezone.utc))
