"""
Time helpers.

All timestamps are naive UTC datetimes, both in the services and in the
database (plain DateTime columns). as_utc_naive() folds any aware value a
caller hands in back to that form before it is compared or encoded.
"""
from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
