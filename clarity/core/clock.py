# core/clock.py
from datetime import date, datetime, timezone
from typing import Optional


def to_local(ts: datetime) -> datetime:
    """
    Express a timestamp in the process's local zone.

    Naive timestamps are taken as local wall-clock time, so their hour and
    date are preserved.
    """
    return ts.astimezone()


def local_now() -> datetime:
    return datetime.now().astimezone()


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now).date() if now is not None else local_now().date()


def to_utc_naive(ts: datetime) -> datetime:
    """Normalize for storage: UTC without tzinfo."""
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(ts: datetime) -> datetime:
    """Inverse of `to_utc_naive` for values read back from the database."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts
