# meeting_governance/core/clock.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Default clock used by the services.

    Services accept any zero-argument callable returning an aware datetime,
    so tests can pin time without patching the datetime module.
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize an aware datetime to UTC.

    Raises ValueError for naive datetimes: a wall-clock time without an
    offset is ambiguous for statutory deadline arithmetic.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("naive datetime is not allowed; supply a UTC offset")
    return value.astimezone(timezone.utc)
