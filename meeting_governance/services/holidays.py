# meeting_governance/services/holidays.py
"""
Holiday sources for the business calendar.

A holiday source is any callable ``year -> Iterable[date]``. The built-in
Indiana source follows the state legal holidays of IC 1-1-9-1; fixed-date
holidays falling on a weekend are moved to the observed weekday.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Iterable

from meeting_governance.core.config import Settings

HolidaySource = Callable[[int], Iterable[date]]

MONDAY = 0
THURSDAY = 3


def _observed(day: date) -> date:
    # Saturday -> Friday, Sunday -> Monday
    if day.weekday() == 5:
        return day - timedelta(days=1)
    if day.weekday() == 6:
        return day + timedelta(days=1)
    return day


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + 7 * (n - 1))


def _last_weekday(year: int, month: int, weekday: int) -> date:
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def _easter_sunday(year: int) -> date:
    """Anonymous Gregorian computus."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def _election_day(year: int, month: int) -> date:
    # first Tuesday after the first Monday
    return _nth_weekday(year, month, MONDAY, 1) + timedelta(days=1)


def indiana_holidays(year: int) -> set[date]:
    """
    Indiana state legal holidays for one calendar year.

    Primary and general election days are holidays in even years only.
    Observed dates may fall into the neighbouring year (New Year's Day on a
    Saturday is observed on December 31); the calendar accounts for that.
    """
    thanksgiving = _nth_weekday(year, 11, THURSDAY, 4)

    days = {
        _observed(date(year, 1, 1)),
        _nth_weekday(year, 1, MONDAY, 3),  # Martin Luther King Jr. Day
        _nth_weekday(year, 2, MONDAY, 3),  # Presidents' Day
        _easter_sunday(year) - timedelta(days=2),  # Good Friday
        _last_weekday(year, 5, MONDAY),  # Memorial Day
        _observed(date(year, 7, 4)),
        _nth_weekday(year, 9, MONDAY, 1),  # Labor Day
        _nth_weekday(year, 10, MONDAY, 2),  # Columbus Day
        _observed(date(year, 11, 11)),
        thanksgiving,
        thanksgiving + timedelta(days=1),
        _observed(date(year, 12, 25)),
    }
    if year % 2 == 0:
        days.add(_election_day(year, 5))
        days.add(_election_day(year, 11))
    return days


def no_holidays(year: int) -> set[date]:
    return set()


def static_holidays(dates: Iterable[date]) -> HolidaySource:
    """
    Source backed by a fixed list of dates, e.g. locally declared closures.
    """
    frozen = frozenset(dates)

    def source(year: int) -> set[date]:
        return {day for day in frozen if day.year == year}

    return source


def combine_sources(*sources: HolidaySource) -> HolidaySource:
    def source(year: int) -> set[date]:
        combined: set[date] = set()
        for item in sources:
            combined.update(item(year))
        return combined

    return source


def parse_holiday_list(raw: str | None) -> list[date]:
    """
    Parse a comma-separated list of ISO dates. Blank entries are ignored.
    """
    if not raw:
        return []
    parsed: list[date] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            parsed.append(date.fromisoformat(chunk))
        except ValueError as exc:
            raise ValueError(f"invalid holiday date {chunk!r} in EXTRA_HOLIDAYS") from exc
    return parsed


_BUILT_IN_CALENDARS: dict[str, HolidaySource] = {
    "indiana": indiana_holidays,
    "none": no_holidays,
}


def build_holiday_source(settings: Settings) -> HolidaySource:
    """
    Build the holiday source configured by HOLIDAY_CALENDAR and EXTRA_HOLIDAYS.
    """
    name = (settings.HOLIDAY_CALENDAR or "none").strip().lower()
    try:
        base = _BUILT_IN_CALENDARS[name]
    except KeyError:
        raise ValueError(
            f"unknown HOLIDAY_CALENDAR {settings.HOLIDAY_CALENDAR!r}; "
            f"expected one of {sorted(_BUILT_IN_CALENDARS)}"
        ) from None

    extra = parse_holiday_list(settings.EXTRA_HOLIDAYS)
    if not extra:
        return base
    return combine_sources(base, static_holidays(extra))
