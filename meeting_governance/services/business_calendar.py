# meeting_governance/services/business_calendar.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from meeting_governance.core.clock import ensure_utc
from meeting_governance.core.config import get_settings
from meeting_governance.services.holidays import HolidaySource, build_holiday_source, no_holidays

ONE_HOUR = timedelta(hours=1)

# A run of non-business hours longer than this means the holiday source
# leaves no business days at all.
_MAX_IDLE_HOURS = 24 * 366


class BusinessCalendar:
    """
    Business-hour arithmetic over absolute UTC instants.

    An hour counts as a business hour when the calendar date on which it
    begins, read in the jurisdiction's timezone, is neither a Saturday, a
    Sunday nor a holiday. All arithmetic is done on UTC instants, so DST
    transitions never lengthen or shorten a counted hour.

    Holiday sets are loaded lazily per calendar year and memoized, so a
    window that crosses a year boundary pulls the neighbouring year
    automatically.
    """

    def __init__(self, holiday_source: HolidaySource | None = None, tz: tzinfo = timezone.utc):
        self._holiday_source = holiday_source or no_holidays
        self._tz = tz
        self._holidays_by_year: dict[int, frozenset[date]] = {}

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def _holidays_for(self, year: int) -> frozenset[date]:
        cached = self._holidays_by_year.get(year)
        if cached is None:
            cached = frozenset(self._holiday_source(year))
            self._holidays_by_year[year] = cached
        return cached

    def local_date(self, instant: datetime) -> date:
        return ensure_utc(instant).astimezone(self._tz).date()

    def is_weekend(self, instant: datetime) -> bool:
        return self.local_date(instant).weekday() >= 5

    def is_holiday(self, instant: datetime) -> bool:
        day = self.local_date(instant)
        if day in self._holidays_for(day.year):
            return True
        # observed New Year's Day of the following year can land on Dec 31
        return day.month == 12 and day in self._holidays_for(day.year + 1)

    def is_business_hour(self, instant: datetime) -> bool:
        return not self.is_weekend(instant) and not self.is_holiday(instant)

    def subtract_business_hours(self, start: datetime, hours: int) -> datetime:
        """
        Walk back from `start` one absolute hour at a time until `hours`
        business hours have been counted.

        The hour beginning at each new cursor position is the one examined,
        so for a meeting at Thursday 19:00 with no weekend in between, 48
        business hours back is Tuesday 19:00.
        """
        if hours < 0:
            raise ValueError("hours must be >= 0")
        cursor = ensure_utc(start)
        counted = 0
        idle = 0
        while counted < hours:
            cursor -= ONE_HOUR
            if self.is_business_hour(cursor):
                counted += 1
                idle = 0
            else:
                idle += 1
                if idle > _MAX_IDLE_HOURS:
                    raise ValueError("holiday source leaves no business days to count")
        return cursor

    def add_business_hours(self, start: datetime, hours: int) -> datetime:
        if hours < 0:
            raise ValueError("hours must be >= 0")
        cursor = ensure_utc(start)
        counted = 0
        idle = 0
        while counted < hours:
            if self.is_business_hour(cursor):
                counted += 1
                idle = 0
            else:
                idle += 1
                if idle > _MAX_IDLE_HOURS:
                    raise ValueError("holiday source leaves no business days to count")
            cursor += ONE_HOUR
        return cursor

    def count_business_hours(self, start: datetime, end: datetime) -> int:
        """
        Number of business hours beginning in [start, end). Zero when end
        is not after start.
        """
        cursor = ensure_utc(start)
        end = ensure_utc(end)
        counted = 0
        while cursor < end:
            if self.is_business_hour(cursor):
                counted += 1
            cursor += ONE_HOUR
        return counted


@lru_cache()
def get_business_calendar() -> BusinessCalendar:
    """
    Process-wide calendar built from settings, so that the per-year holiday
    memo is shared by every request.
    """
    settings = get_settings()
    return BusinessCalendar(
        holiday_source=build_holiday_source(settings),
        tz=ZoneInfo(settings.JURISDICTION_TIMEZONE),
    )
