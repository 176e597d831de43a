# tests/test_business_calendar.py
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from meeting_governance.services.business_calendar import BusinessCalendar
from meeting_governance.services.holidays import static_holidays


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_48_business_hours_before_thursday_is_tuesday_same_time():
    calendar = BusinessCalendar()

    deadline = calendar.subtract_business_hours(_utc(2025, 2, 13, 19), 48)

    assert deadline == _utc(2025, 2, 11, 19)


def test_weekend_pushes_deadline_back_by_48_wall_clock_hours():
    """
    A Monday meeting skips Saturday and Sunday entirely.
    """
    calendar = BusinessCalendar()

    deadline = calendar.subtract_business_hours(_utc(2025, 2, 10, 19), 48)

    assert deadline == _utc(2025, 2, 6, 19)
    assert deadline == _utc(2025, 2, 8, 19) - timedelta(hours=48)


def test_holiday_pushes_deadline_back_by_24_hours():
    calendar = BusinessCalendar(holiday_source=static_holidays([date(2025, 2, 12)]))

    deadline = calendar.subtract_business_hours(_utc(2025, 2, 13, 19), 48)

    assert deadline == _utc(2025, 2, 10, 19)


def test_year_boundary_loads_previous_year_holidays():
    requested_years = []

    def recording_source(year):
        requested_years.append(year)
        return {date(year, 1, 1)}

    calendar = BusinessCalendar(holiday_source=recording_source)

    deadline = calendar.subtract_business_hours(_utc(2025, 1, 3, 12), 48)

    assert deadline == _utc(2024, 12, 31, 12)
    assert 2025 in requested_years
    assert 2024 in requested_years


def test_holiday_source_is_called_once_per_year():
    calls = []

    def counting_source(year):
        calls.append(year)
        return set()

    calendar = BusinessCalendar(holiday_source=counting_source)
    calendar.subtract_business_hours(_utc(2025, 3, 20, 12), 200)

    assert calls.count(2025) == 1


def test_observed_new_year_on_december_31_is_a_holiday():
    # 2028-01-01 is a Saturday, observed on Friday 2027-12-31
    calendar = BusinessCalendar(holiday_source=static_holidays([date(2027, 12, 31)]))

    assert calendar.is_holiday(_utc(2027, 12, 31, 15))


def test_naive_datetime_is_rejected():
    calendar = BusinessCalendar()

    with pytest.raises(ValueError):
        calendar.subtract_business_hours(datetime(2025, 2, 13, 19), 48)

    with pytest.raises(ValueError):
        calendar.count_business_hours(datetime(2025, 2, 11, 19), _utc(2025, 2, 13, 19))


def test_count_business_hours_uses_half_open_interval():
    calendar = BusinessCalendar()

    assert calendar.count_business_hours(_utc(2025, 2, 11, 18), _utc(2025, 2, 13, 19)) == 49
    assert calendar.count_business_hours(_utc(2025, 2, 13, 19), _utc(2025, 2, 13, 19)) == 0
    # Friday 23:00 -> Monday 01:00 only counts Friday 23:00 and Monday 00:00
    assert calendar.count_business_hours(_utc(2025, 2, 7, 23), _utc(2025, 2, 10, 1)) == 2


def test_count_is_zero_when_end_precedes_start():
    calendar = BusinessCalendar()

    assert calendar.count_business_hours(_utc(2025, 2, 13, 19), _utc(2025, 2, 12, 19)) == 0


def test_add_business_hours_skips_weekend():
    calendar = BusinessCalendar()

    # Friday 20:00 + 8 business hours: 20..23 on Friday, 00..03 on Monday
    assert calendar.add_business_hours(_utc(2025, 2, 7, 20), 8) == _utc(2025, 2, 10, 4)


def test_weekend_classification_uses_jurisdiction_timezone():
    calendar = BusinessCalendar(tz=ZoneInfo("America/Indiana/Indianapolis"))

    # Saturday 03:00 UTC is still Friday evening in Indianapolis
    saturday_utc = _utc(2025, 2, 8, 3)
    assert calendar.is_business_hour(saturday_utc)
    # Monday 03:00 UTC is Sunday evening in Indianapolis
    assert not calendar.is_business_hour(_utc(2025, 2, 10, 3))


def test_calendar_without_business_days_fails_instead_of_looping():
    calendar = BusinessCalendar(holiday_source=lambda year: {
        date(year, 1, 1) + timedelta(days=offset) for offset in range(366)
    })

    with pytest.raises(ValueError):
        calendar.subtract_business_hours(_utc(2025, 2, 13, 19), 1)


def test_negative_hours_rejected():
    calendar = BusinessCalendar()

    with pytest.raises(ValueError):
        calendar.subtract_business_hours(_utc(2025, 2, 13, 19), -1)
