# tests/test_holidays.py
from datetime import date

import pytest

from meeting_governance.core.config import Settings
from meeting_governance.services.holidays import (
    build_holiday_source,
    combine_sources,
    indiana_holidays,
    parse_holiday_list,
    static_holidays,
)


def test_indiana_holidays_2024_include_floating_and_election_days():
    days = indiana_holidays(2024)

    assert date(2024, 1, 1) in days
    assert date(2024, 1, 15) in days  # MLK Day
    assert date(2024, 2, 19) in days  # Presidents' Day
    assert date(2024, 3, 29) in days  # Good Friday
    assert date(2024, 5, 7) in days  # primary election
    assert date(2024, 5, 27) in days  # Memorial Day
    assert date(2024, 9, 2) in days  # Labor Day
    assert date(2024, 10, 14) in days  # Columbus Day
    assert date(2024, 11, 5) in days  # general election
    assert date(2024, 11, 28) in days  # Thanksgiving
    assert date(2024, 11, 29) in days  # day after Thanksgiving
    assert date(2024, 12, 25) in days


def test_odd_years_have_no_election_holidays():
    days = indiana_holidays(2025)

    assert date(2025, 5, 6) not in days
    assert date(2025, 11, 4) not in days
    assert date(2025, 4, 18) in days  # Good Friday


def test_fixed_holidays_move_to_observed_weekday():
    # 2026-07-04 is a Saturday, 2027-07-04 a Sunday
    assert date(2026, 7, 3) in indiana_holidays(2026)
    assert date(2027, 7, 5) in indiana_holidays(2027)
    # 2028-01-01 is a Saturday: observed in the previous calendar year
    assert date(2027, 12, 31) in indiana_holidays(2028)


def test_static_and_combined_sources():
    closures = static_holidays([date(2025, 3, 3), date(2026, 3, 3)])
    combined = combine_sources(indiana_holidays, closures)

    assert closures(2025) == {date(2025, 3, 3)}
    assert date(2025, 3, 3) in combined(2025)
    assert date(2025, 12, 25) in combined(2025)


def test_parse_holiday_list():
    assert parse_holiday_list(None) == []
    assert parse_holiday_list("2025-03-03, ,2025-03-04") == [date(2025, 3, 3), date(2025, 3, 4)]

    with pytest.raises(ValueError):
        parse_holiday_list("03/03/2025")


def test_build_holiday_source_from_settings():
    settings = Settings(HOLIDAY_CALENDAR="none", EXTRA_HOLIDAYS="2025-03-03")
    source = build_holiday_source(settings)

    assert set(source(2025)) == {date(2025, 3, 3)}

    indiana = build_holiday_source(Settings(HOLIDAY_CALENDAR="indiana", EXTRA_HOLIDAYS=None))
    assert date(2025, 12, 25) in set(indiana(2025))


def test_unknown_holiday_calendar_rejected():
    with pytest.raises(ValueError):
        build_holiday_source(Settings(HOLIDAY_CALENDAR="atlantis"))
