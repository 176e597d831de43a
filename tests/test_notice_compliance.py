# tests/test_notice_compliance.py
from datetime import date, datetime, timedelta, timezone

import pytest

from meeting_governance.schemas.meeting import MeetingType, NoticeRecordRead, NoticeTimeliness
from meeting_governance.services.business_calendar import BusinessCalendar
from meeting_governance.services.holidays import static_holidays
from meeting_governance.services.notice_compliance import NoticeComplianceCalculator, derive_compliance

MEETING_START = datetime(2025, 2, 13, 19, 0, tzinfo=timezone.utc)


@pytest.fixture
def calculator() -> NoticeComplianceCalculator:
    return NoticeComplianceCalculator(BusinessCalendar(), default_lead_time_hours=48)


def test_posting_49_business_hours_ahead_is_compliant(calculator):
    result = calculator.evaluate(
        MeetingType.REGULAR,
        MEETING_START,
        MEETING_START - timedelta(hours=49),
    )

    assert result.is_timely is True
    assert result.required_posted_by == datetime(2025, 2, 11, 19, tzinfo=timezone.utc)
    assert result.business_hours_lead == 49
    assert result.required_lead_time_hours == 48


def test_posting_33_business_hours_ahead_is_late(calculator):
    result = calculator.evaluate(
        MeetingType.REGULAR,
        MEETING_START,
        MEETING_START - timedelta(hours=33),
    )

    assert result.is_timely is False
    assert result.business_hours_lead == 33
    assert "due by" in result.explanation
    # posted Wednesday 10:00; 48 business hours later is Friday 10:00
    assert "no earlier than 2025-02-14T10:00:00+00:00" in result.explanation


def test_deadline_comparison_is_inclusive(calculator):
    result = calculator.evaluate(
        MeetingType.SPECIAL,
        MEETING_START,
        datetime(2025, 2, 11, 19, tzinfo=timezone.utc),
    )

    assert result.is_timely is True
    assert result.business_hours_lead == 48


def test_emergency_meeting_is_always_timely(calculator):
    result = calculator.evaluate(
        MeetingType.EMERGENCY,
        MEETING_START,
        MEETING_START - timedelta(minutes=30),
    )

    assert result.is_timely is True
    assert result.required_posted_by is None
    assert result.required_lead_time_hours == 0
    assert "exempt" in result.explanation


def test_executive_only_meeting_follows_regular_rule(calculator):
    result = calculator.evaluate(
        MeetingType.EXECUTIVE,
        MEETING_START,
        MEETING_START - timedelta(hours=24),
    )

    assert result.is_timely is False


def test_explicit_lead_time_overrides_default(calculator):
    result = calculator.evaluate(
        MeetingType.REGULAR,
        MEETING_START,
        MEETING_START - timedelta(hours=30),
        lead_time_hours=24,
    )

    assert result.is_timely is True
    assert result.required_lead_time_hours == 24
    assert result.required_posted_by == datetime(2025, 2, 12, 19, tzinfo=timezone.utc)


def test_holiday_inside_window_makes_posting_late():
    calendar = BusinessCalendar(holiday_source=static_holidays([date(2025, 2, 12)]))
    calculator = NoticeComplianceCalculator(calendar)

    result = calculator.evaluate(
        MeetingType.REGULAR,
        MEETING_START,
        MEETING_START - timedelta(hours=49),
    )

    assert result.is_timely is False
    assert result.required_posted_by == datetime(2025, 2, 10, 19, tzinfo=timezone.utc)


def test_naive_posted_at_rejected(calculator):
    with pytest.raises(ValueError):
        calculator.evaluate(MeetingType.REGULAR, MEETING_START, datetime(2025, 2, 10, 9))


def _notice(sequence: int, is_timely: bool) -> NoticeRecordRead:
    return NoticeRecordRead(
        id=f"notice-{sequence}",
        sequence=sequence,
        posted_at=MEETING_START - timedelta(hours=100 - sequence * 60),
        methods=["website"],
        locations=[],
        proof_refs=[],
        required_lead_time_hours=48,
        required_posted_by=datetime(2025, 2, 11, 19, tzinfo=timezone.utc),
        business_hours_lead=48,
        is_timely=is_timely,
        explanation=f"notice {sequence}",
    )


def test_derive_compliance_without_notices_is_unknown():
    status = derive_compliance([])

    assert status.timeliness == NoticeTimeliness.UNKNOWN
    assert status.actual_posted_at is None


def test_derive_compliance_uses_latest_notice():
    status = derive_compliance([_notice(1, True), _notice(2, False)])

    assert status.timeliness == NoticeTimeliness.LATE
    assert status.explanation == "notice 2"

    status = derive_compliance([_notice(1, False), _notice(2, True)])
    assert status.timeliness == NoticeTimeliness.COMPLIANT
