# meeting_governance/services/notice_compliance.py
from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from meeting_governance.core.clock import ensure_utc
from meeting_governance.schemas.meeting import (
    ComplianceStatus,
    MeetingType,
    NoticeEvaluation,
    NoticeTimeliness,
)
from meeting_governance.services.business_calendar import BusinessCalendar

NOTICE_CITATION = "IC 5-14-1.5-5"
EMERGENCY_CITATION = "IC 5-14-1.5-5(d)"


class NoticeLike(Protocol):
    """
    Anything carrying a stored notice verdict: ORM NoticeRecord rows or
    their NoticeRecordRead projection.
    """

    posted_at: datetime
    required_posted_by: datetime | None
    business_hours_lead: int
    is_timely: bool
    explanation: str


class NoticeComplianceCalculator:
    """
    Decides whether one notice posting satisfies the business-hour lead time.

    Rules
    -----
    1) Emergency meetings      => always timely, no deadline, lead time 0
    2) Regular, special and executive-only meetings:
         required_posted_by = scheduled_start - lead business hours
         timely iff posted_at <= required_posted_by (inclusive)

    The lead time is resolved by the caller (meeting override, then
    governing body override); `default_lead_time_hours` applies otherwise.
    """

    def __init__(self, calendar: BusinessCalendar, default_lead_time_hours: int = 48):
        self.calendar = calendar
        self.default_lead_time_hours = default_lead_time_hours

    def evaluate(
        self,
        meeting_type: MeetingType | str,
        scheduled_start: datetime,
        posted_at: datetime,
        lead_time_hours: int | None = None,
    ) -> NoticeEvaluation:
        scheduled_start = ensure_utc(scheduled_start)
        posted_at = ensure_utc(posted_at)
        business_hours_lead = self.calendar.count_business_hours(posted_at, scheduled_start)

        if MeetingType(meeting_type) == MeetingType.EMERGENCY:
            return NoticeEvaluation(
                required_posted_by=None,
                is_timely=True,
                business_hours_lead=business_hours_lead,
                required_lead_time_hours=0,
                explanation=(
                    "Emergency meeting: exempt from the advance notice lead time "
                    f"under {EMERGENCY_CITATION}."
                ),
            )

        lead = self.default_lead_time_hours if lead_time_hours is None else lead_time_hours
        required_posted_by = self.calendar.subtract_business_hours(scheduled_start, lead)
        is_timely = posted_at <= required_posted_by

        if is_timely:
            explanation = (
                f"Posted {business_hours_lead} business hours before the meeting; "
                f"{lead} required under {NOTICE_CITATION}, deadline "
                f"{required_posted_by.isoformat()}."
            )
        else:
            earliest_start = self.calendar.add_business_hours(posted_at, lead)
            explanation = (
                f"Posted {business_hours_lead} business hours before the meeting; "
                f"{lead} required under {NOTICE_CITATION}. Notice was due by "
                f"{required_posted_by.isoformat()}; this posting covers a meeting "
                f"starting no earlier than {earliest_start.isoformat()}."
            )

        return NoticeEvaluation(
            required_posted_by=required_posted_by,
            is_timely=is_timely,
            business_hours_lead=business_hours_lead,
            required_lead_time_hours=lead,
            explanation=explanation,
        )


def derive_compliance(notices: Sequence[NoticeLike]) -> ComplianceStatus:
    """
    Compliance of a meeting as seen through its latest notice record.

    Earlier records keep their own verdicts; only the last one counts here.
    """
    if not notices:
        return ComplianceStatus(
            timeliness=NoticeTimeliness.UNKNOWN,
            explanation="No notice has been posted for this meeting.",
        )

    latest = notices[-1]
    return ComplianceStatus(
        timeliness=NoticeTimeliness.COMPLIANT if latest.is_timely else NoticeTimeliness.LATE,
        required_posted_by=latest.required_posted_by,
        actual_posted_at=latest.posted_at,
        business_hours_lead=latest.business_hours_lead,
        explanation=latest.explanation,
    )
