# meeting_governance/schemas/meeting.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class MeetingType(str, Enum):
    """
    Kind of meeting. Emergency meetings are exempt from the notice lead time.
    """

    REGULAR = "regular"
    SPECIAL = "special"
    EMERGENCY = "emergency"
    EXECUTIVE = "executive"


class MeetingStatus(str, Enum):
    """
    Lifecycle status of a meeting.
    """

    PLANNED = "planned"
    NOTICED = "noticed"
    IN_SESSION = "in_session"
    RECESSED = "recessed"
    ADJOURNED = "adjourned"
    CANCELLED = "cancelled"


class NoticeMethod(str, Enum):
    PHYSICAL_POSTING = "physical_posting"
    WEBSITE = "website"
    NEWSPAPER = "newspaper"
    MAILING_LIST = "mailing_list"
    SOCIAL_MEDIA = "social_media"


class NoticeTimeliness(str, Enum):
    COMPLIANT = "COMPLIANT"
    LATE = "LATE"
    UNKNOWN = "UNKNOWN"


# --------------------------------------------------------------------------
# Notice compliance
# --------------------------------------------------------------------------

class NoticeEvaluation(BaseModel):
    """
    Outcome of checking one notice posting against the lead-time rule.

    This is the primary output of the notice compliance calculator and is
    copied verbatim onto the NoticeRecord it was computed for.
    """

    required_posted_by: datetime | None = Field(
        None,
        description=(
            "Latest instant at which notice could have been posted. "
            "None for meetings exempt from the lead-time rule."
        ),
    )
    is_timely: bool = Field(..., description="True if posted_at <= required_posted_by.")
    business_hours_lead: int = Field(
        ...,
        description="Business hours between the posting and the meeting start.",
        examples=[52],
    )
    required_lead_time_hours: int = Field(..., examples=[48])
    explanation: str = Field(..., examples=["Posted 52 business hours before the meeting."])


class ComplianceStatus(BaseModel):
    """
    Derived open-meetings compliance of a meeting, taken from its latest notice.
    """

    timeliness: NoticeTimeliness = Field(..., examples=["COMPLIANT"])
    required_posted_by: datetime | None = None
    actual_posted_at: datetime | None = None
    business_hours_lead: int | None = None
    explanation: str = Field(..., examples=["No notice has been posted for this meeting."])


class NoticePostedInput(BaseModel):
    """
    Payload for recording that public notice was posted.
    """

    posted_at: AwareDatetime | None = Field(
        default=None,
        description="When notice was posted. Defaults to the time of the call.",
        examples=["2025-02-06T15:00:00Z"],
    )
    methods: list[NoticeMethod] = Field(
        ...,
        min_length=1,
        examples=[["physical_posting", "website"]],
    )
    locations: list[str] = Field(
        default_factory=list,
        examples=[["Town Hall bulletin board", "https://example.gov/meetings"]],
    )
    proof_refs: list[str] = Field(
        default_factory=list,
        description="References to photos, screenshots or affidavits of posting.",
    )
    notes: str | None = None


class NoticeRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sequence: int
    posted_at: datetime
    posted_by: str | None = None
    methods: list[NoticeMethod]
    locations: list[str]
    proof_refs: list[str]
    notes: str | None = None
    required_lead_time_hours: int
    required_posted_by: datetime | None = None
    business_hours_lead: int
    is_timely: bool
    explanation: str


# --------------------------------------------------------------------------
# Meeting
# --------------------------------------------------------------------------

class MeetingCreate(BaseModel):
    """
    Schema for scheduling a new meeting.
    """

    body_id: str = Field(..., description="Governing body holding the meeting.")
    meeting_type: MeetingType = Field(default=MeetingType.REGULAR)
    scheduled_start: AwareDatetime = Field(..., examples=["2025-02-10T23:00:00Z"])
    scheduled_end: AwareDatetime | None = Field(default=None)
    location: str = Field(..., min_length=1, examples=["Town Hall, 123 Main St"])
    notice_lead_time_hours: int | None = Field(
        default=None,
        ge=0,
        description="Meeting-level override of the business-hour notice lead time.",
    )
    jurisdiction_notes: dict[str, Any] = Field(
        default_factory=dict,
        description="Open-ended jurisdiction-specific notes.",
    )


class MeetingCancelInput(BaseModel):
    reason: str | None = Field(default=None, examples=["Lack of agenda items"])


class MeetingSummary(BaseModel):
    """
    Lightweight meeting representation for list views.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    body_id: str
    meeting_type: MeetingType
    status: MeetingStatus
    scheduled_start: datetime
    location: str


class MeetingRead(MeetingSummary):
    """
    Full meeting aggregate returned by every meeting operation.
    """

    scheduled_end: datetime | None = None
    notice_lead_time_hours: int | None = None
    jurisdiction_notes: dict[str, Any] = Field(default_factory=dict)
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    actual_start: datetime | None = None
    actual_end: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    notices: list[NoticeRecordRead] = Field(default_factory=list)
    compliance: ComplianceStatus
