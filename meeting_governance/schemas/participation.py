# meeting_governance/schemas/participation.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"
    LATE = "late"
    LEFT_EARLY = "left_early"


# --------------------------------------------------------------------------
# Recusals
# --------------------------------------------------------------------------

class RecusalCreate(BaseModel):
    """
    A member's disclosure of a conflict of interest.

    Leave `agenda_item_id` empty for a recusal covering the whole meeting.
    """

    member_id: str
    reason: str = Field(..., min_length=1, examples=["Owns property adjacent to the parcel"])
    agenda_item_id: str | None = None
    statutory_citation: str | None = Field(default=None, examples=["IC 35-44.1-1-4"])


class RecusalRead(RecusalCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meeting_id: str
    disclosed_at: datetime
    recorded_by: str | None = None


# --------------------------------------------------------------------------
# Attendance
# --------------------------------------------------------------------------

class AttendanceUpsert(BaseModel):
    member_id: str
    status: AttendanceStatus = Field(default=AttendanceStatus.PRESENT)
    arrived_at: AwareDatetime | None = None
    notes: str | None = None


class AttendanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meeting_id: str
    member_id: str
    status: AttendanceStatus
    arrived_at: datetime | None = None
    departed_at: datetime | None = None
    notes: str | None = None


# --------------------------------------------------------------------------
# Quorum
# --------------------------------------------------------------------------

class QuorumResult(BaseModel):
    """
    Quorum computed for a meeting, or for one agenda item of it.

    Recused members are removed from both the eligible roster and the
    present count before the threshold is applied.
    """

    agenda_item_id: str | None = Field(
        None,
        description="Agenda item the quorum was computed for; None for the meeting as a whole.",
    )
    roster_count: int = Field(..., description="Active voting members of the body.", examples=[5])
    eligible_count: int = Field(..., description="Roster minus recused members.", examples=[3])
    required_count: int = Field(..., examples=[2])
    present_count: int = Field(..., description="Present, non-recused members.", examples=[2])
    recused_count: int = Field(..., examples=[2])
    has_quorum: bool = Field(..., examples=[True])
