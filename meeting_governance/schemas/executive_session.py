# meeting_governance/schemas/executive_session.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class ExecutiveSessionStatus(str, Enum):
    """
    Lifecycle of a closed session.

    Only `active` blocks voting. `certified` and `cancelled` are terminal.
    """

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    ENDED = "ended"
    CERTIFIED = "certified"
    CANCELLED = "cancelled"


class ExecutiveSessionBasis(BaseModel):
    """
    One statutory ground on which a body may meet in closed session.
    """

    code: str = Field(..., examples=["PENDING_LITIGATION"])
    citation: str = Field(..., examples=["IC 5-14-1.5-6.1(b)(2)(B)"])
    subsection: str = Field(..., examples=["(b)(2)(B)"])
    description: str


class ExecutiveSessionCreate(BaseModel):
    basis_code: str = Field(..., min_length=1, examples=["PERSONNEL"])
    subject: str = Field(..., min_length=1, examples=["Annual review of the town marshal"])
    agenda_item_id: str | None = None
    scheduled_start: AwareDatetime | None = None


class ExecutiveSessionEnter(BaseModel):
    pre_certification_statement: str = Field(
        ...,
        min_length=1,
        description="Statement read into the record before the doors close.",
    )
    attendees: list[str] = Field(
        default_factory=list,
        description="Identifiers of everyone present in the closed session.",
    )


class ExecutiveSessionEnd(BaseModel):
    post_certification_statement: str = Field(
        ...,
        min_length=1,
        description=(
            "Certification that no subject other than the noticed one was "
            "discussed."
        ),
    )


class ExecutiveSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    meeting_id: str
    agenda_item_id: str | None = None
    status: ExecutiveSessionStatus
    basis_code: str
    basis_description: str
    statutory_citation: str
    subject: str
    scheduled_start: datetime | None = None
    attendees: list[str] = Field(default_factory=list)
    pre_certification_statement: str | None = None
    post_certification_statement: str | None = None
    entered_at: datetime | None = None
    entered_by: str | None = None
    ended_at: datetime | None = None
    ended_by: str | None = None
    certified_at: datetime | None = None
    certified_by: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ExecutiveSessionActivity(BaseModel):
    """
    Whether a meeting is currently in closed session. Votes are blocked
    while `active` is true.
    """

    meeting_id: str
    active: bool
