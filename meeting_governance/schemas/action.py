# meeting_governance/schemas/action.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from meeting_governance.schemas.participation import QuorumResult


class ActionType(str, Enum):
    MOTION = "motion"
    RESOLUTION = "resolution"
    ORDINANCE = "ordinance"
    AMENDMENT = "amendment"
    NOMINATION = "nomination"
    PROCEDURAL = "procedural"


class ActionResult(str, Enum):
    """
    Outcome of an action. Everything except `pending` is terminal.
    """

    PENDING = "pending"
    ADOPTED = "adopted"
    FAILED = "failed"
    TABLED = "tabled"
    WITHDRAWN = "withdrawn"


class VoteValue(str, Enum):
    YEA = "yea"
    NAY = "nay"
    ABSTAIN = "abstain"
    ABSENT = "absent"


class ActionCreate(BaseModel):
    """
    Schema for putting a motion, resolution or ordinance on the floor.
    """

    action_type: ActionType = Field(default=ActionType.MOTION)
    title: str = Field(..., min_length=1, examples=["Approve the 2025 street paving contract"])
    description: str | None = None
    agenda_item_id: str | None = Field(
        default=None,
        description="Agenda item this action belongs to; scopes item-level recusals.",
    )
    moved_by: str = Field(..., min_length=1, description="Member id of the mover.")


class ActionSecond(BaseModel):
    seconded_by: str = Field(..., min_length=1, description="Member id of the seconder.")


class VoteCast(BaseModel):
    member_id: str = Field(..., min_length=1)
    value: VoteValue = Field(..., examples=["yea"])


class VoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    action_id: str
    member_id: str
    value: VoteValue
    voted_at: datetime


class VoteTally(BaseModel):
    """
    Count of votes on one action. Votes of recused members are counted
    separately and never toward the result.
    """

    yea: int = 0
    nay: int = 0
    abstain: int = 0
    absent: int = 0
    recused: int = 0
    passed: bool = False
    margin: int = Field(0, description="yea minus nay")


class MeetingActionRead(BaseModel):
    """
    Full action aggregate with its votes, running tally and the quorum for
    the action's scope (the whole meeting, or its agenda item).
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    meeting_id: str
    agenda_item_id: str | None = None
    action_type: ActionType
    title: str
    description: str | None = None
    moved_by: str
    moved_at: datetime
    seconded_by: str | None = None
    seconded_at: datetime | None = None
    result: ActionResult
    closed_at: datetime | None = None
    closed_by: str | None = None
    created_at: datetime
    updated_at: datetime
    votes: list[VoteRead] = Field(default_factory=list)
    tally: VoteTally
    quorum: QuorumResult
