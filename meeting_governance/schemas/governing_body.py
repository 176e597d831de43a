# meeting_governance/schemas/governing_body.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuorumRule(str, Enum):
    """
    How many eligible members must be present for the body to do business.
    """

    MAJORITY = "majority"
    TWO_THIRDS = "two_thirds"
    SPECIFIC = "specific"


class PassThreshold(str, Enum):
    """
    Share of yea votes (among yea + nay) an action needs to be adopted.
    """

    SIMPLE_MAJORITY = "simple_majority"
    TWO_THIRDS = "two_thirds"


# --------------------------------------------------------------------------
# Members
# --------------------------------------------------------------------------

class GoverningBodyMemberCreate(BaseModel):
    display_name: str = Field(..., min_length=1, examples=["Jane Doe"])
    title: str | None = Field(default=None, examples=["Council President"])
    seat_number: int | None = Field(default=None, ge=1, examples=[1])
    is_voting: bool = Field(
        default=True,
        description="Non-voting members (e.g. a clerk) are not part of the quorum roster.",
    )


class GoverningBodyMemberRead(GoverningBodyMemberCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    body_id: str
    is_active: bool


# --------------------------------------------------------------------------
# Governing body
# --------------------------------------------------------------------------

class GoverningBodyCreate(BaseModel):
    """
    Schema for registering a governing body.
    """

    name: str = Field(..., min_length=1, examples=["Town Council"])
    code: str | None = Field(default=None, examples=["COUNCIL"])
    quorum_rule: QuorumRule = Field(default=QuorumRule.MAJORITY)
    quorum_number: int | None = Field(
        default=None,
        ge=1,
        description="Fixed quorum count; required when quorum_rule is 'specific'.",
    )
    pass_threshold: PassThreshold = Field(default=PassThreshold.SIMPLE_MAJORITY)
    notice_lead_time_hours: int | None = Field(
        default=None,
        ge=0,
        description=(
            "Business-hour notice lead time for this body's meetings. "
            "Falls back to the service default when omitted."
        ),
    )

    @model_validator(mode="after")
    def _specific_rule_needs_number(self) -> "GoverningBodyCreate":
        if self.quorum_rule == QuorumRule.SPECIFIC and self.quorum_number is None:
            raise ValueError("quorum_number is required when quorum_rule is 'specific'")
        return self


class GoverningBodyRead(GoverningBodyCreate):
    """
    Response schema for a governing body including its roster.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    created_at: datetime
    members: list[GoverningBodyMemberRead] = Field(default_factory=list)
