# meeting_governance/schemas/minutes.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MinutesStatus(str, Enum):
    """
    draft -> pending_approval -> approved -> amended. `amended` is terminal.
    """

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    AMENDED = "amended"


class AmendmentType(str, Enum):
    CORRECTION = "correction"
    ADDITION = "addition"
    DELETION = "deletion"


class MinutesCreate(BaseModel):
    body: str = Field(default="", examples=["Call to order at 7:00 PM by President Doe."])


class MinutesUpdate(BaseModel):
    body: str = Field(...)


class MinutesAmend(BaseModel):
    """
    Amendment of approved minutes. `body` replaces the approved text, which
    is kept as `approved_body`.
    """

    amendment_type: AmendmentType = Field(..., examples=["correction"])
    body: str = Field(...)
    reason: str = Field(..., min_length=1, examples=["Vote count on item 4 misrecorded."])


class MinutesRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    meeting_id: str
    status: MinutesStatus
    body: str
    prepared_by: str | None = None
    prepared_at: datetime
    updated_at: datetime
    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    amendment_type: AmendmentType | None = None
    amendment_reason: str | None = None
    approved_body: str | None = None
    amended_at: datetime | None = None
    amended_by: str | None = None
