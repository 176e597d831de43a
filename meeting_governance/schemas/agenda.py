# meeting_governance/schemas/agenda.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AgendaStatus(str, Enum):
    """
    Publication workflow of an agenda. `amended` is terminal: further changes
    need a new version.
    """

    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PUBLISHED = "published"
    AMENDED = "amended"


class AgendaItemStatus(str, Enum):
    """
    Progress of one item during the meeting. `withdrawn` and `acted_upon`
    are terminal.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DISCUSSED = "discussed"
    TABLED = "tabled"
    WITHDRAWN = "withdrawn"
    ACTED_UPON = "acted_upon"


class AgendaItemType(str, Enum):
    REGULAR = "regular"
    CONSENT = "consent"
    PUBLIC_HEARING = "public_hearing"
    EXECUTIVE_SESSION = "executive_session"
    CEREMONIAL = "ceremonial"
    PRESENTATION = "presentation"
    NEW_BUSINESS = "new_business"
    OLD_BUSINESS = "old_business"


# --------------------------------------------------------------------------
# Agenda items
# --------------------------------------------------------------------------

class AgendaItemCreate(BaseModel):
    """
    Schema for adding an item to a draft agenda.

    Without `order_index` the item is appended after the last one.
    """

    title: str = Field(..., min_length=1, examples=["Rezoning request for parcel 12"])
    description: str | None = None
    item_type: AgendaItemType = Field(default=AgendaItemType.REGULAR)
    order_index: int | None = Field(default=None, ge=0)
    duration_minutes: int | None = Field(default=None, ge=1, examples=[15])
    requires_vote: bool = False
    requires_public_hearing: bool = False
    presenter_name: str | None = Field(default=None, examples=["Planning Director"])


class AgendaItemUpdate(BaseModel):
    """
    Partial update of a draft agenda's item. Omitted fields are unchanged.
    """

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    item_type: AgendaItemType | None = None
    duration_minutes: int | None = Field(default=None, ge=1)
    requires_vote: bool | None = None
    requires_public_hearing: bool | None = None
    presenter_name: str | None = None


class AgendaItemStatusChange(BaseModel):
    status: AgendaItemStatus = Field(..., examples=["in_progress"])
    discussion_notes: str | None = Field(
        default=None,
        description="Notes on the discussion, recorded with the status change.",
    )


class AgendaItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    agenda_id: str
    meeting_id: str
    order_index: int
    title: str
    description: str | None = None
    item_type: AgendaItemType
    status: AgendaItemStatus
    duration_minutes: int | None = None
    requires_vote: bool
    requires_public_hearing: bool
    presenter_name: str | None = None
    discussion_notes: str | None = None


# --------------------------------------------------------------------------
# Agenda
# --------------------------------------------------------------------------

class AgendaCreate(BaseModel):
    title: str | None = Field(default=None, examples=["Regular Meeting Agenda"])
    preamble: str | None = None
    postamble: str | None = None


class AgendaReorder(BaseModel):
    item_ids: list[str] = Field(
        ...,
        min_length=1,
        description="Every item id of the agenda, in the new order.",
    )


class AgendaRead(BaseModel):
    """
    Agenda with its items in order.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    meeting_id: str
    status: AgendaStatus
    version: int
    title: str | None = None
    preamble: str | None = None
    postamble: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    approved_at: datetime | None = None
    approved_by: str | None = None
    published_at: datetime | None = None
    published_by: str | None = None
    amended_at: datetime | None = None
    amended_by: str | None = None
    items: list[AgendaItemRead] = Field(default_factory=list)
