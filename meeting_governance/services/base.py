# meeting_governance/services/base.py
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from meeting_governance.core.clock import Clock, ensure_utc, utc_now
from meeting_governance.core.errors import InputValidationError, NotFoundError
from meeting_governance.models.agenda import AgendaItem
from meeting_governance.models.governing_body import GoverningBody, GoverningBodyMember
from meeting_governance.models.meeting import Meeting
from meeting_governance.repositories.governance import GovernanceRepository
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.locks import MeetingLockRegistry, get_lock_registry


def new_id() -> str:
    return str(uuid.uuid4())


class GovernanceService:
    """
    Shared wiring for the stateful services: repository, clock and the
    per-meeting lock registry.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock | None = None,
        locks: MeetingLockRegistry | None = None,
    ):
        self.db = db
        self.repo = GovernanceRepository(db)
        self.clock = clock or utc_now
        self.locks = locks or get_lock_registry()

    def now(self) -> datetime:
        return ensure_utc(self.clock())

    async def _require_meeting(self, ctx: TenantContext, meeting_id: str) -> Meeting:
        meeting = await self.repo.get_meeting(ctx.tenant_id, meeting_id)
        if meeting is None:
            raise NotFoundError("Meeting", meeting_id)
        return meeting

    async def _require_body(self, ctx: TenantContext, body_id: str) -> GoverningBody:
        body = await self.repo.get_body(ctx.tenant_id, body_id)
        if body is None:
            raise NotFoundError("GoverningBody", body_id)
        return body

    async def _roster(self, ctx: TenantContext, meeting: Meeting) -> tuple[GoverningBody, list[GoverningBodyMember]]:
        """
        Governing body of the meeting and its active voting members.
        """
        body = await self._require_body(ctx, meeting.body_id)
        members = [m for m in body.members if m.is_active and m.is_voting]
        return body, members

    async def _check_agenda_item(
        self,
        ctx: TenantContext,
        meeting: Meeting,
        agenda_item_id: str | None,
    ) -> AgendaItem | None:
        """
        Resolve an optional agenda item reference. The item must be on the
        agenda of this meeting.
        """
        if agenda_item_id is None:
            return None
        item = await self.repo.get_agenda_item(ctx.tenant_id, agenda_item_id)
        if item is None or item.meeting_id != meeting.id:
            raise InputValidationError(
                "Agenda item is not on the agenda of this meeting.",
                {"meeting_id": meeting.id, "agenda_item_id": agenda_item_id},
            )
        return item
