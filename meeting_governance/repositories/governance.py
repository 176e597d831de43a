# meeting_governance/repositories/governance.py
from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from meeting_governance.models.action import MeetingAction
from meeting_governance.models.agenda import Agenda, AgendaItem
from meeting_governance.models.executive_session import ExecutiveSession
from meeting_governance.models.governing_body import GoverningBody
from meeting_governance.models.meeting import Meeting
from meeting_governance.models.minutes import Minutes
from meeting_governance.models.participation import AttendanceRecord, Recusal

ModelT = TypeVar("ModelT")


class GovernanceRepository:
    """
    Tenant-scoped persistence for every governance aggregate.

    `get_*` returns None both for missing rows and for rows owned by another
    tenant; services turn that into NotFoundError. Every read repopulates
    already-loaded instances from the database, so a service that re-reads
    an entity after taking the meeting lock sees the latest committed row.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, model: type[ModelT], tenant_id: str, entity_id: str) -> ModelT | None:
        stmt = (
            select(model)
            .where(model.id == entity_id, model.tenant_id == tenant_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _list(self, stmt) -> list[Any]:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Governing bodies
    # ------------------------------------------------------------------
    async def get_body(self, tenant_id: str, body_id: str) -> GoverningBody | None:
        return await self._get(GoverningBody, tenant_id, body_id)

    async def get_body_by_name(self, tenant_id: str, name: str) -> GoverningBody | None:
        stmt = select(GoverningBody).where(
            GoverningBody.tenant_id == tenant_id,
            GoverningBody.name == name,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_bodies(self, tenant_id: str) -> list[GoverningBody]:
        stmt = (
            select(GoverningBody)
            .where(GoverningBody.tenant_id == tenant_id)
            .order_by(GoverningBody.name)
        )
        return await self._list(stmt)

    # ------------------------------------------------------------------
    # Meetings
    # ------------------------------------------------------------------
    async def get_meeting(self, tenant_id: str, meeting_id: str) -> Meeting | None:
        return await self._get(Meeting, tenant_id, meeting_id)

    async def list_meetings(
        self,
        tenant_id: str,
        body_id: str | None = None,
        status: str | None = None,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
    ) -> list[Meeting]:
        stmt = select(Meeting).where(Meeting.tenant_id == tenant_id)
        if body_id is not None:
            stmt = stmt.where(Meeting.body_id == body_id)
        if status is not None:
            stmt = stmt.where(Meeting.status == status)
        if start_from is not None:
            stmt = stmt.where(Meeting.scheduled_start >= start_from)
        if start_to is not None:
            stmt = stmt.where(Meeting.scheduled_start <= start_to)
        stmt = stmt.order_by(Meeting.scheduled_start, Meeting.id)
        return await self._list(stmt)

    # ------------------------------------------------------------------
    # Agendas
    # ------------------------------------------------------------------
    async def get_agenda(self, tenant_id: str, agenda_id: str) -> Agenda | None:
        return await self._get(Agenda, tenant_id, agenda_id)

    async def get_agenda_for_meeting(self, tenant_id: str, meeting_id: str) -> Agenda | None:
        stmt = (
            select(Agenda)
            .where(Agenda.tenant_id == tenant_id, Agenda.meeting_id == meeting_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_agenda_item(self, tenant_id: str, item_id: str) -> AgendaItem | None:
        return await self._get(AgendaItem, tenant_id, item_id)

    async def count_agenda_item_references(self, tenant_id: str, item_id: str) -> int:
        """
        Recusals, actions and executive sessions scoped to the item.
        """
        total = 0
        for model in (Recusal, MeetingAction, ExecutiveSession):
            stmt = select(func.count()).select_from(model).where(
                model.tenant_id == tenant_id,
                model.agenda_item_id == item_id,
            )
            total += (await self.db.execute(stmt)).scalar_one()
        return total

    # ------------------------------------------------------------------
    # Executive sessions
    # ------------------------------------------------------------------
    async def get_executive_session(self, tenant_id: str, session_id: str) -> ExecutiveSession | None:
        return await self._get(ExecutiveSession, tenant_id, session_id)

    async def list_executive_sessions(self, tenant_id: str, meeting_id: str) -> list[ExecutiveSession]:
        stmt = (
            select(ExecutiveSession)
            .where(
                ExecutiveSession.tenant_id == tenant_id,
                ExecutiveSession.meeting_id == meeting_id,
            )
            .order_by(ExecutiveSession.created_at, ExecutiveSession.id)
        )
        return await self._list(stmt)

    # ------------------------------------------------------------------
    # Recusals & attendance
    # ------------------------------------------------------------------
    async def list_recusals(self, tenant_id: str, meeting_id: str) -> list[Recusal]:
        stmt = (
            select(Recusal)
            .where(Recusal.tenant_id == tenant_id, Recusal.meeting_id == meeting_id)
            .order_by(Recusal.disclosed_at, Recusal.id)
        )
        return await self._list(stmt)

    async def list_attendance(self, tenant_id: str, meeting_id: str) -> list[AttendanceRecord]:
        stmt = (
            select(AttendanceRecord)
            .where(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.meeting_id == meeting_id,
            )
            .order_by(AttendanceRecord.updated_at, AttendanceRecord.id)
        )
        return await self._list(stmt)

    async def get_attendance(
        self,
        tenant_id: str,
        meeting_id: str,
        member_id: str,
    ) -> AttendanceRecord | None:
        stmt = (
            select(AttendanceRecord)
            .where(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.meeting_id == meeting_id,
                AttendanceRecord.member_id == member_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    async def get_action(self, tenant_id: str, action_id: str) -> MeetingAction | None:
        return await self._get(MeetingAction, tenant_id, action_id)

    async def list_actions(self, tenant_id: str, meeting_id: str) -> list[MeetingAction]:
        stmt = (
            select(MeetingAction)
            .where(MeetingAction.tenant_id == tenant_id, MeetingAction.meeting_id == meeting_id)
            .order_by(MeetingAction.moved_at, MeetingAction.id)
        )
        return await self._list(stmt)

    # ------------------------------------------------------------------
    # Minutes
    # ------------------------------------------------------------------
    async def get_minutes(self, tenant_id: str, minutes_id: str) -> Minutes | None:
        return await self._get(Minutes, tenant_id, minutes_id)

    async def get_minutes_for_meeting(self, tenant_id: str, meeting_id: str) -> Minutes | None:
        stmt = (
            select(Minutes)
            .where(Minutes.tenant_id == tenant_id, Minutes.meeting_id == meeting_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------
    def save(self, entity: Any) -> None:
        """
        Insert or update by identity. Entities already attached to the
        session are updated in place on commit.
        """
        self.db.add(entity)

    async def commit(self) -> None:
        await self.db.flush()
        await self.db.commit()
