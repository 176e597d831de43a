# meeting_governance/services/participation.py
from __future__ import annotations

from meeting_governance.core.clock import ensure_utc
from meeting_governance.core.errors import AlreadyTerminalError, InputValidationError, NotFoundError
from meeting_governance.core.logging import get_logger
from meeting_governance.models.governing_body import GoverningBodyMember
from meeting_governance.models.participation import AttendanceRecord, Recusal
from meeting_governance.schemas.meeting import MeetingStatus
from meeting_governance.schemas.participation import (
    AttendanceRead,
    AttendanceStatus,
    AttendanceUpsert,
    QuorumResult,
    RecusalCreate,
    RecusalRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services import quorum
from meeting_governance.services.base import GovernanceService, new_id

logger = get_logger(__name__).bind(component="participation")


def _require_on_roster(member_id: str, roster: list[GoverningBodyMember]) -> None:
    if member_id not in {m.id for m in roster}:
        raise InputValidationError(
            "Member is not an active voting member of this governing body.",
            {"member_id": member_id},
        )


class ParticipationService(GovernanceService):
    """
    Recusals, attendance and quorum for one meeting.
    """

    async def record_recusal(
        self,
        ctx: TenantContext,
        meeting_id: str,
        payload: RecusalCreate,
    ) -> RecusalRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            if meeting.status == MeetingStatus.CANCELLED.value:
                raise AlreadyTerminalError(
                    "Cannot record a recusal for a cancelled meeting.",
                    {"meeting_id": meeting.id},
                )
            await self._check_agenda_item(ctx, meeting, payload.agenda_item_id)
            _, roster = await self._roster(ctx, meeting)
            _require_on_roster(payload.member_id, roster)

            recusal = Recusal(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                agenda_item_id=payload.agenda_item_id,
                member_id=payload.member_id,
                reason=payload.reason,
                statutory_citation=payload.statutory_citation,
                disclosed_at=self.now(),
                recorded_by=ctx.user_id,
            )
            self.repo.save(recusal)
            await self.repo.commit()

        logger.info(
            "recusal_recorded",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting_id,
            member_id=payload.member_id,
            agenda_item_id=payload.agenda_item_id,
        )
        return RecusalRead.model_validate(recusal)

    async def list_recusals(self, ctx: TenantContext, meeting_id: str) -> list[RecusalRead]:
        await self._require_meeting(ctx, meeting_id)
        recusals = await self.repo.list_recusals(ctx.tenant_id, meeting_id)
        return [RecusalRead.model_validate(r) for r in recusals]

    async def record_attendance(
        self,
        ctx: TenantContext,
        meeting_id: str,
        payload: AttendanceUpsert,
    ) -> AttendanceRead:
        """
        Create or replace the attendance record of one member.
        """
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            _, roster = await self._roster(ctx, meeting)
            _require_on_roster(payload.member_id, roster)

            now = self.now()
            record = await self.repo.get_attendance(ctx.tenant_id, meeting.id, payload.member_id)
            if record is None:
                record = AttendanceRecord(
                    id=new_id(),
                    tenant_id=ctx.tenant_id,
                    meeting_id=meeting.id,
                    member_id=payload.member_id,
                )
                self.repo.save(record)

            record.status = payload.status.value
            if payload.arrived_at is not None:
                record.arrived_at = ensure_utc(payload.arrived_at)
            elif record.arrived_at is None and payload.status in quorum.PRESENT_STATUSES:
                record.arrived_at = now
            record.notes = payload.notes
            record.updated_at = now
            await self.repo.commit()

        logger.info(
            "attendance_recorded",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting_id,
            member_id=payload.member_id,
            status=record.status,
        )
        return AttendanceRead.model_validate(record)

    async def mark_departed(self, ctx: TenantContext, meeting_id: str, member_id: str) -> AttendanceRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            await self._require_meeting(ctx, meeting_id)
            record = await self.repo.get_attendance(ctx.tenant_id, meeting_id, member_id)
            if record is None:
                raise NotFoundError("AttendanceRecord", member_id)

            now = self.now()
            record.status = AttendanceStatus.LEFT_EARLY.value
            record.departed_at = now
            record.updated_at = now
            await self.repo.commit()

        logger.info(
            "attendance_departed",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting_id,
            member_id=member_id,
        )
        return AttendanceRead.model_validate(record)

    async def list_attendance(self, ctx: TenantContext, meeting_id: str) -> list[AttendanceRead]:
        await self._require_meeting(ctx, meeting_id)
        records = await self.repo.list_attendance(ctx.tenant_id, meeting_id)
        return [AttendanceRead.model_validate(r) for r in records]

    async def calculate_quorum(
        self,
        ctx: TenantContext,
        meeting_id: str,
        agenda_item_id: str | None = None,
    ) -> QuorumResult:
        meeting = await self._require_meeting(ctx, meeting_id)
        body, roster = await self._roster(ctx, meeting)
        attendance = await self.repo.list_attendance(ctx.tenant_id, meeting_id)
        recusals = await self.repo.list_recusals(ctx.tenant_id, meeting_id)

        return quorum.calculate_quorum(
            roster_ids=[m.id for m in roster],
            present_ids=[a.member_id for a in attendance if quorum.is_present(a.status)],
            recused_ids=quorum.recused_member_ids(recusals, agenda_item_id),
            rule=body.quorum_rule,
            quorum_number=body.quorum_number,
            agenda_item_id=agenda_item_id,
        )
