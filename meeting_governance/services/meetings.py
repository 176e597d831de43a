# meeting_governance/services/meetings.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from meeting_governance.core.clock import Clock, ensure_utc
from meeting_governance.core.config import get_settings
from meeting_governance.core.errors import AlreadyTerminalError, InvalidTransitionError, InputValidationError
from meeting_governance.core.logging import get_logger
from meeting_governance.models.meeting import Meeting, NoticeRecord
from meeting_governance.schemas.meeting import (
    MeetingCreate,
    MeetingRead,
    MeetingStatus,
    MeetingSummary,
    NoticePostedInput,
    NoticeRecordRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.base import GovernanceService, new_id
from meeting_governance.services.business_calendar import get_business_calendar
from meeting_governance.services.locks import MeetingLockRegistry
from meeting_governance.services.meeting_lifecycle import MeetingTransition, is_terminal, next_status
from meeting_governance.services.notice_compliance import NoticeComplianceCalculator, derive_compliance

logger = get_logger(__name__).bind(component="meetings")


def to_meeting_read(meeting: Meeting) -> MeetingRead:
    """
    Project a Meeting row into the API aggregate, deriving compliance from
    its latest notice record.
    """
    notices = [NoticeRecordRead.model_validate(n) for n in meeting.notices]
    data = {column.key: getattr(meeting, column.key) for column in Meeting.__table__.columns}
    data["jurisdiction_notes"] = meeting.jurisdiction_notes or {}
    data["notices"] = notices
    data["compliance"] = derive_compliance(notices)
    return MeetingRead.model_validate(data)


class MeetingService(GovernanceService):
    """
    Scheduling, notice posting and the lifecycle of meetings.

    Every mutating call runs under the meeting lock and returns the full
    MeetingRead aggregate.
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock | None = None,
        locks: MeetingLockRegistry | None = None,
        calculator: NoticeComplianceCalculator | None = None,
    ):
        super().__init__(db, clock=clock, locks=locks)
        if calculator is None:
            calculator = NoticeComplianceCalculator(
                get_business_calendar(),
                default_lead_time_hours=get_settings().NOTICE_LEAD_TIME_HOURS,
            )
        self.calculator = calculator

    # ------------------------------------------------------------------
    # Scheduling & reads
    # ------------------------------------------------------------------
    async def schedule_meeting(self, ctx: TenantContext, payload: MeetingCreate) -> MeetingRead:
        body = await self._require_body(ctx, payload.body_id)

        scheduled_start = ensure_utc(payload.scheduled_start)
        scheduled_end = ensure_utc(payload.scheduled_end) if payload.scheduled_end else None
        if scheduled_end is not None and scheduled_end < scheduled_start:
            raise InputValidationError(
                "scheduled_end must not be before scheduled_start.",
                {"scheduled_start": scheduled_start.isoformat(), "scheduled_end": scheduled_end.isoformat()},
            )

        now = self.now()
        meeting = Meeting(
            id=new_id(),
            tenant_id=ctx.tenant_id,
            body_id=body.id,
            meeting_type=payload.meeting_type.value,
            status=MeetingStatus.PLANNED.value,
            scheduled_start=scheduled_start,
            scheduled_end=scheduled_end,
            location=payload.location,
            notice_lead_time_hours=payload.notice_lead_time_hours,
            jurisdiction_notes=dict(payload.jurisdiction_notes),
            created_by=ctx.user_id,
            created_at=now,
            updated_at=now,
            notices=[],
        )
        self.repo.save(meeting)
        await self.repo.commit()

        logger.info(
            "meeting_scheduled",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting.id,
            body_id=body.id,
            meeting_type=meeting.meeting_type,
            scheduled_start=scheduled_start.isoformat(),
        )
        return to_meeting_read(meeting)

    async def get_meeting(self, ctx: TenantContext, meeting_id: str) -> MeetingRead:
        meeting = await self._require_meeting(ctx, meeting_id)
        return to_meeting_read(meeting)

    async def list_meetings(
        self,
        ctx: TenantContext,
        body_id: str | None = None,
        status: MeetingStatus | None = None,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
    ) -> list[MeetingSummary]:
        meetings = await self.repo.list_meetings(
            ctx.tenant_id,
            body_id=body_id,
            status=status.value if status is not None else None,
            start_from=ensure_utc(start_from) if start_from else None,
            start_to=ensure_utc(start_to) if start_to else None,
        )
        return [MeetingSummary.model_validate(m) for m in meetings]

    # ------------------------------------------------------------------
    # Notice
    # ------------------------------------------------------------------
    async def _resolve_lead_time(self, ctx: TenantContext, meeting: Meeting) -> int | None:
        # meeting override > governing body override > calculator default
        if meeting.notice_lead_time_hours is not None:
            return meeting.notice_lead_time_hours
        body = await self._require_body(ctx, meeting.body_id)
        return body.notice_lead_time_hours

    async def mark_notice_posted(
        self,
        ctx: TenantContext,
        meeting_id: str,
        payload: NoticePostedInput,
    ) -> MeetingRead:
        """
        Append a NoticeRecord evaluated against the lead time in force now.

        A planned meeting becomes noticed; any other open status is kept.
        Earlier notice records are never re-evaluated.
        """
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            if is_terminal(meeting.status):
                raise AlreadyTerminalError(
                    f"Cannot post notice for a meeting that is {meeting.status}.",
                    {"meeting_id": meeting.id, "status": meeting.status},
                )

            now = self.now()
            posted_at = ensure_utc(payload.posted_at) if payload.posted_at else now
            lead_time = await self._resolve_lead_time(ctx, meeting)
            evaluation = self.calculator.evaluate(
                meeting.meeting_type,
                meeting.scheduled_start,
                posted_at,
                lead_time_hours=lead_time,
            )

            record = NoticeRecord(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                sequence=len(meeting.notices) + 1,
                posted_at=posted_at,
                posted_by=ctx.user_id,
                methods=[m.value for m in payload.methods],
                locations=list(payload.locations),
                proof_refs=list(payload.proof_refs),
                notes=payload.notes,
                required_lead_time_hours=evaluation.required_lead_time_hours,
                required_posted_by=evaluation.required_posted_by,
                business_hours_lead=evaluation.business_hours_lead,
                is_timely=evaluation.is_timely,
                explanation=evaluation.explanation,
                recorded_at=now,
            )
            meeting.notices.append(record)
            self.repo.save(record)

            if meeting.status == MeetingStatus.PLANNED.value:
                meeting.status = MeetingStatus.NOTICED.value
            meeting.updated_at = now
            await self.repo.commit()

        logger.info(
            "meeting_notice_posted",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting.id,
            sequence=record.sequence,
            is_timely=record.is_timely,
            status=meeting.status,
        )
        return to_meeting_read(meeting)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def _transition(
        self,
        ctx: TenantContext,
        meeting_id: str,
        transition: MeetingTransition,
    ) -> MeetingRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            target = next_status(meeting.status, transition)

            now = self.now()
            if transition == MeetingTransition.START and meeting.actual_start is None:
                meeting.actual_start = now
            if target == MeetingStatus.ADJOURNED:
                meeting.actual_end = now

            previous = meeting.status
            meeting.status = target.value
            meeting.updated_at = now
            await self.repo.commit()

        logger.info(
            "meeting_status_changed",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting.id,
            transition=transition.value,
            from_status=previous,
            status=meeting.status,
        )
        return to_meeting_read(meeting)

    async def start_meeting(self, ctx: TenantContext, meeting_id: str) -> MeetingRead:
        return await self._transition(ctx, meeting_id, MeetingTransition.START)

    async def recess_meeting(self, ctx: TenantContext, meeting_id: str) -> MeetingRead:
        return await self._transition(ctx, meeting_id, MeetingTransition.RECESS)

    async def resume_meeting(self, ctx: TenantContext, meeting_id: str) -> MeetingRead:
        return await self._transition(ctx, meeting_id, MeetingTransition.RESUME)

    async def adjourn_meeting(self, ctx: TenantContext, meeting_id: str) -> MeetingRead:
        return await self._transition(ctx, meeting_id, MeetingTransition.ADJOURN)

    async def cancel_meeting(
        self,
        ctx: TenantContext,
        meeting_id: str,
        reason: str | None = None,
    ) -> MeetingRead:
        """
        Cancel a meeting that has not concluded.

        Cancelling an already cancelled meeting returns it unchanged, audit
        fields included. A completed (adjourned) meeting cannot be cancelled.
        """
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)

            if meeting.status == MeetingStatus.CANCELLED.value:
                return to_meeting_read(meeting)
            if meeting.status == MeetingStatus.ADJOURNED.value:
                raise InvalidTransitionError(
                    "cannot cancel a completed meeting",
                    {"meeting_id": meeting.id, "status": meeting.status},
                )

            target = next_status(meeting.status, MeetingTransition.CANCEL)
            now = self.now()
            meeting.status = target.value
            meeting.cancelled_at = now
            meeting.cancelled_by = ctx.user_id
            meeting.cancellation_reason = reason
            meeting.updated_at = now
            await self.repo.commit()

        logger.info(
            "meeting_cancelled",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting.id,
            reason=reason,
        )
        return to_meeting_read(meeting)
