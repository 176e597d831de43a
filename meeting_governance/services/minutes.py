# meeting_governance/services/minutes.py
from __future__ import annotations

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
    UncertifiedExecutiveSessionError,
)
from meeting_governance.core.logging import get_logger
from meeting_governance.models.minutes import Minutes
from meeting_governance.schemas.meeting import MeetingStatus
from meeting_governance.schemas.minutes import MinutesAmend, MinutesRead, MinutesStatus
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.base import GovernanceService, new_id
from meeting_governance.services.executive_sessions import uncertified

logger = get_logger(__name__).bind(component="minutes")


class MinutesService(GovernanceService):
    """
    Draft, review and approval of the written record of a meeting.

    draft -> pending_approval -> approved -> amended, with
    pending_approval -> draft allowed for corrections. Approved minutes
    change only by a single amendment, after which they are final. Approval is refused while any executive session
    of the meeting is not certified or cancelled.
    """

    async def _require_minutes(self, ctx: TenantContext, minutes_id: str) -> Minutes:
        minutes = await self.repo.get_minutes(ctx.tenant_id, minutes_id)
        if minutes is None:
            raise NotFoundError("Minutes", minutes_id)
        return minutes

    @staticmethod
    def _ensure_status(minutes: Minutes, required: MinutesStatus, action: str) -> None:
        if minutes.status == MinutesStatus.AMENDED.value:
            raise AlreadyTerminalError(
                f"Minutes are already amended; cannot {action}.",
                {"minutes_id": minutes.id},
            )
        if minutes.status == MinutesStatus.APPROVED.value and required != MinutesStatus.APPROVED:
            raise InvalidTransitionError(
                f"Minutes are approved and change only by amendment; cannot {action}.",
                {"minutes_id": minutes.id, "status": minutes.status},
            )
        if minutes.status != required.value:
            raise InvalidTransitionError(
                f"Cannot {action} minutes that are {minutes.status}.",
                {"minutes_id": minutes.id, "status": minutes.status, "required_status": required.value},
            )

    async def create(self, ctx: TenantContext, meeting_id: str, body: str = "") -> MinutesRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            if meeting.status == MeetingStatus.CANCELLED.value:
                raise AlreadyTerminalError(
                    "Cannot prepare minutes for a cancelled meeting.",
                    {"meeting_id": meeting.id},
                )
            if await self.repo.get_minutes_for_meeting(ctx.tenant_id, meeting.id) is not None:
                raise InputValidationError(
                    "Minutes already exist for this meeting.",
                    {"meeting_id": meeting.id},
                )

            now = self.now()
            minutes = Minutes(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                status=MinutesStatus.DRAFT.value,
                body=body,
                prepared_by=ctx.user_id,
                prepared_at=now,
                updated_at=now,
            )
            self.repo.save(minutes)
            await self.repo.commit()

        logger.info("minutes_created", tenant_id=ctx.tenant_id, meeting_id=meeting_id, minutes_id=minutes.id)
        return MinutesRead.model_validate(minutes)

    async def get(self, ctx: TenantContext, minutes_id: str) -> MinutesRead:
        return MinutesRead.model_validate(await self._require_minutes(ctx, minutes_id))

    async def get_for_meeting(self, ctx: TenantContext, meeting_id: str) -> MinutesRead:
        await self._require_meeting(ctx, meeting_id)
        minutes = await self.repo.get_minutes_for_meeting(ctx.tenant_id, meeting_id)
        if minutes is None:
            raise NotFoundError("Minutes", meeting_id)
        return MinutesRead.model_validate(minutes)

    async def update(self, ctx: TenantContext, minutes_id: str, body: str) -> MinutesRead:
        located = await self._require_minutes(ctx, minutes_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            minutes = await self._require_minutes(ctx, minutes_id)
            self._ensure_status(minutes, MinutesStatus.DRAFT, "edit")

            minutes.body = body
            minutes.updated_at = self.now()
            await self.repo.commit()

        logger.info("minutes_updated", tenant_id=ctx.tenant_id, minutes_id=minutes.id)
        return MinutesRead.model_validate(minutes)

    async def submit_for_approval(self, ctx: TenantContext, minutes_id: str) -> MinutesRead:
        located = await self._require_minutes(ctx, minutes_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            minutes = await self._require_minutes(ctx, minutes_id)
            self._ensure_status(minutes, MinutesStatus.DRAFT, "submit")

            now = self.now()
            minutes.status = MinutesStatus.PENDING_APPROVAL.value
            minutes.submitted_at = now
            minutes.updated_at = now
            await self.repo.commit()

        logger.info("minutes_submitted", tenant_id=ctx.tenant_id, minutes_id=minutes.id)
        return MinutesRead.model_validate(minutes)

    async def return_to_draft(self, ctx: TenantContext, minutes_id: str) -> MinutesRead:
        located = await self._require_minutes(ctx, minutes_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            minutes = await self._require_minutes(ctx, minutes_id)
            self._ensure_status(minutes, MinutesStatus.PENDING_APPROVAL, "return to draft")

            minutes.status = MinutesStatus.DRAFT.value
            minutes.submitted_at = None
            minutes.updated_at = self.now()
            await self.repo.commit()

        logger.info("minutes_returned_to_draft", tenant_id=ctx.tenant_id, minutes_id=minutes.id)
        return MinutesRead.model_validate(minutes)

    async def approve(self, ctx: TenantContext, minutes_id: str) -> MinutesRead:
        located = await self._require_minutes(ctx, minutes_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            minutes = await self._require_minutes(ctx, minutes_id)

            sessions = await self.repo.list_executive_sessions(ctx.tenant_id, minutes.meeting_id)
            blocking = uncertified(sessions)
            if blocking:
                raise UncertifiedExecutiveSessionError(minutes.meeting_id, blocking)

            self._ensure_status(minutes, MinutesStatus.PENDING_APPROVAL, "approve")

            now = self.now()
            minutes.status = MinutesStatus.APPROVED.value
            minutes.approved_at = now
            minutes.approved_by = ctx.user_id
            minutes.updated_at = now
            await self.repo.commit()

        logger.info("minutes_approved", tenant_id=ctx.tenant_id, minutes_id=minutes.id)
        return MinutesRead.model_validate(minutes)

    async def amend(self, ctx: TenantContext, minutes_id: str, payload: MinutesAmend) -> MinutesRead:
        located = await self._require_minutes(ctx, minutes_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            minutes = await self._require_minutes(ctx, minutes_id)
            self._ensure_status(minutes, MinutesStatus.APPROVED, "amend")

            now = self.now()
            minutes.approved_body = minutes.body
            minutes.body = payload.body
            minutes.amendment_type = payload.amendment_type.value
            minutes.amendment_reason = payload.reason
            minutes.status = MinutesStatus.AMENDED.value
            minutes.amended_at = now
            minutes.amended_by = ctx.user_id
            minutes.updated_at = now
            await self.repo.commit()

        logger.info(
            "minutes_amended",
            tenant_id=ctx.tenant_id,
            minutes_id=minutes.id,
            amendment_type=minutes.amendment_type,
        )
        return MinutesRead.model_validate(minutes)
