# meeting_governance/services/actions.py
from __future__ import annotations

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
    RecusedMemberError,
    VoteBlockedError,
)
from meeting_governance.core.logging import get_logger
from meeting_governance.models.action import MeetingAction, VoteRecord
from meeting_governance.models.meeting import Meeting
from meeting_governance.schemas.action import (
    ActionCreate,
    ActionResult,
    MeetingActionRead,
    VoteCast,
    VoteRead,
    VoteTally,
)
from meeting_governance.schemas.governing_body import PassThreshold
from meeting_governance.schemas.meeting import MeetingStatus
from meeting_governance.schemas.participation import QuorumResult
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services import quorum
from meeting_governance.services.base import GovernanceService, new_id
from meeting_governance.services.executive_sessions import EXECUTIVE_SESSION_CITATION, any_active

logger = get_logger(__name__).bind(component="actions")


def to_action_read(action: MeetingAction, tally: VoteTally, quorum_result: QuorumResult) -> MeetingActionRead:
    data = {column.key: getattr(action, column.key) for column in MeetingAction.__table__.columns}
    data["votes"] = [VoteRead.model_validate(v) for v in action.votes]
    data["tally"] = tally
    data["quorum"] = quorum_result
    return MeetingActionRead.model_validate(data)


class ActionService(GovernanceService):
    """
    Motions and roll-call votes.

    Rules
    -----
    1) Only members on the roster may move, second or vote.
    2) Nothing happens to an action of a cancelled meeting.
    3) A motion is voted on and closed only after it has been seconded.
    4) No vote is recorded and no vote is closed while an executive session
       of the meeting is active.
    5) A member recused for the action's scope (meeting-wide, or the
       action's agenda item) cannot vote.
    6) Voting closes only with a quorum present for the action's scope.
    7) Adopted, failed, tabled and withdrawn actions are closed for good.
    """

    async def _require_action(self, ctx: TenantContext, action_id: str) -> MeetingAction:
        action = await self.repo.get_action(ctx.tenant_id, action_id)
        if action is None:
            raise NotFoundError("MeetingAction", action_id)
        return action

    @staticmethod
    def _ensure_pending(action: MeetingAction) -> None:
        if action.result != ActionResult.PENDING.value:
            raise AlreadyTerminalError(
                f"Action is already {action.result}.",
                {"action_id": action.id, "result": action.result},
            )

    @staticmethod
    def _ensure_not_cancelled(meeting: Meeting) -> None:
        if meeting.status == MeetingStatus.CANCELLED.value:
            raise AlreadyTerminalError(
                "Meeting is cancelled; its actions can no longer change.",
                {"meeting_id": meeting.id, "status": meeting.status},
            )

    @staticmethod
    def _ensure_seconded(action: MeetingAction) -> None:
        if action.seconded_by is None:
            raise InvalidTransitionError(
                "Action has not been seconded.",
                {"action_id": action.id},
            )

    async def _ensure_no_active_session(self, ctx: TenantContext, meeting_id: str) -> None:
        sessions = await self.repo.list_executive_sessions(ctx.tenant_id, meeting_id)
        if any_active(sessions):
            raise VoteBlockedError(
                "Voting is not permitted while an executive session is active "
                f"({EXECUTIVE_SESSION_CITATION}).",
                {"meeting_id": meeting_id},
            )

    async def _load_pending(self, ctx: TenantContext, action_id: str) -> tuple[MeetingAction, Meeting]:
        """
        Reload the action and its meeting under the lock and check that the
        action can still change.
        """
        action = await self._require_action(ctx, action_id)
        self._ensure_pending(action)
        meeting = await self._require_meeting(ctx, action.meeting_id)
        self._ensure_not_cancelled(meeting)
        return action, meeting

    async def _evaluate(
        self,
        ctx: TenantContext,
        action: MeetingAction,
        meeting: Meeting,
    ) -> tuple[VoteTally, QuorumResult]:
        body, roster = await self._roster(ctx, meeting)
        recusals = await self.repo.list_recusals(ctx.tenant_id, meeting.id)
        attendance = await self.repo.list_attendance(ctx.tenant_id, meeting.id)
        recused = quorum.recused_member_ids(recusals, action.agenda_item_id)

        tally = quorum.tally_votes(
            action.votes,
            recused,
            body.pass_threshold or PassThreshold.SIMPLE_MAJORITY,
        )
        quorum_result = quorum.calculate_quorum(
            roster_ids=[m.id for m in roster],
            present_ids=[a.member_id for a in attendance if quorum.is_present(a.status)],
            recused_ids=recused,
            rule=body.quorum_rule,
            quorum_number=body.quorum_number,
            agenda_item_id=action.agenda_item_id,
        )
        return tally, quorum_result

    async def _build_read(
        self,
        ctx: TenantContext,
        action: MeetingAction,
        meeting: Meeting | None = None,
    ) -> MeetingActionRead:
        if meeting is None:
            meeting = await self._require_meeting(ctx, action.meeting_id)
        tally, quorum_result = await self._evaluate(ctx, action, meeting)
        return to_action_read(action, tally, quorum_result)

    # ------------------------------------------------------------------
    # Create & read
    # ------------------------------------------------------------------
    async def create_action(
        self,
        ctx: TenantContext,
        meeting_id: str,
        payload: ActionCreate,
    ) -> MeetingActionRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            if meeting.status == MeetingStatus.CANCELLED.value:
                raise AlreadyTerminalError(
                    "Cannot put an action before a cancelled meeting.",
                    {"meeting_id": meeting.id},
                )
            await self._check_agenda_item(ctx, meeting, payload.agenda_item_id)
            _, roster = await self._roster(ctx, meeting)
            if payload.moved_by not in {m.id for m in roster}:
                raise InputValidationError(
                    "Mover is not an active voting member of this governing body.",
                    {"member_id": payload.moved_by},
                )

            now = self.now()
            action = MeetingAction(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                agenda_item_id=payload.agenda_item_id,
                action_type=payload.action_type.value,
                title=payload.title,
                description=payload.description,
                moved_by=payload.moved_by,
                moved_at=now,
                result=ActionResult.PENDING.value,
                created_by=ctx.user_id,
                created_at=now,
                updated_at=now,
                votes=[],
            )
            self.repo.save(action)
            await self.repo.commit()
            read = await self._build_read(ctx, action, meeting)

        logger.info(
            "action_created",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting_id,
            action_id=action.id,
            action_type=action.action_type,
        )
        return read

    async def get_action(self, ctx: TenantContext, action_id: str) -> MeetingActionRead:
        action = await self._require_action(ctx, action_id)
        return await self._build_read(ctx, action)

    async def list_actions(self, ctx: TenantContext, meeting_id: str) -> list[MeetingActionRead]:
        meeting = await self._require_meeting(ctx, meeting_id)
        actions = await self.repo.list_actions(ctx.tenant_id, meeting_id)
        return [await self._build_read(ctx, action, meeting) for action in actions]

    # ------------------------------------------------------------------
    # Second & vote
    # ------------------------------------------------------------------
    async def second_action(self, ctx: TenantContext, action_id: str, seconded_by: str) -> MeetingActionRead:
        located = await self._require_action(ctx, action_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            action, meeting = await self._load_pending(ctx, action_id)
            if action.seconded_by is not None:
                raise InvalidTransitionError(
                    "Action has already been seconded.",
                    {"action_id": action.id, "seconded_by": action.seconded_by},
                )
            if seconded_by == action.moved_by:
                raise InputValidationError(
                    "The mover cannot second their own motion.",
                    {"action_id": action.id, "member_id": seconded_by},
                )

            _, roster = await self._roster(ctx, meeting)
            if seconded_by not in {m.id for m in roster}:
                raise InputValidationError(
                    "Seconder is not an active voting member of this governing body.",
                    {"member_id": seconded_by},
                )

            now = self.now()
            action.seconded_by = seconded_by
            action.seconded_at = now
            action.updated_at = now
            await self.repo.commit()
            read = await self._build_read(ctx, action, meeting)

        logger.info("action_seconded", tenant_id=ctx.tenant_id, action_id=action.id, seconded_by=seconded_by)
        return read

    async def record_vote(self, ctx: TenantContext, action_id: str, payload: VoteCast) -> MeetingActionRead:
        """
        Record or change one member's vote.

        Checks run in order: action still pending, meeting not cancelled,
        motion seconded, no active executive session, member not recused,
        member on the roster.
        """
        located = await self._require_action(ctx, action_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            action, meeting = await self._load_pending(ctx, action_id)
            self._ensure_seconded(action)
            await self._ensure_no_active_session(ctx, action.meeting_id)

            recusals = await self.repo.list_recusals(ctx.tenant_id, meeting.id)
            if payload.member_id in quorum.recused_member_ids(recusals, action.agenda_item_id):
                raise RecusedMemberError(
                    "Member is recused and cannot vote on this action.",
                    {
                        "action_id": action.id,
                        "member_id": payload.member_id,
                        "agenda_item_id": action.agenda_item_id,
                    },
                )

            _, roster = await self._roster(ctx, meeting)
            if payload.member_id not in {m.id for m in roster}:
                raise InputValidationError(
                    "Voter is not an active voting member of this governing body.",
                    {"member_id": payload.member_id},
                )

            now = self.now()
            existing = next((v for v in action.votes if v.member_id == payload.member_id), None)
            if existing is None:
                vote = VoteRecord(
                    id=new_id(),
                    tenant_id=ctx.tenant_id,
                    action_id=action.id,
                    member_id=payload.member_id,
                    value=payload.value.value,
                    voted_at=now,
                )
                action.votes.append(vote)
                self.repo.save(vote)
            else:
                existing.value = payload.value.value
                existing.voted_at = now
            action.updated_at = now
            await self.repo.commit()
            read = await self._build_read(ctx, action, meeting)

        logger.info(
            "vote_recorded",
            tenant_id=ctx.tenant_id,
            action_id=action.id,
            member_id=payload.member_id,
            value=payload.value.value,
        )
        return read

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    async def close_voting(self, ctx: TenantContext, action_id: str) -> MeetingActionRead:
        """
        Tally the votes with the body's pass threshold and mark the action
        adopted or failed. Refused without a quorum for the action's scope.
        """
        located = await self._require_action(ctx, action_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            action, meeting = await self._load_pending(ctx, action_id)
            self._ensure_seconded(action)
            await self._ensure_no_active_session(ctx, action.meeting_id)

            tally, quorum_result = await self._evaluate(ctx, action, meeting)
            if not quorum_result.has_quorum:
                raise InvalidTransitionError(
                    "Voting cannot be closed without a quorum present.",
                    {
                        "action_id": action.id,
                        "agenda_item_id": action.agenda_item_id,
                        "present_count": quorum_result.present_count,
                        "required_count": quorum_result.required_count,
                    },
                )

            now = self.now()
            action.result = (ActionResult.ADOPTED if tally.passed else ActionResult.FAILED).value
            action.closed_at = now
            action.closed_by = ctx.user_id
            action.updated_at = now
            await self.repo.commit()

        logger.info(
            "action_voting_closed",
            tenant_id=ctx.tenant_id,
            action_id=action.id,
            result=action.result,
            yea=tally.yea,
            nay=tally.nay,
            present=quorum_result.present_count,
        )
        return to_action_read(action, tally, quorum_result)

    async def _resolve_without_vote(
        self,
        ctx: TenantContext,
        action_id: str,
        result: ActionResult,
    ) -> MeetingActionRead:
        located = await self._require_action(ctx, action_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            action, meeting = await self._load_pending(ctx, action_id)

            now = self.now()
            action.result = result.value
            action.closed_at = now
            action.closed_by = ctx.user_id
            action.updated_at = now
            await self.repo.commit()
            read = await self._build_read(ctx, action, meeting)

        logger.info("action_resolved", tenant_id=ctx.tenant_id, action_id=action.id, result=action.result)
        return read

    async def table_action(self, ctx: TenantContext, action_id: str) -> MeetingActionRead:
        return await self._resolve_without_vote(ctx, action_id, ActionResult.TABLED)

    async def withdraw_action(self, ctx: TenantContext, action_id: str) -> MeetingActionRead:
        return await self._resolve_without_vote(ctx, action_id, ActionResult.WITHDRAWN)
