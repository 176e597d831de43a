# tests/test_minutes_service.py
from datetime import timedelta

import pytest

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    UncertifiedExecutiveSessionError,
)
from meeting_governance.db.session import AsyncSessionLocal
from meeting_governance.schemas.executive_session import (
    ExecutiveSessionCreate,
    ExecutiveSessionEnd,
    ExecutiveSessionEnter,
)
from meeting_governance.schemas.meeting import NoticePostedInput
from meeting_governance.schemas.minutes import AmendmentType, MinutesAmend, MinutesStatus
from meeting_governance.services.executive_sessions import ExecutiveSessionService
from meeting_governance.services.meetings import MeetingService
from meeting_governance.services.minutes import MinutesService


async def _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting):
    body = await seed_body(db, ctx)
    meeting = await seed_meeting(db, ctx, body.id)
    await MeetingService(db, clock=fixed_clock).mark_notice_posted(
        ctx,
        meeting.id,
        NoticePostedInput(posted_at=meeting.scheduled_start - timedelta(days=5), methods=["website"]),
    )
    return meeting


@pytest.mark.asyncio
async def test_draft_submit_approve(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        service = MinutesService(db, clock=fixed_clock)

        minutes = await service.create(ctx, meeting.id, "Call to order at 7:00 PM.")
        assert minutes.status == MinutesStatus.DRAFT
        assert minutes.prepared_by == ctx.user_id

        minutes = await service.update(ctx, minutes.id, "Call to order at 7:02 PM.")
        minutes = await service.submit_for_approval(ctx, minutes.id)
        assert minutes.status == MinutesStatus.PENDING_APPROVAL

        with pytest.raises(InvalidTransitionError):
            await service.update(ctx, minutes.id, "Edited after submission")

        minutes = await service.approve(ctx, minutes.id)

    assert minutes.status == MinutesStatus.APPROVED
    assert minutes.body == "Call to order at 7:02 PM."
    assert minutes.approved_by == ctx.user_id
    assert minutes.approved_at is not None


@pytest.mark.asyncio
async def test_one_set_of_minutes_per_meeting(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        service = MinutesService(db, clock=fixed_clock)
        await service.create(ctx, meeting.id)

        with pytest.raises(InputValidationError):
            await service.create(ctx, meeting.id)


@pytest.mark.asyncio
async def test_return_to_draft_allows_corrections(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        service = MinutesService(db, clock=fixed_clock)

        minutes = await service.create(ctx, meeting.id, "First draft")
        await service.submit_for_approval(ctx, minutes.id)
        minutes = await service.return_to_draft(ctx, minutes.id)
        assert minutes.status == MinutesStatus.DRAFT
        assert minutes.submitted_at is None

        minutes = await service.update(ctx, minutes.id, "Corrected draft")
        assert minutes.body == "Corrected draft"

        with pytest.raises(InvalidTransitionError):
            await service.approve(ctx, minutes.id)


@pytest.mark.asyncio
async def test_approval_blocked_until_sessions_certified(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        await MeetingService(db, clock=fixed_clock).start_meeting(ctx, meeting.id)
        sessions = ExecutiveSessionService(db, clock=fixed_clock)
        service = MinutesService(db, clock=fixed_clock)

        ended = await sessions.create(ctx, meeting.id, ExecutiveSessionCreate(basis_code="PERSONNEL", subject="Review"))
        await sessions.enter(ctx, ended.id, ExecutiveSessionEnter(pre_certification_statement="Closing."))
        await sessions.end(ctx, ended.id, ExecutiveSessionEnd(post_certification_statement="Certified."))
        skipped = await sessions.create(ctx, meeting.id, ExecutiveSessionCreate(basis_code="SECURITY", subject="Plans"))

        minutes = await service.create(ctx, meeting.id, "Minutes")
        await service.submit_for_approval(ctx, minutes.id)

        with pytest.raises(UncertifiedExecutiveSessionError) as exc_info:
            await service.approve(ctx, minutes.id)
        assert set(exc_info.value.session_ids) == {ended.id, skipped.id}

        await sessions.certify(ctx, ended.id)
        await sessions.cancel(ctx, skipped.id)

        approved = await service.approve(ctx, minutes.id)

    assert approved.status == MinutesStatus.APPROVED


@pytest.mark.asyncio
async def test_approved_minutes_change_only_by_amendment(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        service = MinutesService(db, clock=fixed_clock)

        minutes = await service.create(ctx, meeting.id, "Minutes")
        await service.submit_for_approval(ctx, minutes.id)
        await service.approve(ctx, minutes.id)

        with pytest.raises(InvalidTransitionError) as exc:
            await service.update(ctx, minutes.id, "Rewrite history")
        assert not isinstance(exc.value, AlreadyTerminalError)
        with pytest.raises(InvalidTransitionError):
            await service.approve(ctx, minutes.id)


@pytest.mark.asyncio
async def test_amend_keeps_approved_text_and_is_final(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        meeting = await _noticed_meeting(db, ctx, fixed_clock, seed_body, seed_meeting)
        service = MinutesService(db, clock=fixed_clock)

        minutes = await service.create(ctx, meeting.id, "Motion carried 3-1.")
        with pytest.raises(InvalidTransitionError):
            await service.amend(
                ctx,
                minutes.id,
                MinutesAmend(amendment_type=AmendmentType.CORRECTION, body="x", reason="early"),
            )

        await service.submit_for_approval(ctx, minutes.id)
        await service.approve(ctx, minutes.id)

        amended = await service.amend(
            ctx,
            minutes.id,
            MinutesAmend(
                amendment_type=AmendmentType.CORRECTION,
                body="Motion carried 4-0.",
                reason="Vote count misrecorded.",
            ),
        )
        assert amended.status == MinutesStatus.AMENDED
        assert amended.body == "Motion carried 4-0."
        assert amended.approved_body == "Motion carried 3-1."
        assert amended.amendment_type == AmendmentType.CORRECTION
        assert amended.amended_by == ctx.user_id

        with pytest.raises(AlreadyTerminalError):
            await service.amend(
                ctx,
                minutes.id,
                MinutesAmend(amendment_type=AmendmentType.ADDITION, body="more", reason="again"),
            )
        with pytest.raises(AlreadyTerminalError):
            await service.update(ctx, minutes.id, "Rewrite history")
