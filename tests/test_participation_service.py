# tests/test_participation_service.py
import pytest

from meeting_governance.core.errors import InputValidationError, NotFoundError
from meeting_governance.db.session import AsyncSessionLocal
from meeting_governance.schemas.agenda import AgendaCreate, AgendaItemCreate
from meeting_governance.schemas.governing_body import GoverningBodyMemberCreate
from meeting_governance.schemas.participation import AttendanceStatus, AttendanceUpsert, RecusalCreate
from meeting_governance.services.agendas import AgendaService
from meeting_governance.services.governing_bodies import GoverningBodyService
from meeting_governance.services.participation import ParticipationService


@pytest.mark.asyncio
async def test_quorum_with_meeting_wide_recusals(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body = await seed_body(db, ctx, members=5)
        meeting = await seed_meeting(db, ctx, body.id)
        members = [m.id for m in body.members]
        service = ParticipationService(db, clock=fixed_clock)

        for member in members[3:]:
            await service.record_recusal(ctx, meeting.id, RecusalCreate(member_id=member, reason="Conflict"))
        for member in members[:2]:
            await service.record_attendance(ctx, meeting.id, AttendanceUpsert(member_id=member))

        result = await service.calculate_quorum(ctx, meeting.id)

    assert result.roster_count == 5
    assert result.eligible_count == 3
    assert result.required_count == 2
    assert result.present_count == 2
    assert result.has_quorum is True


@pytest.mark.asyncio
async def test_item_recusal_only_changes_item_quorum(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body = await seed_body(db, ctx, members=5)
        meeting = await seed_meeting(db, ctx, body.id)
        members = [m.id for m in body.members]
        agendas = AgendaService(db, clock=fixed_clock)
        agenda = await agendas.create_agenda(ctx, meeting.id, AgendaCreate())
        agenda = await agendas.add_item(ctx, agenda.id, AgendaItemCreate(title="Variance request"))
        item_id = agenda.items[0].id
        service = ParticipationService(db, clock=fixed_clock)

        await service.record_recusal(
            ctx, meeting.id, RecusalCreate(member_id=members[0], reason="Applicant is a relative", agenda_item_id=item_id)
        )
        for member in members[:3]:
            await service.record_attendance(ctx, meeting.id, AttendanceUpsert(member_id=member))

        overall = await service.calculate_quorum(ctx, meeting.id)
        item = await service.calculate_quorum(ctx, meeting.id, agenda_item_id=item_id)

    assert (overall.present_count, overall.required_count, overall.has_quorum) == (3, 3, True)
    assert (item.eligible_count, item.present_count, item.required_count, item.has_quorum) == (4, 2, 3, False)
    assert item.agenda_item_id == item_id


@pytest.mark.asyncio
async def test_attendance_upsert_and_departure(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body = await seed_body(db, ctx, members=3)
        meeting = await seed_meeting(db, ctx, body.id)
        member = body.members[0].id
        service = ParticipationService(db, clock=fixed_clock)

        first = await service.record_attendance(
            ctx, meeting.id, AttendanceUpsert(member_id=member, status=AttendanceStatus.LATE)
        )
        second = await service.record_attendance(ctx, meeting.id, AttendanceUpsert(member_id=member))
        assert second.id == first.id
        assert second.status == AttendanceStatus.PRESENT

        departed = await service.mark_departed(ctx, meeting.id, member)
        assert departed.status == AttendanceStatus.LEFT_EARLY
        assert departed.departed_at is not None

        records = await service.list_attendance(ctx, meeting.id)
        assert len(records) == 1

        result = await service.calculate_quorum(ctx, meeting.id)
        assert result.present_count == 0

        with pytest.raises(NotFoundError):
            await service.mark_departed(ctx, meeting.id, body.members[1].id)


@pytest.mark.asyncio
async def test_non_voting_and_unknown_members_are_not_on_roster(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body = await seed_body(db, ctx, members=3)
        body = await GoverningBodyService(db, clock=fixed_clock).add_member(
            ctx, body.id, GoverningBodyMemberCreate(display_name="Clerk", is_voting=False)
        )
        clerk = next(m.id for m in body.members if not m.is_voting)
        meeting = await seed_meeting(db, ctx, body.id)
        service = ParticipationService(db, clock=fixed_clock)

        with pytest.raises(InputValidationError):
            await service.record_recusal(ctx, meeting.id, RecusalCreate(member_id=clerk, reason="n/a"))
        with pytest.raises(InputValidationError):
            await service.record_attendance(ctx, meeting.id, AttendanceUpsert(member_id="nobody"))

        result = await service.calculate_quorum(ctx, meeting.id)
        assert result.roster_count == 3


@pytest.mark.asyncio
async def test_recusal_for_unknown_agenda_item_is_rejected(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body = await seed_body(db, ctx, members=3)
        meeting = await seed_meeting(db, ctx, body.id)
        service = ParticipationService(db, clock=fixed_clock)

        with pytest.raises(InputValidationError) as exc:
            await service.record_recusal(
                ctx,
                meeting.id,
                RecusalCreate(member_id=body.members[0].id, reason="Conflict", agenda_item_id="item-3"),
            )
        assert exc.value.context["agenda_item_id"] == "item-3"

        recusals = await service.list_recusals(ctx, meeting.id)

    assert recusals == []
