# tests/test_agenda_service.py
import pytest

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from meeting_governance.db.session import AsyncSessionLocal
from meeting_governance.schemas.agenda import (
    AgendaCreate,
    AgendaItemCreate,
    AgendaItemStatus,
    AgendaItemStatusChange,
    AgendaItemType,
    AgendaItemUpdate,
    AgendaStatus,
)
from meeting_governance.schemas.participation import RecusalCreate
from meeting_governance.services.agendas import (
    AgendaService,
    check_agenda_transition,
    check_item_transition,
)
from meeting_governance.services.meetings import MeetingService
from meeting_governance.services.participation import ParticipationService


@pytest.mark.parametrize(
    "current,target",
    [
        (AgendaStatus.DRAFT, AgendaStatus.PENDING_APPROVAL),
        (AgendaStatus.DRAFT, AgendaStatus.PUBLISHED),
        (AgendaStatus.PENDING_APPROVAL, AgendaStatus.DRAFT),
        (AgendaStatus.APPROVED, AgendaStatus.DRAFT),
        (AgendaStatus.PUBLISHED, AgendaStatus.AMENDED),
    ],
)
def test_allowed_agenda_transitions(current, target):
    assert check_agenda_transition(current, target) == target


def test_agenda_transition_errors():
    with pytest.raises(InvalidTransitionError) as exc:
        check_agenda_transition("published", AgendaStatus.DRAFT)
    assert exc.value.context["allowed"] == ["amended"]

    with pytest.raises(AlreadyTerminalError):
        check_agenda_transition("amended", AgendaStatus.PUBLISHED)


def test_item_transitions():
    assert check_item_transition("tabled", AgendaItemStatus.PENDING) == AgendaItemStatus.PENDING

    with pytest.raises(InvalidTransitionError):
        check_item_transition("pending", AgendaItemStatus.ACTED_UPON)
    with pytest.raises(AlreadyTerminalError):
        check_item_transition("withdrawn", AgendaItemStatus.PENDING)


async def _agenda(db, ctx, fixed_clock, seed_body, seed_meeting, *titles):
    body = await seed_body(db, ctx)
    meeting = await seed_meeting(db, ctx, body.id)
    service = AgendaService(db, clock=fixed_clock)
    agenda = await service.create_agenda(ctx, meeting.id, AgendaCreate(title="Regular Meeting Agenda"))
    for title in titles:
        agenda = await service.add_item(ctx, agenda.id, AgendaItemCreate(title=title))
    return body, meeting, service, agenda


@pytest.mark.asyncio
async def test_publication_workflow_stamps_audit(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        _, meeting, service, agenda = await _agenda(db, ctx, fixed_clock, seed_body, seed_meeting, "Call to order")

        agenda = await service.submit_for_approval(ctx, agenda.id)
        agenda = await service.approve(ctx, agenda.id)
        assert agenda.approved_by == ctx.user_id

        agenda = await service.return_to_draft(ctx, agenda.id)
        assert agenda.status == AgendaStatus.DRAFT
        assert agenda.approved_at is None

        agenda = await service.publish(ctx, agenda.id)
        assert agenda.published_at is not None

        with pytest.raises(InvalidTransitionError):
            await service.add_item(ctx, agenda.id, AgendaItemCreate(title="Late addition"))

        agenda = await service.amend(ctx, agenda.id)
        assert agenda.status == AgendaStatus.AMENDED
        assert agenda.amended_by == ctx.user_id

        with pytest.raises(AlreadyTerminalError):
            await service.add_item(ctx, agenda.id, AgendaItemCreate(title="Late addition"))
        with pytest.raises(AlreadyTerminalError):
            await service.publish(ctx, agenda.id)

        fetched = await service.get_agenda(ctx, meeting.id)

    assert fetched.id == agenda.id
    assert [i.title for i in fetched.items] == ["Call to order"]


@pytest.mark.asyncio
async def test_one_agenda_per_meeting_and_not_for_cancelled(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body, meeting, service, _ = await _agenda(db, ctx, fixed_clock, seed_body, seed_meeting)

        with pytest.raises(InputValidationError):
            await service.create_agenda(ctx, meeting.id, AgendaCreate())

        cancelled = await seed_meeting(db, ctx, body.id)
        await MeetingService(db, clock=fixed_clock).cancel_meeting(ctx, cancelled.id)
        with pytest.raises(AlreadyTerminalError):
            await service.create_agenda(ctx, cancelled.id, AgendaCreate())
        with pytest.raises(NotFoundError):
            await service.get_agenda(ctx, cancelled.id)


@pytest.mark.asyncio
async def test_items_insert_edit_and_reorder(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        _, _, service, agenda = await _agenda(
            db, ctx, fixed_clock, seed_body, seed_meeting, "Call to order", "Adjournment"
        )

        agenda = await service.add_item(
            ctx,
            agenda.id,
            AgendaItemCreate(title="Budget hearing", item_type=AgendaItemType.PUBLIC_HEARING, order_index=1),
        )
        assert [i.title for i in agenda.items] == ["Call to order", "Budget hearing", "Adjournment"]
        assert [i.order_index for i in agenda.items] == [0, 1, 2]

        hearing = agenda.items[1]
        updated = await service.update_item(
            ctx,
            hearing.id,
            AgendaItemUpdate(requires_public_hearing=True, presenter_name="Clerk-Treasurer"),
        )
        assert updated.requires_public_hearing is True
        assert updated.title == "Budget hearing"
        assert updated.item_type == AgendaItemType.PUBLIC_HEARING

        ids = [i.id for i in agenda.items]
        agenda = await service.reorder_items(ctx, agenda.id, [ids[2], ids[0], ids[1]])
        assert [i.title for i in agenda.items] == ["Adjournment", "Call to order", "Budget hearing"]

        with pytest.raises(InputValidationError):
            await service.reorder_items(ctx, agenda.id, ids[:2])
        with pytest.raises(InputValidationError):
            await service.reorder_items(ctx, agenda.id, [ids[0], ids[0], ids[1]])


@pytest.mark.asyncio
async def test_referenced_item_cannot_be_removed(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        body, meeting, service, agenda = await _agenda(
            db, ctx, fixed_clock, seed_body, seed_meeting, "Rezoning", "Road salt"
        )
        rezoning, salt = agenda.items

        await ParticipationService(db, clock=fixed_clock).record_recusal(
            ctx,
            meeting.id,
            RecusalCreate(member_id=body.members[0].id, reason="Owns parcel", agenda_item_id=rezoning.id),
        )

        with pytest.raises(InvalidTransitionError):
            await service.remove_item(ctx, rezoning.id)

        agenda = await service.remove_item(ctx, salt.id)

    assert [(i.id, i.order_index) for i in agenda.items] == [(rezoning.id, 0)]


@pytest.mark.asyncio
async def test_item_status_follows_the_meeting(ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        _, meeting, service, agenda = await _agenda(db, ctx, fixed_clock, seed_body, seed_meeting, "Park plan")
        agenda = await service.publish(ctx, agenda.id)
        item_id = agenda.items[0].id

        item = await service.set_item_status(ctx, item_id, AgendaItemStatusChange(status=AgendaItemStatus.IN_PROGRESS))
        item = await service.set_item_status(
            ctx,
            item_id,
            AgendaItemStatusChange(status=AgendaItemStatus.DISCUSSED, discussion_notes="Residents spoke in favor."),
        )
        assert item.discussion_notes == "Residents spoke in favor."

        item = await service.set_item_status(ctx, item_id, AgendaItemStatusChange(status=AgendaItemStatus.ACTED_UPON))
        assert item.status == AgendaItemStatus.ACTED_UPON

        with pytest.raises(AlreadyTerminalError):
            await service.set_item_status(ctx, item_id, AgendaItemStatusChange(status=AgendaItemStatus.TABLED))

        with pytest.raises(NotFoundError):
            await service.set_item_status(ctx, "missing", AgendaItemStatusChange(status=AgendaItemStatus.TABLED))


@pytest.mark.asyncio
async def test_agendas_are_tenant_scoped(ctx, other_ctx, fixed_clock, seed_body, seed_meeting):
    async with AsyncSessionLocal() as db:
        _, meeting, service, agenda = await _agenda(db, ctx, fixed_clock, seed_body, seed_meeting, "Call to order")

        with pytest.raises(NotFoundError):
            await service.publish(other_ctx, agenda.id)
        with pytest.raises(NotFoundError):
            await service.remove_item(other_ctx, agenda.items[0].id)
        with pytest.raises(NotFoundError):
            await service.get_agenda(other_ctx, meeting.id)
