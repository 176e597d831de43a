# meeting_governance/services/agendas.py
from __future__ import annotations

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from meeting_governance.core.logging import get_logger
from meeting_governance.models.agenda import Agenda, AgendaItem
from meeting_governance.schemas.agenda import (
    AgendaCreate,
    AgendaItemCreate,
    AgendaItemRead,
    AgendaItemStatus,
    AgendaItemStatusChange,
    AgendaItemUpdate,
    AgendaRead,
    AgendaStatus,
)
from meeting_governance.schemas.meeting import MeetingStatus
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.base import GovernanceService, new_id
from meeting_governance.services.meeting_lifecycle import is_terminal

logger = get_logger(__name__).bind(component="agendas")

AGENDA_TRANSITIONS: dict[AgendaStatus, tuple[AgendaStatus, ...]] = {
    AgendaStatus.DRAFT: (AgendaStatus.PENDING_APPROVAL, AgendaStatus.PUBLISHED),
    AgendaStatus.PENDING_APPROVAL: (AgendaStatus.APPROVED, AgendaStatus.DRAFT),
    AgendaStatus.APPROVED: (AgendaStatus.PUBLISHED, AgendaStatus.DRAFT),
    AgendaStatus.PUBLISHED: (AgendaStatus.AMENDED,),
    AgendaStatus.AMENDED: (),
}

AGENDA_ITEM_TRANSITIONS: dict[AgendaItemStatus, tuple[AgendaItemStatus, ...]] = {
    AgendaItemStatus.PENDING: (
        AgendaItemStatus.IN_PROGRESS,
        AgendaItemStatus.TABLED,
        AgendaItemStatus.WITHDRAWN,
    ),
    AgendaItemStatus.IN_PROGRESS: (
        AgendaItemStatus.DISCUSSED,
        AgendaItemStatus.TABLED,
        AgendaItemStatus.ACTED_UPON,
    ),
    AgendaItemStatus.DISCUSSED: (AgendaItemStatus.ACTED_UPON, AgendaItemStatus.TABLED),
    AgendaItemStatus.TABLED: (AgendaItemStatus.PENDING, AgendaItemStatus.WITHDRAWN),
    AgendaItemStatus.WITHDRAWN: (),
    AgendaItemStatus.ACTED_UPON: (),
}


def check_agenda_transition(current: AgendaStatus | str, target: AgendaStatus) -> AgendaStatus:
    current = AgendaStatus(current)
    allowed = AGENDA_TRANSITIONS[current]
    if not allowed:
        raise AlreadyTerminalError(
            f"Agenda is already {current.value}; publish a new version instead.",
            {"status": current.value, "target": target.value},
        )
    if target not in allowed:
        raise InvalidTransitionError(
            f"Cannot move an agenda from {current.value} to {target.value}.",
            {"status": current.value, "target": target.value, "allowed": [s.value for s in allowed]},
        )
    return target


def check_item_transition(current: AgendaItemStatus | str, target: AgendaItemStatus) -> AgendaItemStatus:
    current = AgendaItemStatus(current)
    allowed = AGENDA_ITEM_TRANSITIONS[current]
    if not allowed:
        raise AlreadyTerminalError(
            f"Agenda item is already {current.value}.",
            {"status": current.value, "target": target.value},
        )
    if target not in allowed:
        raise InvalidTransitionError(
            f"Cannot move an agenda item from {current.value} to {target.value}.",
            {"status": current.value, "target": target.value, "allowed": [s.value for s in allowed]},
        )
    return target


def to_agenda_read(agenda: Agenda) -> AgendaRead:
    data = {column.key: getattr(agenda, column.key) for column in Agenda.__table__.columns}
    items = sorted(agenda.items, key=lambda i: i.order_index)
    data["items"] = [AgendaItemRead.model_validate(i) for i in items]
    return AgendaRead.model_validate(data)


def _renumber(items: list[AgendaItem]) -> None:
    for index, item in enumerate(items):
        item.order_index = index


class AgendaService(GovernanceService):
    """
    Agendas and their items.

    Agenda workflow
    ---------------
    draft -> pending_approval -> approved -> published -> amended, with
    direct publication from draft and a way back to draft from
    pending_approval and approved. Items are added, edited, removed and
    reordered only while the agenda is a draft.

    Item workflow
    -------------
    pending -> in_progress -> discussed -> acted_upon, with tabling and
    withdrawal along the way. Item status moves during the meeting and is
    allowed on any agenda that is not amended.
    """

    async def _require_agenda(self, ctx: TenantContext, agenda_id: str) -> Agenda:
        agenda = await self.repo.get_agenda(ctx.tenant_id, agenda_id)
        if agenda is None:
            raise NotFoundError("Agenda", agenda_id)
        return agenda

    async def _require_item(self, ctx: TenantContext, item_id: str) -> AgendaItem:
        item = await self.repo.get_agenda_item(ctx.tenant_id, item_id)
        if item is None:
            raise NotFoundError("AgendaItem", item_id)
        return item

    @staticmethod
    def _ensure_draft(agenda: Agenda) -> None:
        if agenda.status == AgendaStatus.AMENDED.value:
            raise AlreadyTerminalError(
                "Agenda has been amended; publish a new version instead.",
                {"agenda_id": agenda.id},
            )
        if agenda.status != AgendaStatus.DRAFT.value:
            raise InvalidTransitionError(
                f"Agenda items can only be changed while the agenda is a draft, not {agenda.status}.",
                {"agenda_id": agenda.id, "status": agenda.status},
            )

    # ------------------------------------------------------------------
    # Agenda
    # ------------------------------------------------------------------
    async def create_agenda(self, ctx: TenantContext, meeting_id: str, payload: AgendaCreate) -> AgendaRead:
        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            if is_terminal(meeting.status):
                raise AlreadyTerminalError(
                    f"Meeting is already {meeting.status}.",
                    {"meeting_id": meeting.id, "status": meeting.status},
                )
            if await self.repo.get_agenda_for_meeting(ctx.tenant_id, meeting.id) is not None:
                raise InputValidationError(
                    "An agenda already exists for this meeting.",
                    {"meeting_id": meeting.id},
                )

            now = self.now()
            agenda = Agenda(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                status=AgendaStatus.DRAFT.value,
                version=1,
                title=payload.title,
                preamble=payload.preamble,
                postamble=payload.postamble,
                created_by=ctx.user_id,
                created_at=now,
                updated_at=now,
                items=[],
            )
            self.repo.save(agenda)
            await self.repo.commit()

        logger.info("agenda_created", tenant_id=ctx.tenant_id, meeting_id=meeting_id, agenda_id=agenda.id)
        return to_agenda_read(agenda)

    async def get_agenda(self, ctx: TenantContext, meeting_id: str) -> AgendaRead:
        await self._require_meeting(ctx, meeting_id)
        agenda = await self.repo.get_agenda_for_meeting(ctx.tenant_id, meeting_id)
        if agenda is None:
            raise NotFoundError("Agenda", meeting_id)
        return to_agenda_read(agenda)

    async def _move(self, ctx: TenantContext, agenda_id: str, target: AgendaStatus) -> AgendaRead:
        located = await self._require_agenda(ctx, agenda_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            agenda = await self._require_agenda(ctx, agenda_id)
            check_agenda_transition(agenda.status, target)

            now = self.now()
            agenda.status = target.value
            if target == AgendaStatus.APPROVED:
                agenda.approved_at = now
                agenda.approved_by = ctx.user_id
            elif target == AgendaStatus.PUBLISHED:
                agenda.published_at = now
                agenda.published_by = ctx.user_id
            elif target == AgendaStatus.AMENDED:
                agenda.amended_at = now
                agenda.amended_by = ctx.user_id
            elif target == AgendaStatus.DRAFT:
                agenda.approved_at = None
                agenda.approved_by = None
            agenda.updated_at = now
            await self.repo.commit()

        logger.info(
            "agenda_status_changed",
            tenant_id=ctx.tenant_id,
            meeting_id=agenda.meeting_id,
            agenda_id=agenda.id,
            status=agenda.status,
        )
        return to_agenda_read(agenda)

    async def submit_for_approval(self, ctx: TenantContext, agenda_id: str) -> AgendaRead:
        return await self._move(ctx, agenda_id, AgendaStatus.PENDING_APPROVAL)

    async def return_to_draft(self, ctx: TenantContext, agenda_id: str) -> AgendaRead:
        return await self._move(ctx, agenda_id, AgendaStatus.DRAFT)

    async def approve(self, ctx: TenantContext, agenda_id: str) -> AgendaRead:
        return await self._move(ctx, agenda_id, AgendaStatus.APPROVED)

    async def publish(self, ctx: TenantContext, agenda_id: str) -> AgendaRead:
        return await self._move(ctx, agenda_id, AgendaStatus.PUBLISHED)

    async def amend(self, ctx: TenantContext, agenda_id: str) -> AgendaRead:
        return await self._move(ctx, agenda_id, AgendaStatus.AMENDED)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------
    async def add_item(self, ctx: TenantContext, agenda_id: str, payload: AgendaItemCreate) -> AgendaRead:
        located = await self._require_agenda(ctx, agenda_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            agenda = await self._require_agenda(ctx, agenda_id)
            self._ensure_draft(agenda)

            items = sorted(agenda.items, key=lambda i: i.order_index)
            position = len(items) if payload.order_index is None else min(payload.order_index, len(items))
            item = AgendaItem(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                agenda_id=agenda.id,
                meeting_id=agenda.meeting_id,
                order_index=position,
                title=payload.title,
                description=payload.description,
                item_type=payload.item_type.value,
                status=AgendaItemStatus.PENDING.value,
                duration_minutes=payload.duration_minutes,
                requires_vote=payload.requires_vote,
                requires_public_hearing=payload.requires_public_hearing,
                presenter_name=payload.presenter_name,
            )
            items.insert(position, item)
            _renumber(items)
            agenda.items.append(item)
            agenda.updated_at = self.now()
            await self.repo.commit()

        logger.info("agenda_item_added", tenant_id=ctx.tenant_id, agenda_id=agenda.id, item_id=item.id)
        return to_agenda_read(agenda)

    async def update_item(self, ctx: TenantContext, item_id: str, payload: AgendaItemUpdate) -> AgendaItemRead:
        located = await self._require_item(ctx, item_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            item = await self._require_item(ctx, item_id)
            agenda = await self._require_agenda(ctx, item.agenda_id)
            self._ensure_draft(agenda)

            for field, value in payload.model_dump(exclude_unset=True).items():
                if field in ("title", "item_type", "requires_vote", "requires_public_hearing") and value is None:
                    continue
                if field == "item_type":
                    value = value.value
                setattr(item, field, value)
            agenda.updated_at = self.now()
            await self.repo.commit()

        logger.info("agenda_item_updated", tenant_id=ctx.tenant_id, item_id=item.id)
        return AgendaItemRead.model_validate(item)

    async def remove_item(self, ctx: TenantContext, item_id: str) -> AgendaRead:
        """
        Remove an item from a draft agenda. Items that recusals, actions or
        executive sessions already refer to cannot be removed.
        """
        located = await self._require_item(ctx, item_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            item = await self._require_item(ctx, item_id)
            agenda = await self._require_agenda(ctx, item.agenda_id)
            self._ensure_draft(agenda)

            references = await self.repo.count_agenda_item_references(ctx.tenant_id, item.id)
            if references:
                raise InvalidTransitionError(
                    "Agenda item is referenced by recusals, actions or executive sessions.",
                    {"item_id": item.id, "references": references},
                )

            agenda.items.remove(item)
            _renumber(sorted(agenda.items, key=lambda i: i.order_index))
            agenda.updated_at = self.now()
            await self.repo.commit()

        logger.info("agenda_item_removed", tenant_id=ctx.tenant_id, agenda_id=agenda.id, item_id=item_id)
        return to_agenda_read(agenda)

    async def reorder_items(self, ctx: TenantContext, agenda_id: str, item_ids: list[str]) -> AgendaRead:
        located = await self._require_agenda(ctx, agenda_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            agenda = await self._require_agenda(ctx, agenda_id)
            self._ensure_draft(agenda)

            by_id = {item.id: item for item in agenda.items}
            if len(item_ids) != len(by_id) or set(item_ids) != set(by_id):
                raise InputValidationError(
                    "Reorder must list every item of the agenda exactly once.",
                    {"agenda_id": agenda.id, "expected": sorted(by_id), "received": item_ids},
                )

            _renumber([by_id[item_id] for item_id in item_ids])
            agenda.updated_at = self.now()
            await self.repo.commit()

        logger.info("agenda_reordered", tenant_id=ctx.tenant_id, agenda_id=agenda.id)
        return to_agenda_read(agenda)

    async def set_item_status(
        self,
        ctx: TenantContext,
        item_id: str,
        payload: AgendaItemStatusChange,
    ) -> AgendaItemRead:
        located = await self._require_item(ctx, item_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            item = await self._require_item(ctx, item_id)
            agenda = await self._require_agenda(ctx, item.agenda_id)
            if agenda.status == AgendaStatus.AMENDED.value:
                raise AlreadyTerminalError(
                    "Agenda has been amended; publish a new version instead.",
                    {"agenda_id": agenda.id},
                )
            meeting = await self._require_meeting(ctx, item.meeting_id)
            if meeting.status == MeetingStatus.CANCELLED.value:
                raise AlreadyTerminalError(
                    "Meeting is already cancelled.",
                    {"meeting_id": meeting.id, "status": meeting.status},
                )

            target = check_item_transition(item.status, payload.status)
            item.status = target.value
            if payload.discussion_notes is not None:
                item.discussion_notes = payload.discussion_notes
            agenda.updated_at = self.now()
            await self.repo.commit()

        logger.info(
            "agenda_item_status_changed",
            tenant_id=ctx.tenant_id,
            item_id=item.id,
            status=item.status,
        )
        return AgendaItemRead.model_validate(item)
