# meeting_governance/api/routes/agendas.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path

from meeting_governance.api.dependencies.services import get_agenda_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.agenda import (
    AgendaCreate,
    AgendaItemCreate,
    AgendaItemRead,
    AgendaItemStatusChange,
    AgendaItemUpdate,
    AgendaRead,
    AgendaReorder,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.agendas import AgendaService

router = APIRouter(tags=["Agendas"])


@router.post(
    "/meetings/{meeting_id}/agenda",
    response_model=AgendaRead,
    status_code=HTTPStatus.CREATED,
    summary="Create the agenda of a meeting",
)
async def create_agenda(
    payload: AgendaCreate,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.create_agenda(ctx, meeting_id, payload)


@router.get(
    "/meetings/{meeting_id}/agenda",
    response_model=AgendaRead,
    summary="Get the agenda of a meeting",
)
async def get_agenda(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.get_agenda(ctx, meeting_id)


@router.post(
    "/agendas/{agenda_id}/items",
    response_model=AgendaRead,
    status_code=HTTPStatus.CREATED,
    summary="Add an item to a draft agenda",
    description="Without `order_index` the item goes last; otherwise later items move down one place.",
)
async def add_agenda_item(
    payload: AgendaItemCreate,
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.add_item(ctx, agenda_id, payload)


@router.post(
    "/agendas/{agenda_id}/reorder",
    response_model=AgendaRead,
    summary="Reorder the items of a draft agenda",
)
async def reorder_agenda_items(
    payload: AgendaReorder,
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.reorder_items(ctx, agenda_id, payload.item_ids)


@router.patch(
    "/agenda-items/{item_id}",
    response_model=AgendaItemRead,
    summary="Edit an item of a draft agenda",
)
async def update_agenda_item(
    payload: AgendaItemUpdate,
    item_id: str = Path(..., description="Agenda item id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaItemRead:
    return await service.update_item(ctx, item_id, payload)


@router.delete(
    "/agenda-items/{item_id}",
    response_model=AgendaRead,
    summary="Remove an item from a draft agenda",
    description="Rejected with 409 while recusals, actions or executive sessions refer to the item.",
)
async def remove_agenda_item(
    item_id: str = Path(..., description="Agenda item id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.remove_item(ctx, item_id)


@router.post(
    "/agenda-items/{item_id}/status",
    response_model=AgendaItemRead,
    summary="Move an agenda item through the meeting",
)
async def set_agenda_item_status(
    payload: AgendaItemStatusChange,
    item_id: str = Path(..., description="Agenda item id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaItemRead:
    return await service.set_item_status(ctx, item_id, payload)


@router.post("/agendas/{agenda_id}/submit", response_model=AgendaRead, summary="Submit a draft agenda for approval")
async def submit_agenda(
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.submit_for_approval(ctx, agenda_id)


@router.post("/agendas/{agenda_id}/return-to-draft", response_model=AgendaRead, summary="Send an agenda back to draft")
async def return_agenda_to_draft(
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.return_to_draft(ctx, agenda_id)


@router.post("/agendas/{agenda_id}/approve", response_model=AgendaRead, summary="Approve an agenda")
async def approve_agenda(
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.approve(ctx, agenda_id)


@router.post("/agendas/{agenda_id}/publish", response_model=AgendaRead, summary="Publish an agenda")
async def publish_agenda(
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.publish(ctx, agenda_id)


@router.post(
    "/agendas/{agenda_id}/amend",
    response_model=AgendaRead,
    summary="Mark a published agenda as amended",
    description="Amended agendas are final; later changes need a new version.",
)
async def amend_agenda(
    agenda_id: str = Path(..., description="Agenda id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaRead:
    return await service.amend(ctx, agenda_id)
