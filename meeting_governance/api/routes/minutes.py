# meeting_governance/api/routes/minutes.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path

from meeting_governance.api.dependencies.services import get_minutes_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.minutes import MinutesAmend, MinutesCreate, MinutesRead, MinutesUpdate
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.minutes import MinutesService

router = APIRouter(tags=["Minutes"])


@router.post(
    "/meetings/{meeting_id}/minutes",
    response_model=MinutesRead,
    status_code=HTTPStatus.CREATED,
    summary="Start the minutes of a meeting",
    description="Each meeting has at most one set of minutes; a second create is rejected with 422.",
)
async def create_minutes(
    payload: MinutesCreate,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.create(ctx, meeting_id, payload.body)


@router.get("/meetings/{meeting_id}/minutes", response_model=MinutesRead, summary="Get the minutes of a meeting")
async def get_minutes_for_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.get_for_meeting(ctx, meeting_id)


@router.patch("/minutes/{minutes_id}", response_model=MinutesRead, summary="Edit draft minutes")
async def update_minutes(
    payload: MinutesUpdate,
    minutes_id: str = Path(..., description="Minutes id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.update(ctx, minutes_id, payload.body)


@router.post("/minutes/{minutes_id}/submit", response_model=MinutesRead, summary="Submit minutes for approval")
async def submit_minutes(
    minutes_id: str = Path(..., description="Minutes id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.submit_for_approval(ctx, minutes_id)


@router.post(
    "/minutes/{minutes_id}/return-to-draft",
    response_model=MinutesRead,
    summary="Send submitted minutes back for corrections",
)
async def return_minutes_to_draft(
    minutes_id: str = Path(..., description="Minutes id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.return_to_draft(ctx, minutes_id)


@router.post(
    "/minutes/{minutes_id}/approve",
    response_model=MinutesRead,
    summary="Approve minutes",
    description=(
        "Rejected with 409 `uncertified_executive_session` while any executive "
        "session of the meeting is not certified or cancelled."
    ),
)
async def approve_minutes(
    minutes_id: str = Path(..., description="Minutes id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.approve(ctx, minutes_id)


@router.post(
    "/minutes/{minutes_id}/amend",
    response_model=MinutesRead,
    summary="Amend approved minutes",
    description="Replaces the approved text once; the approved text is kept and the minutes become final.",
)
async def amend_minutes(
    payload: MinutesAmend,
    minutes_id: str = Path(..., description="Minutes id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MinutesService = Depends(get_minutes_service),
) -> MinutesRead:
    return await service.amend(ctx, minutes_id, payload)
