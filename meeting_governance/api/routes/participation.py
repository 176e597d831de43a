# meeting_governance/api/routes/participation.py
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from meeting_governance.api.dependencies.services import get_participation_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.participation import (
    AttendanceRead,
    AttendanceUpsert,
    QuorumResult,
    RecusalCreate,
    RecusalRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.participation import ParticipationService

router = APIRouter(prefix="/meetings/{meeting_id}", tags=["Attendance & Quorum"])


@router.post(
    "/recusals",
    response_model=RecusalRead,
    status_code=HTTPStatus.CREATED,
    summary="Record a recusal",
    description=(
        "Records a member's conflict of interest. Without `agenda_item_id` the "
        "recusal covers the whole meeting; with it, only that agenda item."
    ),
)
async def record_recusal(
    payload: RecusalCreate,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> RecusalRead:
    return await service.record_recusal(ctx, meeting_id, payload)


@router.get("/recusals", response_model=list[RecusalRead], summary="List recusals of a meeting")
async def list_recusals(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> list[RecusalRead]:
    return await service.list_recusals(ctx, meeting_id)


@router.put(
    "/attendance",
    response_model=AttendanceRead,
    summary="Record or replace a member's attendance",
)
async def upsert_attendance(
    payload: AttendanceUpsert,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> AttendanceRead:
    return await service.record_attendance(ctx, meeting_id, payload)


@router.get("/attendance", response_model=list[AttendanceRead], summary="List attendance of a meeting")
async def list_attendance(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> list[AttendanceRead]:
    return await service.list_attendance(ctx, meeting_id)


@router.post(
    "/attendance/{member_id}/depart",
    response_model=AttendanceRead,
    summary="Mark a member as having left early",
)
async def mark_departed(
    meeting_id: str = Path(..., description="Meeting id"),
    member_id: str = Path(..., description="Member id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> AttendanceRead:
    return await service.mark_departed(ctx, meeting_id, member_id)


@router.get(
    "/quorum",
    response_model=QuorumResult,
    summary="Compute quorum",
    description=(
        "Quorum for the meeting as a whole, or for one agenda item when "
        "`agenda_item_id` is given. Recused members are removed from both the "
        "eligible roster and the present count."
    ),
)
async def get_quorum(
    meeting_id: str = Path(..., description="Meeting id"),
    agenda_item_id: Optional[str] = Query(None, description="Agenda item to compute quorum for"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ParticipationService = Depends(get_participation_service),
) -> QuorumResult:
    return await service.calculate_quorum(ctx, meeting_id, agenda_item_id)
