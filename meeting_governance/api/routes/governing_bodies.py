# meeting_governance/api/routes/governing_bodies.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path

from meeting_governance.api.dependencies.services import get_governing_body_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.governing_body import (
    GoverningBodyCreate,
    GoverningBodyMemberCreate,
    GoverningBodyRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.governing_bodies import GoverningBodyService

router = APIRouter(prefix="/governing-bodies", tags=["Governing Bodies"])


@router.post(
    "",
    response_model=GoverningBodyRead,
    status_code=HTTPStatus.CREATED,
    summary="Register a governing body",
    description=(
        "Register a council, board or commission together with its quorum rule, "
        "pass threshold and optional notice lead-time override.\n\n"
        "Body names are unique per tenant."
    ),
)
async def create_governing_body(
    payload: GoverningBodyCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: GoverningBodyService = Depends(get_governing_body_service),
) -> GoverningBodyRead:
    return await service.create_body(ctx, payload)


@router.get(
    "",
    response_model=list[GoverningBodyRead],
    summary="List governing bodies",
)
async def list_governing_bodies(
    ctx: TenantContext = Depends(get_tenant_context),
    service: GoverningBodyService = Depends(get_governing_body_service),
) -> list[GoverningBodyRead]:
    return await service.list_bodies(ctx)


@router.get(
    "/{body_id}",
    response_model=GoverningBodyRead,
    summary="Get a governing body with its roster",
)
async def get_governing_body(
    body_id: str = Path(..., description="Governing body id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: GoverningBodyService = Depends(get_governing_body_service),
) -> GoverningBodyRead:
    return await service.get_body(ctx, body_id)


@router.post(
    "/{body_id}/members",
    response_model=GoverningBodyRead,
    status_code=HTTPStatus.CREATED,
    summary="Add a member to a governing body",
    description="Adds a seat holder. Only active voting members count toward quorum and may vote.",
)
async def add_governing_body_member(
    payload: GoverningBodyMemberCreate,
    body_id: str = Path(..., description="Governing body id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: GoverningBodyService = Depends(get_governing_body_service),
) -> GoverningBodyRead:
    return await service.add_member(ctx, body_id, payload)
