# meeting_governance/api/routes/executive_sessions.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path

from meeting_governance.api.dependencies.services import get_executive_session_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.executive_session import (
    ExecutiveSessionActivity,
    ExecutiveSessionBasis,
    ExecutiveSessionCreate,
    ExecutiveSessionEnd,
    ExecutiveSessionEnter,
    ExecutiveSessionRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.executive_sessions import ExecutiveSessionService, list_bases

router = APIRouter(tags=["Executive Sessions"])


@router.get(
    "/executive-sessions/bases",
    response_model=list[ExecutiveSessionBasis],
    summary="List the statutory bases for closed sessions",
)
async def list_executive_session_bases() -> list[ExecutiveSessionBasis]:
    return list_bases()


@router.post(
    "/meetings/{meeting_id}/executive-sessions",
    response_model=ExecutiveSessionRead,
    status_code=HTTPStatus.CREATED,
    summary="Schedule an executive session",
    description=(
        "Schedules a closed session under one of the enumerated statutory bases. "
        "The basis citation and description are copied onto the session."
    ),
)
async def create_executive_session(
    payload: ExecutiveSessionCreate,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.create(ctx, meeting_id, payload)


@router.get(
    "/meetings/{meeting_id}/executive-sessions",
    response_model=list[ExecutiveSessionRead],
    summary="List executive sessions of a meeting",
)
async def list_executive_sessions(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> list[ExecutiveSessionRead]:
    return await service.list_for_meeting(ctx, meeting_id)


@router.get(
    "/meetings/{meeting_id}/executive-sessions/active",
    response_model=ExecutiveSessionActivity,
    summary="Check whether the meeting is in closed session",
    description="`active` is true while any executive session of the meeting is active; votes are refused meanwhile.",
)
async def get_executive_session_activity(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionActivity:
    active = await service.is_any_active(ctx, meeting_id)
    return ExecutiveSessionActivity(meeting_id=meeting_id, active=active)


@router.get(
    "/executive-sessions/{session_id}",
    response_model=ExecutiveSessionRead,
    summary="Get an executive session",
)
async def get_executive_session(
    session_id: str = Path(..., description="Executive session id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.get(ctx, session_id)


@router.post(
    "/executive-sessions/{session_id}/enter",
    response_model=ExecutiveSessionRead,
    summary="Enter a scheduled executive session",
    description="Fails with 409 while another session of the same meeting is active.",
)
async def enter_executive_session(
    payload: ExecutiveSessionEnter,
    session_id: str = Path(..., description="Executive session id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.enter(ctx, session_id, payload)


@router.post(
    "/executive-sessions/{session_id}/end",
    response_model=ExecutiveSessionRead,
    summary="End an active executive session",
)
async def end_executive_session(
    payload: ExecutiveSessionEnd,
    session_id: str = Path(..., description="Executive session id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.end(ctx, session_id, payload)


@router.post(
    "/executive-sessions/{session_id}/certify",
    response_model=ExecutiveSessionRead,
    summary="Certify an ended executive session",
)
async def certify_executive_session(
    session_id: str = Path(..., description="Executive session id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.certify(ctx, session_id)


@router.post(
    "/executive-sessions/{session_id}/cancel",
    response_model=ExecutiveSessionRead,
    summary="Cancel a scheduled executive session",
)
async def cancel_executive_session(
    session_id: str = Path(..., description="Executive session id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ExecutiveSessionService = Depends(get_executive_session_service),
) -> ExecutiveSessionRead:
    return await service.cancel(ctx, session_id)
