# meeting_governance/api/routes/actions.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path

from meeting_governance.api.dependencies.services import get_action_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.action import ActionCreate, ActionSecond, MeetingActionRead, VoteCast
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.actions import ActionService

router = APIRouter(tags=["Actions & Votes"])


@router.post(
    "/meetings/{meeting_id}/actions",
    response_model=MeetingActionRead,
    status_code=HTTPStatus.CREATED,
    summary="Put a motion on the floor",
)
async def create_action(
    payload: ActionCreate,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.create_action(ctx, meeting_id, payload)


@router.get(
    "/meetings/{meeting_id}/actions",
    response_model=list[MeetingActionRead],
    summary="List actions of a meeting",
)
async def list_actions(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> list[MeetingActionRead]:
    return await service.list_actions(ctx, meeting_id)


@router.get("/actions/{action_id}", response_model=MeetingActionRead, summary="Get an action with its votes")
async def get_action(
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.get_action(ctx, action_id)


@router.post("/actions/{action_id}/second", response_model=MeetingActionRead, summary="Second a motion")
async def second_action(
    payload: ActionSecond,
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.second_action(ctx, action_id, payload.seconded_by)


@router.post(
    "/actions/{action_id}/votes",
    response_model=MeetingActionRead,
    summary="Record a member's vote",
    description=(
        "Records or changes one member's vote.\n\n"
        "- 409 `vote_blocked` while an executive session of the meeting is active\n"
        "- 403 `recused_member` when the member is recused for this action's scope\n"
        "- 409 `already_terminal` once the action is resolved"
    ),
)
async def record_vote(
    payload: VoteCast,
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.record_vote(ctx, action_id, payload)


@router.post(
    "/actions/{action_id}/close",
    response_model=MeetingActionRead,
    summary="Close voting and record the result",
)
async def close_voting(
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.close_voting(ctx, action_id)


@router.post("/actions/{action_id}/table", response_model=MeetingActionRead, summary="Table a pending action")
async def table_action(
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.table_action(ctx, action_id)


@router.post("/actions/{action_id}/withdraw", response_model=MeetingActionRead, summary="Withdraw a pending action")
async def withdraw_action(
    action_id: str = Path(..., description="Action id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ActionService = Depends(get_action_service),
) -> MeetingActionRead:
    return await service.withdraw_action(ctx, action_id)
