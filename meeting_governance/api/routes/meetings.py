# meeting_governance/api/routes/meetings.py
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query
from pydantic import AwareDatetime

from meeting_governance.api.dependencies.services import get_governing_body_service, get_meeting_service
from meeting_governance.api.dependencies.tenant import get_tenant_context
from meeting_governance.schemas.meeting import (
    MeetingCancelInput,
    MeetingCreate,
    MeetingRead,
    MeetingStatus,
    MeetingSummary,
    NoticePostedInput,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.governing_bodies import GoverningBodyService
from meeting_governance.services.meetings import MeetingService
from meeting_governance.services.notice_publisher import get_notice_publisher

router = APIRouter(prefix="/meetings", tags=["Meetings"])


@router.post(
    "",
    response_model=MeetingRead,
    status_code=HTTPStatus.CREATED,
    summary="Schedule a meeting",
    description=(
        "Create a meeting in `planned` status for an existing governing body.\n\n"
        "A meeting-level `notice_lead_time_hours` overrides the body's lead time, "
        "which in turn overrides the service default (48 business hours)."
    ),
    responses={
        201: {"description": "Meeting scheduled."},
        404: {"description": "Governing body not found for this tenant."},
        422: {"description": "scheduled_end precedes scheduled_start, or malformed payload."},
    },
)
async def schedule_meeting(
    payload: MeetingCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.schedule_meeting(ctx, payload)


@router.get(
    "",
    response_model=list[MeetingSummary],
    summary="List meetings",
    description="Meetings of the tenant ordered by scheduled start, optionally filtered.",
)
async def list_meetings(
    body_id: Optional[str] = Query(None, description="Only meetings of this governing body"),
    status: Optional[MeetingStatus] = Query(None, description="Only meetings in this status"),
    start_from: Optional[AwareDatetime] = Query(None, alias="from", description="Scheduled start lower bound"),
    start_to: Optional[AwareDatetime] = Query(None, alias="to", description="Scheduled start upper bound"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> list[MeetingSummary]:
    return await service.list_meetings(
        ctx,
        body_id=body_id,
        status=status,
        start_from=start_from,
        start_to=start_to,
    )


@router.get(
    "/{meeting_id}",
    response_model=MeetingRead,
    summary="Get a meeting with notices and compliance status",
)
async def get_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.get_meeting(ctx, meeting_id)


@router.post(
    "/{meeting_id}/notices",
    response_model=MeetingRead,
    status_code=HTTPStatus.CREATED,
    summary="Record that public notice was posted",
    description=(
        "Appends a notice record evaluated against the business-hour lead time "
        "in force now. A `planned` meeting becomes `noticed`.\n\n"
        "When a publication endpoint is configured, the notice is pushed to it "
        "after the response is produced; publication failures never affect "
        "the recorded notice."
    ),
    responses={
        201: {"description": "Notice recorded."},
        409: {"description": "Meeting is cancelled or adjourned."},
    },
)
async def post_notice(
    payload: NoticePostedInput,
    background_tasks: BackgroundTasks,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
    bodies: GoverningBodyService = Depends(get_governing_body_service),
) -> MeetingRead:
    meeting = await service.mark_notice_posted(ctx, meeting_id, payload)

    publisher = get_notice_publisher()
    if publisher is not None:
        body = await bodies.get_body(ctx, meeting.body_id)
        background_tasks.add_task(publisher.publish, meeting, body.name)

    return meeting


@router.post("/{meeting_id}/start", response_model=MeetingRead, summary="Call a noticed meeting to order")
async def start_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.start_meeting(ctx, meeting_id)


@router.post("/{meeting_id}/recess", response_model=MeetingRead, summary="Recess a meeting in session")
async def recess_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.recess_meeting(ctx, meeting_id)


@router.post("/{meeting_id}/resume", response_model=MeetingRead, summary="Resume a recessed meeting")
async def resume_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.resume_meeting(ctx, meeting_id)


@router.post("/{meeting_id}/adjourn", response_model=MeetingRead, summary="Adjourn a meeting")
async def adjourn_meeting(
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    return await service.adjourn_meeting(ctx, meeting_id)


@router.post(
    "/{meeting_id}/cancel",
    response_model=MeetingRead,
    summary="Cancel a meeting",
    description=(
        "Cancelling an already cancelled meeting returns it unchanged. "
        "An adjourned meeting cannot be cancelled (409)."
    ),
)
async def cancel_meeting(
    payload: Optional[MeetingCancelInput] = None,
    meeting_id: str = Path(..., description="Meeting id"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: MeetingService = Depends(get_meeting_service),
) -> MeetingRead:
    reason = payload.reason if payload is not None else None
    return await service.cancel_meeting(ctx, meeting_id, reason)
