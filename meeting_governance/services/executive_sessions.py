# meeting_governance/services/executive_sessions.py
from __future__ import annotations

from typing import Iterable, Protocol

from meeting_governance.core.errors import (
    AlreadyTerminalError,
    InputValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from meeting_governance.core.logging import get_logger
from meeting_governance.models.executive_session import ExecutiveSession
from meeting_governance.models.meeting import Meeting
from meeting_governance.schemas.executive_session import (
    ExecutiveSessionBasis,
    ExecutiveSessionCreate,
    ExecutiveSessionEnd,
    ExecutiveSessionEnter,
    ExecutiveSessionRead,
    ExecutiveSessionStatus,
)
from meeting_governance.schemas.meeting import MeetingStatus
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.base import GovernanceService, new_id
from meeting_governance.services.meeting_lifecycle import is_terminal

logger = get_logger(__name__).bind(component="executive_sessions")

EXECUTIVE_SESSION_CITATION = "IC 5-14-1.5-6.1"

EXECUTIVE_SESSION_BASES: dict[str, ExecutiveSessionBasis] = {
    basis.code: basis
    for basis in (
        ExecutiveSessionBasis(
            code="PERSONNEL",
            citation="IC 5-14-1.5-6.1(b)(6)",
            subsection="(b)(6)",
            description="Discussion of job performance evaluation of individual employees",
        ),
        ExecutiveSessionBasis(
            code="COLLECTIVE_BARGAINING",
            citation="IC 5-14-1.5-6.1(b)(4)",
            subsection="(b)(4)",
            description="Discussion of strategy regarding collective bargaining or labor negotiations",
        ),
        ExecutiveSessionBasis(
            code="INITIATION_OF_LITIGATION",
            citation="IC 5-14-1.5-6.1(b)(2)(B)",
            subsection="(b)(2)(B)",
            description="Discussion of strategy with respect to initiation of litigation",
        ),
        ExecutiveSessionBasis(
            code="PENDING_LITIGATION",
            citation="IC 5-14-1.5-6.1(b)(2)(B)",
            subsection="(b)(2)(B)",
            description=(
                "Discussion of strategy with respect to litigation that is pending "
                "or has been threatened"
            ),
        ),
        ExecutiveSessionBasis(
            code="SECURITY",
            citation="IC 5-14-1.5-6.1(b)(7)",
            subsection="(b)(7)",
            description="Discussion of records classified as confidential by state or federal statute",
        ),
        ExecutiveSessionBasis(
            code="PURCHASE_LEASE",
            citation="IC 5-14-1.5-6.1(b)(2)(D)",
            subsection="(b)(2)(D)",
            description=(
                "Discussion of purchase or lease of real property before competitive "
                "or public offering"
            ),
        ),
        ExecutiveSessionBasis(
            code="SCHOOL_SAFETY",
            citation="IC 5-14-1.5-6.1(b)(8)",
            subsection="(b)(8)",
            description="Discussion of school safety and security measures",
        ),
        ExecutiveSessionBasis(
            code="INDUSTRIAL_PROSPECT",
            citation="IC 5-14-1.5-6.1(b)(5)",
            subsection="(b)(5)",
            description=(
                "Receipt of information about prospective employee or "
                "industrial/commercial prospect"
            ),
        ),
        ExecutiveSessionBasis(
            code="MISSING_CHILD",
            citation="IC 5-14-1.5-6.1(b)(1)",
            subsection="(b)(1)",
            description="Discussion of strategy for missing or exploited children",
        ),
    )
}

TERMINAL_SESSION_STATUSES = frozenset({ExecutiveSessionStatus.CERTIFIED, ExecutiveSessionStatus.CANCELLED})

# Meeting statuses in which the body may go into closed session.
CONVENED_STATUSES = frozenset({MeetingStatus.IN_SESSION.value, MeetingStatus.RECESSED.value})

# transition name -> (source status, target status)
SESSION_TRANSITIONS: dict[str, tuple[ExecutiveSessionStatus, ExecutiveSessionStatus]] = {
    "enter": (ExecutiveSessionStatus.SCHEDULED, ExecutiveSessionStatus.ACTIVE),
    "end": (ExecutiveSessionStatus.ACTIVE, ExecutiveSessionStatus.ENDED),
    "certify": (ExecutiveSessionStatus.ENDED, ExecutiveSessionStatus.CERTIFIED),
    "cancel": (ExecutiveSessionStatus.SCHEDULED, ExecutiveSessionStatus.CANCELLED),
}


class SessionLike(Protocol):
    id: str
    status: str


def get_basis(code: str) -> ExecutiveSessionBasis:
    try:
        return EXECUTIVE_SESSION_BASES[code.strip().upper()]
    except KeyError:
        raise InputValidationError(
            f"Unknown executive session basis {code!r}.",
            {"basis_code": code, "allowed": sorted(EXECUTIVE_SESSION_BASES)},
        ) from None


def list_bases() -> list[ExecutiveSessionBasis]:
    return list(EXECUTIVE_SESSION_BASES.values())


def next_session_status(current: ExecutiveSessionStatus | str, transition: str) -> ExecutiveSessionStatus:
    current = ExecutiveSessionStatus(current)
    source, target = SESSION_TRANSITIONS[transition]
    if current in TERMINAL_SESSION_STATUSES:
        raise AlreadyTerminalError(
            f"Executive session is already {current.value}; cannot {transition}.",
            {"status": current.value, "transition": transition},
        )
    if current != source:
        raise InvalidTransitionError(
            f"Cannot {transition} an executive session that is {current.value}.",
            {"status": current.value, "transition": transition, "required_status": source.value},
        )
    return target


def any_active(sessions: Iterable[SessionLike]) -> bool:
    return any(s.status == ExecutiveSessionStatus.ACTIVE.value for s in sessions)


def uncertified(sessions: Iterable[SessionLike]) -> list[str]:
    """
    Ids of sessions that still block minutes approval: anything not
    certified or cancelled.
    """
    return [
        s.id
        for s in sessions
        if ExecutiveSessionStatus(s.status) not in TERMINAL_SESSION_STATUSES
    ]


class ExecutiveSessionService(GovernanceService):
    """
    Closed sessions held under an enumerated statutory basis.

    Lifecycle: scheduled -> active -> ended -> certified, or
    scheduled -> cancelled. At most one session per meeting is active.
    """

    async def _require_session(self, ctx: TenantContext, session_id: str) -> ExecutiveSession:
        session = await self.repo.get_executive_session(ctx.tenant_id, session_id)
        if session is None:
            raise NotFoundError("ExecutiveSession", session_id)
        return session

    @staticmethod
    def _ensure_meeting_open(meeting: Meeting) -> None:
        if is_terminal(meeting.status):
            raise AlreadyTerminalError(
                f"Meeting is already {meeting.status}.",
                {"meeting_id": meeting.id, "status": meeting.status},
            )

    async def create(
        self,
        ctx: TenantContext,
        meeting_id: str,
        payload: ExecutiveSessionCreate,
    ) -> ExecutiveSessionRead:
        basis = get_basis(payload.basis_code)

        async with self.locks.hold(ctx.tenant_id, meeting_id):
            meeting = await self._require_meeting(ctx, meeting_id)
            self._ensure_meeting_open(meeting)
            await self._check_agenda_item(ctx, meeting, payload.agenda_item_id)

            now = self.now()
            session = ExecutiveSession(
                id=new_id(),
                tenant_id=ctx.tenant_id,
                meeting_id=meeting.id,
                agenda_item_id=payload.agenda_item_id,
                status=ExecutiveSessionStatus.SCHEDULED.value,
                basis_code=basis.code,
                basis_description=basis.description,
                statutory_citation=basis.citation,
                subject=payload.subject,
                scheduled_start=payload.scheduled_start,
                attendees=[],
                created_by=ctx.user_id,
                created_at=now,
                updated_at=now,
            )
            self.repo.save(session)
            await self.repo.commit()

        logger.info(
            "executive_session_scheduled",
            tenant_id=ctx.tenant_id,
            meeting_id=meeting_id,
            session_id=session.id,
            basis_code=basis.code,
        )
        return ExecutiveSessionRead.model_validate(session)

    async def get(self, ctx: TenantContext, session_id: str) -> ExecutiveSessionRead:
        session = await self._require_session(ctx, session_id)
        return ExecutiveSessionRead.model_validate(session)

    async def list_for_meeting(self, ctx: TenantContext, meeting_id: str) -> list[ExecutiveSessionRead]:
        await self._require_meeting(ctx, meeting_id)
        sessions = await self.repo.list_executive_sessions(ctx.tenant_id, meeting_id)
        return [ExecutiveSessionRead.model_validate(s) for s in sessions]

    async def is_any_active(self, ctx: TenantContext, meeting_id: str) -> bool:
        await self._require_meeting(ctx, meeting_id)
        sessions = await self.repo.list_executive_sessions(ctx.tenant_id, meeting_id)
        return any_active(sessions)

    async def enter(
        self,
        ctx: TenantContext,
        session_id: str,
        payload: ExecutiveSessionEnter,
    ) -> ExecutiveSessionRead:
        located = await self._require_session(ctx, session_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            session = await self._require_session(ctx, session_id)
            meeting = await self._require_meeting(ctx, session.meeting_id)
            self._ensure_meeting_open(meeting)
            if meeting.status not in CONVENED_STATUSES:
                raise InvalidTransitionError(
                    "An executive session can only be entered while the meeting is convened.",
                    {"meeting_id": meeting.id, "status": meeting.status},
                )
            target = next_session_status(session.status, "enter")

            siblings = await self.repo.list_executive_sessions(ctx.tenant_id, session.meeting_id)
            active = [s.id for s in siblings if s.id != session.id and s.status == ExecutiveSessionStatus.ACTIVE.value]
            if active:
                raise InvalidTransitionError(
                    "Another executive session of this meeting is already active.",
                    {"meeting_id": session.meeting_id, "active_session_id": active[0]},
                )

            now = self.now()
            session.status = target.value
            session.pre_certification_statement = payload.pre_certification_statement
            session.attendees = list(payload.attendees)
            session.entered_at = now
            session.entered_by = ctx.user_id
            session.updated_at = now
            await self.repo.commit()

        logger.info(
            "executive_session_entered",
            tenant_id=ctx.tenant_id,
            meeting_id=session.meeting_id,
            session_id=session.id,
        )
        return ExecutiveSessionRead.model_validate(session)

    async def end(
        self,
        ctx: TenantContext,
        session_id: str,
        payload: ExecutiveSessionEnd,
    ) -> ExecutiveSessionRead:
        located = await self._require_session(ctx, session_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            session = await self._require_session(ctx, session_id)
            target = next_session_status(session.status, "end")

            now = self.now()
            session.status = target.value
            session.post_certification_statement = payload.post_certification_statement
            session.ended_at = now
            session.ended_by = ctx.user_id
            session.updated_at = now
            await self.repo.commit()

        logger.info(
            "executive_session_ended",
            tenant_id=ctx.tenant_id,
            meeting_id=session.meeting_id,
            session_id=session.id,
        )
        return ExecutiveSessionRead.model_validate(session)

    async def certify(self, ctx: TenantContext, session_id: str) -> ExecutiveSessionRead:
        located = await self._require_session(ctx, session_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            session = await self._require_session(ctx, session_id)
            target = next_session_status(session.status, "certify")

            now = self.now()
            session.status = target.value
            session.certified_at = now
            session.certified_by = ctx.user_id
            session.updated_at = now
            await self.repo.commit()

        logger.info(
            "executive_session_certified",
            tenant_id=ctx.tenant_id,
            meeting_id=session.meeting_id,
            session_id=session.id,
        )
        return ExecutiveSessionRead.model_validate(session)

    async def cancel(self, ctx: TenantContext, session_id: str) -> ExecutiveSessionRead:
        located = await self._require_session(ctx, session_id)

        async with self.locks.hold(ctx.tenant_id, located.meeting_id):
            session = await self._require_session(ctx, session_id)
            target = next_session_status(session.status, "cancel")

            now = self.now()
            session.status = target.value
            session.cancelled_at = now
            session.cancelled_by = ctx.user_id
            session.updated_at = now
            await self.repo.commit()

        logger.info(
            "executive_session_cancelled",
            tenant_id=ctx.tenant_id,
            meeting_id=session.meeting_id,
            session_id=session.id,
        )
        return ExecutiveSessionRead.model_validate(session)
