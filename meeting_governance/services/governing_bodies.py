# meeting_governance/services/governing_bodies.py
from __future__ import annotations

from meeting_governance.core.errors import InputValidationError
from meeting_governance.core.logging import get_logger
from meeting_governance.models.governing_body import GoverningBody, GoverningBodyMember
from meeting_governance.schemas.governing_body import (
    GoverningBodyCreate,
    GoverningBodyMemberCreate,
    GoverningBodyRead,
)
from meeting_governance.schemas.tenant import TenantContext
from meeting_governance.services.base import GovernanceService, new_id

logger = get_logger(__name__).bind(component="governing_bodies")


class GoverningBodyService(GovernanceService):
    """
    Registry of councils, boards and commissions and their seat holders.
    The active voting members form the roster used for quorum and voting.
    """

    async def create_body(self, ctx: TenantContext, payload: GoverningBodyCreate) -> GoverningBodyRead:
        if await self.repo.get_body_by_name(ctx.tenant_id, payload.name) is not None:
            raise InputValidationError(
                f"A governing body named {payload.name!r} already exists.",
                {"name": payload.name},
            )

        body = GoverningBody(
            id=new_id(),
            tenant_id=ctx.tenant_id,
            name=payload.name,
            code=payload.code,
            quorum_rule=payload.quorum_rule.value,
            quorum_number=payload.quorum_number,
            pass_threshold=payload.pass_threshold.value,
            notice_lead_time_hours=payload.notice_lead_time_hours,
            created_at=self.now(),
            members=[],
        )
        self.repo.save(body)
        await self.repo.commit()

        logger.info("governing_body_created", tenant_id=ctx.tenant_id, body_id=body.id, name=body.name)
        return GoverningBodyRead.model_validate(body)

    async def get_body(self, ctx: TenantContext, body_id: str) -> GoverningBodyRead:
        body = await self._require_body(ctx, body_id)
        return GoverningBodyRead.model_validate(body)

    async def list_bodies(self, ctx: TenantContext) -> list[GoverningBodyRead]:
        bodies = await self.repo.list_bodies(ctx.tenant_id)
        return [GoverningBodyRead.model_validate(body) for body in bodies]

    async def add_member(
        self,
        ctx: TenantContext,
        body_id: str,
        payload: GoverningBodyMemberCreate,
    ) -> GoverningBodyRead:
        body = await self._require_body(ctx, body_id)

        member = GoverningBodyMember(
            id=new_id(),
            tenant_id=ctx.tenant_id,
            body_id=body.id,
            display_name=payload.display_name,
            title=payload.title,
            seat_number=payload.seat_number,
            is_voting=payload.is_voting,
            is_active=True,
            created_at=self.now(),
        )
        body.members.append(member)
        self.repo.save(member)
        await self.repo.commit()

        logger.info(
            "governing_body_member_added",
            tenant_id=ctx.tenant_id,
            body_id=body.id,
            member_id=member.id,
        )
        return GoverningBodyRead.model_validate(body)
