# meeting_governance/api/dependencies/tenant.py
from typing import Optional

from fastapi import Header, HTTPException, status

from meeting_governance.schemas.tenant import TenantContext


async def get_tenant_context(
    tenant_id: Optional[str] = Header(
        default=None,
        alias="X-Tenant-Id",
        description="Jurisdiction (tenant) every read and write is scoped to.",
    ),
    user_id: Optional[str] = Header(
        default=None,
        alias="X-User-Id",
        description="Acting user, recorded in audit fields.",
    ),
) -> TenantContext:
    """
    Build the TenantContext for one request.

    Rules
    -----
    - X-Tenant-Id is required; a missing or blank value is a 400.
    - X-User-Id is optional; audit fields stay empty when it is omitted.
    """
    if not tenant_id or not tenant_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-Id header is required.",
        )
    return TenantContext(
        tenant_id=tenant_id.strip(),
        user_id=user_id.strip() if user_id and user_id.strip() else None,
    )
