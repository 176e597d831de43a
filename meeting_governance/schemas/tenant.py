# meeting_governance/schemas/tenant.py
from pydantic import BaseModel, Field


class TenantContext(BaseModel):
    """
    Identity of the jurisdiction (tenant) and acting user for one call.

    Every read and write in the engine is scoped by `tenant_id`.
    """

    tenant_id: str = Field(..., min_length=1, examples=["lapel-in"])
    user_id: str | None = Field(
        default=None,
        description="Identifier of the acting user, recorded in audit fields.",
        examples=["clerk-treasurer"],
    )
