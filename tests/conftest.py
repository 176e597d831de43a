# tests/conftest.py
import os
import tempfile
from datetime import datetime, timezone

# Settings and the engine are built at import time, so the environment has
# to be in place before anything from meeting_governance is imported.
_DB_DIR = tempfile.mkdtemp(prefix="meeting-governance-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JURISDICTION_TIMEZONE"] = "UTC"
os.environ["HOLIDAY_CALENDAR"] = "none"
os.environ.pop("EXTRA_HOLIDAYS", None)
os.environ.pop("NOTICE_PUBLICATION_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from meeting_governance.db.session import reset_schema_sync  # noqa: E402
from meeting_governance.main import create_app  # noqa: E402
from meeting_governance.schemas.governing_body import (  # noqa: E402
    GoverningBodyCreate,
    GoverningBodyMemberCreate,
)
from meeting_governance.schemas.meeting import MeetingCreate, MeetingType  # noqa: E402
from meeting_governance.schemas.tenant import TenantContext  # noqa: E402
from meeting_governance.services.governing_bodies import GoverningBodyService  # noqa: E402
from meeting_governance.services.meetings import MeetingService  # noqa: E402

# Monday 2025-02-03 12:00 UTC
FIXED_NOW = datetime(2025, 2, 3, 12, 0, tzinfo=timezone.utc)
# Thursday 2025-02-13 19:00 UTC
MEETING_START = datetime(2025, 2, 13, 19, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_db():
    """
    Every test gets a clean schema with empty tables.
    """
    reset_schema_sync()


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all API tests.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ctx() -> TenantContext:
    return TenantContext(tenant_id="town-a", user_id="clerk-treasurer")


@pytest.fixture
def other_ctx() -> TenantContext:
    return TenantContext(tenant_id="town-b", user_id="other-clerk")


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def seed_body(fixed_clock):
    """
    Factory creating a governing body with `members` voting members.
    Returns the GoverningBodyRead.
    """

    async def _seed(db, ctx: TenantContext, members: int = 5, **body_fields):
        service = GoverningBodyService(db, clock=fixed_clock)
        fields = {"name": "Town Council", **body_fields}
        body = await service.create_body(ctx, GoverningBodyCreate(**fields))
        for seat in range(1, members + 1):
            body = await service.add_member(
                ctx,
                body.id,
                GoverningBodyMemberCreate(display_name=f"Member {seat}", seat_number=seat),
            )
        return body

    return _seed


@pytest.fixture
def seed_meeting(fixed_clock):
    """
    Factory scheduling a regular meeting for a body. Returns the MeetingRead.
    """

    async def _seed(
        db,
        ctx: TenantContext,
        body_id: str,
        meeting_type: MeetingType = MeetingType.REGULAR,
        scheduled_start: datetime = MEETING_START,
        **fields,
    ):
        service = MeetingService(db, clock=fixed_clock)
        return await service.schedule_meeting(
            ctx,
            MeetingCreate(
                body_id=body_id,
                meeting_type=meeting_type,
                scheduled_start=scheduled_start,
                location="Town Hall, 123 Main St",
                **fields,
            ),
        )

    return _seed
