# meeting_governance/main.py
from fastapi import FastAPI

from meeting_governance.api.errors import register_exception_handlers
from meeting_governance.api.routes import (
    actions,
    agendas,
    executive_sessions,
    governing_bodies,
    health,
    meetings,
    minutes,
    participation,
)
from meeting_governance.core.config import get_settings
from meeting_governance.core.logging import configure_logging
from meeting_governance.db.session import IS_TEST, init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Meeting Governance Engine.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Administers public meetings for multiple jurisdictions: lifecycle,\n"
            "statutory notice timing, agendas, executive sessions, recusals and quorum,\n"
            "motions and votes, and the minutes that form the legal record."
        ),
        version="0.1.0",
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(governing_bodies.router)
    app.include_router(meetings.router)
    app.include_router(agendas.router)
    app.include_router(executive_sessions.router)
    app.include_router(participation.router)
    app.include_router(actions.router)
    app.include_router(minutes.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        if not IS_TEST:
            await init_db_for_startup()

    return app


app = create_app()
