# meeting_governance/api/dependencies/services.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from meeting_governance.db.session import get_db
from meeting_governance.services.actions import ActionService
from meeting_governance.services.agendas import AgendaService
from meeting_governance.services.executive_sessions import ExecutiveSessionService
from meeting_governance.services.governing_bodies import GoverningBodyService
from meeting_governance.services.meetings import MeetingService
from meeting_governance.services.minutes import MinutesService
from meeting_governance.services.participation import ParticipationService


def get_governing_body_service(db: AsyncSession = Depends(get_db)) -> GoverningBodyService:
    return GoverningBodyService(db)


def get_meeting_service(db: AsyncSession = Depends(get_db)) -> MeetingService:
    return MeetingService(db)


def get_executive_session_service(db: AsyncSession = Depends(get_db)) -> ExecutiveSessionService:
    return ExecutiveSessionService(db)


def get_participation_service(db: AsyncSession = Depends(get_db)) -> ParticipationService:
    return ParticipationService(db)


def get_action_service(db: AsyncSession = Depends(get_db)) -> ActionService:
    return ActionService(db)


def get_minutes_service(db: AsyncSession = Depends(get_db)) -> MinutesService:
    return MinutesService(db)


def get_agenda_service(db: AsyncSession = Depends(get_db)) -> AgendaService:
    return AgendaService(db)
