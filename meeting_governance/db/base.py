# meeting_governance/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the meeting governance service.

    Model modules are imported by ``meeting_governance.db.session`` so that
    ``Base.metadata`` is complete before any schema operation runs.
    """
    pass
