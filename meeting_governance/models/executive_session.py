# meeting_governance/models/executive_session.py
from sqlalchemy import JSON, Column, ForeignKey, String, Text

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class ExecutiveSession(Base):
    """
    A closed portion of a meeting held under an enumerated statutory basis.

    Sessions are never deleted; they end in `certified` or `cancelled`.
    """

    __tablename__ = "executive_sessions"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    agenda_item_id = Column(String(64), nullable=True)

    status = Column(String(32), nullable=False, default="scheduled")
    basis_code = Column(String(64), nullable=False)
    basis_description = Column(Text, nullable=False)
    statutory_citation = Column(String(100), nullable=False)
    subject = Column(Text, nullable=False)
    scheduled_start = Column(UTCDateTime, nullable=True)

    attendees = Column(JSON, nullable=False, default=list)
    pre_certification_statement = Column(Text, nullable=True)
    post_certification_statement = Column(Text, nullable=True)

    entered_at = Column(UTCDateTime, nullable=True)
    entered_by = Column(String(64), nullable=True)
    ended_at = Column(UTCDateTime, nullable=True)
    ended_by = Column(String(64), nullable=True)
    certified_at = Column(UTCDateTime, nullable=True)
    certified_by = Column(String(64), nullable=True)
    cancelled_at = Column(UTCDateTime, nullable=True)
    cancelled_by = Column(String(64), nullable=True)

    created_by = Column(String(64), nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ExecutiveSession id={self.id} meeting_id={self.meeting_id} "
            f"basis={self.basis_code} status={self.status}>"
        )
