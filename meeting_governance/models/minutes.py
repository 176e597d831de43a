# meeting_governance/models/minutes.py
from sqlalchemy import Column, ForeignKey, String, Text

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class Minutes(Base):
    """
    The written record of a meeting. One row per meeting.
    """

    __tablename__ = "minutes"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    status = Column(String(32), nullable=False, default="draft")
    body = Column(Text, nullable=False, default="")

    prepared_by = Column(String(64), nullable=True)
    prepared_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)
    submitted_at = Column(UTCDateTime, nullable=True)
    approved_at = Column(UTCDateTime, nullable=True)
    approved_by = Column(String(64), nullable=True)

    # Set once by amendment. `approved_body` keeps the text as approved.
    amendment_type = Column(String(32), nullable=True)
    amendment_reason = Column(Text, nullable=True)
    approved_body = Column(Text, nullable=True)
    amended_at = Column(UTCDateTime, nullable=True)
    amended_by = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<Minutes id={self.id} meeting_id={self.meeting_id} status={self.status}>"
