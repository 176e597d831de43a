# meeting_governance/models/meeting.py
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class Meeting(Base):
    """
    A single scheduled session of one governing body.

    Compliance status is not stored here: it is derived from the last
    NoticeRecord whenever the meeting is read.
    """

    __tablename__ = "meetings"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    body_id = Column(
        String(36),
        ForeignKey("governing_bodies.id"),
        nullable=False,
        index=True,
    )

    meeting_type = Column(String(32), nullable=False, default="regular")
    status = Column(String(32), nullable=False, default="planned")

    scheduled_start = Column(UTCDateTime, nullable=False, index=True)
    scheduled_end = Column(UTCDateTime, nullable=True)
    location = Column(String(300), nullable=False)

    notice_lead_time_hours = Column(Integer, nullable=True)
    jurisdiction_notes = Column(JSON, nullable=False, default=dict)

    created_by = Column(String(64), nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    actual_start = Column(UTCDateTime, nullable=True)
    actual_end = Column(UTCDateTime, nullable=True)

    cancelled_at = Column(UTCDateTime, nullable=True)
    cancelled_by = Column(String(64), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    notices = relationship(
        "NoticeRecord",
        back_populates="meeting",
        lazy="selectin",
        order_by="NoticeRecord.sequence",
    )

    def __repr__(self) -> str:
        return (
            f"<Meeting id={self.id} tenant={self.tenant_id} "
            f"type={self.meeting_type} status={self.status}>"
        )


class NoticeRecord(Base):
    """
    One act of posting public notice for a meeting.

    Rows are append-only: the timeliness verdict is computed once, with the
    rules in force at the time of posting, and never rewritten.
    """

    __tablename__ = "notice_records"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sequence = Column(Integer, nullable=False)

    posted_at = Column(UTCDateTime, nullable=False)
    posted_by = Column(String(64), nullable=True)
    methods = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    proof_refs = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)

    required_lead_time_hours = Column(Integer, nullable=False)
    required_posted_by = Column(UTCDateTime, nullable=True)
    business_hours_lead = Column(Integer, nullable=False, default=0)
    is_timely = Column(Boolean, nullable=False)
    explanation = Column(Text, nullable=False)

    recorded_at = Column(UTCDateTime, nullable=False)

    meeting = relationship("Meeting", back_populates="notices")

    __table_args__ = (
        UniqueConstraint("meeting_id", "sequence", name="uq_notice_records_meeting_sequence"),
    )

    def __repr__(self) -> str:
        return (
            f"<NoticeRecord id={self.id} meeting_id={self.meeting_id} "
            f"posted_at={self.posted_at} timely={self.is_timely}>"
        )
