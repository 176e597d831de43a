# meeting_governance/models/participation.py
from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class Recusal(Base):
    """
    A member's declared conflict. A null agenda_item_id means the recusal
    covers the whole meeting.
    """

    __tablename__ = "recusals"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    agenda_item_id = Column(String(64), nullable=True)
    member_id = Column(
        String(36),
        ForeignKey("governing_body_members.id"),
        nullable=False,
        index=True,
    )

    reason = Column(Text, nullable=False)
    statutory_citation = Column(String(100), nullable=True)
    disclosed_at = Column(UTCDateTime, nullable=False)
    recorded_by = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        scope = self.agenda_item_id or "meeting"
        return f"<Recusal id={self.id} member_id={self.member_id} scope={scope}>"


class AttendanceRecord(Base):
    """
    Attendance of one member at one meeting.
    """

    __tablename__ = "attendance_records"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id = Column(
        String(36),
        ForeignKey("governing_body_members.id"),
        nullable=False,
    )

    status = Column(String(32), nullable=False, default="present")
    arrived_at = Column(UTCDateTime, nullable=True)
    departed_at = Column(UTCDateTime, nullable=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "meeting_id",
            "member_id",
            name="uq_attendance_records_meeting_member",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<AttendanceRecord meeting_id={self.meeting_id} "
            f"member_id={self.member_id} status={self.status}>"
        )
