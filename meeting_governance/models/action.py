# meeting_governance/models/action.py
from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class MeetingAction(Base):
    """
    A motion, resolution or ordinance put before the body.
    """

    __tablename__ = "meeting_actions"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    agenda_item_id = Column(String(64), nullable=True)

    action_type = Column(String(32), nullable=False, default="motion")
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)

    moved_by = Column(String(36), nullable=False)
    moved_at = Column(UTCDateTime, nullable=False)
    seconded_by = Column(String(36), nullable=True)
    seconded_at = Column(UTCDateTime, nullable=True)

    result = Column(String(32), nullable=False, default="pending")
    closed_at = Column(UTCDateTime, nullable=True)
    closed_by = Column(String(64), nullable=True)

    created_by = Column(String(64), nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    votes = relationship(
        "VoteRecord",
        back_populates="action",
        lazy="selectin",
        order_by="VoteRecord.voted_at",
    )

    def __repr__(self) -> str:
        return f"<MeetingAction id={self.id} type={self.action_type} result={self.result}>"


class VoteRecord(Base):
    """
    One member's vote on one action. A member changing their vote updates
    the existing row.
    """

    __tablename__ = "vote_records"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    action_id = Column(
        String(36),
        ForeignKey("meeting_actions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id = Column(
        String(36),
        ForeignKey("governing_body_members.id"),
        nullable=False,
    )
    value = Column(String(16), nullable=False)
    voted_at = Column(UTCDateTime, nullable=False)

    action = relationship("MeetingAction", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("action_id", "member_id", name="uq_vote_records_action_member"),
    )

    def __repr__(self) -> str:
        return f"<VoteRecord action_id={self.action_id} member_id={self.member_id} value={self.value}>"
