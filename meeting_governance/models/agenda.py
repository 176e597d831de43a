# meeting_governance/models/agenda.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class Agenda(Base):
    """
    The published order of business of a meeting. One row per meeting.
    """

    __tablename__ = "agendas"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    meeting_id = Column(
        String(36),
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    status = Column(String(32), nullable=False, default="draft")
    version = Column(Integer, nullable=False, default=1)
    title = Column(String(300), nullable=True)
    preamble = Column(Text, nullable=True)
    postamble = Column(Text, nullable=True)

    created_by = Column(String(64), nullable=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)
    approved_at = Column(UTCDateTime, nullable=True)
    approved_by = Column(String(64), nullable=True)
    published_at = Column(UTCDateTime, nullable=True)
    published_by = Column(String(64), nullable=True)
    amended_at = Column(UTCDateTime, nullable=True)
    amended_by = Column(String(64), nullable=True)

    items = relationship(
        "AgendaItem",
        back_populates="agenda",
        lazy="selectin",
        order_by="AgendaItem.order_index",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Agenda id={self.id} meeting_id={self.meeting_id} status={self.status}>"


class AgendaItem(Base):
    __tablename__ = "agenda_items"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    agenda_id = Column(
        String(36),
        ForeignKey("agendas.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meeting_id = Column(String(36), nullable=False, index=True)

    order_index = Column(Integer, nullable=False)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    item_type = Column(String(32), nullable=False, default="regular")
    status = Column(String(32), nullable=False, default="pending")
    duration_minutes = Column(Integer, nullable=True)
    requires_vote = Column(Boolean, nullable=False, default=False)
    requires_public_hearing = Column(Boolean, nullable=False, default=False)
    presenter_name = Column(String(200), nullable=True)
    discussion_notes = Column(Text, nullable=True)

    agenda = relationship("Agenda", back_populates="items")

    def __repr__(self) -> str:
        return f"<AgendaItem id={self.id} order={self.order_index} status={self.status}>"
