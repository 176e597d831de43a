# meeting_governance/models/governing_body.py
from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from meeting_governance.db.base import Base
from meeting_governance.db.types import UTCDateTime


class GoverningBody(Base):
    """
    A council, board or commission that holds meetings.

    Carries the quorum and pass-threshold rules used by the quorum engine and
    an optional notice lead-time override for its meetings.
    """

    __tablename__ = "governing_bodies"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    code = Column(String(32), nullable=True)

    quorum_rule = Column(String(32), nullable=False, default="majority")
    quorum_number = Column(Integer, nullable=True)
    pass_threshold = Column(String(32), nullable=False, default="simple_majority")
    notice_lead_time_hours = Column(Integer, nullable=True)

    created_at = Column(UTCDateTime, nullable=False)

    members = relationship(
        "GoverningBodyMember",
        back_populates="body",
        lazy="selectin",
        order_by="GoverningBodyMember.seat_number",
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_governing_bodies_tenant_name"),
    )

    def __repr__(self) -> str:
        return f"<GoverningBody id={self.id} tenant={self.tenant_id} name={self.name!r}>"


class GoverningBodyMember(Base):
    """
    One seat holder on a governing body. The roster used for quorum math is
    the set of active voting members.
    """

    __tablename__ = "governing_body_members"

    id = Column(String(36), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    body_id = Column(
        String(36),
        ForeignKey("governing_bodies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    display_name = Column(String(200), nullable=False)
    title = Column(String(100), nullable=True)
    seat_number = Column(Integer, nullable=True)
    is_voting = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(UTCDateTime, nullable=False)

    body = relationship("GoverningBody", back_populates="members")

    def __repr__(self) -> str:
        return f"<GoverningBodyMember id={self.id} body_id={self.body_id} name={self.display_name!r}>"
