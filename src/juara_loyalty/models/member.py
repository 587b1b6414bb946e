"""Member domain model."""

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Member(Base):
    """Loyalty member profile and points balance."""

    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("member_code", name="members_member_code_unique"),
        CheckConstraint("points >= 0", name="members_points_non_negative"),
    )

    member_id = Column(String(32), ForeignKey("accounts.account_id", ondelete="RESTRICT"), primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    birth_date = Column(String)
    member_code = Column(String(16), nullable=False)
    points = Column(Integer, nullable=False, default=0)
    address = Column(JSON)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    redemptions = relationship("Redemption", back_populates="member")
