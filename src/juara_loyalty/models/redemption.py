"""Redemption request model."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class RedemptionStatus(str, enum.Enum):
    """Possible redemption states; approved and rejected are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Redemption(Base):
    """A member's request to exchange points, processed once by an admin."""

    __tablename__ = "redemptions"
    __table_args__ = (
        CheckConstraint("points_to_redeem > 0", name="redemptions_points_positive"),
    )

    redemption_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id = Column(String(32), ForeignKey("members.member_id", ondelete="RESTRICT"), nullable=False)
    # Snapshot taken when the request is made.
    member_code = Column(String(16), nullable=False)
    member_name = Column(String, nullable=False)
    points_to_redeem = Column(Integer, nullable=False)
    status = Column(
        SAEnum(
            RedemptionStatus,
            name="redemption_status",
            values_callable=lambda states: [s.value for s in states],
        ),
        nullable=False,
        default=RedemptionStatus.PENDING,
    )
    requested_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    processed_at = Column(DateTime(timezone=True))

    member = relationship("Member", back_populates="redemptions")
