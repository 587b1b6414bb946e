"""Store-wide settings model."""

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Integer, String

from ..core.database import Base
from ..utils.datetime import utcnow

STORE_SETTINGS_ID = "store"


class StoreSettings(Base):
    """Singleton row holding the store address and points rules."""

    __tablename__ = "store_settings"
    __table_args__ = (
        CheckConstraint("redemption_points > 0", name="store_settings_redemption_points_positive"),
        CheckConstraint("points_per_transaction > 0", name="store_settings_points_per_transaction_positive"),
    )

    settings_id = Column(String(16), primary_key=True, default=STORE_SETTINGS_ID)
    address = Column(JSON)
    redemption_points = Column(Integer, nullable=False)
    points_per_transaction = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
