"""Inventory stock and usage log models."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class InventoryItem(Base):
    """Raw material tracked by stock quantity."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        UniqueConstraint("name", name="inventory_items_name_unique"),
        CheckConstraint("stock >= 0", name="inventory_items_stock_non_negative"),
    )

    item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    stock = Column(Float, nullable=False, default=0)
    unit = Column(String(16), nullable=False)

    usage_logs = relationship("InventoryUsageLog", back_populates="item")


class InventoryUsageLog(Base):
    """Append-only record of stock consumed."""

    __tablename__ = "inventory_usage_logs"

    log_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id = Column(Uuid, ForeignKey("inventory_items.item_id", ondelete="CASCADE"), nullable=False)
    item_name = Column(String, nullable=False)
    quantity_used = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False)
    recorded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    item = relationship("InventoryItem", back_populates="usage_logs")
