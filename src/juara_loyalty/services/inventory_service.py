"""Domain logic for inventory stock and usage."""

from __future__ import annotations

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, PreconditionViolation
from ..models import InventoryItem, InventoryUsageLog
from ..utils.datetime import utcnow

logger = logging.getLogger(__name__)


def _format_quantity(value: float) -> str:
    return f"{value:g}"


def list_items(session: Session) -> Sequence[InventoryItem]:
    return session.execute(select(InventoryItem).order_by(InventoryItem.name.asc())).scalars().all()


def create_item(session: Session, *, name: str, stock: float, unit: str) -> InventoryItem:
    name = name.strip()
    existing = session.execute(select(InventoryItem).where(InventoryItem.name == name)).scalar_one_or_none()
    if existing is not None:
        raise PreconditionViolation(f"Item {name} already exists.", status_code=409)
    if stock < 0:
        raise PreconditionViolation("Stock cannot be negative.")

    item = InventoryItem(name=name, stock=stock, unit=unit.strip())
    session.add(item)
    session.flush()
    session.refresh(item)
    return item


def record_usage(session: Session, *, item_id: UUID, quantity_used: float) -> InventoryUsageLog:
    """Decrement stock and log the usage in one transaction."""

    if quantity_used <= 0:
        raise PreconditionViolation("Quantity used must be positive.")

    item = session.execute(
        select(InventoryItem).where(InventoryItem.item_id == item_id).with_for_update()
    ).scalar_one_or_none()
    if item is None:
        raise NotFoundError("Item not found in inventory.")

    if item.stock < quantity_used:
        raise PreconditionViolation(
            f"Insufficient stock for {item.name}. Only {_format_quantity(item.stock)} {item.unit} left."
        )

    item.stock = item.stock - quantity_used
    log = InventoryUsageLog(
        item_id=item.item_id,
        item_name=item.name,
        quantity_used=quantity_used,
        unit=item.unit,
        recorded_at=utcnow(),
    )
    session.add(log)
    session.flush()
    logger.info("recorded usage of %s %s %s", _format_quantity(quantity_used), item.unit, item.name)
    return log


def recent_usage(session: Session, *, limit: int = 5) -> Sequence[InventoryUsageLog]:
    stmt = select(InventoryUsageLog).order_by(InventoryUsageLog.recorded_at.desc()).limit(limit)
    return session.execute(stmt).scalars().all()
