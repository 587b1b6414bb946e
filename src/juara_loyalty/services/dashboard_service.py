"""Read-only rollups for the admin dashboard."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import InventoryItem, Member, Redemption, RedemptionStatus

LOW_STOCK_THRESHOLD = 10


def compute_stats(session: Session, *, low_stock_threshold: float = LOW_STOCK_THRESHOLD) -> dict[str, int]:
    """Recompute dashboard counters from the committed state."""

    member_totals = session.execute(
        select(
            func.count(Member.member_id),
            func.coalesce(func.sum(Member.points), 0),
        )
    ).one()

    pending = session.execute(
        select(func.count(Redemption.redemption_id)).where(Redemption.status == RedemptionStatus.PENDING)
    ).scalar_one()

    low_stock = session.execute(
        select(func.count(InventoryItem.item_id)).where(InventoryItem.stock <= low_stock_threshold)
    ).scalar_one()

    return {
        "total_members": int(member_totals[0] or 0),
        "total_points": int(member_totals[1] or 0),
        "pending_redemptions": int(pending or 0),
        "low_stock_items": int(low_stock or 0),
    }
