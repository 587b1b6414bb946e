"""Store settings persistence."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..models import STORE_SETTINGS_ID, StoreSettings


def get_store_settings(session: Session, *, defaults: Settings | None = None) -> StoreSettings:
    """Return the settings row, creating it from configured defaults when missing."""

    store = session.execute(
        select(StoreSettings).where(StoreSettings.settings_id == STORE_SETTINGS_ID)
    ).scalar_one_or_none()
    if store is None:
        defaults = defaults or get_settings()
        store = StoreSettings(
            settings_id=STORE_SETTINGS_ID,
            redemption_points=defaults.default_redemption_points,
            points_per_transaction=defaults.default_points_per_transaction,
        )
        session.add(store)
        session.flush()
    return store


def update_store_settings(
    session: Session,
    *,
    address: Optional[dict[str, Any]] = None,
    redemption_points: Optional[int] = None,
    points_per_transaction: Optional[int] = None,
) -> StoreSettings:
    """Merge the supplied fields into the settings row."""

    store = get_store_settings(session)
    if address is not None:
        store.address = address
    if redemption_points is not None:
        store.redemption_points = redemption_points
    if points_per_transaction is not None:
        store.points_per_transaction = points_per_transaction
    session.flush()
    return store
