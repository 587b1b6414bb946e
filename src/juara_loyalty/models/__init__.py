"""SQLAlchemy models for the loyalty service."""

from .account import Account, Role
from .inventory import InventoryItem, InventoryUsageLog
from .member import Member
from .redemption import Redemption, RedemptionStatus
from .store_settings import STORE_SETTINGS_ID, StoreSettings

__all__ = [
    "Account",
    "InventoryItem",
    "InventoryUsageLog",
    "Member",
    "Redemption",
    "RedemptionStatus",
    "Role",
    "STORE_SETTINGS_ID",
    "StoreSettings",
]
