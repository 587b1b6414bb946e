"""Public schema exports."""

from .auth import AccessToken, RegistrationCreate, RegistrationReceipt, SignInRequest
from .chat import ChatMessageCreate, ChatSessionRead
from .dashboard import DashboardStats
from .inventory import InventoryItemCreate, InventoryItemRead, UsageCreate, UsageLogRead
from .member import Address, MemberLookupResult, MemberQRCode, MemberRead, PointsAwardReceipt
from .navigation import NavigationResolution
from .redemption import RedemptionCreate, RedemptionDecision, RedemptionRead
from .store_settings import StoreSettingsRead, StoreSettingsUpdate

__all__ = [
	"AccessToken",
	"Address",
	"ChatMessageCreate",
	"ChatSessionRead",
	"DashboardStats",
	"InventoryItemCreate",
	"InventoryItemRead",
	"MemberLookupResult",
	"MemberQRCode",
	"MemberRead",
	"NavigationResolution",
	"PointsAwardReceipt",
	"RedemptionCreate",
	"RedemptionDecision",
	"RedemptionRead",
	"RegistrationCreate",
	"RegistrationReceipt",
	"SignInRequest",
	"StoreSettingsRead",
	"StoreSettingsUpdate",
	"UsageCreate",
	"UsageLogRead",
]
