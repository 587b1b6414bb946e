"""Service layer exports."""

from . import (
	assistant_service,
	auth_service,
	dashboard_service,
	inventory_service,
	member_service,
	navigation_service,
	qr_service,
	redemption_service,
	settings_service,
)

__all__ = [
	"assistant_service",
	"auth_service",
	"dashboard_service",
	"inventory_service",
	"member_service",
	"navigation_service",
	"qr_service",
	"redemption_service",
	"settings_service",
]
