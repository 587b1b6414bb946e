"""Admin dashboard response schema."""

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """Rollups recomputed on every request."""

    total_members: int = Field(..., ge=0)
    total_points: int = Field(..., ge=0)
    pending_redemptions: int = Field(..., ge=0)
    low_stock_items: int = Field(..., ge=0)
