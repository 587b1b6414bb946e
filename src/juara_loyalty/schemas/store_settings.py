"""Pydantic schemas for store settings."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .member import Address


class StoreSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: Optional[Address]
    redemption_points: int
    points_per_transaction: int


class StoreSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    address: Optional[Address] = None
    redemption_points: Optional[int] = Field(None, gt=0)
    points_per_transaction: Optional[int] = Field(None, gt=0)
