"""Pydantic schemas for inventory tracking."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    stock: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=16)


class InventoryItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: UUID
    name: str
    stock: float
    unit: str


class UsageCreate(BaseModel):
    quantity_used: float = Field(..., gt=0)


class UsageLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    log_id: UUID
    item_id: UUID
    item_name: str
    quantity_used: float
    unit: str
    recorded_at: datetime
