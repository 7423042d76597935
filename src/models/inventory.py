from datetime import datetime
from typing import Optional

from pydantic import Field

from src.models.common import ApiModel, InventoryCategory


class InventoryItemCreate(ApiModel):
    name: str = Field(min_length=1)
    category: InventoryCategory
    quantity: int = Field(ge=0)
    unit: str = Field(min_length=1)
    # min < max is checked by the client form only
    min_threshold: Optional[int] = Field(default=None, ge=0)
    max_threshold: Optional[int] = Field(default=None, ge=0)
    cost: float = Field(ge=0)
    supplier: Optional[str] = None
    expiry_date: Optional[datetime] = None


class InventoryItemUpdate(ApiModel):
    non_nullable = ("name", "category", "quantity", "unit", "cost")

    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[InventoryCategory] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, min_length=1)
    min_threshold: Optional[int] = Field(default=None, ge=0)
    max_threshold: Optional[int] = Field(default=None, ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    expiry_date: Optional[datetime] = None
    last_restocked: Optional[datetime] = None


class StockChange(ApiModel):
    """Body of the restock and use endpoints; the quantity is checked by the handler."""

    quantity: Optional[int] = None
