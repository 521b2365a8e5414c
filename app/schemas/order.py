"""
Order-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional, Union
from pydantic import BaseModel, Field

class OrderItemIn(BaseModel):
    """Line item as submitted by the POS client"""
    name: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    category_name: Optional[str] = Field(None, alias="categoryName")
    item_id: Optional[Union[str, int]] = Field(None, alias="itemId")

    class Config:
        populate_by_name = True

class PlaceOrderRequest(BaseModel):
    """Place (or replace) the pending order of a table"""
    orders: Optional[List[OrderItemIn]] = None
    waiter_id: Optional[str] = Field(None, alias="waiterId")

    class Config:
        populate_by_name = True

class OrderItem(BaseModel):
    """Normalized line item"""
    name: str
    price: float
    quantity: int = 1
    category_name: str = Field("Uncategorized", alias="categoryName")
    item_id: Optional[Union[str, int]] = Field(None, alias="itemId")

    class Config:
        populate_by_name = True

class OrderResponse(BaseModel):
    """Order response schema"""
    id: str = Field(alias="_id")
    table_id: str = Field(alias="tableId")
    items: List[OrderItem]
    total: float
    status: str
    waiter_id: Optional[str] = Field(None, alias="waiterId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
