"""
Table-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.order import OrderItem
from app.schemas.waiter import WaiterSummary

# Range of a SQL INTEGER column
MAX_TABLE_NUMBER = 2**31 - 1

class TableCreate(BaseModel):
    """Schema for creating a table"""
    name: Optional[str] = None
    table_number: Optional[int] = Field(None, alias="tableNumber", ge=-MAX_TABLE_NUMBER - 1, le=MAX_TABLE_NUMBER)

    class Config:
        populate_by_name = True

class TableUpdate(TableCreate):
    """Schema for updating a table; at least one field is required"""

class TableResponse(BaseModel):
    """Table as listed and created"""
    id: str = Field(alias="_id")
    name: str
    table_number: int = Field(alias="tableNumber")
    has_orders: bool = Field(False, alias="hasOrders")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True

class TableDetail(TableResponse):
    """Table with its pending order items and assigned waiter"""
    orders: List[OrderItem] = []
    waiter: Optional[WaiterSummary] = None
