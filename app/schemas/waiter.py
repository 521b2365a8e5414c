"""
Waiter-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

class WaiterCreate(BaseModel):
    """Schema for creating a waiter"""
    name: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")

    class Config:
        populate_by_name = True

class WaiterUpdate(WaiterCreate):
    """Schema for updating a waiter"""

class WaiterSummary(BaseModel):
    """Reduced waiter view attached to tables"""
    id: str = Field(alias="_id")
    name: str
    phone_number: Optional[str] = Field(None, alias="phoneNumber")

    class Config:
        populate_by_name = True

class WaiterResponse(WaiterSummary):
    """Waiter response schema"""
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
