"""
Order API routes
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.order import OrderResponse
from app.services.order_service import OrderService

router = APIRouter()

@router.get("", response_model=List[OrderResponse])
async def list_orders(
    status: Optional[str] = Query(None),
    table_id: Optional[str] = Query(None, alias="tableId"),
    db: Session = Depends(get_db)
):
    """List orders, newest first"""
    return OrderService.list_orders(db, status=status, table_id=table_id)
