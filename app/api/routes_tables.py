"""
Table API routes - tables, their pending order and clearing
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.order import PlaceOrderRequest
from app.schemas.table import TableCreate, TableUpdate, TableResponse, TableDetail
from app.schemas.common import MessageResponse
from app.services.order_service import OrderService
from app.services.table_service import TableService
from app.utils.responses import message_response

router = APIRouter()

@router.get("", response_model=List[TableResponse])
async def list_tables(db: Session = Depends(get_db)):
    """List tables ordered by table number"""
    return TableService.list_tables(db)

@router.post("", response_model=TableResponse, status_code=201)
async def create_table(table_data: TableCreate, db: Session = Depends(get_db)):
    """Create a table with a unique table number"""
    return TableService.create_table(
        name=table_data.name,
        table_number=table_data.table_number,
        db=db
    )

@router.get("/{table_id}", response_model=TableDetail)
async def get_table(table_id: str, db: Session = Depends(get_db)):
    """Get a table with its pending order items and waiter"""
    return TableService.get_table(table_id, db)

@router.put("/{table_id}", response_model=TableDetail)
async def update_table(table_id: str, table_update: TableUpdate, db: Session = Depends(get_db)):
    """Rename or renumber a table"""
    return TableService.update_table(
        table_id,
        db,
        name=table_update.name,
        table_number=table_update.table_number
    )

@router.delete("/{table_id}", response_model=MessageResponse)
async def delete_table(table_id: str, db: Session = Depends(get_db)):
    """Delete a table and all of its orders"""
    TableService.delete_table(table_id, db)
    return message_response("Table and all associated orders deleted successfully")

@router.post("/{table_id}/orders", response_model=TableDetail)
async def place_order(table_id: str, order_data: PlaceOrderRequest, db: Session = Depends(get_db)):
    """Place or replace the pending order of a table"""
    orders = None
    if order_data.orders is not None:
        orders = [item.model_dump(by_alias=True) for item in order_data.orders]

    return OrderService.place_order(
        table_id,
        orders,
        db,
        waiter_id=order_data.waiter_id
    )

@router.post("/{table_id}/clear", response_model=TableDetail)
async def clear_orders(table_id: str, db: Session = Depends(get_db)):
    """Complete the table's pending orders"""
    return TableService.clear_orders(table_id, db)
