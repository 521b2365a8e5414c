"""
Waiter API routes
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.common import MessageResponse
from app.schemas.waiter import WaiterCreate, WaiterUpdate, WaiterResponse
from app.services.waiter_service import WaiterService
from app.utils.responses import message_response

router = APIRouter()

@router.get("", response_model=List[WaiterResponse])
async def list_waiters(db: Session = Depends(get_db)):
    return WaiterService.list_waiters(db)

@router.post("", response_model=WaiterResponse, status_code=201)
async def create_waiter(waiter_data: WaiterCreate, db: Session = Depends(get_db)):
    return WaiterService.create_waiter(waiter_data.name, waiter_data.phone_number, db)

@router.get("/{waiter_id}", response_model=WaiterResponse)
async def get_waiter(waiter_id: str, db: Session = Depends(get_db)):
    return WaiterService.get_waiter(waiter_id, db)

@router.put("/{waiter_id}", response_model=WaiterResponse)
async def update_waiter(waiter_id: str, waiter_update: WaiterUpdate, db: Session = Depends(get_db)):
    return WaiterService.update_waiter(
        waiter_id,
        db,
        name=waiter_update.name,
        phone_number=waiter_update.phone_number
    )

@router.delete("/{waiter_id}", response_model=MessageResponse)
async def delete_waiter(waiter_id: str, db: Session = Depends(get_db)):
    WaiterService.delete_waiter(waiter_id, db)
    return message_response("Waiter deleted successfully")
