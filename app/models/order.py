"""
Order model
"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, JSON

from app.core.db import Base
from app.models.table import new_id

class OrderStatus(str, enum.Enum):
    """Order status; pending -> completed only"""
    PENDING = "pending"
    COMPLETED = "completed"

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)
    table_id = Column(String(32), ForeignKey("tables.id"), nullable=False, index=True)
    # Line items as a JSON document: name, price, quantity, categoryName, itemId
    items = Column(JSON, nullable=False, default=list)
    total = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    # No foreign key: a deleted waiter leaves the reference dangling
    waiter_id = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
