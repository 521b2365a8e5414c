"""
Table model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime

from app.core.db import Base

def new_id() -> str:
    return uuid.uuid4().hex

class Table(Base):
    __tablename__ = "tables"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    table_number = Column(Integer, unique=True, nullable=False, index=True)
    # Cached; reads recompute from pending orders
    has_orders = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
