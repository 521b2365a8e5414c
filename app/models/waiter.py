"""
Waiter model
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime

from app.core.db import Base
from app.models.table import new_id

class Waiter(Base):
    __tablename__ = "waiters"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
