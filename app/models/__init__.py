"""
Database models package
"""

from .table import Table
from .order import Order, OrderStatus
from .waiter import Waiter

__all__ = ["Table", "Order", "OrderStatus", "Waiter"]
