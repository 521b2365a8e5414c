"""
Pydantic schemas package
"""

from .common import *
from .order import *
from .table import *
from .waiter import *

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "OrderItemIn",
    "PlaceOrderRequest",
    "OrderItem",
    "OrderResponse",
    "TableCreate",
    "TableUpdate",
    "TableResponse",
    "TableDetail",
    "WaiterCreate",
    "WaiterUpdate",
    "WaiterSummary",
    "WaiterResponse",
]
