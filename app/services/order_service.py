"""
Order placement service
"""

import logging
import math
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models import OrderStatus
from app.services.repositories import OrderRepo, TableRepo, WaiterRepo
from app.services.table_service import TableService
from app.services.waiter_service import WaiterService

logger = logging.getLogger(__name__)

class OrderService:
    """Service for the single pending order kept per table"""

    DEFAULT_CATEGORY = "Uncategorized"

    @staticmethod
    def _quantity(value: Any) -> int:
        # Absent, zero or unparsable quantities count as one
        try:
            return int(value or 0) or 1
        except (TypeError, ValueError):
            return 1

    @staticmethod
    def normalize_items(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Fill line item defaults and coerce price/quantity to numbers"""
        items = []
        for position, item in enumerate(orders, start=1):
            if not isinstance(item, dict) or not item.get("name") or item.get("price") is None:
                raise ValidationError(f"Order item {position} requires a name and price")
            try:
                price = float(item["price"])
            except (TypeError, ValueError):
                raise ValidationError(f"Order item {position} has an invalid price")
            if not math.isfinite(price):
                raise ValidationError(f"Order item {position} has an invalid price")

            items.append({
                "name": item["name"],
                "price": price,
                "quantity": OrderService._quantity(item.get("quantity")),
                "categoryName": item.get("categoryName") or OrderService.DEFAULT_CATEGORY,
                "itemId": item.get("itemId") or None,
            })
        return items

    @staticmethod
    def compute_total(items: List[Dict[str, Any]]) -> float:
        return sum(item["price"] * item["quantity"] for item in items)

    @staticmethod
    def place_order(
        table_id: str,
        orders: Optional[List[Dict[str, Any]]],
        db: Optional[Session],
        waiter_id: Optional[str] = None
    ) -> Dict:
        """Create the table's pending order, or replace the items of the existing one.

        A supplied waiter is assigned; an omitted one never clears the
        waiter already on the order. The table is flagged as having orders.
        """
        if not orders or not isinstance(orders, list):
            raise ValidationError("Orders must be a non-empty array")

        table = TableRepo.get_by_id(db, table_id)
        if not table:
            raise NotFoundError("Table")

        if waiter_id and not WaiterRepo.get_by_id(db, waiter_id):
            raise NotFoundError("Waiter")

        items = OrderService.normalize_items(orders)
        try:
            total = OrderService.compute_total(items)
        except OverflowError:
            raise ValidationError("Order total is out of range")
        if not math.isfinite(total):
            raise ValidationError("Order total is out of range")

        order = OrderRepo.find_pending(db, table_id)
        if order:
            fields = {"items": items, "total": total}
            if waiter_id:
                fields["waiterId"] = waiter_id
            order = OrderRepo.update(db, order["_id"], fields)
            if not order:
                raise NotFoundError("Order")
            logger.info(f"Replaced pending order {order['_id']} on table {table_id}: {len(items)} item(s), total {total}")
        else:
            order = OrderRepo.create(db, table_id, items, total, waiter_id or None)
            logger.info(f"Opened order {order['_id']} on table {table_id}: {len(items)} item(s), total {total}")

        table = TableRepo.update(db, table_id, {"hasOrders": True}) or table

        waiter = WaiterService.waiter_summary(order.get("waiterId"), db)
        return TableService.table_view(table, order, waiter)

    @staticmethod
    def list_orders(
        db: Optional[Session],
        status: Optional[str] = None,
        table_id: Optional[str] = None
    ) -> List[Dict]:
        """All orders, newest first"""
        valid = [s.value for s in OrderStatus]
        if status and status not in valid:
            raise ValidationError(f"Status must be one of: {', '.join(valid)}")
        return OrderRepo.list_all(db, status=status, table_id=table_id)
