"""
Table management service
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.services.repositories import OrderRepo, TableRepo
from app.services.waiter_service import WaiterService

logger = logging.getLogger(__name__)

class TableService:
    """Service for table CRUD and table/order bookkeeping"""

    @staticmethod
    def table_summary(table: Dict, has_orders: bool) -> Dict:
        return {
            "_id": table["_id"],
            "name": table.get("name"),
            "tableNumber": table.get("tableNumber"),
            "hasOrders": has_orders,
            "createdAt": table.get("createdAt"),
            "updatedAt": table.get("updatedAt"),
        }

    @staticmethod
    def table_view(table: Dict, order: Optional[Dict], waiter: Optional[Dict] = None) -> Dict:
        """Table plus the items of its pending order and the waiter summary"""
        view = TableService.table_summary(table, has_orders=order is not None)
        view["orders"] = list(order["items"]) if order else []
        view["waiter"] = waiter
        return view

    @staticmethod
    def _current_view(table: Dict, db: Optional[Session]) -> Dict:
        order = OrderRepo.find_pending(db, table["_id"])
        waiter = WaiterService.waiter_summary(order.get("waiterId") if order else None, db)
        return TableService.table_view(table, order, waiter)

    @staticmethod
    def list_tables(db: Optional[Session]) -> List[Dict]:
        """All tables by table number, hasOrders recomputed from pending orders"""
        return [
            TableService.table_summary(
                table,
                has_orders=OrderRepo.find_pending(db, table["_id"]) is not None
            )
            for table in TableRepo.list_all(db)
        ]

    @staticmethod
    def create_table(name: Optional[str], table_number: Optional[int], db: Optional[Session]) -> Dict:
        if not name or not table_number:
            raise ValidationError("Table name and number are required")

        if TableRepo.find_by_number(db, table_number):
            raise ConflictError("Table number already exists")

        table = TableRepo.create(db, name, table_number)
        logger.info(f"Created table {table['_id']} (number {table_number})")
        return TableService.table_summary(table, has_orders=bool(table.get("hasOrders")))

    @staticmethod
    def update_table(
        table_id: str,
        db: Optional[Session],
        name: Optional[str] = None,
        table_number: Optional[int] = None
    ) -> Dict:
        if not name and not table_number:
            raise ValidationError("At least name or table number must be provided")

        fields = {}
        if name:
            fields["name"] = name
        if table_number:
            if TableRepo.find_by_number(db, table_number, exclude_id=table_id):
                raise ConflictError("Table number already exists")
            fields["tableNumber"] = table_number

        table = TableRepo.update(db, table_id, fields)
        if not table:
            raise NotFoundError("Table")

        logger.info(f"Updated table {table_id}: {', '.join(fields)}")
        return TableService._current_view(table, db)

    @staticmethod
    def delete_table(table_id: str, db: Optional[Session]) -> None:
        """Delete a table and every order that references it"""
        if not TableRepo.delete_with_orders(db, table_id):
            raise NotFoundError("Table")
        logger.info(f"Deleted table {table_id} and its orders")

    @staticmethod
    def get_table(table_id: str, db: Optional[Session]) -> Dict:
        table = TableRepo.get_by_id(db, table_id)
        if not table:
            raise NotFoundError("Table")
        return TableService._current_view(table, db)

    @staticmethod
    def clear_orders(table_id: str, db: Optional[Session]) -> Dict:
        """Complete the table's pending orders and reset its hasOrders flag"""
        table = TableRepo.get_by_id(db, table_id)
        if not table:
            raise NotFoundError("Table")

        completed = OrderRepo.complete_pending(db, table_id)
        table = TableRepo.update(db, table_id, {"hasOrders": False}) or table

        logger.info(f"Cleared table {table_id}: {completed} order(s) completed")
        return TableService.table_view(table, None)
