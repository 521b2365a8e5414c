"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Every backend-neutral method returns plain documents shaped like the API
payloads (``_id`` plus camelCase fields), so services never care which
store answered. The ``*_sql`` / ``*_fs`` methods hold the per-backend code.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ConflictError
from app.models import Order, OrderStatus, Table, Waiter
from app.services.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)

TABLES = "tables"
ORDERS = "orders"
WAITERS = "waiters"

# Firestore rejects write batches larger than this
FIRESTORE_BATCH_LIMIT = 500


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def _now_iso() -> str:
    return datetime.utcnow().isoformat()


def _commit_batched(fs, writes: Iterable[Tuple[str, Any, Optional[Dict[str, Any]]]]) -> int:
    """Apply ("delete" | "update", ref, data) writes in batches of FIRESTORE_BATCH_LIMIT"""
    batch = fs.batch()
    pending = 0
    count = 0
    for op, ref, data in writes:
        if op == "delete":
            batch.delete(ref)
        else:
            batch.update(ref, data)
        pending += 1
        count += 1
        if pending == FIRESTORE_BATCH_LIMIT:
            batch.commit()
            batch = fs.batch()
            pending = 0
    if pending:
        batch.commit()
    return count


def _fs_doc(snapshot) -> Dict[str, Any]:
    data = snapshot.to_dict()
    data["_id"] = snapshot.id
    return data


def table_doc(table: Table) -> Dict[str, Any]:
    return {
        "_id": table.id,
        "name": table.name,
        "tableNumber": table.table_number,
        "hasOrders": bool(table.has_orders),
        "createdAt": table.created_at,
        "updatedAt": table.updated_at,
    }


def order_doc(order: Order) -> Dict[str, Any]:
    return {
        "_id": order.id,
        "tableId": order.table_id,
        "items": list(order.items or []),
        "total": order.total,
        "status": order.status,
        "waiterId": order.waiter_id,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
    }


def waiter_doc(waiter: Waiter) -> Dict[str, Any]:
    return {
        "_id": waiter.id,
        "name": waiter.name,
        "phoneNumber": waiter.phone_number,
        "createdAt": waiter.created_at,
        "updatedAt": waiter.updated_at,
    }


# -------- Table repository --------

class TableRepo:
    # document field -> column attribute
    FIELDS = {"name": "name", "tableNumber": "table_number", "hasOrders": "has_orders"}

    @staticmethod
    def list_all(db: Optional[Session]) -> List[Dict[str, Any]]:
        if use_firestore():
            return TableRepo.list_all_fs()
        return TableRepo.list_all_sql(db)

    @staticmethod
    def get_by_id(db: Optional[Session], table_id: str) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return TableRepo.get_by_id_fs(table_id)
        return TableRepo.get_by_id_sql(db, table_id)

    @staticmethod
    def find_by_number(db: Optional[Session], table_number: int, exclude_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return TableRepo.find_by_number_fs(table_number, exclude_id)
        return TableRepo.find_by_number_sql(db, table_number, exclude_id)

    @staticmethod
    def create(db: Optional[Session], name: str, table_number: int) -> Dict[str, Any]:
        if use_firestore():
            return TableRepo.create_fs(name, table_number)
        return TableRepo.create_sql(db, name, table_number)

    @staticmethod
    def update(db: Optional[Session], table_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return TableRepo.update_fs(table_id, fields)
        return TableRepo.update_sql(db, table_id, fields)

    @staticmethod
    def delete_with_orders(db: Optional[Session], table_id: str) -> bool:
        """Delete the table's orders and then the table; True if the table existed"""
        if use_firestore():
            return TableRepo.delete_with_orders_fs(table_id)
        return TableRepo.delete_with_orders_sql(db, table_id)

    @staticmethod
    def list_all_sql(db: Session) -> List[Dict[str, Any]]:
        return [table_doc(t) for t in db.query(Table).order_by(Table.table_number).all()]

    @staticmethod
    def get_by_id_sql(db: Session, table_id: str) -> Optional[Dict[str, Any]]:
        table = db.query(Table).filter(Table.id == table_id).first()
        return table_doc(table) if table else None

    @staticmethod
    def find_by_number_sql(db: Session, table_number: int, exclude_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        query = db.query(Table).filter(Table.table_number == table_number)
        if exclude_id:
            query = query.filter(Table.id != exclude_id)
        table = query.first()
        return table_doc(table) if table else None

    @staticmethod
    def create_sql(db: Session, name: str, table_number: int) -> Dict[str, Any]:
        table = Table(name=name, table_number=table_number, has_orders=False)
        db.add(table)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Table number already exists")
        db.refresh(table)
        return table_doc(table)

    @staticmethod
    def update_sql(db: Session, table_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        table = db.query(Table).filter(Table.id == table_id).first()
        if not table:
            return None
        for key, value in fields.items():
            setattr(table, TableRepo.FIELDS[key], value)
        table.updated_at = datetime.utcnow()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Table number already exists")
        db.refresh(table)
        return table_doc(table)

    @staticmethod
    def delete_with_orders_sql(db: Session, table_id: str) -> bool:
        db.query(Order).filter(Order.table_id == table_id).delete(synchronize_session=False)
        deleted = db.query(Table).filter(Table.id == table_id).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    # Firestore shape: collection "tables/{auto_id}" with camelCase fields
    @staticmethod
    def list_all_fs() -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(TABLES).order_by("tableNumber").get()
        return [_fs_doc(d) for d in docs]

    @staticmethod
    def get_by_id_fs(table_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        doc = fs.collection(TABLES).document(table_id).get()
        return _fs_doc(doc) if doc.exists else None

    @staticmethod
    def find_by_number_fs(table_number: int, exclude_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(TABLES).where("tableNumber", "==", table_number).get()
        for d in docs:
            if d.id != exclude_id:
                return _fs_doc(d)
        return None

    @staticmethod
    def create_fs(name: str, table_number: int) -> Dict[str, Any]:
        fs = get_firestore_client()
        ref = fs.collection(TABLES).document()
        now = _now_iso()
        data = {
            "name": name,
            "tableNumber": table_number,
            "hasOrders": False,
            "createdAt": now,
            "updatedAt": now,
        }
        ref.set(data)
        return {"_id": ref.id, **data}

    @staticmethod
    def update_fs(table_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        ref = fs.collection(TABLES).document(table_id)
        if not ref.get().exists:
            return None
        ref.set({**fields, "updatedAt": _now_iso()}, merge=True)
        return _fs_doc(ref.get())

    @staticmethod
    def delete_with_orders_fs(table_id: str) -> bool:
        fs = get_firestore_client()
        ref = fs.collection(TABLES).document(table_id)
        existed = ref.get().exists
        writes = [("delete", d.reference, None) for d in fs.collection(ORDERS).where("tableId", "==", table_id).get()]
        # Table last, so it only goes once its orders are gone
        if existed:
            writes.append(("delete", ref, None))
        _commit_batched(fs, writes)
        return existed


# -------- Order repository --------

class OrderRepo:
    FIELDS = {"items": "items", "total": "total", "status": "status", "waiterId": "waiter_id"}

    @staticmethod
    def find_pending(db: Optional[Session], table_id: str) -> Optional[Dict[str, Any]]:
        """Newest pending order of a table"""
        if use_firestore():
            return OrderRepo.find_pending_fs(table_id)
        return OrderRepo.find_pending_sql(db, table_id)

    @staticmethod
    def create(db: Optional[Session], table_id: str, items: List[Dict[str, Any]], total: float, waiter_id: Optional[str] = None) -> Dict[str, Any]:
        if use_firestore():
            return OrderRepo.create_fs(table_id, items, total, waiter_id)
        return OrderRepo.create_sql(db, table_id, items, total, waiter_id)

    @staticmethod
    def update(db: Optional[Session], order_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return OrderRepo.update_fs(order_id, fields)
        return OrderRepo.update_sql(db, order_id, fields)

    @staticmethod
    def complete_pending(db: Optional[Session], table_id: str) -> int:
        """Mark every pending order of a table completed; returns how many changed"""
        if use_firestore():
            return OrderRepo.complete_pending_fs(table_id)
        return OrderRepo.complete_pending_sql(db, table_id)

    @staticmethod
    def list_all(db: Optional[Session], status: Optional[str] = None, table_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if use_firestore():
            return OrderRepo.list_all_fs(status, table_id)
        return OrderRepo.list_all_sql(db, status, table_id)

    @staticmethod
    def find_pending_sql(db: Session, table_id: str) -> Optional[Dict[str, Any]]:
        order = db.query(Order).filter(
            Order.table_id == table_id,
            Order.status == OrderStatus.PENDING.value
        ).order_by(Order.created_at.desc()).first()
        return order_doc(order) if order else None

    @staticmethod
    def create_sql(db: Session, table_id: str, items: List[Dict[str, Any]], total: float, waiter_id: Optional[str] = None) -> Dict[str, Any]:
        order = Order(
            table_id=table_id,
            items=items,
            total=total,
            status=OrderStatus.PENDING.value,
            waiter_id=waiter_id
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order_doc(order)

    @staticmethod
    def update_sql(db: Session, order_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            return None
        for key, value in fields.items():
            setattr(order, OrderRepo.FIELDS[key], value)
        order.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(order)
        return order_doc(order)

    @staticmethod
    def complete_pending_sql(db: Session, table_id: str) -> int:
        count = db.query(Order).filter(
            Order.table_id == table_id,
            Order.status == OrderStatus.PENDING.value
        ).update(
            {Order.status: OrderStatus.COMPLETED.value, Order.updated_at: datetime.utcnow()},
            synchronize_session=False
        )
        db.commit()
        return count

    @staticmethod
    def list_all_sql(db: Session, status: Optional[str] = None, table_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = db.query(Order)
        if status:
            query = query.filter(Order.status == status)
        if table_id:
            query = query.filter(Order.table_id == table_id)
        return [order_doc(o) for o in query.order_by(Order.created_at.desc()).all()]

    # Firestore shape: collection "orders/{auto_id}", tableId/waiterId hold document ids
    @staticmethod
    def find_pending_fs(table_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(ORDERS).where("tableId", "==", table_id).where("status", "==", OrderStatus.PENDING.value).get()
        orders = sorted((_fs_doc(d) for d in docs), key=lambda o: o.get("createdAt") or "", reverse=True)
        return orders[0] if orders else None

    @staticmethod
    def create_fs(table_id: str, items: List[Dict[str, Any]], total: float, waiter_id: Optional[str] = None) -> Dict[str, Any]:
        fs = get_firestore_client()
        ref = fs.collection(ORDERS).document()
        now = _now_iso()
        data = {
            "tableId": table_id,
            "items": items,
            "total": total,
            "status": OrderStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
        }
        if waiter_id:
            data["waiterId"] = waiter_id
        ref.set(data)
        return {"_id": ref.id, "waiterId": None, **data}

    @staticmethod
    def update_fs(order_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        ref = fs.collection(ORDERS).document(order_id)
        if not ref.get().exists:
            return None
        ref.set({**fields, "updatedAt": _now_iso()}, merge=True)
        return _fs_doc(ref.get())

    @staticmethod
    def complete_pending_fs(table_id: str) -> int:
        fs = get_firestore_client()
        docs = fs.collection(ORDERS).where("tableId", "==", table_id).where("status", "==", OrderStatus.PENDING.value).get()
        now = _now_iso()
        return _commit_batched(fs, (
            ("update", d.reference, {"status": OrderStatus.COMPLETED.value, "updatedAt": now})
            for d in docs
        ))

    @staticmethod
    def list_all_fs(status: Optional[str] = None, table_id: Optional[str] = None) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        query = fs.collection(ORDERS)
        if status:
            query = query.where("status", "==", status)
        if table_id:
            query = query.where("tableId", "==", table_id)
        orders = [_fs_doc(d) for d in query.get()]
        return sorted(orders, key=lambda o: o.get("createdAt") or "", reverse=True)


# -------- Waiter repository --------

class WaiterRepo:
    FIELDS = {"name": "name", "phoneNumber": "phone_number"}

    @staticmethod
    def list_all(db: Optional[Session]) -> List[Dict[str, Any]]:
        if use_firestore():
            return WaiterRepo.list_all_fs()
        return WaiterRepo.list_all_sql(db)

    @staticmethod
    def get_by_id(db: Optional[Session], waiter_id: str) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return WaiterRepo.get_by_id_fs(waiter_id)
        return WaiterRepo.get_by_id_sql(db, waiter_id)

    @staticmethod
    def create(db: Optional[Session], name: str, phone_number: Optional[str] = None) -> Dict[str, Any]:
        if use_firestore():
            return WaiterRepo.create_fs(name, phone_number)
        return WaiterRepo.create_sql(db, name, phone_number)

    @staticmethod
    def update(db: Optional[Session], waiter_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if use_firestore():
            return WaiterRepo.update_fs(waiter_id, fields)
        return WaiterRepo.update_sql(db, waiter_id, fields)

    @staticmethod
    def delete(db: Optional[Session], waiter_id: str) -> bool:
        if use_firestore():
            return WaiterRepo.delete_fs(waiter_id)
        return WaiterRepo.delete_sql(db, waiter_id)

    @staticmethod
    def list_all_sql(db: Session) -> List[Dict[str, Any]]:
        return [waiter_doc(w) for w in db.query(Waiter).order_by(Waiter.name).all()]

    @staticmethod
    def get_by_id_sql(db: Session, waiter_id: str) -> Optional[Dict[str, Any]]:
        waiter = db.query(Waiter).filter(Waiter.id == waiter_id).first()
        return waiter_doc(waiter) if waiter else None

    @staticmethod
    def create_sql(db: Session, name: str, phone_number: Optional[str] = None) -> Dict[str, Any]:
        waiter = Waiter(name=name, phone_number=phone_number)
        db.add(waiter)
        db.commit()
        db.refresh(waiter)
        return waiter_doc(waiter)

    @staticmethod
    def update_sql(db: Session, waiter_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        waiter = db.query(Waiter).filter(Waiter.id == waiter_id).first()
        if not waiter:
            return None
        for key, value in fields.items():
            setattr(waiter, WaiterRepo.FIELDS[key], value)
        waiter.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(waiter)
        return waiter_doc(waiter)

    @staticmethod
    def delete_sql(db: Session, waiter_id: str) -> bool:
        deleted = db.query(Waiter).filter(Waiter.id == waiter_id).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    # Firestore shape: collection "waiters/{auto_id}"
    @staticmethod
    def list_all_fs() -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(WAITERS).order_by("name").get()
        return [_fs_doc(d) for d in docs]

    @staticmethod
    def get_by_id_fs(waiter_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        doc = fs.collection(WAITERS).document(waiter_id).get()
        return _fs_doc(doc) if doc.exists else None

    @staticmethod
    def create_fs(name: str, phone_number: Optional[str] = None) -> Dict[str, Any]:
        fs = get_firestore_client()
        ref = fs.collection(WAITERS).document()
        now = _now_iso()
        data = {"name": name, "phoneNumber": phone_number, "createdAt": now, "updatedAt": now}
        ref.set(data)
        return {"_id": ref.id, **data}

    @staticmethod
    def update_fs(waiter_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        ref = fs.collection(WAITERS).document(waiter_id)
        if not ref.get().exists:
            return None
        ref.set({**fields, "updatedAt": _now_iso()}, merge=True)
        return _fs_doc(ref.get())

    @staticmethod
    def delete_fs(waiter_id: str) -> bool:
        fs = get_firestore_client()
        ref = fs.collection(WAITERS).document(waiter_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
