"""
Tests for order placement functionality
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.core.exceptions import NotFoundError, ValidationError
from app.models import Order, OrderStatus, Table
from app.services.order_service import OrderService
from app.services.repositories import OrderRepo
from app.services.table_service import TableService
from app.services.waiter_service import WaiterService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_orders.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def table(db_session):
    return TableService.create_table("T1", 1, db_session)

@pytest.fixture
def waiter(db_session):
    return WaiterService.create_waiter("Maria", "555-0101", db_session)

def pending_orders(db_session, table_id):
    return db_session.query(Order).filter(
        Order.table_id == table_id,
        Order.status == OrderStatus.PENDING.value
    ).all()

def test_normalize_items_defaults():
    """Test line item defaults and coercion"""
    items = OrderService.normalize_items([
        {"name": "Soup", "price": "4.5"},
        {"name": "Steak", "price": 20, "quantity": 0, "categoryName": "Mains", "itemId": "m-1"},
        {"name": "Wine", "price": 8, "quantity": "3"},
        {"name": "Bread", "price": 2, "quantity": "several"},
    ])

    assert items[0] == {
        "name": "Soup",
        "price": 4.5,
        "quantity": 1,
        "categoryName": "Uncategorized",
        "itemId": None,
    }
    assert items[1]["quantity"] == 1
    assert items[1]["categoryName"] == "Mains"
    assert items[1]["itemId"] == "m-1"
    assert items[2]["quantity"] == 3
    assert items[3]["quantity"] == 1

def test_normalize_items_requires_name_and_price():
    """Test malformed line items"""
    with pytest.raises(ValidationError):
        OrderService.normalize_items([{"name": "Soup"}])
    with pytest.raises(ValidationError):
        OrderService.normalize_items([{"price": 3}])
    with pytest.raises(ValidationError):
        OrderService.normalize_items([{"name": "Soup", "price": "cheap"}])
    with pytest.raises(ValidationError):
        OrderService.normalize_items(["Soup"])

def test_compute_total():
    """Test total is the sum of price times quantity"""
    items = OrderService.normalize_items([
        {"name": "Soup", "price": 5, "quantity": 2},
        {"name": "Tea", "price": 1.5, "quantity": 4},
    ])
    assert OrderService.compute_total(items) == 16

def test_place_order_creates_pending_order(db_session, table):
    """Test the first placement on a table"""
    view = OrderService.place_order(
        table["_id"],
        [{"name": "Soup", "price": 5, "quantity": 2}],
        db_session
    )

    assert view["_id"] == table["_id"]
    assert view["hasOrders"] is True
    assert view["orders"][0]["name"] == "Soup"
    assert view["orders"][0]["quantity"] == 2
    assert view["waiter"] is None

    orders = pending_orders(db_session, table["_id"])
    assert len(orders) == 1
    assert orders[0].total == 10
    assert orders[0].waiter_id is None

    stored = db_session.query(Table).filter(Table.id == table["_id"]).first()
    assert stored.has_orders is True

def test_place_order_replaces_items(db_session, table):
    """Test that a second placement replaces rather than accumulates"""
    OrderService.place_order(
        table["_id"],
        [{"name": "Soup", "price": 5, "quantity": 2}, {"name": "Tea", "price": 2}],
        db_session
    )
    view = OrderService.place_order(
        table["_id"],
        [{"name": "Steak", "price": 18, "quantity": 1}],
        db_session
    )

    assert [item["name"] for item in view["orders"]] == ["Steak"]

    orders = pending_orders(db_session, table["_id"])
    assert len(orders) == 1
    db_session.refresh(orders[0])
    assert orders[0].total == 18
    assert len(orders[0].items) == 1

def test_place_order_empty(db_session, table):
    """Test that an empty order is rejected"""
    with pytest.raises(ValidationError):
        OrderService.place_order(table["_id"], [], db_session)
    with pytest.raises(ValidationError):
        OrderService.place_order(table["_id"], None, db_session)

    assert pending_orders(db_session, table["_id"]) == []

def test_place_order_missing_table(db_session):
    """Test placing an order on a missing table"""
    with pytest.raises(NotFoundError) as exc_info:
        OrderService.place_order("missing", [{"name": "Soup", "price": 5}], db_session)

    assert exc_info.value.message == "Table not found"

def test_place_order_missing_waiter(db_session, table):
    """Test placing an order with an unknown waiter"""
    with pytest.raises(NotFoundError) as exc_info:
        OrderService.place_order(
            table["_id"],
            [{"name": "Soup", "price": 5}],
            db_session,
            waiter_id="nobody"
        )

    assert exc_info.value.message == "Waiter not found"
    assert pending_orders(db_session, table["_id"]) == []

def test_place_order_with_waiter(db_session, table, waiter):
    """Test waiter summary on the table view"""
    view = OrderService.place_order(
        table["_id"],
        [{"name": "Soup", "price": 5}],
        db_session,
        waiter_id=waiter["_id"]
    )

    assert view["waiter"] == {
        "_id": waiter["_id"],
        "name": "Maria",
        "phoneNumber": "555-0101",
    }

def test_place_order_keeps_waiter_when_omitted(db_session, table, waiter):
    """Test that a later placement without a waiter keeps the assigned one"""
    OrderService.place_order(
        table["_id"],
        [{"name": "Soup", "price": 5}],
        db_session,
        waiter_id=waiter["_id"]
    )
    view = OrderService.place_order(
        table["_id"],
        [{"name": "Tea", "price": 2}],
        db_session
    )

    assert view["waiter"]["_id"] == waiter["_id"]

    detail = TableService.get_table(table["_id"], db_session)
    assert detail["waiter"]["name"] == "Maria"
    assert detail["orders"][0]["name"] == "Tea"

def test_place_order_after_clear_opens_new_order(db_session, table):
    """Test that clearing then ordering creates a fresh pending order"""
    OrderService.place_order(table["_id"], [{"name": "Soup", "price": 5}], db_session)
    TableService.clear_orders(table["_id"], db_session)

    view = OrderService.place_order(table["_id"], [{"name": "Tea", "price": 2}], db_session)
    assert view["hasOrders"] is True
    assert [item["name"] for item in view["orders"]] == ["Tea"]

    all_orders = db_session.query(Order).filter(Order.table_id == table["_id"]).all()
    assert len(all_orders) == 2
    assert sorted(o.status for o in all_orders) == ["completed", "pending"]

def test_deleted_waiter_is_reported_as_none(db_session, table, waiter):
    """Test that a dangling waiter reference resolves to no waiter"""
    OrderService.place_order(
        table["_id"],
        [{"name": "Soup", "price": 5}],
        db_session,
        waiter_id=waiter["_id"]
    )
    WaiterService.delete_waiter(waiter["_id"], db_session)

    detail = TableService.get_table(table["_id"], db_session)
    assert detail["hasOrders"] is True
    assert detail["waiter"] is None

def test_list_orders(db_session, table):
    """Test listing orders with filters"""
    second = TableService.create_table("T2", 2, db_session)
    OrderService.place_order(table["_id"], [{"name": "Soup", "price": 5}], db_session)
    TableService.clear_orders(table["_id"], db_session)
    OrderService.place_order(second["_id"], [{"name": "Tea", "price": 2}], db_session)

    assert len(OrderService.list_orders(db_session)) == 2

    pending = OrderService.list_orders(db_session, status="pending")
    assert [o["tableId"] for o in pending] == [second["_id"]]

    completed = OrderService.list_orders(db_session, status="completed", table_id=table["_id"])
    assert len(completed) == 1
    assert completed[0]["total"] == 5

    with pytest.raises(ValidationError):
        OrderService.list_orders(db_session, status="cancelled")

def test_normalize_items_rejects_non_finite_price():
    """Test that NaN and infinite prices are rejected"""
    for price in ("NaN", float("nan"), "inf", float("-inf")):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.normalize_items([{"name": "Soup", "price": price}])
        assert exc_info.value.message == "Order item 1 has an invalid price"

def test_place_order_total_out_of_range(db_session, table):
    """Test that a total overflowing to infinity is rejected"""
    with pytest.raises(ValidationError):
        OrderService.place_order(
            table["_id"],
            [{"name": "Caviar", "price": 1e308, "quantity": 10}],
            db_session
        )
    with pytest.raises(ValidationError):
        OrderService.place_order(
            table["_id"],
            [{"name": "Caviar", "price": 1.0, "quantity": 10**400}],
            db_session
        )

    assert pending_orders(db_session, table["_id"]) == []

def test_place_order_pending_order_vanishes(db_session, table, monkeypatch):
    """Test replacing an order that was removed after it was looked up"""
    OrderService.place_order(table["_id"], [{"name": "Soup", "price": 5}], db_session)
    monkeypatch.setattr(OrderRepo, "update", staticmethod(lambda db, order_id, fields: None))

    with pytest.raises(NotFoundError) as exc_info:
        OrderService.place_order(table["_id"], [{"name": "Tea", "price": 2}], db_session)

    assert exc_info.value.message == "Order not found"
