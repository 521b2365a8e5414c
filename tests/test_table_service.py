"""
Tests for table management functionality
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Order, OrderStatus, Table
from app.services.order_service import OrderService
from app.services.table_service import TableService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_tables.db"
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
def dining_room(db_session):
    """Three tables created out of number order"""
    return {
        number: TableService.create_table(f"Table {number}", number, db_session)
        for number in (3, 1, 2)
    }

def test_create_table(db_session):
    """Test creating a table"""
    table = TableService.create_table("Window", 7, db_session)

    assert table["_id"]
    assert table["name"] == "Window"
    assert table["tableNumber"] == 7
    assert table["hasOrders"] is False
    assert table["createdAt"] is not None

def test_create_table_requires_name_and_number(db_session):
    """Test that both name and number are required"""
    with pytest.raises(ValidationError):
        TableService.create_table(None, 1, db_session)
    with pytest.raises(ValidationError):
        TableService.create_table("Patio", None, db_session)
    with pytest.raises(ValidationError):
        TableService.create_table("", 0, db_session)

    assert db_session.query(Table).count() == 0

def test_create_table_duplicate_number(db_session, dining_room):
    """Test that table numbers are unique"""
    with pytest.raises(ConflictError) as exc_info:
        TableService.create_table("Another one", 1, db_session)

    assert exc_info.value.message == "Table number already exists"
    assert db_session.query(Table).count() == 3

    # Distinct numbers still succeed
    table = TableService.create_table("Bar", 4, db_session)
    assert table["tableNumber"] == 4

def test_list_tables_sorted_by_number(db_session, dining_room):
    """Test that tables are listed by table number"""
    tables = TableService.list_tables(db_session)

    assert [t["tableNumber"] for t in tables] == [1, 2, 3]
    assert all(t["hasOrders"] is False for t in tables)
    assert "orders" not in tables[0]

def test_list_tables_has_orders_follows_pending_orders(db_session, dining_room):
    """Test that hasOrders is true exactly for tables with a pending order"""
    OrderService.place_order(
        dining_room[2]["_id"],
        [{"name": "Tea", "price": 2}],
        db_session
    )

    tables = {t["tableNumber"]: t for t in TableService.list_tables(db_session)}
    assert tables[2]["hasOrders"] is True
    assert tables[1]["hasOrders"] is False
    assert tables[3]["hasOrders"] is False

def test_list_tables_recomputes_stale_flag(db_session, dining_room):
    """Test that the stored flag is not trusted when listing"""
    table = db_session.query(Table).filter(Table.table_number == 1).first()
    table.has_orders = True
    db_session.commit()

    tables = {t["tableNumber"]: t for t in TableService.list_tables(db_session)}
    assert tables[1]["hasOrders"] is False

def test_update_table(db_session, dining_room):
    """Test renaming and renumbering a table"""
    table_id = dining_room[1]["_id"]

    view = TableService.update_table(table_id, db_session, name="Terrace", table_number=10)

    assert view["name"] == "Terrace"
    assert view["tableNumber"] == 10
    assert view["hasOrders"] is False
    assert view["orders"] == []

def test_update_table_keeps_own_number(db_session, dining_room):
    """Test that a table can be updated with its current number"""
    table_id = dining_room[1]["_id"]

    view = TableService.update_table(table_id, db_session, name="Corner", table_number=1)
    assert view["name"] == "Corner"
    assert view["tableNumber"] == 1

def test_update_table_validation(db_session, dining_room):
    """Test update failures"""
    table_id = dining_room[1]["_id"]

    with pytest.raises(ValidationError):
        TableService.update_table(table_id, db_session)

    with pytest.raises(ConflictError):
        TableService.update_table(table_id, db_session, table_number=2)

    with pytest.raises(NotFoundError):
        TableService.update_table("missing", db_session, name="Ghost")

def test_update_table_includes_pending_order(db_session, dining_room):
    """Test that the update response carries the current order"""
    table_id = dining_room[3]["_id"]
    OrderService.place_order(table_id, [{"name": "Soup", "price": 5, "quantity": 2}], db_session)

    view = TableService.update_table(table_id, db_session, name="Booth")

    assert view["hasOrders"] is True
    assert view["orders"][0]["name"] == "Soup"

def test_get_table_not_found(db_session):
    """Test looking up a missing table"""
    with pytest.raises(NotFoundError) as exc_info:
        TableService.get_table("nope", db_session)

    assert exc_info.value.message == "Table not found"

def test_delete_table_cascades_orders(db_session, dining_room):
    """Test that deleting a table removes its orders"""
    table_id = dining_room[1]["_id"]
    OrderService.place_order(table_id, [{"name": "Soup", "price": 5}], db_session)
    TableService.clear_orders(table_id, db_session)
    OrderService.place_order(table_id, [{"name": "Bread", "price": 3}], db_session)

    other_id = dining_room[2]["_id"]
    OrderService.place_order(other_id, [{"name": "Tea", "price": 2}], db_session)

    assert db_session.query(Order).filter(Order.table_id == table_id).count() == 2

    TableService.delete_table(table_id, db_session)

    assert db_session.query(Order).filter(Order.table_id == table_id).count() == 0
    assert db_session.query(Order).filter(Order.table_id == other_id).count() == 1
    with pytest.raises(NotFoundError):
        TableService.get_table(table_id, db_session)

def test_delete_missing_table(db_session):
    """Test deleting a table that does not exist"""
    with pytest.raises(NotFoundError):
        TableService.delete_table("missing", db_session)

def test_clear_orders(db_session, dining_room):
    """Test clearing the pending order of a table"""
    table_id = dining_room[1]["_id"]
    OrderService.place_order(table_id, [{"name": "Soup", "price": 5, "quantity": 2}], db_session)

    view = TableService.clear_orders(table_id, db_session)

    assert view["hasOrders"] is False
    assert view["orders"] == []
    assert view["waiter"] is None

    pending = db_session.query(Order).filter(
        Order.table_id == table_id,
        Order.status == OrderStatus.PENDING.value
    ).count()
    assert pending == 0

    completed = db_session.query(Order).filter(
        Order.table_id == table_id,
        Order.status == OrderStatus.COMPLETED.value
    ).count()
    assert completed == 1

    table = db_session.query(Table).filter(Table.id == table_id).first()
    db_session.refresh(table)
    assert table.has_orders is False

def test_clear_orders_missing_table(db_session):
    """Test clearing orders of a missing table"""
    with pytest.raises(NotFoundError):
        TableService.clear_orders("missing", db_session)
