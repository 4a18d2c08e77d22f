"""
Database — SQLAlchemy tables and async session factory.

    from orderflow import db

    session_factory, engine = await db.create_database("sqlite+aiosqlite:///:memory:")
"""

from orderflow.db._tables import (
    Base,
    UserTable,
    AddressTable,
    CategoryTable,
    ProductTable,
    InventoryTable,
    CartTable,
    CartItemTable,
    CouponTable,
    OrderTable,
    OrderItemTable,
    PaymentTable,
)
from orderflow.db._engine import (
    SessionFactory,
    create_engine,
    create_schema,
    create_database,
)

__all__ = (
    "Base",
    "UserTable",
    "AddressTable",
    "CategoryTable",
    "ProductTable",
    "InventoryTable",
    "CartTable",
    "CartItemTable",
    "CouponTable",
    "OrderTable",
    "OrderItemTable",
    "PaymentTable",
    "SessionFactory",
    "create_engine",
    "create_schema",
    "create_database",
)
