"""
Database layer — SQLAlchemy models.

Money is Numeric(18, 2) mapped to Decimal; timestamps are naive UTC.
Relationships are never lazy-loaded: stores eager-load what they return.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from orderflow._types import (
    CouponType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    UserRole,
    utcnow,
)

Money = Numeric(18, 2)


# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class _Timestamps:
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


def _enum(enum_cls: type) -> SAEnum:
    return SAEnum(enum_cls, native_enum=False, length=20)


# ═══════════════════════════════════════════════════════════════════════════════
# People & Places
# ═══════════════════════════════════════════════════════════════════════════════


class UserTable(Base, _Timestamps):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[UserRole] = mapped_column(_enum(UserRole), nullable=False, default=UserRole.USER)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AddressTable(Base, _Timestamps):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    street: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def one_line(self) -> str:
        parts = (self.street, self.city, self.state, self.country, self.zip_code)
        return ", ".join(p for p in parts if p)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog & Stock
# ═══════════════════════════════════════════════════════════════════════════════


class CategoryTable(Base, _Timestamps):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class ProductTable(Base, _Timestamps):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    seller_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount_price: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    seller: Mapped[UserTable] = relationship()

    @property
    def effective_price(self) -> Decimal:
        if self.discount_price is not None and self.discount_price < self.price:
            return self.discount_price
        return self.price


class InventoryTable(Base, _Timestamps):
    __tablename__ = "inventories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reserved_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    last_restocked_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def available_quantity(self) -> int:
        return self.stock_quantity - self.reserved_quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class CartTable(Base, _Timestamps):
    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)

    items: Mapped[list[CartItemTable]] = relationship(
        back_populates="cart", order_by="CartItemTable.id"
    )

    @property
    def live_items(self) -> list[CartItemTable]:
        return [i for i in self.items if not i.is_deleted]


class CartItemTable(Base, _Timestamps):
    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cart_id: Mapped[int] = mapped_column(ForeignKey("carts.id"), nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    cart: Mapped[CartTable] = relationship(back_populates="items")
    product: Mapped[ProductTable] = relationship()


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons
# ═══════════════════════════════════════════════════════════════════════════════


class CouponTable(Base, _Timestamps):
    __tablename__ = "coupons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    type: Mapped[CouponType] = mapped_column(_enum(CouponType), nullable=False)
    value: Mapped[Decimal] = mapped_column(Money, nullable=False)
    min_purchase_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    max_discount_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    valid_from: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    valid_to: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    usage_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class OrderTable(Base, _Timestamps):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    address_id: Mapped[int] = mapped_column(ForeignKey("addresses.id"), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        _enum(OrderStatus), nullable=False, default=OrderStatus.PENDING
    )
    sub_total: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    tax_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    coupon_id: Mapped[int | None] = mapped_column(
        ForeignKey("coupons.id", ondelete="SET NULL"), nullable=True
    )
    tracking_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shipped_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    delivered_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user: Mapped[UserTable] = relationship()
    address: Mapped[AddressTable] = relationship()
    coupon: Mapped[CouponTable | None] = relationship()
    items: Mapped[list[OrderItemTable]] = relationship(
        back_populates="order", order_by="OrderItemTable.id", cascade="all, delete-orphan"
    )
    payment: Mapped[PaymentTable | None] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )

    @property
    def live_items(self) -> list[OrderItemTable]:
        return [i for i in self.items if not i.is_deleted]


class OrderItemTable(Base, _Timestamps):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    order: Mapped[OrderTable] = relationship(back_populates="items")
    product: Mapped[ProductTable] = relationship()


class PaymentTable(Base, _Timestamps):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    transaction_id: Mapped[str] = mapped_column(String(100), nullable=False)
    method: Mapped[PaymentMethod] = mapped_column(_enum(PaymentMethod), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    order: Mapped[OrderTable] = relationship(back_populates="payment")


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
)
