"""Pytest fixtures for orderflow tests."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from orderflow import db
from orderflow._types import Actor, CouponType, UserRole
from orderflow.db import (
    AddressTable,
    CartItemTable,
    CartTable,
    CategoryTable,
    CouponTable,
    InventoryTable,
    ProductTable,
    UserTable,
)

NOW = datetime(2024, 5, 17, 10, 30)


class RecordingSender:
    """Notification sender that remembers every call; optionally fails each one."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple] = []

    async def _record(self, kind: str, *args) -> None:
        self.sent.append((kind, *args))
        if self.fail:
            raise ConnectionError("smtp unreachable")

    async def order_placed(self, email, name, order_number, total, created_at):
        await self._record("placed", email, order_number, total)

    async def order_confirmed(self, email, name, order_number):
        await self._record("confirmed", email, order_number)

    async def order_cancelled(self, email, name, order_number):
        await self._record("cancelled", email, order_number)

    async def order_delivered(self, email, name, order_number, delivered_date):
        await self._record("delivered", email, order_number, delivered_date)

    def kinds(self) -> list[str]:
        return [s[0] for s in self.sent]


class Seed:
    """Writes fixture rows, each call in its own committed session."""

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory
        self._emails = 0

    async def add(self, row):
        async with self.session_factory() as session:
            session.add(row)
            await session.commit()
        return row

    async def user(self, role: UserRole = UserRole.USER, first: str = "Asha", last: str = "Rao", email=None):
        self._emails += 1
        return await self.add(
            UserTable(
                first_name=first,
                last_name=last,
                email=email if email is not None else f"user{self._emails}@shop.test",
                role=role,
            )
        )

    async def address(self, user_id: int, city: str = "Pune"):
        return await self.add(
            AddressTable(
                user_id=user_id,
                street="12 MG Road",
                city=city,
                state="MH",
                country="India",
                zip_code="411001",
            )
        )

    async def category(self, name: str = "Gadgets"):
        return await self.add(CategoryTable(name=name))

    async def product(
        self,
        seller_id: int,
        category_id: int,
        name: str = "Widget",
        price: str = "50.00",
        discount_price: str | None = None,
        stock: int = 10,
        active: bool = True,
    ):
        return await self.add(
            ProductTable(
                seller_id=seller_id,
                category_id=category_id,
                name=name,
                price=Decimal(price),
                discount_price=Decimal(discount_price) if discount_price else None,
                stock_quantity=stock,
                is_active=active,
            )
        )

    async def inventory(self, product_id: int, stock: int, reserved: int = 0):
        return await self.add(
            InventoryTable(product_id=product_id, stock_quantity=stock, reserved_quantity=reserved)
        )

    async def cart(self, user_id: int, *lines: tuple[ProductTable, int], price: str | None = None):
        """Cart holding (product, quantity) lines; the snapshot price defaults to the product's."""
        async with self.session_factory() as session:
            cart = (
                await session.execute(select(CartTable).where(CartTable.user_id == user_id))
            ).scalar_one_or_none()
            if cart is None:
                cart = CartTable(user_id=user_id)
                session.add(cart)
                await session.flush()
            for product, quantity in lines:
                session.add(
                    CartItemTable(
                        cart_id=cart.id,
                        product_id=product.id,
                        quantity=quantity,
                        price=Decimal(price) if price else product.price,
                    )
                )
            await session.commit()
        return cart

    async def coupon(
        self,
        code: str = "SAVE10",
        type: CouponType = CouponType.FLAT,
        value: str = "10",
        usage_limit: int = 0,
        used_count: int = 0,
        min_purchase: str | None = None,
        max_discount: str | None = None,
        valid_from: datetime = NOW - timedelta(days=30),
        valid_to: datetime = NOW + timedelta(days=30),
        active: bool = True,
    ):
        return await self.add(
            CouponTable(
                code=code,
                type=type,
                value=Decimal(value),
                usage_limit=usage_limit,
                used_count=used_count,
                min_purchase_amount=Decimal(min_purchase) if min_purchase else None,
                max_discount_amount=Decimal(max_discount) if max_discount else None,
                valid_from=valid_from,
                valid_to=valid_to,
                is_active=active,
            )
        )

    async def get(self, model, id: int):
        async with self.session_factory() as session:
            return await session.get(model, id)

    async def count(self, model) -> int:
        async with self.session_factory() as session:
            return (await session.execute(select(func.count()).select_from(model))).scalar_one()

    async def cart_items(self, user_id: int) -> list[CartItemTable]:
        async with self.session_factory() as session:
            stmt = (
                select(CartItemTable)
                .join(CartTable, CartTable.id == CartItemTable.cart_id)
                .where(CartTable.user_id == user_id)
                .order_by(CartItemTable.id)
            )
            return list((await session.execute(stmt)).scalars().all())


@dataclass
class Shop:
    """A small shop: one customer, two sellers, an admin, one product per seller."""

    customer: UserTable
    other_customer: UserTable
    seller_a: UserTable
    seller_b: UserTable
    admin: UserTable
    address: AddressTable
    widget: ProductTable
    gizmo: ProductTable

    def actor(self, user: UserTable) -> Actor:
        return Actor(user_id=user.id, role=user.role)


@pytest.fixture
async def session_factory():
    """In-memory database, fresh per test."""
    factory, engine = await db.create_database()
    yield factory
    await engine.dispose()


@pytest.fixture
def seed(session_factory):
    return Seed(session_factory)


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
async def shop(seed):
    customer = await seed.user(UserRole.USER, "Asha", "Rao", email="asha@shop.test")
    other = await seed.user(UserRole.USER, "Ravi", "Iyer")
    seller_a = await seed.user(UserRole.SELLER, "Seller", "A")
    seller_b = await seed.user(UserRole.SELLER, "Seller", "B")
    admin = await seed.user(UserRole.ADMIN, "Root", "Admin")
    address = await seed.address(customer.id)
    category = await seed.category()
    widget = await seed.product(seller_a.id, category.id, "Widget", "50.00", stock=10)
    gizmo = await seed.product(seller_b.id, category.id, "Gizmo", "30.00", stock=10)
    return Shop(
        customer=customer,
        other_customer=other,
        seller_a=seller_a,
        seller_b=seller_b,
        admin=admin,
        address=address,
        widget=widget,
        gizmo=gizmo,
    )
