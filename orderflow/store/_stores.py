"""
Stores — typed accessors over the tables the order workflow touches.

Each store is bound to a Transaction (writes) or a bare AsyncSession
(read-only paths). Relationships the caller needs are eager-loaded here.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderflow.db import (
    AddressTable,
    CartItemTable,
    CartTable,
    CouponTable,
    InventoryTable,
    OrderItemTable,
    OrderTable,
    PaymentTable,
    ProductTable,
    UserTable,
)
from orderflow.tx import Transaction

type Bound = Transaction | AsyncSession


def _session(bound: Bound) -> AsyncSession:
    return bound.session if isinstance(bound, Transaction) else bound


class _Store:
    __slots__ = ("_session",)

    def __init__(self, bound: Bound) -> None:
        self._session = _session(bound)


# ═══════════════════════════════════════════════════════════════════════════════
# Users / Addresses
# ═══════════════════════════════════════════════════════════════════════════════


class UserStore(_Store):
    async def get_by_id(self, user_id: int) -> UserTable | None:
        return await self._session.get(UserTable, user_id)


class AddressStore(_Store):
    async def get_by_id(self, address_id: int) -> AddressTable | None:
        return await self._session.get(AddressTable, address_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(_Store):
    async def get_by_user(self, user_id: int) -> CartTable | None:
        stmt = (
            select(CartTable)
            .where(CartTable.user_id == user_id)
            .options(selectinload(CartTable.items).selectinload(CartItemTable.product))
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def mark_items_deleted(self, item_ids: Iterable[int]) -> None:
        ids = list(item_ids)
        if not ids:
            return
        await self._session.execute(
            update(CartItemTable)
            .where(CartItemTable.id.in_(ids))
            .values(is_deleted=True)
            .execution_options(synchronize_session="fetch")
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons
# ═══════════════════════════════════════════════════════════════════════════════


class CouponStore(_Store):
    async def get_by_code(self, code: str) -> CouponTable | None:
        stmt = select(CouponTable).where(CouponTable.code == code)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def increment_usage(self, coupon_id: int) -> bool:
        """Take one use of the coupon. False when its usage limit is already reached."""
        # limit re-checked in the UPDATE itself; 0 means unlimited
        result = await self._session.execute(
            update(CouponTable)
            .where(
                CouponTable.id == coupon_id,
                (CouponTable.usage_limit == 0)
                | (CouponTable.used_count < CouponTable.usage_limit),
            )
            .values(used_count=CouponTable.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


# ═══════════════════════════════════════════════════════════════════════════════
# Products / Inventory
# ═══════════════════════════════════════════════════════════════════════════════


class ProductStore(_Store):
    async def get_by_id(self, product_id: int) -> ProductTable | None:
        return await self._session.get(ProductTable, product_id)

    async def get_by_id_with_details(self, product_id: int) -> ProductTable | None:
        """Fresh read: bypasses whatever the session already holds."""
        stmt = (
            select(ProductTable)
            .where(ProductTable.id == product_id)
            .options(selectinload(ProductTable.seller))
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def update_stock(self, product_id: int, quantity: int) -> None:
        await self._session.execute(
            update(ProductTable)
            .where(ProductTable.id == product_id)
            .values(stock_quantity=quantity)
            .execution_options(synchronize_session="fetch")
        )


class InventoryStore(_Store):
    async def get_by_product_id(self, product_id: int) -> InventoryTable | None:
        # FOR UPDATE is a no-op on SQLite and a row lock elsewhere
        stmt = (
            select(InventoryTable)
            .where(InventoryTable.product_id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def update_stock(self, inventory_id: int, quantity: int) -> None:
        await self._session.execute(
            update(InventoryTable)
            .where(InventoryTable.id == inventory_id)
            .values(stock_quantity=quantity)
            .execution_options(synchronize_session="fetch")
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Orders / Payments
# ═══════════════════════════════════════════════════════════════════════════════


def _with_details(stmt):  # type: ignore[no-untyped-def]
    return stmt.options(
        selectinload(OrderTable.user),
        selectinload(OrderTable.address),
        selectinload(OrderTable.coupon),
        selectinload(OrderTable.items)
        .selectinload(OrderItemTable.product)
        .selectinload(ProductTable.seller),
    )


class OrderStore(_Store):
    async def exists_order_number(self, order_number: str) -> bool:
        stmt = select(exists().where(OrderTable.order_number == order_number))
        return bool((await self._session.execute(stmt)).scalar())

    async def add(self, order: OrderTable) -> OrderTable:
        """Insert order with its items in one write; assigns ids."""
        self._session.add(order)
        await self._session.flush()
        return order

    async def get_by_id_with_details(self, order_id: int) -> OrderTable | None:
        stmt = _with_details(
            select(OrderTable).where(
                OrderTable.id == order_id, OrderTable.is_deleted.is_(False)
            )
        ).execution_options(populate_existing=True)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_for_user(self, user_id: int, limit: int | None = None) -> Sequence[OrderTable]:
        stmt = _with_details(
            select(OrderTable)
            .where(OrderTable.user_id == user_id, OrderTable.is_deleted.is_(False))
            .order_by(OrderTable.created_at.desc(), OrderTable.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return (await self._session.execute(stmt)).scalars().all()

    async def count(self, ids: Sequence[int] | None = None) -> int:
        stmt = select(func.count()).select_from(OrderTable).where(
            OrderTable.is_deleted.is_(False)
        )
        if ids is not None:
            stmt = stmt.where(OrderTable.id.in_(ids))
        return int((await self._session.execute(stmt)).scalar_one())

    async def list_page(
        self,
        offset: int,
        limit: int,
        ids: Sequence[int] | None = None,
    ) -> Sequence[OrderTable]:
        stmt = select(OrderTable).where(OrderTable.is_deleted.is_(False))
        if ids is not None:
            stmt = stmt.where(OrderTable.id.in_(ids))
        stmt = _with_details(
            stmt.order_by(OrderTable.created_at.desc(), OrderTable.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return (await self._session.execute(stmt)).scalars().all()

    async def order_ids_for_seller(self, seller_id: int) -> list[int]:
        """Orders holding at least one live item of the seller's products."""
        stmt = (
            select(OrderItemTable.order_id)
            .join(ProductTable, ProductTable.id == OrderItemTable.product_id)
            .where(
                OrderItemTable.is_deleted.is_(False),
                ProductTable.seller_id == seller_id,
            )
            .distinct()
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def in_range(
        self,
        from_utc: datetime,
        to_utc: datetime,
        ids: Sequence[int] | None = None,
    ) -> Sequence[OrderTable]:
        """Live orders created in [from_utc, to_utc), oldest first."""
        stmt = select(OrderTable).where(
            OrderTable.is_deleted.is_(False),
            OrderTable.created_at >= from_utc,
            OrderTable.created_at < to_utc,
        )
        if ids is not None:
            stmt = stmt.where(OrderTable.id.in_(ids))
        stmt = stmt.options(
            selectinload(OrderTable.items).selectinload(OrderItemTable.product)
        ).order_by(OrderTable.created_at, OrderTable.id)
        return (await self._session.execute(stmt)).scalars().all()


class PaymentStore(_Store):
    async def add(self, payment: PaymentTable) -> PaymentTable:
        self._session.add(payment)
        await self._session.flush()
        return payment


__all__ = (
    "Bound",
    "UserStore",
    "AddressStore",
    "CartStore",
    "CouponStore",
    "ProductStore",
    "InventoryStore",
    "OrderStore",
    "PaymentStore",
)
